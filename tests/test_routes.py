import asyncio
import json
import httpx
import pytest
from models import Coordinates
from services.ai_service import AIService, fallback_delivery_time
from tests.conftest import ADMIN, CUSTOMER, DRIVER, package_payload

def _completion(content):
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

def _service(handler):
    return AIService("http://ai.test", "test-key", customer_id="ops@kingx.com",
                     model="test-model", transport=httpx.MockTransport(handler))

DESTINATIONS = [
    {"lat": 40.70, "lng": -74.00, "address": "A"},
    {"lat": 40.72, "lng": -74.02, "address": "B"},
    {"lat": 40.74, "lng": -73.98, "address": "C"},
]

def test_optimize_route_uses_ai_answer():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["customer"] = request.headers["customerId"]
        seen["body"] = json.loads(request.content)
        return _completion(json.dumps({
            "optimizedOrder": [2, 0, 1],
            "estimatedTime": 48,
            "estimatedDistance": 12.5,
            "reasoning": "Closest first",
        }))

    result = asyncio.run(_service(handler).optimize_route(Coordinates(lat=40.71, lng=-74.0), DESTINATIONS, "van"))
    assert result["optimizedOrder"] == [2, 0, 1]
    assert result["estimatedTime"] == 48
    assert result["optimized"] is True
    assert seen["auth"] == "Bearer test-key"
    assert seen["customer"] == "ops@kingx.com"
    assert seen["body"]["model"] == "test-model"
    assert "Vehicle Type: van" in seen["body"]["messages"][0]["content"]

def test_optimize_route_accepts_fenced_json():
    def handler(request):
        return _completion('```json\n{"optimizedOrder": [1, 0, 2], "estimatedTime": 30, '
                           '"estimatedDistance": 9, "reasoning": "ok"}\n```')

    result = asyncio.run(_service(handler).optimize_route(Coordinates(lat=0, lng=0), DESTINATIONS))
    assert result["optimizedOrder"] == [1, 0, 2]

@pytest.mark.parametrize("handler", [
    lambda request: httpx.Response(500, json={"error": "boom"}),
    lambda request: _completion("not json at all"),
    lambda request: _completion(json.dumps({"optimizedOrder": [0, 0, 7], "estimatedTime": 1,
                                            "estimatedDistance": 1})),
    lambda request: _completion(json.dumps({"optimizedOrder": [0.9, 1, 2], "estimatedTime": 1,
                                            "estimatedDistance": 1})),
    lambda request: httpx.Response(200, json={"choices": []}),
])
def test_optimize_route_falls_back(handler):
    result = asyncio.run(_service(handler).optimize_route(Coordinates(lat=0, lng=0), DESTINATIONS))
    assert result == {
        "optimizedOrder": [0, 1, 2],
        "estimatedTime": 45.0,
        "estimatedDistance": 10.5,
        "reasoning": "Fallback optimization: Sequential order based on input sequence",
        "optimized": False,
    }

def test_delivery_time_falls_back_on_network_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    result = asyncio.run(_service(handler).calculate_delivery_time(10, 1.5, 1.0, "urgent"))
    assert result["estimatedTime"] == round(10 * 3 * 1.5 * 0.7)
    assert result["confidence"] == 0.75

def test_delivery_time_uses_ai_answer():
    def handler(request):
        return _completion(json.dumps({"estimatedTime": 25, "confidence": 0.9, "factors": ["Traffic"]}))

    result = asyncio.run(_service(handler).calculate_delivery_time(10))
    assert result == {"estimatedTime": 25.0, "confidence": 0.9, "factors": ["Traffic"]}

def test_fallback_delivery_time_priority_order():
    times = [fallback_delivery_time(20, priority=p)["estimatedTime"] for p in ("urgent", "high", "medium", "low")]
    assert times == sorted(times)

def _assigned_packages(client, count):
    ids = []
    for _ in range(count):
        package = client.post("/packages", headers=CUSTOMER, json=package_payload()).json()
        client.post(f"/packages/{package['id']}/assign", headers=ADMIN, json={"driverId": "2"})
        ids.append(package["id"])
    return ids

def test_optimize_route_endpoint(client):
    def handler(request):
        return _completion(json.dumps({
            "optimizedOrder": [1, 0],
            "estimatedTime": 40,
            "estimatedDistance": 8,
            "reasoning": "Second stop is on the way",
        }))

    client.app.state.ai_service = _service(handler)
    package_ids = _assigned_packages(client, 2)

    response = client.post("/routes/optimize", headers=DRIVER, json={"driverId": "2", "packageIds": package_ids})
    assert response.status_code == 201
    route = response.json()
    assert route["optimized"] is True
    assert route["packages"] == [package_ids[1], package_ids[0]]
    assert [s["order"] for s in route["stops"]] == [1, 2]
    assert route["estimatedDuration"] == 40
    assert route["distance"] == 8
    assert route["startLocation"] == {"lat": 40.7128, "lng": -74.0060}

    listed = client.get("/routes", headers=DRIVER).json()
    assert [r["id"] for r in listed] == [route["id"]]

def test_optimize_route_endpoint_fallback(client):
    client.app.state.ai_service = _service(lambda request: httpx.Response(503))
    package_ids = _assigned_packages(client, 3)

    route = client.post("/routes/optimize", headers=ADMIN, json={"driverId": "2", "packageIds": package_ids}).json()
    assert route["optimized"] is False
    assert route["packages"] == package_ids
    assert route["estimatedDuration"] == 45
    assert route["distance"] == 10.5

def test_optimize_route_validation(client):
    client.app.state.ai_service = _service(lambda request: httpx.Response(503))
    assert client.post("/routes/optimize", headers=CUSTOMER,
                       json={"driverId": "2", "packageIds": ["x"]}).status_code == 403
    assert client.post("/routes/optimize", headers=ADMIN,
                       json={"driverId": "2", "packageIds": ["missing"]}).status_code == 404
    assert client.post("/routes/optimize", headers=ADMIN,
                       json={"driverId": "2", "packageIds": []}).status_code == 422

def test_route_stop_progression(client):
    client.app.state.ai_service = _service(lambda request: httpx.Response(503))
    package_ids = _assigned_packages(client, 2)
    route = client.post("/routes/optimize", headers=DRIVER, json={"driverId": "2", "packageIds": package_ids}).json()

    first = client.patch(f"/routes/{route['id']}/stops/1", headers=DRIVER, json={"status": "completed"}).json()
    assert first["status"] == "in_progress"
    assert first["stops"][0]["actualArrival"] is not None

    done = client.patch(f"/routes/{route['id']}/stops/2", headers=DRIVER, json={"status": "skipped"}).json()
    assert done["status"] == "completed"

    assert client.patch(f"/routes/{route['id']}/stops/9", headers=DRIVER,
                        json={"status": "completed"}).status_code == 404

def test_route_status_update(client):
    client.app.state.ai_service = _service(lambda request: httpx.Response(503))
    package_ids = _assigned_packages(client, 1)
    route = client.post("/routes/optimize", headers=DRIVER, json={"driverId": "2", "packageIds": package_ids}).json()
    response = client.patch(f"/routes/{route['id']}/status", headers=ADMIN,
                            json={"status": "cancelled", "actualDuration": 12})
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["actualDuration"] == 12

def test_estimate_time_endpoint(client):
    client.app.state.ai_service = _service(lambda request: httpx.Response(503))
    response = client.post("/routes/estimate-time", headers=CUSTOMER, json={"distance": 10, "priority": "low"})
    assert response.status_code == 200
    assert response.json()["estimatedTime"] == 36
