import pytest
from models import Coordinates, DeliveryPriority, DeliveryType
from services.pricing_service import (
    DEFAULT_DISTANCE_KM, calculate_delivery_price, calculate_distance, estimate_distance,
    interpolate_location,
)

def _line_items(b):
    return b.basePrice + b.distanceFee + b.weightFee + b.priorityFee + b.insuranceFee + b.serviceFee

def test_express_high_priority_insured():
    b = calculate_delivery_price(10, 3, DeliveryPriority.HIGH, DeliveryType.EXPRESS,
                                 insurance=True, package_value=300)
    assert b.basePrice == 15.00
    assert b.distanceFee == 15.00
    assert b.weightFee == 4.00
    assert b.priorityFee == 5.00
    assert b.insuranceFee == 6.00
    assert b.serviceFee == 2.50
    assert b.tax == 3.80
    assert b.discount == 0
    assert b.total == 51.30

def test_minimal_standard_delivery():
    b = calculate_delivery_price(0, 0.5, "medium", "standard")
    assert b.weightFee == 0
    assert b.priorityFee == 0
    assert b.insuranceFee == 0
    assert b.total == 13.50

def test_urgent_priority_uses_unadjusted_base():
    b = calculate_delivery_price(1, 1, DeliveryPriority.URGENT, DeliveryType.SAME_DAY)
    assert b.basePrice == 20.00
    assert b.priorityFee == 10.00

def test_insurance_has_minimum_fee():
    b = calculate_delivery_price(5, 1, DeliveryPriority.LOW, DeliveryType.STANDARD,
                                 insurance=True, package_value=10)
    assert b.insuranceFee == 2.00

@pytest.mark.parametrize("distance", [0, 0.37, 5.833, 42.1, 250])
@pytest.mark.parametrize("weight", [0.1, 1, 2.49, 17.3])
@pytest.mark.parametrize("priority", list(DeliveryPriority))
@pytest.mark.parametrize("delivery_type", list(DeliveryType))
def test_total_is_sum_of_breakdown(distance, weight, priority, delivery_type):
    b = calculate_delivery_price(distance, weight, priority, delivery_type,
                                 insurance=True, package_value=123.45)
    assert b.total == pytest.approx(_line_items(b) + b.tax - b.discount, abs=1e-9)
    assert b.weightFee >= 0
    assert b.priorityFee >= 0
    assert b.insuranceFee >= 0

def test_discount_is_subtracted():
    b = calculate_delivery_price(10, 3, DeliveryPriority.HIGH, DeliveryType.EXPRESS,
                                 insurance=True, package_value=300, discount=5)
    assert b.discount == 5
    assert b.total == 46.30

@pytest.mark.parametrize("value", [0.01, 50, 100, 5000])
def test_insurance_strictly_increases_total(value):
    without = calculate_delivery_price(8, 2, DeliveryPriority.MEDIUM, DeliveryType.STANDARD,
                                       insurance=False, package_value=value)
    with_insurance = calculate_delivery_price(8, 2, DeliveryPriority.MEDIUM, DeliveryType.STANDARD,
                                              insurance=True, package_value=value)
    assert with_insurance.total > without.total

def test_negative_inputs_rejected():
    with pytest.raises(ValueError):
        calculate_delivery_price(-1, 1, DeliveryPriority.LOW, DeliveryType.STANDARD)
    with pytest.raises(ValueError):
        calculate_delivery_price(1, -1, DeliveryPriority.LOW, DeliveryType.STANDARD)

def test_haversine_distance():
    # New York to Brooklyn, about 5.8 km
    assert calculate_distance(40.7128, -74.0060, 40.6892, -73.9442) == pytest.approx(5.83, abs=0.05)
    assert calculate_distance(10, 10, 10, 10) == 0

def test_estimate_distance_defaults_without_coordinates():
    assert estimate_distance(None, Coordinates(lat=1, lng=1)) == DEFAULT_DISTANCE_KM

def test_interpolate_location_clamps_progress():
    start = Coordinates(lat=0, lng=0)
    end = Coordinates(lat=10, lng=20)
    assert interpolate_location(start, end, 0.5) == {"lat": 5, "lng": 10}
    assert interpolate_location(start, end, 2) == {"lat": 10, "lng": 20}

def test_quote_endpoint(client):
    response = client.post("/pricing/quote", json={
        "weight": 3,
        "distance": 10,
        "priority": "high",
        "deliveryType": "express",
        "insurance": True,
        "packageValue": 300,
    })
    assert response.status_code == 200
    assert response.json()["total"] == 51.30

def test_quote_endpoint_uses_coordinates(client):
    response = client.post("/pricing/quote", json={
        "weight": 1,
        "origin": {"lat": 40.7128, "lng": -74.0060},
        "destination": {"lat": 40.6892, "lng": -73.9442},
    })
    assert response.status_code == 200
    assert response.json()["distanceFee"] == pytest.approx(5.83 * 1.5, abs=0.1)

def test_quote_endpoint_rejects_bad_weight(client):
    response = client.post("/pricing/quote", json={"weight": 0, "distance": 3})
    assert response.status_code == 422
