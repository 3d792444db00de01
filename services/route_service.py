import uuid
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException
from models import Coordinates, Route, RouteStatus, RouteStop, StopStatus
from services import driver_service, package_service
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Used when neither the driver nor the package carries coordinates
DEFAULT_LOCATION = Coordinates(lat=40.7128, lng=-74.0060)

def _format_address(address):
    parts = [address.street, address.city, address.state, address.zipCode]
    if address.country and address.country != "USA":
        parts.append(address.country)
    return ", ".join(p for p in parts if p)

async def optimize_route(store, ai_service, driver_id, package_ids, vehicle_type=None):
    """Build a planned route for a driver over the given packages"""
    driver = await driver_service.get_driver(store, driver_id)
    if len(set(package_ids)) != len(package_ids):
        raise HTTPException(status_code=400, detail="Duplicate package ids")
    packages = [await package_service.get_package(store, package_id) for package_id in package_ids]

    start = driver.currentLocation
    if start is None:
        start = packages[0].sender.address.coordinates or DEFAULT_LOCATION

    destinations = []
    for package in packages:
        coordinates = package.receiver.address.coordinates or DEFAULT_LOCATION
        destinations.append({
            "lat": coordinates.lat,
            "lng": coordinates.lng,
            "address": _format_address(package.receiver.address),
        })

    vehicle = (vehicle_type or driver.vehicle.type).value
    plan = await ai_service.optimize_route(start, destinations, vehicle)

    now = datetime.now(timezone.utc)
    minutes_per_stop = plan["estimatedTime"] / len(packages)
    stops = []
    for position, index in enumerate(plan["optimizedOrder"]):
        package = packages[index]
        stops.append(RouteStop(
            packageId=package.id,
            address=package.receiver.address,
            coordinates=package.receiver.address.coordinates or DEFAULT_LOCATION,
            estimatedArrival=now + timedelta(minutes=minutes_per_stop * (position + 1)),
            status=StopStatus.PENDING,
            order=position + 1,
        ))

    route = Route(
        id=uuid.uuid4().hex,
        driverId=driver.id,
        packages=[stop.packageId for stop in stops],
        startLocation=start,
        stops=stops,
        status=RouteStatus.PLANNED,
        estimatedDuration=plan["estimatedTime"],
        distance=plan["estimatedDistance"],
        optimized=plan["optimized"],
        reasoning=plan["reasoning"],
        createdAt=now,
    )
    store.routes.set(route.id, route.model_dump(mode="json"))
    logger.info(f"Route {route.id} planned for driver {driver.id} with {len(stops)} stops")
    return route

async def get_route(store, route_id):
    data = store.routes.get(route_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Route not found")
    return Route.model_validate(data)

async def list_routes(store, driver_id=None):
    routes = [Route.model_validate(data) for data in store.routes.stream()]
    if driver_id is not None:
        routes = [r for r in routes if r.driverId == driver_id]
    return sorted(routes, key=lambda r: r.createdAt, reverse=True)

async def update_route_status(store, route_id, status, actual_duration=None):
    route = await get_route(store, route_id)
    route.status = RouteStatus(status)
    if actual_duration is not None:
        route.actualDuration = actual_duration
    store.routes.set(route.id, route.model_dump(mode="json"))
    return route

async def update_stop_status(store, route_id, order, status):
    route = await get_route(store, route_id)
    for stop in route.stops:
        if stop.order == order:
            stop.status = StopStatus(status)
            if stop.status in (StopStatus.ARRIVED, StopStatus.COMPLETED) and stop.actualArrival is None:
                stop.actualArrival = datetime.now(timezone.utc)
            break
    else:
        raise HTTPException(status_code=404, detail="Stop not found")

    if route.status == RouteStatus.PLANNED:
        route.status = RouteStatus.IN_PROGRESS
    if all(s.status in (StopStatus.COMPLETED, StopStatus.FAILED, StopStatus.SKIPPED) for s in route.stops):
        route.status = RouteStatus.COMPLETED
    store.routes.set(route.id, route.model_dump(mode="json"))
    return route
