from fastapi import APIRouter, HTTPException, Request
from typing import List
from models import (
    DeliveryTimeEstimate, DeliveryTimeRequest, OptimizeRouteRequest, Route,
    RouteStatusUpdateRequest, StopStatusUpdateRequest, UserRole,
)
from services import route_service
from services.user_service import get_current_user, require_role

router = APIRouter(prefix="/routes")

async def _require_route_access(request, driver_id):
    user = await require_role(request, UserRole.DRIVER, UserRole.ADMIN)
    if user.role == UserRole.DRIVER and user.id != driver_id:
        raise HTTPException(status_code=403, detail="Not allowed to manage this route")
    return user

@router.post("/optimize", response_model=Route, status_code=201)
async def optimize(body: OptimizeRouteRequest, request: Request):
    await _require_route_access(request, body.driverId)
    return await route_service.optimize_route(
        request.app.state.store,
        request.app.state.ai_service,
        body.driverId,
        body.packageIds,
        vehicle_type=body.vehicleType,
    )

@router.post("/estimate-time", response_model=DeliveryTimeEstimate)
async def estimate_time(body: DeliveryTimeRequest, request: Request):
    await get_current_user(request)
    return await request.app.state.ai_service.calculate_delivery_time(
        body.distance, body.trafficFactor, body.weatherFactor, body.priority,
    )

@router.get("", response_model=List[Route])
async def get_routes(request: Request, driverId: str | None = None):
    user = await require_role(request, UserRole.DRIVER, UserRole.ADMIN)
    if user.role == UserRole.DRIVER:
        driverId = user.id
    return await route_service.list_routes(request.app.state.store, driver_id=driverId)

@router.patch("/{route_id}/status", response_model=Route)
async def update_status(route_id: str, body: RouteStatusUpdateRequest, request: Request):
    store = request.app.state.store
    route = await route_service.get_route(store, route_id)
    await _require_route_access(request, route.driverId)
    return await route_service.update_route_status(store, route_id, body.status, body.actualDuration)

@router.patch("/{route_id}/stops/{order}", response_model=Route)
async def update_stop(route_id: str, order: int, body: StopStatusUpdateRequest, request: Request):
    store = request.app.state.store
    route = await route_service.get_route(store, route_id)
    await _require_route_access(request, route.driverId)
    return await route_service.update_stop_status(store, route_id, order, body.status)
