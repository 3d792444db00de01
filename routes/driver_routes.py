from fastapi import APIRouter, HTTPException, Request
from typing import List
from models import AvailabilityUpdateRequest, Coordinates, Driver, DriverProfileRequest, UserRole
from services import driver_service
from services.user_service import get_current_user

router = APIRouter(prefix="/drivers")

async def _require_self_or_admin(request, driver_id):
    user = await get_current_user(request)
    if user.role != UserRole.ADMIN and user.id != driver_id:
        raise HTTPException(status_code=403, detail="Not allowed to modify this driver")
    return user

@router.get("", response_model=List[Driver])
async def get_drivers(request: Request, onlineOnly: bool = False):
    await get_current_user(request)
    return await driver_service.list_drivers(request.app.state.store, online_only=onlineOnly)

@router.get("/{driver_id}", response_model=Driver)
async def get_driver(driver_id: str, request: Request):
    await get_current_user(request)
    return await driver_service.get_driver(request.app.state.store, driver_id)

@router.put("/{driver_id}", response_model=Driver)
async def put_driver_profile(driver_id: str, profile: DriverProfileRequest, request: Request):
    await _require_self_or_admin(request, driver_id)
    return await driver_service.upsert_driver_profile(request.app.state.store, driver_id, profile)

@router.patch("/{driver_id}/location", response_model=Driver)
async def update_location(driver_id: str, coordinates: Coordinates, request: Request):
    await _require_self_or_admin(request, driver_id)
    return await driver_service.update_driver_location(request.app.state.store, driver_id, coordinates)

@router.patch("/{driver_id}/availability", response_model=Driver)
async def update_availability(driver_id: str, update: AvailabilityUpdateRequest, request: Request):
    await _require_self_or_admin(request, driver_id)
    return await driver_service.update_availability(request.app.state.store, driver_id, update)
