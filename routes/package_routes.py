from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Query, Request
from typing import List
from models import (
    AssignDriverRequest, DeliveryPriority, Package, PackageCreateRequest, PackageStatus,
    ProofRequest, SortKey, StatusUpdateRequest, TrackingResponse, UserRole,
)
from services import package_service
from services.user_service import get_current_user, require_admin, require_role

router = APIRouter()

def _aware(value):
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

@router.post("/packages", response_model=Package, status_code=201)
async def create_package(package: PackageCreateRequest, request: Request):
    await get_current_user(request)
    return await package_service.create_package(request.app.state.store, package)

@router.get("/packages", response_model=List[Package])
async def get_packages(
    request: Request,
    status: List[PackageStatus] | None = Query(None),
    priority: List[DeliveryPriority] | None = Query(None),
    search: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    sortBy: SortKey = "date",
):
    user = await get_current_user(request)
    packages = await package_service.get_packages_by_user(request.app.state.store, user)
    packages = package_service.filter_packages(
        packages, status=status, priority=priority, start=_aware(start), end=_aware(end), search=search,
    )
    return package_service.sort_packages(packages, sortBy)

@router.get("/packages/{package_id}", response_model=Package)
async def get_package(package_id: str, request: Request):
    user = await get_current_user(request)
    package = await package_service.get_package(request.app.state.store, package_id)
    if not package_service.can_view(user, package):
        raise HTTPException(status_code=404, detail="Package not found")
    return package

@router.get("/tracking/{tracking_number}", response_model=TrackingResponse)
async def track_package(tracking_number: str, request: Request):
    return await package_service.tracking_view(request.app.state.store, tracking_number)

@router.patch("/packages/{package_id}/status", response_model=Package)
async def update_status(package_id: str, update: StatusUpdateRequest, request: Request):
    user = await get_current_user(request)
    store = request.app.state.store
    package = await package_service.get_package(store, package_id)
    if not package_service.can_update_status(user, package, update.status):
        raise HTTPException(status_code=403, detail="Not allowed to update this package")
    return await package_service.update_package_status(
        store, package_id, update.status, update.location, update.notes, update.coordinates,
    )

@router.post("/packages/{package_id}/assign", response_model=Package)
async def assign_driver(package_id: str, assignment: AssignDriverRequest, request: Request):
    await require_admin(request)
    return await package_service.assign_package_to_driver(
        request.app.state.store, package_id, assignment.driverId,
    )

@router.post("/packages/{package_id}/proof", response_model=Package)
async def record_proof(package_id: str, proof: ProofRequest, request: Request):
    user = await require_role(request, UserRole.DRIVER, UserRole.ADMIN)
    store = request.app.state.store
    package = await package_service.get_package(store, package_id)
    if user.role == UserRole.DRIVER and package.driverId != user.id:
        raise HTTPException(status_code=403, detail="Package is not assigned to you")
    return await package_service.record_proof_of_delivery(store, package_id, proof)
