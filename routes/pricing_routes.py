from fastapi import APIRouter
from typing import List
from models import PriceBreakdown, QuoteRequest, StatusInfo
from services.pricing_service import calculate_delivery_price, estimate_distance
from services.status_service import describe_statuses

router = APIRouter()

@router.post("/pricing/quote", response_model=PriceBreakdown)
async def quote(request: QuoteRequest):
    distance = request.distance
    if distance is None:
        distance = estimate_distance(request.origin, request.destination)
    return calculate_delivery_price(
        distance,
        request.weight,
        request.priority,
        request.deliveryType,
        insurance=request.insurance,
        package_value=request.packageValue,
    )

@router.get("/statuses", response_model=List[StatusInfo])
async def statuses():
    return describe_statuses()
