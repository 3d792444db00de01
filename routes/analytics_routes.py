from fastapi import APIRouter, Request
from models import Analytics
from services.analytics_service import compute_analytics
from services.user_service import require_admin

router = APIRouter()

@router.get("/analytics", response_model=Analytics)
async def get_analytics(request: Request):
    await require_admin(request)
    return await compute_analytics(request.app.state.store)
