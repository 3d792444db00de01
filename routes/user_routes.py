from fastapi import APIRouter, Request
from models import User, UserRole, ProfileUpdateRequest
from typing import List
from services.user_service import get_current_user, list_users, require_admin, update_user_profile

router = APIRouter(prefix="/users")

@router.get("/me", response_model=User)
async def get_me(request: Request):
    return await get_current_user(request)

@router.patch("/me", response_model=User)
async def update_me(update: ProfileUpdateRequest, request: Request):
    user = await get_current_user(request)
    return await update_user_profile(request.app.state.store, user, update.model_dump())

@router.get("", response_model=List[User])
async def get_users(request: Request, role: UserRole | None = None):
    await require_admin(request)
    return await list_users(request.app.state.store, role=role)
