from fastapi import APIRouter, HTTPException, Request
from models import SignupRequest, LoginRequest, AuthResponse, User, UserRole
from services.auth_service import (
    bearer_token, create_account, create_session, end_session, resolve_session, verify_email_password,
)
from services.user_service import get_user_data
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(request: SignupRequest, request_obj: Request):
    store = request_obj.app.state.store
    if request.role == UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin accounts cannot be self-registered")
    user = await create_account(
        store,
        request.name,
        request.email,
        request.phone,
        request.password,
        role=request.role,
    )
    token = await create_session(store, user.id)
    return {"token": token, "user": user}

@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, request_obj: Request):
    store = request_obj.app.state.store

    # Verify credentials
    user_id = await verify_email_password(store, request.email, request.password)

    user = await get_user_data(store, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User record not found")
    if request.role and user.role != request.role:
        raise HTTPException(status_code=401, detail="Invalid role for this account")

    token = await create_session(store, user.id)
    logger.info(f"User logged in: {user_id}")
    return {"token": token, "user": user}

@router.get("/session", response_model=User)
async def get_session(request: Request):
    store = request.app.state.store
    user_id = await resolve_session(store, bearer_token(request))
    user = await get_user_data(store, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User record not found")
    return user

@router.post("/logout", status_code=204)
async def logout(request: Request):
    await end_session(request.app.state.store, bearer_token(request))
