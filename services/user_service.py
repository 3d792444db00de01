from datetime import datetime, timezone
from fastapi import HTTPException
from models import User, UserRole

async def get_user_data(store, user_id):
    """Get a user by id, or None"""
    data = store.users.get(user_id)
    if data is None:
        return None
    return User.model_validate(data)

async def get_current_user(request):
    """Resolve the caller from the X-User-ID header set by the gateway"""
    user_id = request.headers.get("X-User-ID", "")
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing User ID")
    user = await get_user_data(request.app.state.store, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user

async def require_role(request, *roles):
    user = await get_current_user(request)
    if user.role not in roles:
        raise HTTPException(status_code=403, detail="Not allowed for this role")
    return user

async def require_admin(request):
    return await require_role(request, UserRole.ADMIN)

async def save_user(store, user):
    try:
        store.users.set(user.id, user.model_dump(mode="json"))
        return user
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error saving user document: {exc}")

async def update_user_profile(store, user, updates):
    """Apply non-empty profile fields and bump updatedAt"""
    changes = {k: v for k, v in updates.items() if v is not None}
    changes["updatedAt"] = datetime.now(timezone.utc)
    updated = user.model_copy(update=changes)
    return await save_user(store, updated)

async def list_users(store, role=None):
    users = [User.model_validate(data) for data in store.users.stream()]
    if role is not None:
        users = [u for u in users if u.role == role]
    return sorted(users, key=lambda u: u.createdAt)
