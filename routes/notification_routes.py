from fastapi import APIRouter, Request
from models import Notification, NotificationList, NotificationType
from services import notification_service
from services.user_service import get_current_user

router = APIRouter(prefix="/notifications")

@router.get("", response_model=NotificationList)
async def get_notifications(request: Request, type: NotificationType | None = None, unreadOnly: bool = False):
    user = await get_current_user(request)
    store = request.app.state.store
    notifications = await notification_service.get_user_notifications(
        store, user, type=type, unread_only=unreadOnly,
    )
    # The badge count covers every unread notification, not just the filtered page
    everything = await notification_service.get_user_notifications(store, user)
    return {
        "notifications": notifications,
        "unreadCount": notification_service.unread_count(everything),
    }

@router.patch("/{notification_id}/read", response_model=Notification)
async def mark_read(notification_id: str, request: Request):
    user = await get_current_user(request)
    return await notification_service.mark_as_read(request.app.state.store, user, notification_id)

@router.post("/read-all")
async def mark_all_read(request: Request):
    user = await get_current_user(request)
    updated = await notification_service.mark_all_as_read(request.app.state.store, user)
    return {"updated": updated}

@router.delete("/{notification_id}", status_code=204)
async def delete_notification(notification_id: str, request: Request):
    user = await get_current_user(request)
    await notification_service.delete_notification(request.app.state.store, user, notification_id)

@router.delete("")
async def clear_notifications(request: Request):
    user = await get_current_user(request)
    removed = await notification_service.clear_all(request.app.state.store, user)
    return {"removed": removed}
