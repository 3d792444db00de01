import uuid
from datetime import datetime, timezone
from fastapi import HTTPException
from models import Notification, NotificationType

async def add_notification(store, user_id, type, title, message, data=None):
    notification = Notification(
        id=uuid.uuid4().hex,
        userId=user_id,
        type=NotificationType(type),
        title=title,
        message=message,
        data=data,
        read=False,
        createdAt=datetime.now(timezone.utc),
    )
    store.notifications.set(notification.id, notification.model_dump(mode="json"))
    return notification

async def get_user_notifications(store, user, type=None, unread_only=False):
    """Notifications addressed to the user, newest first.

    Notifications may be addressed by user id or by email (package events
    address the sender by the email on the package).
    """
    owners = {user.id, user.email}
    notifications = [
        Notification.model_validate(data)
        for data in store.notifications.stream()
        if data["userId"] in owners
    ]
    if type is not None:
        notifications = [n for n in notifications if n.type == type]
    if unread_only:
        notifications = [n for n in notifications if not n.read]
    notifications.sort(key=lambda n: n.createdAt, reverse=True)
    return notifications

def unread_count(notifications):
    return sum(1 for n in notifications if not n.read)

async def _get_owned(store, user, notification_id):
    data = store.notifications.get(notification_id)
    if data is None or data["userId"] not in (user.id, user.email):
        raise HTTPException(status_code=404, detail="Notification not found")
    return Notification.model_validate(data)

async def mark_as_read(store, user, notification_id):
    notification = await _get_owned(store, user, notification_id)
    notification.read = True
    store.notifications.set(notification.id, notification.model_dump(mode="json"))
    return notification

async def mark_all_as_read(store, user):
    updated = 0
    for notification in await get_user_notifications(store, user, unread_only=True):
        notification.read = True
        store.notifications.set(notification.id, notification.model_dump(mode="json"))
        updated += 1
    return updated

async def delete_notification(store, user, notification_id):
    notification = await _get_owned(store, user, notification_id)
    store.notifications.delete(notification.id)

async def clear_all(store, user):
    removed = 0
    for notification in await get_user_notifications(store, user):
        store.notifications.delete(notification.id)
        removed += 1
    return removed
