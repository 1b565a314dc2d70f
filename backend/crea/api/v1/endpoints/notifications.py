from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.core.logging_config import logger
from crea.models.notification import Notification
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_user, get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.notification import (
    NotificationResponse,
    UnreadCountResponse,
    BroadcastRequest,
    BroadcastResponse,
)
from crea.services.crud import CRUDService
from crea.services.notification_service import notify_all_users

router = APIRouter()

notifications = CRUDService(Notification, "Notification")


async def _own_notification(db: AsyncSession, notification_id: str, user: User) -> Notification:
    notification = await notifications.get_or_none(db, notification_id)
    # Someone else's notification is reported as missing
    if notification is None or str(notification.user_id) != str(user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """My notifications, newest first"""
    criteria = [Notification.user_id == current_user.id]
    if unread_only:
        criteria.append(Notification.read.is_(False))
    return await notifications.list(db, *criteria)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(func.count()).select_from(Notification).where(
            Notification.user_id == current_user.id,
            Notification.read.is_(False),
        )
    )
    return UnreadCountResponse(count=result.scalar() or 0)


@router.put("/read-all", response_model=SuccessResponse)
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await db.execute(
        update(Notification)
        .where(Notification.user_id == current_user.id, Notification.read.is_(False))
        .values(read=True)
    )
    await db.commit()
    return SuccessResponse(message="All notifications marked as read")


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    notification = await _own_notification(db, notification_id, current_user)
    return await notifications.apply(db, notification, {"read": True})


@router.delete("/{notification_id}", response_model=SuccessResponse)
async def delete_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    notification = await _own_notification(db, notification_id, current_user)
    await db.delete(notification)
    await db.commit()
    return SuccessResponse(message="Notification deleted")


@router.post("/broadcast", response_model=BroadcastResponse)
async def broadcast(
    data: BroadcastRequest,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Send a notification to every user"""
    sent = await notify_all_users(db, data.type, data.title, data.message, link=data.link)
    await db.commit()
    logger.info(f"[Notify] {admin.email} broadcast '{data.title}' to {sent} users")
    return BroadcastResponse(sent=sent)
