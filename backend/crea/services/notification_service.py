"""
In-app notifications.

Notifications are written in the caller's session and committed with the
rest of the request's changes.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.logging_config import logger
from crea.models.notification import Notification, NotificationType
from crea.models.user import User, UserRole


def _build(
    user_id: str,
    type: NotificationType,
    title: str,
    message: str,
    link: Optional[str],
    metadata: Optional[Dict[str, Any]],
) -> Notification:
    return Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        link=link,
        extra_metadata=dict(metadata or {}),
    )


async def notify_user(
    db: AsyncSession,
    user_id: str,
    type: NotificationType,
    title: str,
    message: str,
    link: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Notification:
    notification = _build(str(user_id), type, title, message, link, metadata)
    db.add(notification)
    return notification


async def _notify_many(
    db: AsyncSession,
    user_ids: List[str],
    type: NotificationType,
    title: str,
    message: str,
    link: Optional[str],
    metadata: Optional[Dict[str, Any]],
) -> int:
    db.add_all([_build(uid, type, title, message, link, metadata) for uid in user_ids])
    logger.info(f"[Notify] {type.value} '{title}' queued for {len(user_ids)} users")
    return len(user_ids)


async def notify_all_users(
    db: AsyncSession,
    type: NotificationType,
    title: str,
    message: str,
    link: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> int:
    """Notify every account; returns the number of notifications created"""
    result = await db.execute(select(User.id))
    user_ids = [str(uid) for uid in result.scalars().all()]
    return await _notify_many(db, user_ids, type, title, message, link, metadata)


async def notify_admins(
    db: AsyncSession,
    type: NotificationType,
    title: str,
    message: str,
    link: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> int:
    result = await db.execute(select(User.id).where(User.role == UserRole.ADMIN))
    admin_ids = [str(uid) for uid in result.scalars().all()]
    return await _notify_many(db, admin_ids, type, title, message, link, metadata)
