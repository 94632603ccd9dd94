"""Notification creation and queries.

Notifications are a best-effort side effect of follow/like/comment writes:
they are created after the primary write has committed, so a failure here is
logged and never undoes the write that triggered it.
"""
import logging
from uuid import UUID

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from socialconnect.core.exceptions import NotFoundException
from socialconnect.core.permissions import ensure_notification_recipient
from socialconnect.models.notification import Notification
from socialconnect.models.user import User
from socialconnect.schemas.notification import NotificationResponse, PostPreview
from socialconnect.schemas.pagination import PageParams

logger = logging.getLogger(__name__)

PUSH_TEXT = {
    "follow": "{actor} started following you",
    "like": "{actor} liked your post",
    "comment": "{actor} commented on your post",
    "mention": "{actor} mentioned you",
}


def _display_name(user: User) -> str:
    full = " ".join(part for part in (user.first_name, user.last_name) if part)
    return full or user.username


async def create_notification(
    db: AsyncSession,
    *,
    user_id: UUID,
    actor: User,
    notification_type: str,
    post_id: UUID | None = None,
    comment_id: UUID | None = None,
    content: str | None = None,
) -> Notification | None:
    """Create and commit a notification. Skips self-notifications; never raises on store failure."""
    if user_id == actor.id:
        return None
    text = PUSH_TEXT[notification_type].format(actor=_display_name(actor))
    try:
        notification = Notification(
            user_id=user_id,
            actor_id=actor.id,
            type=notification_type,
            post_id=post_id,
            comment_id=comment_id,
            content=content,
        )
        db.add(notification)
        await db.commit()
    except SQLAlchemyError:
        logger.warning("Could not store %s notification for %s", notification_type, user_id, exc_info=True)
        await db.rollback()
        return None
    _dispatch_push(user_id, text)
    return notification


def _dispatch_push(user_id: UUID, text: str) -> None:
    from socialconnect.workers.notifications import send_push_notification

    try:
        send_push_notification.delay(str(user_id), "SocialConnect", text)
    except Exception:
        logger.warning("Push dispatch failed for %s", user_id, exc_info=True)


def notification_to_response(n: Notification) -> NotificationResponse:
    from socialconnect.services.user_service import user_to_summary

    return NotificationResponse(
        id=n.id,
        user_id=n.user_id,
        actor_id=n.actor_id,
        type=n.type,
        post_id=n.post_id,
        comment_id=n.comment_id,
        content=n.content,
        is_read=n.is_read,
        created_at=n.created_at,
        actor=user_to_summary(n.actor),
        post=PostPreview(id=n.post.id, content=n.post.content) if n.post else None,
    )


async def get_notifications(
    db: AsyncSession,
    user_id: UUID,
    params: PageParams,
) -> tuple[list[Notification], int]:
    """Get notifications for user, most recent first."""
    total = await db.scalar(select(func.count(Notification.id)).where(Notification.user_id == user_id)) or 0
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(desc(Notification.created_at))
        .offset(params.offset)
        .limit(params.limit)
        .options(selectinload(Notification.actor), selectinload(Notification.post))
    )
    return list(result.scalars().all()), total


async def get_unread_count(db: AsyncSession, user_id: UUID) -> int:
    """Get count of unread notifications."""
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
    )
    return result.scalar() or 0


async def mark_all_read(db: AsyncSession, user_id: UUID) -> int:
    """Mark all notifications as read. Returns count updated."""
    stmt = (
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount or 0


async def mark_one_read(db: AsyncSession, actor: User, notification_id: UUID) -> Notification:
    """Flip the read flag. Only the recipient may do this."""
    result = await db.execute(
        select(Notification)
        .where(Notification.id == notification_id)
        .options(selectinload(Notification.actor), selectinload(Notification.post))
    )
    notification = result.scalar_one_or_none()
    if not notification:
        raise NotFoundException("Notification not found")
    ensure_notification_recipient(actor, notification)
    notification.is_read = True
    await db.flush()
    return notification
