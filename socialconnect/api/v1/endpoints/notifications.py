"""Notifications API."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.api.deps import get_current_user, get_db
from socialconnect.models.user import User
from socialconnect.schemas.notification import NotificationList
from socialconnect.schemas.pagination import PageParams, page_params
from socialconnect.services.notification_service import (
    get_notifications,
    get_unread_count,
    mark_all_read,
    mark_one_read,
    notification_to_response,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationList)
async def list_notifications(
    params: PageParams = Depends(page_params()),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notifications, total = await get_notifications(db, current_user.id, params)
    return NotificationList(
        notifications=[notification_to_response(n) for n in notifications],
        pagination=params.describe(total),
        unread_count=await get_unread_count(db, current_user.id),
    )


@router.get("/unread-count")
async def unread_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    count = await get_unread_count(db, current_user.id)
    return {"count": count}


@router.post("/mark-all-read")
async def mark_all_as_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await mark_all_read(db, current_user.id)
    await db.commit()
    return {"updated": updated}


@router.api_route("/{notification_id}/read", methods=["PUT", "PATCH"])
async def mark_one_as_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notification = await mark_one_read(db, current_user, notification_id)
    await db.commit()
    return {
        "message": "Notification marked as read",
        "notification": notification_to_response(notification),
    }
