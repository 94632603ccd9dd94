"""Pydantic schemas for Notification."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from socialconnect.schemas.pagination import Pagination
from socialconnect.schemas.user import UserSummary


class PostPreview(BaseModel):
    id: UUID
    content: str

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    id: UUID
    user_id: UUID
    actor_id: UUID | None = None
    type: str
    post_id: UUID | None = None
    comment_id: UUID | None = None
    content: str | None = None
    is_read: bool = False
    created_at: datetime
    actor: UserSummary | None = None
    post: PostPreview | None = None

    model_config = {"from_attributes": True}


class NotificationList(BaseModel):
    notifications: list[NotificationResponse]
    pagination: Pagination
    unread_count: int = 0
