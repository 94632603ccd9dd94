"""Pydantic schemas for Comment."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from socialconnect.models.comment import COMMENT_MAX_LENGTH
from socialconnect.schemas.pagination import Pagination
from socialconnect.schemas.user import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content is required")
        return value


class CommentUpdate(CommentCreate):
    pass


class CommentResponse(BaseModel):
    id: UUID
    user_id: UUID
    post_id: UUID
    content: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime | None = None
    user: UserSummary | None = None

    model_config = {"from_attributes": True}


class CommentDetail(BaseModel):
    comment: CommentResponse


class CommentList(BaseModel):
    comments: list[CommentResponse]
    pagination: Pagination
