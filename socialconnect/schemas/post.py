"""Pydantic schemas for Post."""
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from socialconnect.models.post import POST_MAX_LENGTH
from socialconnect.schemas.pagination import Pagination
from socialconnect.schemas.user import UserSummary

PostCategory = Literal["general", "announcement", "question"]


class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=POST_MAX_LENGTH)
    image_url: str | None = None
    category: PostCategory = "general"

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content is required")
        return value


class PostUpdate(BaseModel):
    content: str | None = Field(None, min_length=1, max_length=POST_MAX_LENGTH)
    image_url: str | None = None
    category: PostCategory | None = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Content is required")
        return value


class PostResponse(BaseModel):
    id: UUID
    author_id: UUID
    content: str
    image_url: str | None = None
    category: str = "general"
    is_active: bool = True
    like_count: int = 0
    comment_count: int = 0
    created_at: datetime
    updated_at: datetime | None = None
    author: UserSummary | None = None
    is_liked: bool = False

    model_config = {"from_attributes": True}


class PostDetail(BaseModel):
    post: PostResponse


class PostList(BaseModel):
    posts: list[PostResponse]
    pagination: Pagination


class LikeResponse(BaseModel):
    id: UUID
    user_id: UUID
    post_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class LikeResult(BaseModel):
    message: str
    like: LikeResponse
