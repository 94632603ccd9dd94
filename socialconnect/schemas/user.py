"""Pydantic schemas for User and auth payloads."""
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from socialconnect.schemas.pagination import Pagination

ProfileVisibility = Literal["public", "private", "followers_only"]


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.]+$")
    password: str = Field(..., min_length=8)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class UserUpdate(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    bio: str | None = None
    avatar_url: str | None = None
    website: str | None = None
    location: str | None = Field(None, max_length=100)
    profile_visibility: ProfileVisibility | None = None


class UserSummary(BaseModel):
    """Compact author/actor block embedded in posts, comments and notifications."""
    id: UUID
    username: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None

    model_config = {"from_attributes": True}


class UserPublic(UserSummary):
    bio: str | None = None
    website: str | None = None
    location: str | None = None
    profile_visibility: str = "public"
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    is_following: bool = False  # Set by API when viewer is authenticated
    created_at: datetime


class UserResponse(UserPublic):
    """Full profile, returned to the account itself and to admins."""
    email: str
    role: str = "user"
    is_active: bool = True
    last_login: datetime | None = None
    updated_at: datetime | None = None


class UserDetail(BaseModel):
    user: UserResponse


class UserPublicDetail(BaseModel):
    user: UserPublic


class UserList(BaseModel):
    users: list[UserPublic]
    pagination: Pagination


class AdminUserList(BaseModel):
    users: list[UserResponse]
    pagination: Pagination


class FollowersList(BaseModel):
    followers: list[UserPublic]
    pagination: Pagination


class FollowingList(BaseModel):
    following: list[UserPublic]
    pagination: Pagination


class FollowResponse(BaseModel):
    id: UUID
    follower_id: UUID
    following_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class FollowResult(BaseModel):
    message: str
    follow: FollowResponse


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class RegisterResponse(Token):
    message: str = "User registered successfully"


class TokenRefresh(BaseModel):
    refresh_token: str


class LoginRequest(BaseModel):
    email: EmailStr | None = None
    username: str | None = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _require_identifier(self) -> "LoginRequest":
        if not self.email and not self.username:
            raise ValueError("email or username is required")
        return self
