"""Admin endpoints: account and post listings, statistics, deactivation."""
import logging
from datetime import datetime, time
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.api.deps import get_current_admin, get_db
from socialconnect.core.exceptions import NotFoundException, ValidationException
from socialconnect.models.comment import Comment
from socialconnect.models.engagement import Like
from socialconnect.models.post import Post
from socialconnect.models.user import User
from socialconnect.schemas.pagination import ADMIN_DEFAULT_LIMIT, PageParams, page_params
from socialconnect.schemas.post import PostList
from socialconnect.schemas.user import AdminUserList, UserDetail
from socialconnect.services import feed_service, user_service
from socialconnect.services.feed_service import post_to_response
from socialconnect.services.user_service import user_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class DashboardStats(BaseModel):
    total_users: int
    total_posts: int
    total_likes: int
    total_comments: int
    active_today: int


class StatsResponse(BaseModel):
    stats: DashboardStats


@router.get("/users", response_model=AdminUserList)
async def list_all_users(
    params: PageParams = Depends(page_params(ADMIN_DEFAULT_LIMIT)),
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    users, total = await user_service.list_users(db, params, include_inactive=True)
    return AdminUserList(users=[user_to_response(u) for u in users], pagination=params.describe(total))


@router.get("/posts", response_model=PostList)
async def list_all_posts(
    params: PageParams = Depends(page_params(ADMIN_DEFAULT_LIMIT)),
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    posts, total = await feed_service.get_all_posts(db, params)
    return PostList(posts=[post_to_response(p) for p in posts], pagination=params.describe(total))


@router.get("/stats", response_model=StatsResponse)
async def get_dashboard_stats(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Aggregated totals; active_today counts logins since UTC midnight."""
    today = datetime.combine(datetime.utcnow().date(), time.min)
    users_count = await db.scalar(select(func.count(User.id)))
    posts_count = await db.scalar(select(func.count(Post.id)))
    likes_count = await db.scalar(select(func.count(Like.id)))
    comments_count = await db.scalar(select(func.count(Comment.id)))
    active_today = await db.scalar(select(func.count(User.id)).where(User.last_login >= today))
    return StatsResponse(
        stats=DashboardStats(
            total_users=users_count or 0,
            total_posts=posts_count or 0,
            total_likes=likes_count or 0,
            total_comments=comments_count or 0,
            active_today=active_today or 0,
        )
    )


@router.post("/users/{user_id}/deactivate", response_model=UserDetail)
async def deactivate_user(
    user_id: UUID,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundException("User not found")
    if user.id == current_user.id:
        raise ValidationException("Cannot deactivate your own account")
    user.is_active = False
    await db.commit()
    logger.info("Admin %s deactivated %s", current_user.id, user.id)
    return UserDetail(user=user_to_response(user))
