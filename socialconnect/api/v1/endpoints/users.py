"""User profile and follow endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.api.deps import get_current_user, get_current_user_optional, get_db
from socialconnect.core.exceptions import ForbiddenException, NotFoundException
from socialconnect.core.permissions import can_view_profile, is_admin
from socialconnect.models.user import User
from socialconnect.schemas.pagination import PageParams, page_params
from socialconnect.schemas.user import (
    FollowersList,
    FollowingList,
    FollowResponse,
    FollowResult,
    UserDetail,
    UserList,
    UserPublicDetail,
    UserUpdate,
)
from socialconnect.services import user_service
from socialconnect.services.notification_service import create_notification
from socialconnect.services.user_service import user_to_public, user_to_response

router = APIRouter(prefix="/users", tags=["users"])


async def _public_list(db: AsyncSession, users: list[User], viewer: User | None) -> list:
    following_ids = await user_service.get_following_ids(db, viewer.id, [u.id for u in users]) if viewer else set()
    return [user_to_public(u, is_following=u.id in following_ids) for u in users]


async def _get_viewable_user(db: AsyncSession, user_id: UUID, viewer: User | None) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or (not user.is_active and not is_admin(viewer)):
        raise NotFoundException("User not found")
    return user


@router.get("", response_model=UserList)
async def list_users(
    params: PageParams = Depends(page_params()),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    users, total = await user_service.list_users(db, params)
    return UserList(users=await _public_list(db, users, current_user), pagination=params.describe(total))


@router.get("/me", response_model=UserDetail)
async def get_me(current_user: User = Depends(get_current_user)):
    return UserDetail(user=user_to_response(current_user))


@router.api_route("/me", methods=["PUT", "PATCH"], response_model=UserDetail)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.update_profile(db, current_user, data)
    await db.commit()
    return UserDetail(user=user_to_response(user))


@router.get("/{user_id}", response_model=UserPublicDetail)
async def get_user(
    user_id: UUID,
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    user = await _get_viewable_user(db, user_id, current_user)
    is_following = False
    if current_user and current_user.id != user.id:
        is_following = user.id in await user_service.get_following_ids(db, current_user.id, [user.id])
    full = await can_view_profile(db, user, current_user)
    return UserPublicDetail(user=user_to_public(user, is_following=is_following, full=full))


@router.post("/{user_id}/follow", response_model=FollowResult, status_code=status.HTTP_201_CREATED)
async def follow_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    follow = await user_service.follow_user(db, current_user, user_id)
    await db.commit()
    response = FollowResult(message="User followed successfully", follow=FollowResponse.model_validate(follow))
    await create_notification(
        db,
        user_id=user_id,
        actor=current_user,
        notification_type="follow",
    )
    return response


@router.delete("/{user_id}/follow")
async def unfollow_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    removed = await user_service.unfollow_user(db, current_user, user_id)
    await db.commit()
    if not removed:
        return {"message": "Not following this user"}
    return {"message": "User unfollowed successfully"}


@router.get("/{user_id}/followers", response_model=FollowersList)
async def get_user_followers(
    user_id: UUID,
    params: PageParams = Depends(page_params()),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """Get users who follow this user."""
    target = await _get_viewable_user(db, user_id, current_user)
    if not await can_view_profile(db, target, current_user):
        raise ForbiddenException("Cannot view followers of this profile")
    users, total = await user_service.list_followers(db, user_id, params)
    return FollowersList(followers=await _public_list(db, users, current_user), pagination=params.describe(total))


@router.get("/{user_id}/following", response_model=FollowingList)
async def get_user_following(
    user_id: UUID,
    params: PageParams = Depends(page_params()),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """Get users that this user follows."""
    target = await _get_viewable_user(db, user_id, current_user)
    if not await can_view_profile(db, target, current_user):
        raise ForbiddenException("Cannot view following of this profile")
    users, total = await user_service.list_following(db, user_id, params)
    return FollowingList(following=await _public_list(db, users, current_user), pagination=params.describe(total))
