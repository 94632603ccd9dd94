"""Profiles and the follow graph."""
import logging
from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.core.exceptions import ConflictException, NotFoundException
from socialconnect.core.permissions import ensure_not_self_follow
from socialconnect.models.engagement import Follow
from socialconnect.models.user import User
from socialconnect.schemas.pagination import PageParams
from socialconnect.schemas.user import UserPublic, UserResponse, UserSummary, UserUpdate
from socialconnect.services import counters

logger = logging.getLogger(__name__)

BIO_MAX_LENGTH = 160


def user_to_summary(user: User | None) -> UserSummary | None:
    if user is None:
        return None
    return UserSummary(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        avatar_url=user.avatar_url,
    )


def user_to_public(user: User, is_following: bool = False, full: bool = True) -> UserPublic:
    """Public profile. With ``full=False`` only identity fields are exposed (restricted profiles)."""
    return UserPublic(
        id=user.id,
        username=user.username,
        first_name=user.first_name if full else None,
        last_name=user.last_name if full else None,
        avatar_url=user.avatar_url,
        bio=user.bio if full else None,
        website=user.website if full else None,
        location=user.location if full else None,
        profile_visibility=user.profile_visibility or "public",
        followers_count=user.followers_count or 0,
        following_count=user.following_count or 0,
        posts_count=user.posts_count or 0,
        is_following=is_following,
        created_at=user.created_at,
    )


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        **user_to_public(user).model_dump(),
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        last_login=user.last_login,
        updated_at=user.updated_at,
    )


async def get_active_user(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id, User.is_active.is_(True)))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundException("User not found")
    return user


async def list_users(db: AsyncSession, params: PageParams, *, include_inactive: bool = False) -> tuple[list[User], int]:
    q = select(User)
    count_q = select(func.count(User.id))
    if not include_inactive:
        q = q.where(User.is_active.is_(True))
        count_q = count_q.where(User.is_active.is_(True))
    total = await db.scalar(count_q) or 0
    result = await db.execute(
        q.order_by(desc(User.created_at)).offset(params.offset).limit(params.limit)
    )
    return list(result.scalars().all()), total


async def update_profile(db: AsyncSession, user: User, data: UserUpdate) -> User:
    changes = data.model_dump(exclude_unset=True)
    if "bio" in changes and changes["bio"] is not None:
        changes["bio"] = changes["bio"][:BIO_MAX_LENGTH]
    for field, value in changes.items():
        if field == "profile_visibility" and value is None:
            continue
        setattr(user, field, value)
    await db.flush()
    await db.refresh(user)
    return user


async def get_following_ids(db: AsyncSession, follower_id: UUID, candidate_ids: list[UUID]) -> set[UUID]:
    """Return the subset of ``candidate_ids`` that ``follower_id`` follows."""
    if not candidate_ids:
        return set()
    result = await db.execute(
        select(Follow.following_id).where(
            Follow.follower_id == follower_id,
            Follow.following_id.in_(candidate_ids),
        )
    )
    return {row[0] for row in result.all()}


async def follow_user(db: AsyncSession, actor: User, target_id: UUID) -> Follow:
    ensure_not_self_follow(actor, target_id)
    target = await get_active_user(db, target_id)
    existing = await db.execute(
        select(Follow.id).where(Follow.follower_id == actor.id, Follow.following_id == target.id)
    )
    if existing.first() is not None:
        raise ConflictException("Already following this user")
    follow = Follow(follower_id=actor.id, following_id=target.id)
    db.add(follow)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictException("Already following this user")
    await counters.on_follow_created(db, actor.id, target.id)
    logger.info("%s followed %s", actor.id, target.id)
    return follow


async def unfollow_user(db: AsyncSession, actor: User, target_id: UUID) -> bool:
    """Remove the edge. Returns False when there was nothing to remove."""
    result = await db.execute(
        delete(Follow)
        .where(Follow.follower_id == actor.id, Follow.following_id == target_id)
        .execution_options(synchronize_session=False)
    )
    if not result.rowcount:
        return False
    await counters.on_follow_deleted(db, actor.id, target_id)
    logger.info("%s unfollowed %s", actor.id, target_id)
    return True


async def list_followers(db: AsyncSession, user_id: UUID, params: PageParams) -> tuple[list[User], int]:
    """Accounts following ``user_id``, most recent follow first."""
    total = await db.scalar(select(func.count(Follow.id)).where(Follow.following_id == user_id)) or 0
    result = await db.execute(
        select(User)
        .join(Follow, Follow.follower_id == User.id)
        .where(Follow.following_id == user_id)
        .order_by(desc(Follow.created_at))
        .offset(params.offset)
        .limit(params.limit)
    )
    return list(result.scalars().all()), total


async def list_following(db: AsyncSession, user_id: UUID, params: PageParams) -> tuple[list[User], int]:
    """Accounts ``user_id`` follows, most recent follow first."""
    total = await db.scalar(select(func.count(Follow.id)).where(Follow.follower_id == user_id)) or 0
    result = await db.execute(
        select(User)
        .join(Follow, Follow.following_id == User.id)
        .where(Follow.follower_id == user_id)
        .order_by(desc(Follow.created_at))
        .offset(params.offset)
        .limit(params.limit)
    )
    return list(result.scalars().all()), total
