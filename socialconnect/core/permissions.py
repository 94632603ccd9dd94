"""Ownership and role rules.

Each check compares the acting account against the owner/recipient of the
target row and raises before any mutation happens. These mirror the row-level
policies of the schema: writes are limited to the acting identity, admins may
remove any post and manage accounts.
"""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.core.exceptions import ForbiddenException, ValidationException
from socialconnect.models.comment import Comment
from socialconnect.models.engagement import Follow
from socialconnect.models.notification import Notification
from socialconnect.models.post import Post
from socialconnect.models.user import User


def is_admin(user: User | None) -> bool:
    return user is not None and user.role == "admin"


def ensure_admin(user: User) -> None:
    if not is_admin(user):
        raise ForbiddenException("Admin privileges required")


def ensure_post_owner(actor: User, post: Post) -> None:
    if post.author_id != actor.id:
        raise ForbiddenException("You can only modify your own posts")


def ensure_post_owner_or_admin(actor: User, post: Post) -> None:
    if post.author_id != actor.id and not is_admin(actor):
        raise ForbiddenException("You can only delete your own posts")


def ensure_comment_owner(actor: User, comment: Comment) -> None:
    if comment.user_id != actor.id:
        raise ForbiddenException("You can only modify your own comments")


def ensure_notification_recipient(actor: User, notification: Notification) -> None:
    if notification.user_id != actor.id:
        raise ForbiddenException("Not your notification")


def ensure_not_self_follow(actor: User, target_id: UUID) -> None:
    if actor.id == target_id:
        raise ValidationException("Cannot follow yourself")


async def is_following(db: AsyncSession, follower_id: UUID, following_id: UUID) -> bool:
    result = await db.execute(
        select(Follow.id).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )
    return result.first() is not None


async def can_view_profile(db: AsyncSession, owner: User, viewer: User | None) -> bool:
    """public: everyone; followers_only: owner and followers; private: owner only. Admins see all."""
    visibility = owner.profile_visibility or "public"
    if visibility == "public":
        return True
    if viewer is None:
        return False
    if viewer.id == owner.id or is_admin(viewer):
        return True
    if visibility == "followers_only":
        return await is_following(db, viewer.id, owner.id)
    return False
