import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.core.exceptions import ForbiddenException, ValidationException
from socialconnect.core.permissions import (
    can_view_profile,
    ensure_not_self_follow,
    ensure_post_owner_or_admin,
)
from socialconnect.models.post import Post
from socialconnect.models.user import User
from socialconnect.schemas.pagination import PageParams
from socialconnect.services import counters


async def _user(db: AsyncSession, username: str, **fields) -> User:
    user = User(username=username, email=f"{username}@example.com", password_hash="x", **fields)
    db.add(user)
    await db.flush()
    return user


async def _reload(db: AsyncSession, model, row_id):
    db.expire_all()
    return (await db.execute(select(model).where(model.id == row_id))).scalar_one()


async def test_increment_and_decrement(db_session: AsyncSession) -> None:
    user = await _user(db_session, "alice")
    post = Post(author_id=user.id, content="hi")
    db_session.add(post)
    await db_session.flush()

    await counters.on_like_created(db_session, post.id)
    await counters.on_like_created(db_session, post.id)
    await counters.on_comment_created(db_session, post.id)
    await counters.on_like_deleted(db_session, post.id)

    post = await _reload(db_session, Post, post.id)
    assert post.like_count == 1
    assert post.comment_count == 1


async def test_decrement_never_goes_negative(db_session: AsyncSession) -> None:
    user = await _user(db_session, "alice")
    await counters.on_post_deleted(db_session, user.id)
    await counters.decrement(db_session, User.followers_count, user.id)
    user = await _reload(db_session, User, user.id)
    assert user.posts_count == 0
    assert user.followers_count == 0


async def test_follow_counters_touch_both_sides(db_session: AsyncSession) -> None:
    alice_id = (await _user(db_session, "alice")).id
    bob_id = (await _user(db_session, "bob")).id
    await counters.on_follow_created(db_session, alice_id, bob_id)

    alice = await _reload(db_session, User, alice_id)
    assert (alice.following_count, alice.followers_count) == (1, 0)
    bob = await _reload(db_session, User, bob_id)
    assert (bob.following_count, bob.followers_count) == (0, 1)

    await counters.on_follow_deleted(db_session, alice_id, bob_id)
    bob = await _reload(db_session, User, bob_id)
    assert bob.followers_count == 0


def test_self_follow_is_rejected() -> None:
    user = User(id=uuid.uuid4(), username="alice", role="user")
    with pytest.raises(ValidationException):
        ensure_not_self_follow(user, user.id)


def test_post_owner_or_admin() -> None:
    owner = User(id=uuid.uuid4(), role="user")
    stranger = User(id=uuid.uuid4(), role="user")
    admin = User(id=uuid.uuid4(), role="admin")
    post = Post(id=uuid.uuid4(), author_id=owner.id, content="x")

    ensure_post_owner_or_admin(owner, post)
    ensure_post_owner_or_admin(admin, post)
    with pytest.raises(ForbiddenException):
        ensure_post_owner_or_admin(stranger, post)


async def test_private_profile_visible_to_owner_and_admin_only(db_session: AsyncSession) -> None:
    owner = await _user(db_session, "owner", profile_visibility="private")
    viewer = await _user(db_session, "viewer")
    admin = await _user(db_session, "admin", role="admin")

    assert await can_view_profile(db_session, owner, owner)
    assert await can_view_profile(db_session, owner, admin)
    assert not await can_view_profile(db_session, owner, viewer)
    assert not await can_view_profile(db_session, owner, None)


@pytest.mark.parametrize(
    ("total", "limit", "pages"),
    [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (101, 50, 3)],
)
def test_page_count(total: int, limit: int, pages: int) -> None:
    assert PageParams(page=1, limit=limit).describe(total).pages == pages


def test_offset() -> None:
    assert PageParams(page=3, limit=10).offset == 20
