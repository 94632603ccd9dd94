"""Denormalized counter maintenance.

Every edge write (follow, like, comment) and every post create/delete adjusts
exactly its dependent counters with a single atomic ``UPDATE col = col +/- 1``
issued in the same transaction as the edge write. Decrements never go below 0.
"""
from uuid import UUID

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from socialconnect.models.post import Post
from socialconnect.models.user import User


async def increment(db: AsyncSession, column: InstrumentedAttribute, row_id: UUID) -> None:
    model = column.class_
    stmt = (
        update(model)
        .where(model.id == row_id)
        .values({column.key: column + 1})
        .execution_options(synchronize_session=False)
    )
    await db.execute(stmt)


async def decrement(db: AsyncSession, column: InstrumentedAttribute, row_id: UUID) -> None:
    model = column.class_
    stmt = (
        update(model)
        .where(model.id == row_id)
        .values({column.key: case((column > 0, column - 1), else_=0)})
        .execution_options(synchronize_session=False)
    )
    await db.execute(stmt)


async def on_follow_created(db: AsyncSession, follower_id: UUID, following_id: UUID) -> None:
    await increment(db, User.following_count, follower_id)
    await increment(db, User.followers_count, following_id)


async def on_follow_deleted(db: AsyncSession, follower_id: UUID, following_id: UUID) -> None:
    await decrement(db, User.following_count, follower_id)
    await decrement(db, User.followers_count, following_id)


async def on_like_created(db: AsyncSession, post_id: UUID) -> None:
    await increment(db, Post.like_count, post_id)


async def on_like_deleted(db: AsyncSession, post_id: UUID) -> None:
    await decrement(db, Post.like_count, post_id)


async def on_comment_created(db: AsyncSession, post_id: UUID) -> None:
    await increment(db, Post.comment_count, post_id)


async def on_comment_deleted(db: AsyncSession, post_id: UUID) -> None:
    await decrement(db, Post.comment_count, post_id)


async def on_post_created(db: AsyncSession, author_id: UUID) -> None:
    await increment(db, User.posts_count, author_id)


async def on_post_deleted(db: AsyncSession, author_id: UUID) -> None:
    await decrement(db, User.posts_count, author_id)
