"""Feed, post, like and comment business logic."""
import logging
from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from socialconnect.core.exceptions import ConflictException, NotFoundException
from socialconnect.core.permissions import (
    ensure_comment_owner,
    ensure_post_owner,
    ensure_post_owner_or_admin,
    is_admin,
)
from socialconnect.models.comment import Comment
from socialconnect.models.engagement import Follow, Like
from socialconnect.models.post import Post
from socialconnect.models.user import User
from socialconnect.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from socialconnect.schemas.pagination import PageParams
from socialconnect.schemas.post import PostCreate, PostResponse, PostUpdate
from socialconnect.services import counters
from socialconnect.services.user_service import user_to_summary

logger = logging.getLogger(__name__)


def post_to_response(post: Post, is_liked: bool = False) -> PostResponse:
    return PostResponse(
        id=post.id,
        author_id=post.author_id,
        content=post.content,
        image_url=post.image_url,
        category=post.category or "general",
        is_active=post.is_active,
        like_count=post.like_count or 0,
        comment_count=post.comment_count or 0,
        created_at=post.created_at,
        updated_at=post.updated_at,
        author=user_to_summary(post.author),
        is_liked=is_liked,
    )


def comment_to_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        user_id=comment.user_id,
        post_id=comment.post_id,
        content=comment.content,
        is_active=comment.is_active,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        user=user_to_summary(comment.user),
    )


async def _paginate_posts(db: AsyncSession, conditions: list, params: PageParams) -> tuple[list[Post], int]:
    total = await db.scalar(select(func.count(Post.id)).where(*conditions)) or 0
    result = await db.execute(
        select(Post)
        .where(*conditions)
        .order_by(desc(Post.created_at))
        .offset(params.offset)
        .limit(params.limit)
        .options(selectinload(Post.author))
    )
    return list(result.scalars().all()), total


async def get_explore_posts(db: AsyncSession, params: PageParams) -> tuple[list[Post], int]:
    """All active posts, newest first."""
    return await _paginate_posts(db, [Post.is_active.is_(True)], params)


async def get_feed_posts(db: AsyncSession, user_id: UUID, params: PageParams) -> tuple[list[Post], int]:
    """Active posts written by the user or by anyone the user follows, newest first."""
    subq_following = select(Follow.following_id).where(Follow.follower_id == user_id)
    conditions = [
        Post.is_active.is_(True),
        (Post.author_id == user_id) | Post.author_id.in_(subq_following),
    ]
    return await _paginate_posts(db, conditions, params)


async def get_all_posts(db: AsyncSession, params: PageParams) -> tuple[list[Post], int]:
    """Every post including inactive ones (admin listing)."""
    return await _paginate_posts(db, [], params)


async def get_user_liked_post_ids(
    db: AsyncSession,
    user_id: UUID,
    post_ids: list[UUID],
) -> set[UUID]:
    """Return set of post IDs that the user has liked."""
    if not post_ids:
        return set()
    result = await db.execute(
        select(Like.post_id).where(
            Like.user_id == user_id,
            Like.post_id.in_(post_ids),
        )
    )
    return {row[0] for row in result.all()}


async def get_post(db: AsyncSession, post_id: UUID, viewer: User | None = None) -> Post:
    """Load a post with its author. Inactive posts are only visible to their owner and admins."""
    result = await db.execute(
        select(Post).where(Post.id == post_id).options(selectinload(Post.author))
    )
    post = result.scalar_one_or_none()
    if not post:
        raise NotFoundException("Post not found")
    if not post.is_active and not (viewer and (viewer.id == post.author_id or is_admin(viewer))):
        raise NotFoundException("Post not found")
    return post


async def create_post(db: AsyncSession, author: User, data: PostCreate) -> Post:
    post = Post(
        author_id=author.id,
        content=data.content,
        image_url=data.image_url or None,
        category=data.category or "general",
    )
    db.add(post)
    await db.flush()
    await counters.on_post_created(db, author.id)
    post.author = author
    logger.info("Post %s created by %s", post.id, author.id)
    return post


async def update_post(db: AsyncSession, actor: User, post_id: UUID, data: PostUpdate) -> Post:
    post = await get_post(db, post_id, actor)
    ensure_post_owner(actor, post)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("content") is not None:
        post.content = changes["content"]
    if "image_url" in changes:
        post.image_url = changes["image_url"]
    if changes.get("category") is not None:
        post.category = changes["category"]
    await db.flush()
    return post


async def delete_post(db: AsyncSession, actor: User, post_id: UUID) -> tuple[UUID, str | None]:
    """Hard-delete a post with its likes and comments. Returns its author id and image URL."""
    post = await get_post(db, post_id, actor)
    ensure_post_owner_or_admin(actor, post)
    author_id = post.author_id
    image_url = post.image_url
    await db.delete(post)
    await db.flush()
    await counters.on_post_deleted(db, author_id)
    logger.info("Post %s deleted by %s", post_id, actor.id)
    return author_id, image_url


async def like_post(db: AsyncSession, actor: User, post_id: UUID) -> tuple[Like, Post]:
    post = await get_post(db, post_id, actor)
    existing = await db.execute(
        select(Like.id).where(Like.post_id == post.id, Like.user_id == actor.id)
    )
    if existing.first() is not None:
        raise ConflictException("Post already liked")
    like = Like(user_id=actor.id, post_id=post.id)
    db.add(like)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictException("Post already liked")
    await counters.on_like_created(db, post.id)
    return like, post


async def unlike_post(db: AsyncSession, actor: User, post_id: UUID) -> bool:
    """Remove the like. Returns False when the post was not liked."""
    result = await db.execute(
        delete(Like)
        .where(Like.user_id == actor.id, Like.post_id == post_id)
        .execution_options(synchronize_session=False)
    )
    if not result.rowcount:
        return False
    await counters.on_like_deleted(db, post_id)
    return True


async def list_comments(db: AsyncSession, post_id: UUID, params: PageParams) -> tuple[list[Comment], int]:
    await get_post(db, post_id)
    conditions = [Comment.post_id == post_id, Comment.is_active.is_(True)]
    total = await db.scalar(select(func.count(Comment.id)).where(*conditions)) or 0
    result = await db.execute(
        select(Comment)
        .where(*conditions)
        .order_by(desc(Comment.created_at))
        .offset(params.offset)
        .limit(params.limit)
        .options(selectinload(Comment.user))
    )
    return list(result.scalars().all()), total


async def create_comment(db: AsyncSession, actor: User, post_id: UUID, data: CommentCreate) -> tuple[Comment, Post]:
    post = await get_post(db, post_id, actor)
    comment = Comment(user_id=actor.id, post_id=post.id, content=data.content)
    db.add(comment)
    await db.flush()
    await counters.on_comment_created(db, post.id)
    comment.user = actor
    return comment, post


async def _get_comment(db: AsyncSession, post_id: UUID, comment_id: UUID) -> Comment:
    result = await db.execute(
        select(Comment)
        .where(Comment.id == comment_id, Comment.post_id == post_id)
        .options(selectinload(Comment.user))
    )
    comment = result.scalar_one_or_none()
    if not comment or not comment.is_active:
        raise NotFoundException("Comment not found")
    return comment


async def update_comment(
    db: AsyncSession, actor: User, post_id: UUID, comment_id: UUID, data: CommentUpdate
) -> Comment:
    comment = await _get_comment(db, post_id, comment_id)
    ensure_comment_owner(actor, comment)
    comment.content = data.content
    await db.flush()
    return comment


async def delete_comment(db: AsyncSession, actor: User, post_id: UUID, comment_id: UUID) -> None:
    comment = await _get_comment(db, post_id, comment_id)
    ensure_comment_owner(actor, comment)
    await db.delete(comment)
    await db.flush()
    await counters.on_comment_deleted(db, post_id)
