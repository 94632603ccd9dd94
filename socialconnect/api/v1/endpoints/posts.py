"""Posts CRUD, explore listing, feed, likes and comments."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.api.deps import get_current_user, get_current_user_optional, get_db
from socialconnect.models.post import Post
from socialconnect.models.user import User
from socialconnect.schemas.comment import CommentCreate, CommentDetail, CommentList, CommentUpdate
from socialconnect.schemas.pagination import PageParams, page_params
from socialconnect.schemas.post import LikeResponse, LikeResult, PostCreate, PostDetail, PostList, PostUpdate
from socialconnect.services import feed_service
from socialconnect.services.feed_service import comment_to_response, post_to_response
from socialconnect.services.notification_service import create_notification
from socialconnect.services.storage_service import get_storage

router = APIRouter(prefix="/posts", tags=["posts"])


async def _post_list(db: AsyncSession, posts: list[Post], total: int, params: PageParams, viewer: User | None) -> PostList:
    liked_ids = await feed_service.get_user_liked_post_ids(db, viewer.id, [p.id for p in posts]) if viewer else set()
    return PostList(
        posts=[post_to_response(p, is_liked=p.id in liked_ids) for p in posts],
        pagination=params.describe(total),
    )


@router.get("", response_model=PostList)
async def list_posts(
    params: PageParams = Depends(page_params()),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    posts, total = await feed_service.get_explore_posts(db, params)
    return await _post_list(db, posts, total, params, current_user)


@router.get("/feed", response_model=PostList)
async def get_feed(
    params: PageParams = Depends(page_params()),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    posts, total = await feed_service.get_feed_posts(db, current_user.id, params)
    return await _post_list(db, posts, total, params, current_user)


@router.post("", response_model=PostDetail, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    data: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await feed_service.create_post(db, current_user, data)
    await db.commit()
    return PostDetail(post=post_to_response(post))


@router.get("/{post_id}", response_model=PostDetail)
async def get_post(
    post_id: UUID,
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    post = await feed_service.get_post(db, post_id, current_user)
    is_liked = False
    if current_user:
        is_liked = post.id in await feed_service.get_user_liked_post_ids(db, current_user.id, [post.id])
    return PostDetail(post=post_to_response(post, is_liked=is_liked))


@router.api_route("/{post_id}", methods=["PUT", "PATCH"], response_model=PostDetail)
async def update_post_endpoint(
    post_id: UUID,
    data: PostUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await feed_service.update_post(db, current_user, post_id, data)
    liked_ids = await feed_service.get_user_liked_post_ids(db, current_user.id, [post.id])
    await db.commit()
    return PostDetail(post=post_to_response(post, is_liked=post.id in liked_ids))


@router.delete("/{post_id}")
async def delete_post_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    author_id, image_url = await feed_service.delete_post(db, current_user, post_id)
    await db.commit()
    if image_url:
        # Only files under the author's own upload prefix are removed
        get_storage().delete(image_url, owner_id=str(author_id))
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/like", response_model=LikeResult, status_code=status.HTTP_201_CREATED)
async def like_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    like, post = await feed_service.like_post(db, current_user, post_id)
    await db.commit()
    response = LikeResult(message="Post liked successfully", like=LikeResponse.model_validate(like))
    await create_notification(
        db,
        user_id=post.author_id,
        actor=current_user,
        notification_type="like",
        post_id=post.id,
    )
    return response


@router.delete("/{post_id}/like")
async def unlike_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    removed = await feed_service.unlike_post(db, current_user, post_id)
    await db.commit()
    if not removed:
        return {"message": "Post was not liked"}
    return {"message": "Post unliked successfully"}


@router.get("/{post_id}/comments", response_model=CommentList)
async def list_post_comments(
    post_id: UUID,
    params: PageParams = Depends(page_params()),
    db: AsyncSession = Depends(get_db),
):
    comments, total = await feed_service.list_comments(db, post_id, params)
    return CommentList(
        comments=[comment_to_response(c) for c in comments],
        pagination=params.describe(total),
    )


@router.post("/{post_id}/comments", response_model=CommentDetail, status_code=status.HTTP_201_CREATED)
async def create_post_comment(
    post_id: UUID,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment, post = await feed_service.create_comment(db, current_user, post_id, data)
    await db.commit()
    response = CommentDetail(comment=comment_to_response(comment))
    content_preview = data.content[:50] + "..." if len(data.content) > 50 else data.content
    await create_notification(
        db,
        user_id=post.author_id,
        actor=current_user,
        notification_type="comment",
        post_id=post.id,
        comment_id=comment.id,
        content=content_preview,
    )
    return response


@router.api_route("/{post_id}/comments/{comment_id}", methods=["PUT", "PATCH"], response_model=CommentDetail)
async def update_post_comment(
    post_id: UUID,
    comment_id: UUID,
    data: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await feed_service.update_comment(db, current_user, post_id, comment_id, data)
    await db.commit()
    return CommentDetail(comment=comment_to_response(comment))


@router.delete("/{post_id}/comments/{comment_id}")
async def delete_post_comment(
    post_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await feed_service.delete_comment(db, current_user, post_id, comment_id)
    await db.commit()
    return {"message": "Comment deleted successfully"}
