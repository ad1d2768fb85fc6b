"""
Community posts, likes and comments
Counters on Post move in the same transaction as the rows they count
"""

from typing import Any, List, Set

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_current_user, get_db, get_page_params, require_admin
from gympro.core.logging_config import get_logger
from gympro.models.community import Comment, Like, Post
from gympro.schemas.common import ApiResponse, MessageResponse, PageParams, PaginatedResponse, ok, paginate
from gympro.schemas.community import (
    AdminPostResponse, CommentCreate, CommentResponse, LikeToggleResponse, PostCreate,
    PostDetail, PostFilter, PostResponse, VisibilityResponse,
)
from gympro.services.achievement_service import refresh_achievements_after

logger = get_logger(__name__)

router = APIRouter()


async def _liked_post_ids(db: AsyncSession, user_id: str, post_ids: List[str]) -> Set[str]:
    if not post_ids:
        return set()
    result = await db.execute(
        select(Like.post_id).where(Like.user_id == user_id, Like.post_id.in_(post_ids))
    )
    return set(result.scalars().all())


async def _get_post(db: AsyncSession, post_id: str) -> Post:
    post = await db.get(Post, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def _can_moderate(post_owner_id: str, user: TokenUser) -> bool:
    return post_owner_id == user.id or user.role == "ADMIN"


@router.get("/admin/all", response_model=ApiResponse[PaginatedResponse[AdminPostResponse]])
async def list_posts_admin(
    *,
    db: AsyncSession = Depends(get_db),
    admin: TokenUser = Depends(require_admin),
    pagination: PageParams = Depends(get_page_params),
    filter: PostFilter = Query("all"),
) -> Any:
    conditions = []
    if filter == "published":
        conditions.append(Post.is_published.is_(True))
    elif filter == "hidden":
        conditions.append(Post.is_published.is_(False))

    total = (await db.execute(select(func.count(Post.id)).where(*conditions))).scalar() or 0
    result = await db.execute(
        select(Post)
        .options(selectinload(Post.user))
        .where(*conditions)
        .order_by(Post.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    items = [AdminPostResponse.model_validate(p) for p in result.scalars().all()]
    return ok(paginate(items, total, pagination.page, pagination.limit))


@router.get("", response_model=ApiResponse[PaginatedResponse[PostResponse]])
async def list_posts(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    pagination: PageParams = Depends(get_page_params),
) -> Any:
    """Published posts, newest first"""
    total = (await db.execute(
        select(func.count(Post.id)).where(Post.is_published.is_(True))
    )).scalar() or 0
    result = await db.execute(
        select(Post)
        .options(selectinload(Post.user))
        .where(Post.is_published.is_(True))
        .order_by(Post.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    posts = result.scalars().all()
    liked = await _liked_post_ids(db, user.id, [p.id for p in posts])

    items = []
    for post in posts:
        item = PostResponse.model_validate(post)
        item.has_liked = post.id in liked
        items.append(item)
    return ok(paginate(items, total, pagination.page, pagination.limit))


@router.post("", response_model=ApiResponse[PostResponse], status_code=status.HTTP_201_CREATED)
async def create_post(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    post_in: PostCreate,
) -> Any:
    post = Post(user_id=user.id, content=post_in.content, image_url=post_in.image_url)
    db.add(post)
    await db.commit()
    post_id = post.id

    await refresh_achievements_after(db, user.id)

    result = await db.execute(
        select(Post)
        .options(selectinload(Post.user))
        .where(Post.id == post_id)
        .execution_options(populate_existing=True)
    )
    return ok(PostResponse.model_validate(result.scalar_one()))


@router.get("/{post_id}", response_model=ApiResponse[PostDetail])
async def get_post(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    post_id: str,
) -> Any:
    """Hidden posts are only visible to their author and admins"""
    result = await db.execute(
        select(Post)
        .options(
            selectinload(Post.user),
            selectinload(Post.comments).selectinload(Comment.user),
        )
        .where(Post.id == post_id)
    )
    post = result.scalar_one_or_none()
    if not post or (not post.is_published and not _can_moderate(post.user_id, user)):
        raise HTTPException(status_code=404, detail="Post not found")

    detail = PostDetail.model_validate(post)
    detail.has_liked = bool(await _liked_post_ids(db, user.id, [post.id]))
    return ok(detail)


@router.delete("/{post_id}", response_model=ApiResponse[MessageResponse])
async def delete_post(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    post_id: str,
) -> Any:
    post = await _get_post(db, post_id)
    if not _can_moderate(post.user_id, user):
        raise HTTPException(status_code=403, detail="Not authorized to delete this post")

    await db.delete(post)
    await db.commit()
    return ok({"message": "Post deleted successfully"})


@router.post("/{post_id}/like", response_model=ApiResponse[LikeToggleResponse])
async def toggle_like(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    post_id: str,
) -> Any:
    """Like the post, or remove the caller's like when one exists"""
    await _get_post(db, post_id)

    existing = (await db.execute(
        select(Like).where(Like.post_id == post_id, Like.user_id == user.id)
    )).scalar_one_or_none()

    if existing:
        await db.delete(existing)
        delta = -1
    else:
        db.add(Like(post_id=post_id, user_id=user.id))
        delta = 1

    await db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(likes_count=Post.likes_count + delta)
    )
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request from the same user already inserted the like
        await db.rollback()
        raise HTTPException(status_code=409, detail="Like is already being processed")

    likes_count = (await db.execute(
        select(Post.likes_count).where(Post.id == post_id)
    )).scalar() or 0
    return ok({"liked": delta > 0, "likes_count": likes_count})


@router.patch("/{post_id}/visibility", response_model=ApiResponse[VisibilityResponse])
async def toggle_visibility(
    *,
    db: AsyncSession = Depends(get_db),
    admin: TokenUser = Depends(require_admin),
    post_id: str,
) -> Any:
    post = await _get_post(db, post_id)
    post.is_published = not post.is_published
    await db.commit()
    logger.info(f"Post {post_id} visibility set to {post.is_published} by {admin.email}")
    return ok({"id": post.id, "is_published": post.is_published})


@router.get("/{post_id}/comments", response_model=ApiResponse[PaginatedResponse[CommentResponse]])
async def list_comments(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    post_id: str,
    pagination: PageParams = Depends(get_page_params),
) -> Any:
    await _get_post(db, post_id)

    total = (await db.execute(
        select(func.count(Comment.id)).where(Comment.post_id == post_id)
    )).scalar() or 0
    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.user))
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    items = [CommentResponse.model_validate(c) for c in result.scalars().all()]
    return ok(paginate(items, total, pagination.page, pagination.limit))


@router.post(
    "/{post_id}/comments",
    response_model=ApiResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    post_id: str,
    comment_in: CommentCreate,
) -> Any:
    await _get_post(db, post_id)

    comment = Comment(post_id=post_id, user_id=user.id, content=comment_in.content)
    db.add(comment)
    await db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(comments_count=Post.comments_count + 1)
    )
    await db.commit()

    result = await db.execute(
        select(Comment).options(selectinload(Comment.user)).where(Comment.id == comment.id)
    )
    return ok(CommentResponse.model_validate(result.scalar_one()))


@router.delete("/comments/{comment_id}", response_model=ApiResponse[MessageResponse])
async def delete_comment(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    comment_id: str,
) -> Any:
    comment = await db.get(Comment, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.user_id != user.id and user.role != "ADMIN":
        raise HTTPException(status_code=403, detail="Not authorized to delete this comment")

    await db.execute(
        update(Post)
        .where(Post.id == comment.post_id)
        .values(comments_count=Post.comments_count - 1)
    )
    await db.delete(comment)
    await db.commit()
    return ok({"message": "Comment deleted successfully"})
