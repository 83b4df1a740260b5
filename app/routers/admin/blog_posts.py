"""Admin routes for blog posts."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.dependencies.auth import get_current_active_user
from app.dependencies.database import get_db
from app.models.blog import Blog, BlogPost
from app.models.user import User
from app.policies import Action, authorise
from app.schemas.admin import (
    BlogPostCreate,
    BlogPostDetailResponse,
    BlogPostListResponse,
    BlogPostResponse,
    BlogPostUpdate,
)
from app.services.admin_service import DeleteFailure, delete_loaded_record, handle_delete_failure
from app.utils.exceptions import NotFoundError
from app.utils.response_builders import ResponseBuilder
from app.utils.validators import slugify

router = APIRouter()

POSTS_PATH = f"{settings.ADMIN_PREFIX}/blog/posts"

DELETE_ALERT = "Failed to find blog post to delete"


@router.get("", response_model=BlogPostListResponse)
async def list_posts(
    blog_id: int | None = Query(None, description="Only posts in this blog"),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List blog posts, newest first."""

    query = select(BlogPost).order_by(BlogPost.posted_at.desc(), BlogPost.id.desc())
    if blog_id is not None:
        query = query.where(BlogPost.blog_id == blog_id)

    result = await db.execute(query)
    posts = list(result.scalars().all())

    authorise(posts or BlogPost, Action.LIST, current_user)

    return BlogPostListResponse(
        posts=[BlogPostResponse.model_validate(post) for post in posts],
        total=len(posts),
    )


@router.post("", response_model=BlogPostDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: BlogPostCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a blog post written by the current user."""

    authorise(BlogPost, Action.CREATE, current_user)

    if not await db.get(Blog, post_data.blog_id):
        raise NotFoundError("Blog not found")

    post = BlogPost(
        blog_id=post_data.blog_id,
        user_id=current_user.id,
        title=post_data.title,
        slug=post_data.slug or slugify(post_data.title),
        body=post_data.body,
        hidden=post_data.hidden,
    )
    if post_data.posted_at:
        post.posted_at = post_data.posted_at

    db.add(post)
    await db.commit()
    await db.refresh(post)

    return BlogPostDetailResponse(message="Blog post created", post=BlogPostResponse.model_validate(post))


@router.put("/{post_id}", response_model=BlogPostDetailResponse)
async def update_post(
    post_id: int,
    post_update: BlogPostUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a blog post."""

    post = await db.get(BlogPost, post_id)
    if not post:
        raise NotFoundError("Blog post not found")

    authorise(post, Action.UPDATE, current_user)

    for field, value in post_update.model_dump(exclude_unset=True).items():
        setattr(post, field, value)

    await db.commit()
    await db.refresh(post)

    return BlogPostDetailResponse(message="Blog post updated", post=BlogPostResponse.model_validate(post))


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a blog post."""

    post = await db.get(BlogPost, post_id)
    if post is None:
        return handle_delete_failure(DeleteFailure.NOT_FOUND, DELETE_ALERT, POSTS_PATH)

    authorise(post, Action.DELETE, current_user)

    failure = await delete_loaded_record(db, post)
    if failure:
        return handle_delete_failure(failure, DELETE_ALERT, POSTS_PATH)

    return ResponseBuilder.redirect(POSTS_PATH, notice="Blog post deleted")
