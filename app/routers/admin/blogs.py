"""Admin routes for blogs."""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.dependencies.auth import get_current_active_user
from app.dependencies.database import get_db
from app.models.blog import Blog
from app.models.user import User
from app.policies import Action, authorise
from app.schemas.admin import (
    BlogCreate,
    BlogDetailResponse,
    BlogListResponse,
    BlogResponse,
    BlogUpdate,
)
from app.services.admin_service import DeleteFailure, delete_loaded_record, handle_delete_failure
from app.utils.exceptions import NotFoundError
from app.utils.response_builders import ResponseBuilder
from app.utils.validators import slugify

router = APIRouter()

BLOGS_PATH = f"{settings.ADMIN_PREFIX}/blogs"

DELETE_ALERTS = {
    DeleteFailure.CONSTRAINT_VIOLATION: "Could not delete blog: delete its posts first",
    DeleteFailure.NOT_FOUND: "Could not find blog to delete",
}


async def get_blog_or_404(db: AsyncSession, blog_id: int) -> Blog:
    blog = await db.get(Blog, blog_id)
    if not blog:
        raise NotFoundError("Blog not found")
    return blog


@router.get("", response_model=BlogListResponse)
async def list_blogs(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List blogs."""

    result = await db.execute(select(Blog).order_by(Blog.name))
    blogs = list(result.scalars().all())

    authorise(blogs or Blog, Action.LIST, current_user)

    return BlogListResponse(
        blogs=[BlogResponse.model_validate(blog) for blog in blogs],
        total=len(blogs),
    )


@router.post("", response_model=BlogDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_blog(
    blog_data: BlogCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a blog owned by the current user."""

    authorise(Blog, Action.CREATE, current_user)

    blog = Blog(
        name=blog_data.name,
        slug=blog_data.slug or slugify(blog_data.name),
        description=blog_data.description,
        hidden=blog_data.hidden,
        user_id=current_user.id,
    )
    db.add(blog)
    await db.commit()
    await db.refresh(blog)

    return BlogDetailResponse(message="Blog created", blog=BlogResponse.model_validate(blog))


@router.put("/{blog_id}", response_model=BlogDetailResponse)
async def update_blog(
    blog_id: int,
    blog_update: BlogUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a blog."""

    blog = await get_blog_or_404(db, blog_id)
    authorise(blog, Action.UPDATE, current_user)

    for field, value in blog_update.model_dump(exclude_unset=True).items():
        setattr(blog, field, value)

    await db.commit()
    await db.refresh(blog)

    return BlogDetailResponse(message="Blog updated", blog=BlogResponse.model_validate(blog))


@router.delete("/{blog_id}")
async def delete_blog(
    blog_id: int,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a blog; blogs that still have posts are kept."""

    blog = await db.get(Blog, blog_id)
    if blog is None:
        return handle_delete_failure(DeleteFailure.NOT_FOUND, DELETE_ALERTS, BLOGS_PATH)

    authorise(blog, Action.DELETE, current_user)

    failure = await delete_loaded_record(db, blog)
    if failure:
        return handle_delete_failure(failure, DELETE_ALERTS, BLOGS_PATH)

    return ResponseBuilder.redirect(BLOGS_PATH, notice="Blog deleted")
