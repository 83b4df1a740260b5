"""Admin routes for user accounts."""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.dependencies.auth import get_current_active_user
from app.dependencies.database import get_db
from app.dependencies.services import get_user_service
from app.models.user import User
from app.policies import Action, authorise
from app.schemas.admin import (
    AdminUserCreate,
    AdminUserDetailResponse,
    AdminUserListResponse,
    AdminUserResponse,
    AdminUserUpdate,
)
from app.services.admin_service import DeleteFailure, delete_loaded_record, handle_delete_failure
from app.services.user_service import UserService
from app.utils.exceptions import AuthorizationError, UserNotFoundError
from app.utils.response_builders import ResponseBuilder

router = APIRouter()

USERS_PATH = f"{settings.ADMIN_PREFIX}/users"

DELETE_ALERTS = {
    DeleteFailure.CONSTRAINT_VIOLATION: "Could not delete user: they still own blogs or posts",
    DeleteFailure.NOT_FOUND: "Could not find user to delete",
}


@router.get("", response_model=AdminUserListResponse)
async def list_users(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List user accounts."""

    result = await db.execute(select(User).order_by(User.username))
    users = list(result.scalars().all())

    authorise(users or User, Action.LIST, current_user)

    return AdminUserListResponse(
        users=[AdminUserResponse.model_validate(user) for user in users],
        total=len(users),
    )


@router.post("", response_model=AdminUserDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: AdminUserCreate,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
):
    """Create a confirmed user account."""

    authorise(User, Action.CREATE, current_user)

    if user_data.is_superuser and not current_user.is_superuser:
        raise AuthorizationError("Only superusers can create superusers")

    user = await user_service.create_user(
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
        display_name=user_data.display_name,
        is_superuser=user_data.is_superuser,
        confirmed=True,
    )

    return AdminUserDetailResponse(message="User created", user=AdminUserResponse.model_validate(user))


@router.put("/{user_id}", response_model=AdminUserDetailResponse)
async def update_user(
    user_id: int,
    user_update: AdminUserUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a user account."""

    user = await db.get(User, user_id)
    if not user:
        raise UserNotFoundError()

    authorise(user, Action.UPDATE, current_user)

    for field, value in user_update.model_dump(exclude_unset=True).items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    return AdminUserDetailResponse(message="User updated", user=AdminUserResponse.model_validate(user))


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a user account; admins cannot delete themselves."""

    user = await db.get(User, user_id)
    if user is None:
        return handle_delete_failure(DeleteFailure.NOT_FOUND, DELETE_ALERTS, USERS_PATH)

    authorise(user, Action.DELETE, current_user)

    failure = await delete_loaded_record(db, user)
    if failure:
        return handle_delete_failure(failure, DELETE_ALERTS, USERS_PATH)

    return ResponseBuilder.redirect(USERS_PATH, notice="User deleted")
