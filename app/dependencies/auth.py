"""Authentication dependencies for FastAPI."""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.jwt_service import JWTService
from app.services.user_service import UserService
from app.utils.exceptions import AuthenticationError

from .database import get_db

logger = logging.getLogger(__name__)

# Security scheme for Bearer tokens
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Get current user from a bearer token, if there is a valid one."""
    if not credentials:
        return None

    try:
        user_id = JWTService().get_user_id_from_token(credentials.credentials)
    except AuthenticationError as e:
        logger.info(f"Rejected bearer token: {e.message}", extra={"error_code": e.error_code})
        return None

    user = await UserService(db).get_user_by_id(user_id)
    if user and user.can_login:
        return user

    return None


async def get_current_active_user(
    current_user: User | None = Depends(get_current_user),
) -> User:
    """Get current active user, raise exception if not authenticated."""
    if not current_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return current_user


async def get_optional_current_user(
    current_user: User | None = Depends(get_current_user),
) -> User | None:
    """Get current user if authenticated, otherwise None."""
    return current_user
