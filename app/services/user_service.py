"""User account service: registration, login, confirmation, updates."""

import logging
from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.utils.exceptions import (
    AuthenticationError,
    EmailAlreadyExistsError,
    UsernameAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from app.utils.security import hash_password, verify_password
from app.utils.validators import validate_email

from .jwt_service import JWTService

logger = logging.getLogger(__name__)


class UserService:
    """Service for user account operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.jwt_service = JWTService()

    async def get_user_by_id(self, user_id: int) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        username: str,
        email: str,
        password: str,
        display_name: str | None = None,
        is_superuser: bool = False,
        confirmed: bool = False,
    ) -> User:
        """Create a user after checking that the email and username are free."""

        email = validate_email(email)
        result = await self.db.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            raise EmailAlreadyExistsError()

        if await self.get_user_by_username(username):
            raise UsernameAlreadyExistsError()

        user = User(
            username=username,
            email=email,
            display_name=display_name,
            password_hash=hash_password(password),
            is_superuser=is_superuser,
            confirmed_at=datetime.now(timezone.utc) if confirmed else None,
        )

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        return user

    async def register_user(
        self,
        username: str,
        email: str,
        password: str,
        display_name: str | None = None,
    ) -> tuple[User, str]:
        """Create an unconfirmed user; returns it with its confirmation token."""

        user = await self.create_user(username, email, password, display_name)
        token = self.jwt_service.create_confirmation_token(user.id, user.email)

        # Mail delivery is handled outside this service
        logger.info(
            f"Registered user {user.username}, confirmation pending",
            extra={"user_id": user.id, "event": "user_registered"},
        )
        return user, token

    async def confirm_user(self, token: str) -> User:
        """Confirm a user's email address from a confirmation token."""
        payload = self.jwt_service.decode_token(token, expected_type="confirmation")

        user = await self.get_user_by_id(int(payload["sub"]))
        if not user or user.email != payload.get("email"):
            raise UserNotFoundError()

        if not user.confirmed_at:
            user.confirmed_at = datetime.now(timezone.utc)
            await self.db.commit()
            await self.db.refresh(user)

        return user

    async def authenticate_user(self, login: str, password: str) -> User:
        """Authenticate with either email address or username."""

        result = await self.db.execute(
            select(User).where(or_(User.email == login, User.username == login))
        )
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"login": login})
            raise AuthenticationError("Invalid login or password")

        if not user.can_login:
            raise AuthenticationError("Account is inactive or unconfirmed")

        user.last_login_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(user)

        return user

    async def update_account(
        self,
        user: User,
        current_password: str,
        display_name: str | None = None,
        profile_text: str | None = None,
        email: str | None = None,
        new_password: str | None = None,
    ) -> User:
        """Update the user's own account; requires their current password."""

        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        if email:
            email = validate_email(email)

        if email and email != user.email:
            result = await self.db.execute(select(User).where(User.email == email))
            if result.scalar_one_or_none():
                raise EmailAlreadyExistsError()
            user.email = email

        if display_name is not None:
            user.display_name = display_name

        if profile_text is not None:
            user.profile_text = profile_text

        if new_password:
            user.password_hash = hash_password(new_password)

        await self.db.commit()
        await self.db.refresh(user)

        return user

    def create_access_token(self, user: User) -> str:
        return self.jwt_service.create_access_token(user.id, user.username)
