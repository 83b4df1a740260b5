"""User and admin capability models."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class CapabilityCategory(str, Enum):
    """Areas of the admin site that capabilities are granted for."""

    BLOGS = "blogs"
    BLOG_POSTS = "blog_posts"
    USERS = "users"
    FEATURE_FLAGS = "feature_flags"


class CapabilityName(str, Enum):
    """Things an admin may do within a category."""

    LIST = "list"
    ADD = "add"
    EDIT = "edit"
    DESTROY = "destroy"


class User(Base, TimestampMixin):
    """User model representing site users and admins."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(100))
    profile_text: Mapped[str | None] = mapped_column(Text)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_superuser: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    capabilities: Mapped[list["UserCapability"]] = relationship(
        "UserCapability",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def name(self) -> str:
        """Name shown on the site."""
        return self.display_name or self.username

    @property
    def is_confirmed(self) -> bool:
        return self.confirmed_at is not None

    @property
    def can_login(self) -> bool:
        """Check if user can login."""
        from app.config.settings import settings

        if not settings.CONFIRMATION_REQUIRED:
            return self.is_active

        return self.is_active and self.is_confirmed

    def has_capability(self, category: str, name: str) -> bool:
        """Check whether the user was granted ``name`` within ``category``."""
        category = CapabilityCategory(category).value
        name = CapabilityName(name).value
        return any(
            capability.category == category and capability.name == name
            for capability in self.capabilities
        )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', active={self.is_active})>"


class UserCapability(Base, TimestampMixin):
    """A single admin capability granted to a user."""

    __tablename__ = "user_capabilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="capabilities")

    __table_args__ = (
        UniqueConstraint("user_id", "category", "name", name="unique_user_capability"),
    )

    def __repr__(self) -> str:
        return f"<UserCapability(user_id={self.user_id}, '{self.category}:{self.name}')>"
