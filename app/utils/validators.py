"""Validation utilities."""

import re

from email_validator import EmailNotValidError
from email_validator import validate_email as _validate_email

from .exceptions import ValidationError


def validate_email(email: str) -> str:
    """Validate and normalize email address."""
    try:
        validated_email = _validate_email(email, check_deliverability=False)
        return validated_email.normalized
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email address: {e}")


def validate_password(password: str) -> None:
    """Validate password strength.

    Long passphrases are preferred over character-class rules.
    """
    from app.config.settings import settings

    errors = []

    if len(password) < settings.PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long")

    if len(password) > 128:
        errors.append("Password must be less than 128 characters")

    if password.strip() == "":
        errors.append("Password cannot be blank")

    if errors:
        raise ValidationError("Password validation failed", details={"errors": errors})


def validate_username(username: str) -> None:
    """Validate username format."""
    if not username:
        raise ValidationError("Username is required")

    if len(username) < 3:
        raise ValidationError("Username must be at least 3 characters long")

    if len(username) > 50:
        raise ValidationError("Username must be less than 50 characters")

    # Username can contain letters, numbers, underscores, and hyphens
    if not re.match(r"^[a-zA-Z0-9_-]+$", username):
        raise ValidationError(
            "Username can only contain letters, numbers, underscores, and hyphens"
        )

    # Reserved for site routes
    if username.lower() in {"admin", "account", "login", "logout", "profile"}:
        raise ValidationError(f"Username '{username}' is reserved")


def validate_slug(slug: str) -> None:
    """Validate URL slug format."""
    if not slug:
        raise ValidationError("Slug is required")

    if len(slug) > 100:
        raise ValidationError("Slug must be less than 100 characters")

    # Slug can contain lowercase letters, numbers, and hyphens
    if not re.match(r"^[a-z0-9-]+$", slug):
        raise ValidationError("Slug can only contain lowercase letters, numbers, and hyphens")

    # Slug cannot start or end with hyphen
    if slug.startswith("-") or slug.endswith("-"):
        raise ValidationError("Slug cannot start or end with hyphen")


def slugify(text: str) -> str:
    """Build a slug from a title."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:100].rstrip("-")
