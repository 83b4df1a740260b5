"""Utility functions and classes."""

from .exceptions import *
from .security import *
from .validators import *

__all__ = [
    # Security
    "hash_password",
    "verify_password",
    # Exceptions
    "BaseAppException",
    "AuthenticationError",
    "AuthorizationError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "EmptySubjectError",
    "PolicyNotFoundError",
    # Validators
    "validate_email",
    "validate_password",
    "validate_username",
    "validate_slug",
    "slugify",
]
