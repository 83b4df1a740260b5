"""Service layer for business logic."""

from .feature_flag_service import FeatureFlagService
from .jwt_service import JWTService
from .user_service import UserService

__all__ = [
    "FeatureFlagService",
    "JWTService",
    "UserService",
]
