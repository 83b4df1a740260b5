"""Pydantic schemas for request/response models."""

from .account import *
from .admin import *
from .common import *

__all__ = [
    # Common
    "BaseResponse",
    # Account
    "RegistrationRequest",
    "RegistrationForm",
    "CaptchaWidget",
    "LoginRequest",
    "LoginForm",
    "TokenResponse",
    "UserProfile",
    "ProfileResponse",
    "AccountDetails",
    "AccountResponse",
    "AccountUpdateRequest",
    # Admin
    "BlogCreate",
    "BlogUpdate",
    "BlogResponse",
    "BlogListResponse",
    "BlogDetailResponse",
    "BlogPostCreate",
    "BlogPostUpdate",
    "BlogPostResponse",
    "BlogPostListResponse",
    "BlogPostDetailResponse",
    "AdminUserResponse",
    "AdminUserCreate",
    "AdminUserUpdate",
    "AdminUserListResponse",
    "AdminUserDetailResponse",
    "FeatureFlagResponse",
    "FeatureFlagUpdate",
    "FeatureFlagListResponse",
    "FeatureFlagDetailResponse",
]
