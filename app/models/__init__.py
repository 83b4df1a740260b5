"""Database models."""

from .base import Base, TimestampMixin
from .blog import Blog, BlogPost
from .feature_flag import FeatureFlag
from .user import CapabilityCategory, CapabilityName, User, UserCapability

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "UserCapability",
    "CapabilityCategory",
    "CapabilityName",
    "Blog",
    "BlogPost",
    "FeatureFlag",
]
