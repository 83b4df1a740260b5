"""Admin area policies; importing this package registers them."""

from .base import CAPABILITY_FOR_ACTION, AdminPolicy
from .blog_policy import BlogPolicy
from .blog_post_policy import BlogPostPolicy
from .feature_flag_policy import FeatureFlagPolicy
from .user_policy import UserPolicy

__all__ = [
    "AdminPolicy",
    "CAPABILITY_FOR_ACTION",
    "BlogPolicy",
    "BlogPostPolicy",
    "FeatureFlagPolicy",
    "UserPolicy",
]
