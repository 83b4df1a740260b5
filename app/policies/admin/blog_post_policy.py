"""Admin policy for blog posts."""

from app.models.user import CapabilityCategory

from ..registry import admin_policy
from .base import AdminPolicy


@admin_policy("BlogPost")
class BlogPostPolicy(AdminPolicy):
    """Authorization for managing blog posts."""

    category = CapabilityCategory.BLOG_POSTS
