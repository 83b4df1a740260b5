"""Admin policy for blogs."""

from app.models.user import CapabilityCategory

from ..registry import admin_policy
from .base import AdminPolicy


@admin_policy("Blog")
class BlogPolicy(AdminPolicy):
    """Authorization for managing blogs."""

    category = CapabilityCategory.BLOGS
