"""Admin policy for feature flags."""

from app.models.user import CapabilityCategory

from ..base_policy import Action
from ..registry import admin_policy
from .base import AdminPolicy


@admin_policy("FeatureFlag")
class FeatureFlagPolicy(AdminPolicy):
    """Flags are seeded, never created or deleted from the admin area."""

    category = CapabilityCategory.FEATURE_FLAGS
    actions = frozenset({Action.LIST, Action.READ, Action.UPDATE})
