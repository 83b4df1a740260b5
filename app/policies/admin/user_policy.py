"""Admin policy for user accounts."""

from typing import Optional

from app.models.user import CapabilityCategory

from ..base_policy import Action, PolicyContext, PolicyResult
from ..registry import admin_policy
from .base import AdminPolicy


@admin_policy("User")
class UserPolicy(AdminPolicy):
    """Authorization for managing user accounts."""

    category = CapabilityCategory.USERS

    def _check_rules(self, action: Action, context: PolicyContext) -> Optional[PolicyResult]:
        # Admins cannot delete their own account from the admin area
        if action == Action.DELETE and self._is_same_user(context):
            return PolicyResult.deny("Cannot delete self")

        return None
