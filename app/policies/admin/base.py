"""Capability-based base policy for the admin area."""

from typing import Optional

from app.models.user import CapabilityCategory, CapabilityName

from ..base_policy import Action, BasePolicy, PolicyContext, PolicyResult

CAPABILITY_FOR_ACTION = {
    Action.LIST: CapabilityName.LIST,
    Action.READ: CapabilityName.LIST,
    Action.CREATE: CapabilityName.ADD,
    Action.UPDATE: CapabilityName.EDIT,
    Action.DELETE: CapabilityName.DESTROY,
}


class AdminPolicy(BasePolicy):
    """Admins need the matching capability in the policy's category.

    Superusers are allowed everything the policy does not rule out first.
    """

    category: CapabilityCategory
    actions: frozenset[Action] = frozenset(Action)

    def check(self, action: Action, context: PolicyContext) -> PolicyResult:
        """Check admin authorization."""

        # Always require authentication
        auth_check = self._require_authentication(context)
        if auth_check:
            return auth_check

        if action not in self.actions:
            return PolicyResult.deny(f"Unsupported action: {action.value}")

        rule_check = self._check_rules(action, context)
        if rule_check:
            return rule_check

        if context.user.is_superuser:
            return PolicyResult.allow("Superuser access")

        capability_check = self._require_capability(action, context)
        if capability_check:
            return capability_check

        return PolicyResult.allow(f"Has {self.category.value}:{CAPABILITY_FOR_ACTION[action].value}")

    def _check_rules(self, action: Action, context: PolicyContext) -> Optional[PolicyResult]:
        """Entity-specific denials that apply even to superusers."""
        return None

    def _require_capability(self, action: Action, context: PolicyContext) -> Optional[PolicyResult]:
        capability = CAPABILITY_FOR_ACTION[action]
        if not context.user.has_capability(self.category, capability):
            return PolicyResult.deny(
                f"Capability '{self.category.value}:{capability.value}' required"
            )

        return None
