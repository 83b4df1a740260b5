"""Registry of admin policies, keyed by policy class name."""

import logging

from app.utils.exceptions import PolicyNotFoundError

from .base_policy import BasePolicy

logger = logging.getLogger(__name__)

ADMIN_NAMESPACE = "Admin"


def policy_class_name(entity_type_name: str, namespace: str = ADMIN_NAMESPACE) -> str:
    """Build the policy name for an entity type, e.g. ``Admin::BlogPostPolicy``."""
    return f"{namespace}::{entity_type_name}Policy"


class PolicyRegistry:
    """Maps policy class names to policy classes.

    Filled while the policy modules are imported and only read after that.
    """

    def __init__(self, namespace: str = ADMIN_NAMESPACE):
        self.namespace = namespace
        self._policies: dict[str, type[BasePolicy]] = {}

    def register(self, entity_type_name: str, policy_class: type[BasePolicy]) -> type[BasePolicy]:
        name = policy_class_name(entity_type_name, self.namespace)
        if name in self._policies:
            raise ValueError(f"Policy {name} is already registered")

        self._policies[name] = policy_class
        logger.debug(f"Registered {policy_class.__name__} as {name}")
        return policy_class

    def lookup(self, name: str) -> type[BasePolicy]:
        """Return the policy class registered as ``name``."""
        try:
            return self._policies[name]
        except KeyError:
            raise PolicyNotFoundError(name) from None

    def names(self) -> list[str]:
        return sorted(self._policies)

    def __contains__(self, name: str) -> bool:
        return name in self._policies

    def __len__(self) -> int:
        return len(self._policies)


# Process-wide registry for the admin area
admin_policies = PolicyRegistry()


def admin_policy(entity_type_name: str):
    """
    Class decorator registering an admin policy for an entity type.

    Usage:
        @admin_policy("BlogPost")
        class BlogPostPolicy(AdminPolicy):
            category = CapabilityCategory.BLOG_POSTS
    """
    def decorator(policy_class: type[BasePolicy]) -> type[BasePolicy]:
        return admin_policies.register(entity_type_name, policy_class)

    return decorator
