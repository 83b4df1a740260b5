"""Guard helpers for admin authorization checks."""

from typing import Any

from app.models.user import User
from app.utils.exceptions import AuthorizationError

from .base_policy import Action
from .registry import PolicyRegistry, admin_policies
from .resolver import authorize, subject_from


def can(
    user: User | None,
    action: Action,
    subject: Any,
    registry: PolicyRegistry = admin_policies,
    **kwargs,
) -> bool:
    """
    Check if user can perform action on subject.

    Usage:
        can(user, Action.UPDATE, post)
        can(user, Action.LIST, posts)
        can(user, Action.CREATE, BlogPost)
        can(user, Action.LIST, "feature_flags")
    """
    return authorize(subject_from(subject), action, user, registry=registry, **kwargs).allowed


def authorise(
    subject: Any,
    action: Action,
    user: User | None,
    registry: PolicyRegistry = admin_policies,
    **kwargs,
) -> None:
    """
    Require that user can perform action on subject.
    Raises AuthorizationError if not allowed.

    Usage:
        authorise(post, Action.DELETE, current_user)
    """
    result = authorize(subject_from(subject), action, user, registry=registry, **kwargs)

    if not result.allowed:
        raise AuthorizationError(
            result.reason or "Access denied",
            details={"action": action.value},
        )
