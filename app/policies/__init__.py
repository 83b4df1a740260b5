"""Authorization policies system."""

from .base_policy import Action, BasePolicy, PolicyContext, PolicyResult
from .registry import PolicyRegistry, admin_policies, admin_policy, policy_class_name
from .resolver import (
    RecordCollection,
    SingleRecord,
    Subject,
    SymbolicName,
    TypeReference,
    authorize,
    resolve_entity_type_name,
    subject_from,
)

# Registers the admin policies
from . import admin  # noqa: E402,F401  isort:skip
from .guards import authorise, can  # noqa: E402  isort:skip

__all__ = [
    "Action",
    "BasePolicy",
    "PolicyContext",
    "PolicyResult",
    "PolicyRegistry",
    "admin_policies",
    "admin_policy",
    "policy_class_name",
    "Subject",
    "SingleRecord",
    "RecordCollection",
    "TypeReference",
    "SymbolicName",
    "resolve_entity_type_name",
    "subject_from",
    "authorize",
    "authorise",
    "can",
]
