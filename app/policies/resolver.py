"""Resolve an authorization subject to the admin policy that governs it.

A subject is whatever an admin route is about to act on: one record, a list
of records, a model class, or a bare name such as ``"blog_posts"``. Each form
resolves to exactly one entity type name, which in turn names the policy
(``Admin::<EntityType>Policy``) that makes the decision.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from app.models.user import User
from app.utils.exceptions import EmptySubjectError
from app.utils.inflection import classify

from .base_policy import Action, PolicyContext, PolicyResult
from .registry import PolicyRegistry, admin_policies, policy_class_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SingleRecord:
    """One entity instance."""

    record: Any


@dataclass(frozen=True)
class RecordCollection:
    """A homogeneous, ordered sequence of entity instances."""

    records: Sequence[Any]


@dataclass(frozen=True)
class TypeReference:
    """An entity type itself, with no instance."""

    entity_type: type


@dataclass(frozen=True)
class SymbolicName:
    """A bare name token, e.g. ``"posts"`` or ``"blog_posts"``."""

    name: str


Subject = Union[SingleRecord, RecordCollection, TypeReference, SymbolicName]


def subject_from(value: Any) -> Subject:
    """Wrap a raw value in the matching subject variant."""
    if isinstance(value, (SingleRecord, RecordCollection, TypeReference, SymbolicName)):
        return value

    if isinstance(value, type):
        return TypeReference(value)

    if isinstance(value, Enum):
        value = value.value

    if isinstance(value, str):
        return SymbolicName(value)

    if isinstance(value, Sequence) and not isinstance(value, bytes):
        return RecordCollection(value)

    return SingleRecord(value)


def resolve_entity_type_name(subject: Subject) -> str:
    """Return the entity type name a subject is about."""
    if isinstance(subject, RecordCollection):
        if len(subject.records) == 0:
            raise EmptySubjectError()
        return type(subject.records[0]).__name__

    if isinstance(subject, TypeReference):
        return subject.entity_type.__name__

    if isinstance(subject, SymbolicName):
        return classify(subject.name)

    if isinstance(subject, SingleRecord):
        return type(subject.record).__name__

    raise TypeError(f"Not an authorization subject: {subject!r}")


def authorize(
    subject: Subject,
    action: Action,
    acting_user: User | None,
    registry: PolicyRegistry = admin_policies,
    **extra_data,
) -> PolicyResult:
    """
    Ask the policy for the subject's entity type whether the action is allowed.

    Raises PolicyNotFoundError when no policy is registered for the entity
    type; that is never turned into a denial.
    """
    entity_type_name = resolve_entity_type_name(subject)
    name = policy_class_name(entity_type_name, registry.namespace)
    policy_class = registry.lookup(name)

    context = PolicyContext(
        user=acting_user,
        subject=subject,
        entity_type_name=entity_type_name,
        extra_data=extra_data or None,
    )
    result = policy_class().check(action, context)

    log_data = {
        "policy": name,
        "action": action.value,
        "user_id": acting_user.id if acting_user else None,
        "allowed": result.allowed,
        "reason": result.reason,
    }
    if result.allowed:
        logger.info(f"{name} allowed {action.value}", extra=log_data)
    else:
        logger.warning(f"{name} denied {action.value}: {result.reason}", extra=log_data)

    return result
