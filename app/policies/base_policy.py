"""Base policy classes and types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from app.models.user import User


class Action(str, Enum):
    """Admin actions that policies decide on."""

    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class PolicyContext:
    """Context for policy evaluation."""

    user: Optional[User]
    subject: Any = None
    entity_type_name: Optional[str] = None
    extra_data: Optional[Dict[str, Any]] = None

    @property
    def record(self) -> Any:
        """The single record being authorised, if the subject is one."""
        from .resolver import SingleRecord

        if isinstance(self.subject, SingleRecord):
            return self.subject.record
        return None


@dataclass
class PolicyResult:
    """Result of policy evaluation."""

    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls, reason: Optional[str] = None) -> "PolicyResult":
        """Create an allow result."""
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str) -> "PolicyResult":
        """Create a deny result."""
        return cls(allowed=False, reason=reason)


class BasePolicy(ABC):
    """Base class for all authorization policies."""

    @abstractmethod
    def check(self, action: Action, context: PolicyContext) -> PolicyResult:
        """Check if action is allowed in the given context."""
        pass

    def can_perform(self, action: Action, context: PolicyContext) -> bool:
        return self.check(action, context).allowed

    def _require_authentication(self, context: PolicyContext) -> Optional[PolicyResult]:
        """Check if user is authenticated."""
        if not context.user:
            return PolicyResult.deny("Authentication required")

        if not context.user.is_active:
            return PolicyResult.deny("User account is inactive")

        if not context.user.can_login:
            return PolicyResult.deny("User account is locked or unconfirmed")

        return None

    def _is_same_user(self, context: PolicyContext) -> bool:
        """Check if the record is the acting user themselves."""
        record = context.record
        if record is None or not isinstance(record, User):
            return False

        return record.id == context.user.id
