"""Custom exceptions for the application."""

from typing import Any, Dict, Optional


class BaseAppException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(BaseAppException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed", **kwargs):
        kwargs.setdefault("error_code", "AUTHENTICATION_FAILED")
        super().__init__(message, **kwargs)


class AuthorizationError(BaseAppException):
    """Raised when an authorization check denies access."""

    def __init__(self, message: str = "Access denied", **kwargs):
        kwargs.setdefault("error_code", "ACCESS_DENIED")
        super().__init__(message, **kwargs)


class ValidationError(BaseAppException):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", **kwargs):
        kwargs.setdefault("error_code", "VALIDATION_ERROR")
        super().__init__(message, **kwargs)


class NotFoundError(BaseAppException):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found", **kwargs):
        kwargs.setdefault("error_code", "NOT_FOUND")
        super().__init__(message, **kwargs)


class ConflictError(BaseAppException):
    """Raised when there's a conflict (e.g., duplicate resource)."""

    def __init__(self, message: str = "Resource conflict", **kwargs):
        kwargs.setdefault("error_code", "CONFLICT")
        super().__init__(message, **kwargs)


class TokenExpiredError(AuthenticationError):
    """Raised when a token has expired."""

    def __init__(self, message: str = "Token has expired", **kwargs):
        super().__init__(message, error_code="TOKEN_EXPIRED", **kwargs)


class InvalidTokenError(AuthenticationError):
    """Raised when a token is invalid."""

    def __init__(self, message: str = "Invalid token", **kwargs):
        super().__init__(message, error_code="INVALID_TOKEN", **kwargs)


class UserNotFoundError(NotFoundError):
    """Raised when user is not found."""

    def __init__(self, message: str = "User not found", **kwargs):
        super().__init__(message, error_code="USER_NOT_FOUND", **kwargs)


class EmailAlreadyExistsError(ConflictError):
    """Raised when email already exists."""

    def __init__(self, message: str = "Email already exists", **kwargs):
        super().__init__(message, error_code="EMAIL_EXISTS", **kwargs)


class UsernameAlreadyExistsError(ConflictError):
    """Raised when username already exists."""

    def __init__(self, message: str = "Username already exists", **kwargs):
        super().__init__(message, error_code="USERNAME_EXISTS", **kwargs)


class EmptySubjectError(BaseAppException):
    """Raised when an authorization subject is an empty collection.

    There is no first element to take a type from, so the caller has to
    authorise the entity type instead.
    """

    def __init__(self, message: str = "Cannot authorise an empty collection", **kwargs):
        super().__init__(message, error_code="EMPTY_SUBJECT", **kwargs)


class PolicyNotFoundError(BaseAppException):
    """Raised when no policy is registered under a derived policy name.

    This is a deployment defect, not a denial: it must reach the top-level
    handler and be reported as an internal error.
    """

    def __init__(self, policy_name: str, **kwargs):
        self.policy_name = policy_name
        kwargs.setdefault("details", {"policy_name": policy_name})
        super().__init__(f"No policy registered as {policy_name}", error_code="POLICY_NOT_FOUND", **kwargs)
