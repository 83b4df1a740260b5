"""HTTP status code constants with semantic names."""

from enum import IntEnum


class APIStatus(IntEnum):
    """Semantic HTTP status codes for API responses."""

    # Success
    SUCCESS = 200
    CREATED = 201
    NO_CONTENT = 204

    # Redirects
    FOUND = 302
    SEE_OTHER = 303

    # Client errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    CONFLICT = 409
    VALIDATION_ERROR = 422

    # Server errors
    INTERNAL_ERROR = 500
