"""Global exception handler middleware."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException

from app.utils.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BaseAppException,
    ConflictError,
    EmptySubjectError,
    NotFoundError,
    PolicyNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Looked up along the exception's MRO, so subclasses inherit their parent's status
STATUS_MAPPING = {
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    EmptySubjectError: status.HTTP_400_BAD_REQUEST,
}


def status_for(exc: BaseAppException) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_MAPPING:
            return STATUS_MAPPING[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ExceptionHandlers:
    """Centralized exception handlers for the application."""

    @staticmethod
    async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
        """Handle all custom application exceptions."""

        logger.warning(
            f"App exception in {request.method} {request.url}: {exc.message}",
            extra={
                "error_code": exc.error_code,
                "details": exc.details,
                "path": str(request.url.path),
                "method": request.method,
            },
        )

        return JSONResponse(
            status_code=status_for(exc),
            content={
                "success": False,
                "message": exc.message,
                "error_code": exc.error_code,
                "details": exc.details,
            },
        )

    @staticmethod
    async def policy_not_found_handler(request: Request, exc: PolicyNotFoundError) -> JSONResponse:
        """A missing policy is a deployment defect; report it as an internal error."""

        logger.error(
            f"Policy lookup failed in {request.method} {request.url}: {exc.message}",
            extra={
                "policy_name": exc.policy_name,
                "path": str(request.url.path),
                "method": request.method,
            },
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Internal server error",
                "error_code": "INTERNAL_ERROR",
                "details": {},
            },
        )

    @staticmethod
    async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle validation exceptions from pydantic."""

        logger.warning(
            f"Validation error in {request.method} {request.url}: {str(exc)}",
            extra={
                "path": str(request.url.path),
                "method": request.method,
                "exception_type": type(exc).__name__,
            },
        )

        errors = exc.errors() if hasattr(exc, "errors") else str(exc)

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "message": "Validation failed",
                "error_code": "VALIDATION_ERROR",
                "details": {"validation_errors": jsonable_errors(errors)},
            },
        )

    @staticmethod
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        """Handle database integrity errors that escaped a route."""

        logger.error(
            f"Database integrity error in {request.method} {request.url}: {str(exc.orig)}",
            extra={
                "path": str(request.url.path),
                "method": request.method,
            },
        )

        error_message = "Database constraint violation"
        error_code = "INTEGRITY_ERROR"

        text = str(exc.orig).lower()
        if "unique" in text or "duplicate key" in text:
            error_message = "Resource already exists"
            error_code = "DUPLICATE_RESOURCE"
        elif "foreign key" in text:
            error_message = "Referenced resource not found"
            error_code = "FOREIGN_KEY_VIOLATION"
        elif "not null" in text:
            error_message = "Required field is missing"
            error_code = "REQUIRED_FIELD_MISSING"

        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "success": False,
                "message": error_message,
                "error_code": error_code,
                "details": {},
            },
        )

    @staticmethod
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Handle FastAPI HTTP exceptions with consistent format."""

        logger.warning(
            f"HTTP exception in {request.method} {request.url}: {exc.detail}",
            extra={
                "status_code": exc.status_code,
                "path": str(request.url.path),
                "method": request.method,
            },
        )

        error_code_mapping = {
            400: "BAD_REQUEST",
            401: "UNAUTHORIZED",
            403: "FORBIDDEN",
            404: "NOT_FOUND",
            405: "METHOD_NOT_ALLOWED",
            409: "CONFLICT",
            422: "VALIDATION_ERROR",
            500: "INTERNAL_ERROR",
        }

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "message": exc.detail,
                "error_code": error_code_mapping.get(exc.status_code, "HTTP_ERROR"),
                "details": {},
            },
            headers=getattr(exc, "headers", None),
        )

    @staticmethod
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""

        logger.error(
            f"Unexpected error in {request.method} {request.url}: {str(exc)}",
            extra={
                "path": str(request.url.path),
                "method": request.method,
                "exception_type": type(exc).__name__,
            },
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Internal server error",
                "error_code": "INTERNAL_ERROR",
                "details": {},
            },
        )


def jsonable_errors(errors: Any) -> Any:
    """Strip non-serialisable context (e.g. the raised ValueError) from pydantic errors."""
    if not isinstance(errors, list):
        return errors
    return [{key: value for key, value in error.items() if key != "ctx"} for error in errors]


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with the FastAPI app."""

    handlers = ExceptionHandlers()

    # Application exceptions; the more specific handler wins
    app.add_exception_handler(PolicyNotFoundError, handlers.policy_not_found_handler)
    app.add_exception_handler(BaseAppException, handlers.app_exception_handler)

    # Database errors
    app.add_exception_handler(IntegrityError, handlers.integrity_error_handler)

    # HTTP exceptions
    app.add_exception_handler(HTTPException, handlers.http_exception_handler)

    # Request body and pydantic validation errors
    from pydantic import ValidationError as PydanticValidationError

    app.add_exception_handler(RequestValidationError, handlers.validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, handlers.validation_exception_handler)

    # Catch-all for unexpected errors
    app.add_exception_handler(Exception, handlers.general_exception_handler)
