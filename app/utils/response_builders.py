"""Response builder utilities for consistent API responses."""

from typing import Any

from fastapi.responses import JSONResponse

from app.constants.status_codes import APIStatus


class ResponseBuilder:
    """Builder class for standardized API responses."""

    @staticmethod
    def redirect(
        path: str,
        alert: str | None = None,
        notice: str | None = None,
        status_code: int = APIStatus.SEE_OTHER,
        **data: Any,
    ) -> JSONResponse:
        """Redirect with a flash-style alert or notice in the body.

        Alerts report something that went wrong, notices something that
        went right; browsers follow ``Location``, API clients read the body.
        """
        content = {
            "success": alert is None,
            "message": alert or notice,
            "alert": alert,
            "notice": notice,
            "redirect_to": path,
            **data,
        }
        return JSONResponse(status_code=status_code, content=content, headers={"Location": path})

    @staticmethod
    def feature_disabled(alert: str, path: str = "/") -> JSONResponse:
        """Redirect away from a screen whose feature flag is off."""
        return ResponseBuilder.redirect(path, alert=alert, error_code="FEATURE_DISABLED")
