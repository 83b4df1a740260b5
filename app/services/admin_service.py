"""Helpers shared by the admin area routes."""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.response_builders import ResponseBuilder

logger = logging.getLogger(__name__)


class DeleteFailure(str, Enum):
    """Why an admin delete did not happen."""

    CONSTRAINT_VIOLATION = "constraint_violation"
    NOT_FOUND = "not_found"


async def delete_record(db: AsyncSession, model: type, record_id: Any) -> DeleteFailure | None:
    """Delete one row by primary key; returns the failure, or None on success."""
    record = await db.get(model, record_id)
    if record is None:
        return DeleteFailure.NOT_FOUND

    return await delete_loaded_record(db, record)


async def delete_loaded_record(db: AsyncSession, record: Any) -> DeleteFailure | None:
    """Delete a row that has already been loaded (and authorised)."""
    try:
        await db.delete(record)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(
            f"Delete of {type(record).__name__} blocked by a constraint",
            extra={"entity_type": type(record).__name__, "error": str(e.orig)},
        )
        return DeleteFailure.CONSTRAINT_VIOLATION

    return None


def delete_failure_message(
    failure: DeleteFailure,
    alert_message: str | Mapping[DeleteFailure, str],
) -> str:
    """Pick the alert for a failure: one message for both, or one per variant."""
    if isinstance(alert_message, str):
        return alert_message
    return alert_message[failure]


def handle_delete_failure(
    failure: DeleteFailure,
    alert_message: str | Mapping[DeleteFailure, str],
    redirect_path: str,
) -> JSONResponse:
    """Redirect after a failed admin delete.

    No authorization or audit step runs for this response.
    """
    logger.info(
        f"Admin delete failed ({failure.value}), redirecting to {redirect_path}",
        extra={"delete_failure": failure.value, "redirect_path": redirect_path},
    )
    return ResponseBuilder.redirect(
        redirect_path,
        alert=delete_failure_message(failure, alert_message),
        error_code=failure.value.upper(),
    )
