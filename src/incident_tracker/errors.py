"""Error taxonomy and its translation into HTTP responses."""
import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from incident_tracker.schemas import RULE_ERROR_TYPE

logger = logging.getLogger("incidenttracker.errors")


class IncidentTrackerError(Exception):
    """Base exception for the application."""


class IncidentNotFoundError(IncidentTrackerError):
    def __init__(self, incident_id: str):
        super().__init__(f"Incident {incident_id} not found")
        self.incident_id = incident_id


def validation_messages(errors: Sequence[dict[str, Any]]) -> list[str]:
    """Flatten pydantic errors into one message per violated rule, in order."""
    messages = []
    for err in errors:
        if err.get("type") == RULE_ERROR_TYPE:
            messages.append(err["msg"])
            continue
        field = next(
            (str(part) for part in reversed(err.get("loc", ())) if isinstance(part, str)),
            "request",
        )
        messages.append(f"{field}: {err['msg']}")
    return messages


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": validation_messages(exc.errors())},
    )


async def not_found_handler(request: Request, exc: IncidentNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": "Incident not found"},
    )


async def persistence_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Persistence failure on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IncidentNotFoundError, not_found_handler)
    app.add_exception_handler(SQLAlchemyError, persistence_error_handler)
