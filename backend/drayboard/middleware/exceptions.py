"""Domain errors and the handlers that turn them into JSON error bodies.

Every error leaves the API as

    {"error": {"code": "MISSING_YARD_INFO", "message": "...", "details": ...}}

with ``details`` present only when there is something to report (the row
numbers of a rejected import, the failing fields of a malformed body).
Rejections raised by the board rules are 400s; an unknown id is a 404.
Nothing is retried: the request-scoped session has already been rolled back
by the time a handler runs.
"""

import logging
from typing import Union

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class DrayBoardException(Exception):
    """Base class for errors the API reports with a stable code."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"

    def __init__(self, message: str, details: Union[dict, list, None] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidStatusError(DrayBoardException):
    error_code = "INVALID_STATUS"

    def __init__(self, value: object):
        super().__init__(f"Invalid status value: {value!r}")
        self.value = value


class MissingYardInfoError(DrayBoardException):
    """AT_OTHER_YARD requested without a yard id and a LOADED/EMPTY yard status."""

    error_code = "MISSING_YARD_INFO"


class EmptyRequiredFieldError(DrayBoardException):
    error_code = "EMPTY_REQUIRED_FIELD"

    def __init__(self, field: str):
        super().__init__(f"{field} is required")
        self.field = field


class ImportRejectedError(DrayBoardException):
    """The uploaded sheet was refused as a whole; no container was written."""

    error_code = "IMPORT_REJECTED"


class ResourceNotFoundError(DrayBoardException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


def create_error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: Union[dict, list, None] = None,
) -> JSONResponse:
    error = {"code": error_code, "message": message}
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


def _where(request: Request) -> str:
    return f"{request.method} {request.url.path}"


# ── Handlers ─────────────────────────────────────────────────

async def drayboard_exception_handler(request: Request, exc: DrayBoardException) -> JSONResponse:
    logger.warning("%s rejected: %s - %s", _where(request), exc.error_code, exc.message)
    return create_error_response(exc.status_code, exc.message, exc.error_code, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s failed: HTTP %s %s", _where(request), exc.status_code, exc.detail)
    return create_error_response(exc.status_code, str(exc.detail), f"HTTP_{exc.status_code}")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.warning("%s malformed body: %s", _where(request), errors)
    return create_error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Request body is not valid",
        "VALIDATION_ERROR",
        {"errors": errors},
    )


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # The only unique column is containers.case_number
    logger.error("%s integrity error: %s", _where(request), exc.orig)
    if "unique" in str(exc.orig).lower():
        return create_error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "A container with this case number already exists",
            "DUPLICATE_CASE_NUMBER",
        )
    return create_error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Database constraint violation",
        "INTEGRITY_ERROR",
    )


async def operational_exception_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error("%s database unavailable: %s", _where(request), exc)
    return create_error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Database temporarily unavailable. Please try again.",
        "DATABASE_UNAVAILABLE",
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s unhandled %s", _where(request), type(exc).__name__, exc_info=exc)
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        "INTERNAL_SERVER_ERROR",
    )


def register_exception_handlers(app):
    app.add_exception_handler(DrayBoardException, drayboard_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(OperationalError, operational_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
