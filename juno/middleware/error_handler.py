"""Centralized error reporter and FastAPI exception handlers.

Every failure that reaches the response boundary passes through
``report_error``: it is classified into an ``ApiError`` (unknown failures
become ``InternalError``), stamped with the request's correlation id, logged,
and written as the error envelope:
{ success, statusCode, message, data, errors, [code], timestamp, [correlationId] }
"""

from __future__ import annotations

import logging
import traceback
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from juno.middleware.request_id import REQUEST_ID_HEADER, get_request_id
from juno.models.errors import (
    KIND_ERRORS,
    ApiError,
    ErrorDetail,
    ErrorKind,
    InternalError,
    ValidationFailedError,
    make_error,
)

logger = logging.getLogger(__name__)

# Leading ``loc`` segments that name the request part rather than the field.
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _format_trace(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _field_name(loc: tuple) -> str | None:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or None


def _status_code_name(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).name
    except ValueError:
        return "HTTP_ERROR"


def _status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Something went wrong"


def _from_validation_error(
    exc: RequestValidationError | PydanticValidationError,
) -> ValidationFailedError:
    details = [
        ErrorDetail(
            field=_field_name(tuple(err.get("loc", ()))),
            message=err["msg"],
            code=err.get("type"),
        )
        for err in exc.errors()
    ]
    return ValidationFailedError("Validation failed", details, trace=_format_trace(exc))


def _from_http_exception(exc: StarletteHTTPException) -> ApiError:
    status_code = exc.status_code
    message = exc.detail if isinstance(exc.detail, str) and exc.detail else None
    message = message or _status_phrase(status_code)
    kind = ErrorKind.from_status(status_code)
    if kind is not None:
        return KIND_ERRORS[kind](message, trace=_format_trace(exc))
    if 400 <= status_code <= 599:
        return make_error(
            status_code, message, trace=_format_trace(exc), code=_status_code_name(status_code)
        )
    return InternalError(trace=_format_trace(exc))


def classify_error(exc: BaseException) -> ApiError:
    """Map any failure onto an ``ApiError``.

    ``ApiError`` instances pass through unchanged. Validation failures become
    ``ValidationFailedError`` with one detail per field, HTTP exceptions keep
    their status, and everything else escalates to ``InternalError`` with the
    original traceback preserved as ``trace``.
    """
    if isinstance(exc, ApiError):
        return exc
    if isinstance(exc, (RequestValidationError, PydanticValidationError)):
        return _from_validation_error(exc)
    if isinstance(exc, StarletteHTTPException):
        return _from_http_exception(exc)
    return InternalError(trace=_format_trace(exc))


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def _log_traces(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return True if settings is None else settings.log_traces


def record_error(request: Request, exc: BaseException) -> ApiError:
    """Classify *exc*, attach the request's correlation id and log it."""
    error = classify_error(exc)

    request_id = get_request_id(request)
    if request_id and error.correlation_id is None:
        error.correlation_id = request_id

    extra: dict = {
        "status_code": error.status_code,
        "error_code": error.code,
        "path": request.url.path,
        "method": request.method,
        "request_id": request_id,
    }
    if error.status_code >= 500:
        if _log_traces(request):
            extra["trace"] = error.trace
        logger.error("Request failed: %s", error.message, extra=extra)
    else:
        logger.warning("Request rejected: %s", error.message, extra=extra)
    return error


def report_error(request: Request, exc: BaseException) -> JSONResponse:
    """Record *exc* and write it as the error envelope response."""
    error = record_error(request, exc)
    request_id = get_request_id(request)
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    return JSONResponse(
        status_code=error.status_code, content=error.to_json(), headers=headers
    )


async def _reporting_handler(request: Request, exc: Exception) -> JSONResponse:
    return report_error(request, exc)


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire the centralized reporter into every FastAPI exception path."""
    app.add_exception_handler(ApiError, _reporting_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _reporting_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _reporting_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _reporting_handler)
