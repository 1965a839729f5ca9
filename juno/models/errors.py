"""Error envelope and the closed error taxonomy.

``ApiError`` is both the error envelope and a raisable exception. Handlers
raise it (or one of the kind subclasses below); the centralized reporter in
``juno.middleware.error_handler`` serializes it:
{ success: false, statusCode, message, data: null, errors, [code], timestamp, [correlationId] }
"""

from __future__ import annotations

import traceback
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from juno.models.responses import ConstructionError, check_status, isoformat_ms, utc_now

ERROR_STATUS_RANGE = (400, 599)


class ErrorDetail(BaseModel):
    """A single field-level (or otherwise specific) error entry."""

    model_config = ConfigDict(frozen=True)

    field: str | None = None
    message: str
    code: str | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ErrorKind(str, Enum):
    """Closed set of error classifications used across the service."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_FAILED = "VALIDATION_ERROR"
    INTERNAL = "INTERNAL_ERROR"

    @property
    def code(self) -> str:
        return self.value

    @property
    def status_code(self) -> int:
        return _KIND_STATUS[self]

    @classmethod
    def from_status(cls, status_code: int) -> ErrorKind | None:
        for kind, status in _KIND_STATUS.items():
            if status == status_code:
                return kind
        return None


_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION_FAILED: 422,
    ErrorKind.INTERNAL: 500,
}

ErrorDetailInput = ErrorDetail | dict[str, Any]


def _coerce_details(errors: Iterable[ErrorDetailInput] | None) -> tuple[ErrorDetail, ...]:
    if errors is None:
        return ()
    return tuple(
        item if isinstance(item, ErrorDetail) else ErrorDetail.model_validate(item)
        for item in errors
    )


def _capture_trace() -> str:
    # Omit this helper and ApiError.__init__.
    return "".join(traceback.format_stack()[:-2])


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


class ApiError(Exception):
    """Error envelope raised by handlers and serialized by the error reporter.

    Parameters
    ----------
    status_code:
        HTTP error status (400-599).
    message:
        Primary error message shown to clients.
    errors:
        Detailed entries, e.g. one per invalid field.
    trace:
        Diagnostic trace from the original failure. Captured from the current
        stack when omitted.
    code:
        Machine-readable classification such as ``NOT_FOUND``.

    Raises
    ------
    ConstructionError
        If *status_code* is outside [400, 599].
    """

    @property
    def success(self) -> bool:
        return False

    @property
    def data(self) -> None:
        return None

    def __init__(
        self,
        status_code: int,
        message: str = "Something went wrong",
        errors: Iterable[ErrorDetailInput] | None = None,
        trace: str | None = None,
        code: str | None = None,
    ) -> None:
        check_status(status_code, *ERROR_STATUS_RANGE, kind="error")
        super().__init__(message)
        self._status_code = status_code
        self._message = message
        self._errors = _coerce_details(errors)
        self._code = code
        self._timestamp: datetime = utc_now()
        self._trace = trace or _capture_trace()
        self._correlation_id: str | None = None

    # Envelope fields are read-only; only correlation_id may be set, once.

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def message(self) -> str:
        return self._message

    @property
    def errors(self) -> tuple[ErrorDetail, ...]:
        return self._errors

    @property
    def code(self) -> str | None:
        return self._code

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def trace(self) -> str:
        return self._trace

    @property
    def correlation_id(self) -> str | None:
        return self._correlation_id

    @correlation_id.setter
    def correlation_id(self, value: str) -> None:
        if self._correlation_id is not None:
            raise AttributeError("correlation_id is already set")
        self._correlation_id = value

    @property
    def kind(self) -> ErrorKind | None:
        """Taxonomy kind for this envelope's status, if it has one."""
        return ErrorKind.from_status(self.status_code)

    def to_json(self) -> dict[str, Any]:
        """Wire representation. ``trace`` is never included."""
        body: dict[str, Any] = {
            "success": self.success,
            "statusCode": self.status_code,
            "message": self.message,
            "data": self.data,
            "errors": [detail.to_json() for detail in self.errors],
        }
        if self.code:
            body["code"] = self.code
        body["timestamp"] = isoformat_ms(self.timestamp)
        if self._correlation_id:
            body["correlationId"] = self._correlation_id
        return body

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(status_code={self.status_code}, "
            f"message={self.message!r}, code={self.code!r})"
        )

    # -----------------------------------------------------------------------
    # Factories for common error scenarios
    # -----------------------------------------------------------------------

    @staticmethod
    def bad_request(
        message: str = "Bad Request", errors: Iterable[ErrorDetailInput] | None = None
    ) -> BadRequestError:
        return BadRequestError(message, errors)

    @staticmethod
    def unauthorized(message: str = "Unauthorized access") -> UnauthorizedError:
        return UnauthorizedError(message)

    @staticmethod
    def forbidden(message: str = "Access forbidden") -> ForbiddenError:
        return ForbiddenError(message)

    @staticmethod
    def not_found(resource: str = "Resource") -> NotFoundError:
        return NotFoundError(f"{resource} not found")

    @staticmethod
    def conflict(message: str = "Resource conflict") -> ConflictError:
        return ConflictError(message)

    @staticmethod
    def validation(
        message: str = "Validation failed",
        errors: Iterable[ErrorDetailInput] | None = None,
    ) -> ValidationFailedError:
        return ValidationFailedError(message, errors)

    @staticmethod
    def internal(message: str = "Internal server error") -> InternalError:
        return InternalError(message)


def make_error(
    status_code: int,
    message: str = "Something went wrong",
    errors: Iterable[ErrorDetailInput] | None = None,
    trace: str | None = None,
    code: str | None = None,
) -> ApiError:
    """Build an error envelope for an arbitrary 4xx/5xx status."""
    return ApiError(status_code, message, errors, trace, code)


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------


class _KindError(ApiError):
    """Base for the fixed taxonomy kinds; status and code come from ``kind``."""

    error_kind: ErrorKind
    default_message: str
    max_details: int | None = 1

    def __init__(
        self,
        message: str | None = None,
        errors: Iterable[ErrorDetailInput] | None = None,
        *,
        trace: str | None = None,
    ) -> None:
        details = _coerce_details(errors)
        if self.max_details is not None and len(details) > self.max_details:
            raise ConstructionError(
                f"{self.__class__.__name__} carries at most {self.max_details} "
                f"error detail(s), got {len(details)}"
            )
        super().__init__(
            self.error_kind.status_code,
            message or self.default_message,
            details,
            trace,
            self.error_kind.code,
        )


class BadRequestError(_KindError):
    """Malformed input shape."""

    error_kind = ErrorKind.BAD_REQUEST
    default_message = "Bad Request"


class UnauthorizedError(_KindError):
    """Missing or invalid credential."""

    error_kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized access"


class ForbiddenError(_KindError):
    """Valid credential, insufficient rights."""

    error_kind = ErrorKind.FORBIDDEN
    default_message = "Access forbidden"


class NotFoundError(_KindError):
    """Referenced resource is absent."""

    error_kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(_KindError):
    """Uniqueness or state conflict."""

    error_kind = ErrorKind.CONFLICT
    default_message = "Resource conflict"


class ValidationFailedError(_KindError):
    """One or more field-level rule failures."""

    error_kind = ErrorKind.VALIDATION_FAILED
    default_message = "Validation failed"
    max_details = None


class InternalError(_KindError):
    """Unexpected or unclassified failure."""

    error_kind = ErrorKind.INTERNAL
    default_message = "Internal server error"


KIND_ERRORS: dict[ErrorKind, type[ApiError]] = {
    cls.error_kind: cls
    for cls in (
        BadRequestError,
        UnauthorizedError,
        ForbiddenError,
        NotFoundError,
        ConflictError,
        ValidationFailedError,
        InternalError,
    )
}
