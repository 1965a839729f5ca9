"""Success response envelope model.

Every successful handler completion is wrapped in this envelope:
{ success: true, statusCode, message, data, [metadata], timestamp }

``metadata`` is only emitted when supplied, and only with the fields that were
supplied. ``timestamp`` is captured once at construction.

The envelope is frozen, but only shallowly: ``data`` is held by reference, so
mutating the caller's object afterwards changes the serialized body.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import to_jsonable_python

T = TypeVar("T")

SUCCESS_STATUS_RANGE = (200, 399)


class ConstructionError(Exception):
    """Raised when an envelope is built with an invalid status code or shape.

    Not a ``ValueError``: pydantic validators re-raise it as-is rather than
    wrapping it in a ``ValidationError``.
    """


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_ms(moment: datetime) -> str:
    """Render *moment* as ISO-8601 UTC with millisecond precision and a ``Z``."""
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def check_status(status_code: int, low: int, high: int, kind: str) -> int:
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        raise ConstructionError(f"Invalid {kind} status code: {status_code!r}")
    if status_code < low or status_code > high:
        raise ConstructionError(
            f"Invalid {kind} status code: {status_code}. Must be between {low}-{high}"
        )
    return status_code


class ResponseMetadata(BaseModel):
    """Pagination details attached to list responses, keyed by wire names."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total: int | None = None
    page: int | None = None
    limit: int | None = None
    total_pages: int | None = Field(default=None, alias="totalPages")
    has_next: bool | None = Field(default=None, alias="hasNext")
    has_previous: bool | None = Field(default=None, alias="hasPrevious")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ApiResponse(BaseModel, Generic[T]):
    """Immutable JSON envelope for successful API responses."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: Literal[True] = True
    status_code: int = Field(alias="statusCode")
    data: T | None = None
    message: str = "Success"
    metadata: ResponseMetadata | None = None
    timestamp: datetime = Field(default_factory=utc_now)

    @field_validator("status_code", mode="before")
    @classmethod
    def validate_status_code(cls, value: Any) -> int:
        return check_status(value, *SUCCESS_STATUS_RANGE, kind="success")

    def to_json(self) -> dict[str, Any]:
        """Wire representation; called by the response layer before sending."""
        body: dict[str, Any] = {
            "success": self.success,
            "statusCode": self.status_code,
            "message": self.message,
            "data": to_jsonable_python(self.data, by_alias=True),
        }
        if self.metadata is not None:
            body["metadata"] = self.metadata.to_json()
        body["timestamp"] = isoformat_ms(self.timestamp)
        return body

    # -----------------------------------------------------------------------
    # Factories for common success scenarios
    # -----------------------------------------------------------------------

    @classmethod
    def ok(cls, data: Any, message: str = "Success") -> ApiResponse:
        return make_success(200, data, message)

    @classmethod
    def created(
        cls, data: Any, message: str = "Resource created successfully"
    ) -> ApiResponse:
        return make_success(201, data, message)

    @classmethod
    def no_content(cls, message: str = "Operation completed successfully") -> ApiResponse:
        return make_success(204, None, message)

    @classmethod
    def paginated(
        cls,
        data: list[Any],
        metadata: ResponseMetadata | dict[str, Any],
        message: str = "Data retrieved successfully",
    ) -> ApiResponse:
        return make_success(200, data, message, metadata)


def make_success(
    status_code: int,
    data: Any,
    message: str = "Success",
    metadata: ResponseMetadata | dict[str, Any] | None = None,
) -> ApiResponse:
    """Build a success envelope.

    Raises
    ------
    ConstructionError
        If *status_code* is outside [200, 399], or *metadata* has unknown
        keys or mistyped values.
    """
    check_status(status_code, *SUCCESS_STATUS_RANGE, kind="success")
    if isinstance(metadata, dict):
        try:
            metadata = ResponseMetadata.model_validate(metadata)
        except ValidationError as exc:
            raise ConstructionError(f"Invalid response metadata: {exc}") from exc
    return ApiResponse(
        status_code=status_code, data=data, message=message, metadata=metadata
    )


ok = ApiResponse.ok
created = ApiResponse.created
no_content = ApiResponse.no_content
paginated = ApiResponse.paginated
