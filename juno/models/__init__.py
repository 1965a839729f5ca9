"""Public models for the Juno backend: success and error envelopes."""

from juno.models.errors import (
    KIND_ERRORS,
    ApiError,
    BadRequestError,
    ConflictError,
    ErrorDetail,
    ErrorKind,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
    make_error,
)
from juno.models.responses import (
    ApiResponse,
    ConstructionError,
    ResponseMetadata,
    created,
    make_success,
    no_content,
    ok,
    paginated,
)

__all__ = [
    "KIND_ERRORS",
    "ApiError",
    "ApiResponse",
    "BadRequestError",
    "ConflictError",
    "ConstructionError",
    "ErrorDetail",
    "ErrorKind",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "ResponseMetadata",
    "UnauthorizedError",
    "ValidationFailedError",
    "created",
    "make_error",
    "make_success",
    "no_content",
    "ok",
    "paginated",
]
