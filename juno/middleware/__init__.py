"""Middleware package: centralized error reporter and request ID."""

from juno.middleware.error_handler import (
    classify_error,
    record_error,
    register_error_handlers,
    report_error,
)
from juno.middleware.request_id import RequestIdMiddleware, get_request_id

__all__ = [
    "RequestIdMiddleware",
    "classify_error",
    "get_request_id",
    "record_error",
    "register_error_handlers",
    "report_error",
]
