"""Express-style transport adapter for FastAPI.

Handlers in this service take ``(request, response, next_)``:

- ``request`` is the Starlette request,
- ``response`` is a ``ResponseChannel`` that accepts a single write,
- ``next_`` forwards a failure to the centralized error reporter.

``express_route`` wraps such a handler with ``async_handler`` and turns it
into a FastAPI endpoint.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from juno.middleware.error_handler import record_error, report_error
from juno.models.errors import ApiError, InternalError
from juno.models.responses import ApiResponse
from juno.utils.async_handler import RequestHandler, async_handler

logger = logging.getLogger(__name__)


class ResponseChannel:
    """Single-write response channel handed to Express-style handlers.

    The first ``send`` wins. Later writes, and any write after ``close()``
    (transport aborted), are ignored rather than raised.
    """

    def __init__(self) -> None:
        self.status_code: int | None = None
        self.body: Any = None
        self.headers: dict[str, str] = {}
        self.closed = False

    @property
    def written(self) -> bool:
        return self.status_code is not None

    def send(self, status_code: int, body: Any) -> bool:
        """Record the response. Returns ``False`` when the write was ignored."""
        if self.closed:
            logger.debug("Ignoring write to closed response channel")
            return False
        if self.written:
            logger.warning(
                "Ignoring second response write",
                extra={"status_code": status_code},
            )
            return False
        self.status_code = status_code
        self.body = body
        return True

    def send_envelope(self, envelope: ApiResponse | ApiError) -> bool:
        return self.send(envelope.status_code, envelope.to_json())

    def close(self) -> None:
        self.closed = True

    def to_response(self) -> Response:
        if self.status_code == 204:
            return Response(status_code=204, headers=self.headers)
        return JSONResponse(
            status_code=self.status_code or 200, content=self.body, headers=self.headers
        )


class _FailureSink:
    """``next_`` continuation that keeps the first forwarded failure."""

    def __init__(self) -> None:
        self.failure: BaseException | None = None

    def __call__(self, exc: BaseException) -> None:
        if self.failure is not None:
            logger.warning("Ignoring additional forwarded failure: %r", exc)
            return
        self.failure = exc


def express_route(handler: RequestHandler):
    """Adapt an Express-style handler into a FastAPI endpoint.

    The handler is always run through ``async_handler``, so a route cannot be
    registered without the failure funnel.
    """
    safe_handler = async_handler(handler)

    async def endpoint(request: Request) -> Response:
        channel = ResponseChannel()
        next_ = _FailureSink()
        await safe_handler(request, channel, next_)

        if next_.failure is not None:
            if channel.written:
                # The written response stands; the failure is only logged.
                record_error(request, next_.failure)
                return channel.to_response()
            return report_error(request, next_.failure)
        if not channel.written:
            return report_error(
                request, InternalError("Handler completed without writing a response")
            )
        return channel.to_response()

    # Not functools.wraps: FastAPI must see this signature, not the handler's.
    endpoint.__name__ = getattr(handler, "__name__", endpoint.__name__)
    endpoint.__qualname__ = getattr(handler, "__qualname__", endpoint.__qualname__)
    endpoint.__doc__ = handler.__doc__
    return endpoint
