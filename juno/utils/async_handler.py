"""Async handler wrapper.

Wraps Express-style ``(request, response, next_)`` handlers so that any
failure, raised before the first ``await`` or after it, is handed to the
``next_`` continuation exactly once. The continuation is where the
centralized error reporter picks it up.

The wrapper never classifies failures; it forwards the raw exception.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

NextFunction = Callable[[BaseException], Awaitable[None] | None]
RequestHandler = Callable[[Any, Any, NextFunction], Awaitable[Any] | Any]
SafeHandler = Callable[[Any, Any, NextFunction], Awaitable[None]]


def async_handler(request_handler: RequestHandler) -> SafeHandler:
    """Return a coroutine function that funnels *request_handler* failures to ``next_``.

    *request_handler* may be a coroutine function, a plain function, or a
    plain function returning an awaitable. On success the wrapper does
    nothing further; the handler writes its own response.

    ``asyncio.CancelledError`` is not an ``Exception`` and propagates
    untouched, since a cancelled request has no one to report to.

    Example::

        @async_handler
        async def get_project(request, response, next_):
            project = await projects.fetch(request.path_params["id"])
            response.send_envelope(ok(project))
    """

    @functools.wraps(request_handler)
    async def safe_handler(request: Any, response: Any, next_: NextFunction) -> None:
        try:
            outcome = request_handler(request, response, next_)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as exc:
            logger.debug(
                "Forwarding failure from %s: %r",
                getattr(request_handler, "__qualname__", request_handler),
                exc,
            )
            forwarded = next_(exc)
            if inspect.isawaitable(forwarded):
                await forwarded

    return safe_handler
