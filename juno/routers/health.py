"""Health check endpoint.

GET {api_prefix}/health/ answers with a 200 success envelope whose data is
``{"message": "Server is running."}``. It is the liveness probe used by
external monitors and does not require authentication.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from juno.models.responses import ApiResponse
from juno.transport import ResponseChannel, express_route
from juno.utils.async_handler import NextFunction


async def health_check(
    request: Request, response: ResponseChannel, next_: NextFunction
) -> None:
    """Confirm the server is up."""
    response.send_envelope(ApiResponse.ok({"message": "Server is running."}))


def create_health_router() -> APIRouter:
    """Factory that creates the health router."""
    health_router = APIRouter(tags=["health"])
    health_router.add_api_route("/", express_route(health_check), methods=["GET"])
    return health_router
