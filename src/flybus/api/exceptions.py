"""Global exception handlers.

Registered by the app factory: Starlette snapshots the handler table when
it builds its middleware stack, so they must be in place before startup.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from flybus.core.service.metrics import RATE_LIMIT_REJECTIONS_TOTAL
from flybus.infra.guards import RateLimited

from .security import Unauthorized

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized request"
RATE_LIMITED_MESSAGE = "Too many requests. Please try again later."


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""

    @app.exception_handler(Unauthorized)
    async def handle_unauthorized(request: Request, exc: Unauthorized) -> JSONResponse:
        return JSONResponse(status_code=401, content={"error": UNAUTHORIZED_MESSAGE})

    @app.exception_handler(RateLimited)
    async def handle_rate_limited(request: Request, exc: RateLimited) -> JSONResponse:
        RATE_LIMIT_REJECTIONS_TOTAL.inc()
        logger.info("Rate limit hit for %s: %s", exc.ip, exc)
        return JSONResponse(
            status_code=429,
            content={"error": RATE_LIMITED_MESSAGE},
            headers={"Retry-After": "60"},
        )
