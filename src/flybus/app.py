"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flybus.api.chat import router as chat_router
from flybus.api.exceptions import register_exception_handlers
from flybus.configs.config import get_app_config
from flybus.core.service.deps import build_orchestrator
from flybus.core.service.metrics import instrument_app
from flybus.infra.guards import build_request_guard
from flybus.infra.lifespan import inject
from flybus.infra.logging import setup_logging
from flybus.infra.telemetry import init_telemetry

logger = logging.getLogger(__name__)


@inject
async def lifespan(
    app: FastAPI,
    _guard: Annotated[None, Depends(build_request_guard)],
    _orchestrator: Annotated[None, Depends(build_orchestrator)],
) -> AsyncGenerator[None, None]:
    """Application lifespan; collaborators are built by the dependencies."""
    logger.info("Flybus chat backend started")
    yield
    logger.info("Flybus chat backend shutting down")


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="Flybus Chat",
        description="Context-aware airport transfer assistant",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS", "HEAD"],
        allow_headers=["Content-Type", "x-api-key", "x-session-id"],
    )

    instrument_app(app, config.tracing)
    init_telemetry(app, config.tracing)
    register_exception_handlers(app)

    app.include_router(chat_router)

    return app


app = get_app()
