"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from bridgeme.api.chat import router as chat_router
from bridgeme.api.exceptions import register_exception_handlers
from bridgeme.configs.config import get_app_config
from bridgeme.core.llm import build_chat_backend
from bridgeme.infra.history import build_history_store
from bridgeme.infra.logging import setup_logging
from bridgeme.infra.telemetry import init_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the process-wide history store and LLM backend."""
    config = get_app_config()
    app.state.history_store = build_history_store(config)
    app.state.chat_backend = build_chat_backend(config)
    logger.info(
        "Bridge Me started (provider=%s, history=%s)",
        config.llm.provider,
        config.history.path,
    )

    yield

    app.state.chat_backend = None
    logger.info("Bridge Me shut down.")


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="Bridge Me",
        description="Mood-aware chat that routes replies to a supportive "
        "or exploratory mode",
        version="0.1.0",
        lifespan=lifespan,
    )

    init_telemetry(app, config.tracing)
    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=config.tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics")
    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(chat_router)

    return app


app = get_app()
