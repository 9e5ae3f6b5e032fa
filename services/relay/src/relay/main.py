"""
Relay service entry point.

Builds the FastAPI application: the AppNeta webhook, CORS preflight,
health and Prometheus metrics endpoints, and the shared deduplication
store, suppression router, and Slack channel.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from relay_common.config import Settings, get_settings
from relay_common.errors import RelayError
from relay_common.logging import configure_logging
from relay_common.messaging.redis_client import RedisClient

from .channels.slack_channel import SlackChannel
from .evaluator import SuppressionEvaluator
from .health import router as health_router
from .middleware.cors import add_cors
from .middleware.logging import LoggingMiddleware
from .router import DispatchRouter
from .store import InMemoryTTLStore, RedisTTLStore, TTLStore
from .webhook import relay_errors_total
from .webhook import router as webhook_router

logger = structlog.get_logger()


def _settings(app: FastAPI) -> Settings:
    return getattr(app.state, "settings", None) or get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle for the relay."""
    settings = _settings(app)
    logger.info(
        "relay_starting",
        store_backend=settings.store_backend,
        persistence_time=settings.persistence_time,
    )

    redis_client: RedisClient | None = None
    store: TTLStore
    if settings.store_backend == "redis":
        redis_client = RedisClient(settings.redis_url)
        await redis_client.connect()
        store = RedisTTLStore(redis_client.redis, ttl_s=settings.persistence_time)
    else:
        store = InMemoryTTLStore(ttl_s=settings.persistence_time)

    channel = SlackChannel(settings.slack_webhook_url, max_attempts=settings.slack_max_attempts)
    app.state.redis_client = redis_client
    app.state.router = DispatchRouter(SuppressionEvaluator(store, atomic=settings.atomic_dedup))
    app.state.channel = channel

    yield

    logger.info("relay_stopping")
    await channel.close()
    if redis_client is not None:
        await redis_client.close()


async def relay_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map any :class:`RelayError` to a 500 response."""
    kind = getattr(exc, "kind", "relay_error")
    relay_errors_total.labels(kind=kind).inc()
    logger.error("relay_error", kind=kind, error=str(exc), path=request.url.path)
    return JSONResponse(
        {"status": "error", "error": kind, "detail": str(exc)},
        status_code=500,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.environment)

    app = FastAPI(title="AppNeta Slack Relay", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.include_router(webhook_router)
    app.include_router(health_router)
    app.mount("/metrics", make_asgi_app())
    app.add_exception_handler(RelayError, relay_error_handler)

    # ── Middleware (applied outermost-first) ──
    app.add_middleware(LoggingMiddleware)
    add_cors(app)

    return app


if __name__ == "__main__":
    _settings_at_start = get_settings()
    uvicorn.run(
        "relay.main:create_app",
        factory=True,
        host=_settings_at_start.api_host,
        port=_settings_at_start.api_port,
        reload=False,
    )
