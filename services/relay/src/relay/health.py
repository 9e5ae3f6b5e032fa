"""
Health check endpoint for the relay service.

Exposes a /health endpoint returning service status and the
reachability of the deduplication store.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    services: dict[str, str]


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    services: dict[str, str] = {}

    redis_client = getattr(request.app.state, "redis_client", None)
    if redis_client is None:
        services["redis"] = "not_configured"
    elif await redis_client.health_check():
        services["redis"] = "healthy"
    else:
        services["redis"] = "unhealthy"

    channel = getattr(request.app.state, "channel", None)
    services["slack"] = "configured" if getattr(channel, "webhook_url", "") else "not_configured"

    overall = "healthy" if services["redis"] != "unhealthy" else "degraded"
    return HealthResponse(status=overall, services=services)
