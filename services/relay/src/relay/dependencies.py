"""
FastAPI dependency injection providers for the relay.

The router and delivery channel are built once at startup and stored on
``app.state``; these callables hand them to request handlers and are
overridden in tests.
"""

from __future__ import annotations

from fastapi import Request

from .channels.base import AlertChannel
from .router import DispatchRouter


async def get_router(request: Request) -> DispatchRouter:
    """Return the shared :class:`DispatchRouter` from app state."""
    return request.app.state.router


async def get_channel(request: Request) -> AlertChannel:
    """Return the shared delivery channel from app state."""
    return request.app.state.channel
