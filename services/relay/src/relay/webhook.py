"""
AppNeta webhook router for the relay.

Receives the JSON event AppNeta posts, runs it through the suppression
rules, and forwards surviving events to Slack.

Responses
---------
* ``200 {"status": "suppressed"}`` — duplicate within the persistence time.
* ``200 {"status": "delivered"}`` — rendered and accepted by Slack.
* ``502 {"status": "delivery_failed"}`` — Slack rejected or was unreachable.
* ``500 {"status": "error", ...}`` — any relay error (see ``relay.main``).
* ``OPTIONS /`` without preflight headers answers 200 with ``Allow``;
  CORS preflights are answered by the CORS middleware.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import Counter

from relay_common.errors import MalformedEventField

from .blocks import get_block
from .channels.base import AlertChannel
from .dependencies import get_channel, get_router
from .router import DispatchRouter

logger = structlog.get_logger()

router = APIRouter(tags=["webhook"])

# ── Prometheus metrics ──
relay_events_total = Counter(
    "relay_events_total",
    "AppNeta events processed by the relay",
    ["event_type", "decision"],
)
relay_errors_total = Counter(
    "relay_errors_total",
    "AppNeta events that failed with a relay error",
    ["kind"],
)


@router.post("/")
async def receive_event(
    request: Request,
    dispatch: DispatchRouter = Depends(get_router),
    channel: AlertChannel = Depends(get_channel),
) -> JSONResponse:
    try:
        payload: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedEventField("<body>", "request body is not valid JSON") from exc

    event = await dispatch.route_raw(payload)
    event_type = str(payload.get("type"))

    if event is None:
        relay_events_total.labels(event_type=event_type, decision="suppressed").inc()
        return JSONResponse({"status": "suppressed"})

    message = get_block(event)
    delivered = await channel.send(message)
    if not delivered:
        relay_events_total.labels(event_type=event_type, decision="delivery_failed").inc()
        logger.error("event_delivery_failed", event_type=event_type, channel=channel.name)
        return JSONResponse({"status": "delivery_failed"}, status_code=502)

    relay_events_total.labels(event_type=event_type, decision="delivered").inc()
    return JSONResponse({"status": "delivered"})


@router.options("/")
async def describe_methods() -> Response:
    return Response(status_code=200, headers={"Allow": "POST, OPTIONS"})
