"""Shared fixtures for relay service tests."""

from __future__ import annotations

import os
from typing import Any
from unittest.mock import AsyncMock

import pytest

# Set env vars before any relay_common import.
os.environ.setdefault("RELAY_STORE_BACKEND", "memory")
os.environ.setdefault("RELAY_PERSISTENCE_TIME", "300")
os.environ.setdefault("RELAY_SLACK_WEBHOOK_URL", "https://hooks.slack.com/services/T00/B00/xxx")

from relay_common.models import decode_event  # noqa: E402

from relay.evaluator import SuppressionEvaluator  # noqa: E402
from relay.router import DispatchRouter  # noqa: E402
from relay.store import InMemoryTTLStore  # noqa: E402

WINDOW_S = 300


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ─── Payload builders ────────────────────────────────────────────

_BASE: dict[str, Any] = {
    "description": "Alert condition violated",
    "eventTime": 1604275200,
    "sequencerName": "branch-mp",
    "sequencerHost": "mp1.example.com",
    "orgId": 42,
    "orgName": "Example Org",
}


def diagnostic_test_payload(**overrides: Any) -> dict[str, Any]:
    return {
        **_BASE,
        "type": "TEST_EVENT",
        "target": "example.com",
        "testId": 7,
        "name": "Nightly voice test",
        "testStatus": "FAILED",
        "dataReadiness": "GOOD",
        "voiceReadiness": "POOR",
        **overrides,
    }


def sequencer_payload(**overrides: Any) -> dict[str, Any]:
    return {**_BASE, "type": "SEQUENCER_EVENT", "sequencerStatus": "UNAVAILABLE", **overrides}


def service_quality_payload(**overrides: Any) -> dict[str, Any]:
    return {
        **_BASE,
        "type": "SQA_EVENT",
        "target": "example.com",
        "pathId": 11,
        "pathName": "mp1 -> example.com",
        "pathServiceQuality": "SQA_VIOLATED",
        "measuredParam": "DATA_LOSS",
        "measuredValue": 3.5,
        "deepLink": "https://apm.example.com/path/11",
        "importance": 5,
        "tags": [],
        **overrides,
    }


def web_application_payload(**overrides: Any) -> dict[str, Any]:
    return {
        **_BASE,
        "type": "WEB_PATH_SQA_EVENT",
        "target": "https://app.example.com",
        "webAppId": 1,
        "webPathId": 2,
        "workflowName": "Login flow",
        "milestoneName": "login",
        "measuredParam": "HTTP_TOTAL_TIME",
        "measuredValue": 1200,
        "deepLink": "https://apm.example.com/web/2",
        **overrides,
    }


def network_change_payload(old: str = "AS100 AS200", new: str = "AS100 AS300", **overrides: Any) -> dict[str, Any]:
    return {
        **_BASE,
        "type": "NETWORK_CHANGE_EVENT",
        "target": "example.com",
        "pathId": 11,
        "pathName": "mp1 -> example.com",
        "tracerouteProtocol": "icmp",
        "oldAsnSequence": old,
        "newAsnSequence": new,
        "deepLink": "https://apm.example.com/path/11",
        "tags": [],
        **overrides,
    }


PAYLOAD_BUILDERS = {
    "TEST_EVENT": diagnostic_test_payload,
    "SEQUENCER_EVENT": sequencer_payload,
    "SQA_EVENT": service_quality_payload,
    "WEB_PATH_SQA_EVENT": web_application_payload,
    "NETWORK_CHANGE_EVENT": network_change_payload,
}


# ─── Fixtures ────────────────────────────────────────────────────


@pytest.fixture()
def payloads() -> dict[str, Any]:
    """Builders for each event family, keyed by discriminant."""
    return PAYLOAD_BUILDERS


@pytest.fixture()
def make_event():
    """Decode a payload built by one of the builders."""
    def _make(event_type: str, **overrides: Any):
        return decode_event(PAYLOAD_BUILDERS[event_type](**overrides))
    return _make


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> InMemoryTTLStore:
    return InMemoryTTLStore(ttl_s=WINDOW_S, clock=clock)


@pytest.fixture()
def evaluator(store: InMemoryTTLStore) -> SuppressionEvaluator:
    return SuppressionEvaluator(store)


@pytest.fixture()
def dispatch(evaluator: SuppressionEvaluator) -> DispatchRouter:
    return DispatchRouter(evaluator)


@pytest.fixture()
def mock_redis() -> AsyncMock:
    """Async mock standing in for a ``redis.asyncio.Redis`` instance."""
    redis = AsyncMock()
    redis.exists = AsyncMock(return_value=0)
    redis.set = AsyncMock(return_value=True)  # NX set succeeded
    redis.ping = AsyncMock(return_value=True)
    redis.aclose = AsyncMock()
    return redis
