"""
Suppression decisions for AppNeta events.

Compares each event's fingerprint against the TTL store.  An event whose
fingerprint was seen within the persistence time is suppressed (``None``
is returned); otherwise it is recorded and returned unchanged so the
caller forwards it to Slack.

Flow
----
* **Test / sequencer / service quality / web application** — build the
  fingerprint; suppress if present, else record and forward.  By default
  the check and the record are one atomic ``insert_if_absent`` call.
* **Network change** — check the fingerprint built from the *new* AS
  path; suppress if present, else record the fingerprint built from the
  *old* AS path and forward.  Recording the path we just left means a
  later event whose new path returns to it (X→Y then Y→X) is suppressed
  as oscillation.  Only the departed-from path is remembered: a repeat
  of the same X→Y change is not suppressed by this rule.
"""

from __future__ import annotations

from typing import TypeVar

import structlog

from relay_common.models import (
    EventBase,
    EventType,
    NetworkChangeEvent,
    SequencerEvent,
    ServiceQualityEvent,
    TestEvent,
    WebApplicationEvent,
)

from .fingerprint import build_fingerprint, fingerprint_key, network_change_fingerprint
from .store import TTLStore

logger = structlog.get_logger()

E = TypeVar("E", bound=EventBase)


class SuppressionEvaluator:
    """Decides whether an event is forwarded or suppressed.

    Args:
        store: TTL store shared by every request.
        atomic: Use the store's ``insert_if_absent`` for the general rule.
                ``False`` issues separate ``exists``/``record`` calls, which
                lets two concurrent identical events both be forwarded.
    """

    def __init__(self, store: TTLStore, *, atomic: bool = True) -> None:
        self.store = store
        self.atomic = atomic

    async def _check(self, event: E) -> E | None:
        key = fingerprint_key(event.event_type, build_fingerprint(event))
        log = logger.bind(event_type=event.event_type.value, key=key)

        if self.atomic:
            seen = await self.store.insert_if_absent(key)
        else:
            seen = await self.store.exists(key)
            if not seen:
                await self.store.record(key)

        if seen:
            log.info("event_suppressed")
            return None
        log.info("event_forwarded")
        return event

    async def evaluate_test(self, event: TestEvent) -> TestEvent | None:
        return await self._check(event)

    async def evaluate_sequencer(self, event: SequencerEvent) -> SequencerEvent | None:
        return await self._check(event)

    async def evaluate_service_quality(
        self, event: ServiceQualityEvent,
    ) -> ServiceQualityEvent | None:
        return await self._check(event)

    async def evaluate_web_application(
        self, event: WebApplicationEvent,
    ) -> WebApplicationEvent | None:
        return await self._check(event)

    async def evaluate_network_change(
        self, event: NetworkChangeEvent,
    ) -> NetworkChangeEvent | None:
        """Suppress a path change whose new path was recently departed from.

        Both fingerprints are built before the store is touched, so a
        malformed hop sequence fails without mutating anything.
        """
        event_type = EventType.NETWORK_CHANGE_EVENT
        new_key = fingerprint_key(event_type, network_change_fingerprint(event))
        old_key = fingerprint_key(
            event_type, network_change_fingerprint(event, use_old_path=True),
        )
        log = logger.bind(event_type=event_type.value, key=new_key)

        if await self.store.exists(new_key):
            log.info("event_suppressed", reason="returned_to_recent_path")
            return None

        await self.store.record(old_key)
        log.info("event_forwarded", recorded=old_key)
        return event
