"""
Dispatch of AppNeta events to their suppression rule.

Maps each event's ``type`` discriminant to the matching
:class:`~relay.evaluator.SuppressionEvaluator` method over the closed set
of five families.  Anything else raises
:class:`~relay_common.errors.UnsupportedEventType` before the store is
touched.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import structlog

from relay_common.errors import UnsupportedEventType
from relay_common.models import Event, EventType, decode_event

from .evaluator import SuppressionEvaluator

logger = structlog.get_logger()


class DispatchRouter:
    """Routes an event to the evaluator for its family.

    Args:
        evaluator: The :class:`SuppressionEvaluator` holding the store.
    """

    def __init__(self, evaluator: SuppressionEvaluator) -> None:
        self.evaluator = evaluator
        self._routes: dict[EventType, Callable[[Any], Awaitable[Any]]] = {
            EventType.TEST_EVENT: evaluator.evaluate_test,
            EventType.SEQUENCER_EVENT: evaluator.evaluate_sequencer,
            EventType.SQA_EVENT: evaluator.evaluate_service_quality,
            EventType.WEB_PATH_SQA_EVENT: evaluator.evaluate_web_application,
            EventType.NETWORK_CHANGE_EVENT: evaluator.evaluate_network_change,
        }

    async def route(self, event: Event) -> Event | None:
        """Apply the suppression rule for *event*'s family.

        Returns:
            *event* if it should be forwarded, ``None`` if suppressed.

        Raises:
            UnsupportedEventType: *event* is not one of the five families.
        """
        event_type = getattr(event, "type", None)
        try:
            handler = self._routes[EventType(event_type)]
        except ValueError:
            logger.warning("unsupported_event_type", event_type=event_type)
            raise UnsupportedEventType(event_type) from None
        return await handler(event)

    async def route_raw(self, payload: Mapping[str, Any]) -> Event | None:
        """Decode an untrusted JSON object, then :meth:`route` it.

        Raises:
            UnsupportedEventType: ``type`` is missing or unknown.
            MalformedEventField: ``type`` is known but the fields are invalid.
        """
        return await self.route(decode_event(payload))
