"""
Error taxonomy for the AppNeta relay.

All relay failures derive from :class:`RelayError` so the webhook entry
point can map them to a single failure response.  The decision engine
never catches these itself.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for every relay failure."""

    kind: str = "relay_error"


class UnsupportedEventType(RelayError):
    """The event's ``type`` discriminant is not one of the known families.

    Args:
        event_type: The discriminant value received (``None`` if absent).
    """

    kind = "unsupported_event_type"

    def __init__(self, event_type: object) -> None:
        self.event_type = event_type
        super().__init__(f"Unsupported event type: {event_type!r}")


class MalformedEventField(RelayError):
    """A field needed to decide on the event is missing or badly shaped.

    Args:
        field: Name of the offending field.
        reason: Human-readable description of the problem.
    """

    kind = "malformed_event"

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Malformed event field {field!r}: {reason}")


class StoreUnavailable(RelayError):
    """The TTL existence store could not be reached."""

    kind = "store_unavailable"
