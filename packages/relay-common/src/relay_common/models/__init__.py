"""
Shared Pydantic data models for the AppNeta relay.

This package contains the AppNeta event families and their status
vocabularies.
"""

from relay_common.models.events import (
    Event,
    EventBase,
    EventType,
    NetworkChangeEvent,
    Readiness,
    SequencerEvent,
    SequencerStatus,
    ServiceQuality,
    ServiceQualityEvent,
    TagObject,
    TestEvent,
    TestStatus,
    TracerouteProtocol,
    WebApplicationEvent,
    decode_event,
)

__all__ = [
    "Event",
    "EventBase",
    "EventType",
    "NetworkChangeEvent",
    "Readiness",
    "SequencerEvent",
    "SequencerStatus",
    "ServiceQuality",
    "ServiceQualityEvent",
    "TagObject",
    "TestEvent",
    "TestStatus",
    "TracerouteProtocol",
    "WebApplicationEvent",
    "decode_event",
]
