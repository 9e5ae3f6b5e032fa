"""
AppNeta event models for the relay.

Defines the Pydantic models for the five AppNeta event families
(test, sequencer, service quality, web application, and network change)
as a closed tagged union discriminated on the ``type`` field.  Field
names follow Python conventions; the camelCase names AppNeta sends on
the wire are accepted through aliases.

See https://docs.appneta.com/event-integration.html for the source
payload reference.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from relay_common.errors import MalformedEventField, UnsupportedEventType


class EventType(str, enum.Enum):
    """AppNeta event discriminants."""

    TEST_EVENT = "TEST_EVENT"
    SEQUENCER_EVENT = "SEQUENCER_EVENT"
    SQA_EVENT = "SQA_EVENT"
    WEB_PATH_SQA_EVENT = "WEB_PATH_SQA_EVENT"
    NETWORK_CHANGE_EVENT = "NETWORK_CHANGE_EVENT"


class SequencerStatus(str, enum.Enum):
    """Monitoring point status."""

    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    REMOVED = "REMOVED"
    NEW = "NEW"
    BLOCKED = "BLOCKED"


class ServiceQuality(str, enum.Enum):
    """Status of a network path with respect to its alert profile."""

    SQA_NOT_VIOLATED = "SQA_NOT_VIOLATED"
    INDETERMINATE = "INDETERMINATE"
    SQA_VIOLATED = "SQA_VIOLATED"
    DISABLED = "DISABLED"


class TestStatus(str, enum.Enum):
    """Diagnostic test status."""

    __test__ = False

    UNKNOWN = "UNKNOWN"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    STOPPED = "STOPPED"
    STARTED = "STARTED"
    FAILED = "FAILED"
    QUEUED = "QUEUED"
    INITIALIZING = "INITIALIZING"
    SKIPPED = "SKIPPED"


class Readiness(str, enum.Enum):
    """Data and voice readiness ratings."""

    NA = "NA"
    UNKNOWN = "UNKNOWN"
    NO_CONNECTIVITY = "NO_CONNECTIVITY"
    VERY_POOR = "VERY_POOR"
    POOR = "POOR"
    MARGINAL = "MARGINAL"
    GOOD = "GOOD"
    EXCELLENT = "EXCELLENT"


class TracerouteProtocol(str, enum.Enum):
    """Protocol a traceroute was run with."""

    ICMP = "icmp"
    TCP = "tcp"
    UDP = "udp"


class _AppNetaModel(BaseModel):
    """Immutable model accepting AppNeta's camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class TagObject(_AppNetaModel):
    """A tag attached to a network path.

    Attributes:
        id: Tag ID.
        orgid: Organization the tag belongs to.
        category: Tag category.
        value: Tag value.
    """

    id: int
    orgid: int
    category: str
    value: str


class EventBase(_AppNetaModel):
    """Properties shared by every AppNeta event.

    Attributes:
        description: Free-text description of the event.
        event_time: When the event occurred (UTC, decoded from UNIX seconds).
        sequencer_name: Name of the monitoring point in APM.
        sequencer_host: Hostname of the monitoring point.
        org_id: Organization the monitoring point belongs to.
        org_name: Name of that organization.
    """

    description: str = ""
    event_time: datetime
    sequencer_name: str = ""
    sequencer_host: str
    org_id: int | None = None
    org_name: str = ""

    @property
    def event_type(self) -> EventType:
        """The discriminant as an :class:`EventType` member."""
        return EventType(self.type)  # type: ignore[attr-defined]


class TestEvent(EventBase):
    """A diagnostic test completed or was halted."""

    __test__ = False

    type: Literal["TEST_EVENT"]
    target: str = ""
    test_id: int
    name: str = ""
    test_status: TestStatus
    data_readiness: Readiness = Readiness.UNKNOWN
    voice_readiness: Readiness = Readiness.UNKNOWN


class SequencerEvent(EventBase):
    """APM lost or re-established connectivity with a monitoring point."""

    type: Literal["SEQUENCER_EVENT"]
    sequencer_status: SequencerStatus


class ServiceQualityEvent(EventBase):
    """A network path alert condition was violated or cleared."""

    type: Literal["SQA_EVENT"]
    target: str = ""
    path_id: int
    path_name: str = ""
    path_service_quality: ServiceQuality = ServiceQuality.INDETERMINATE
    measured_param: str = ""
    measured_value: float
    deep_link: str = ""
    importance: int | None = Field(default=None, ge=1, le=10)
    tags: list[TagObject] = Field(default_factory=list)


class WebApplicationEvent(EventBase):
    """A web path alert condition was violated or cleared."""

    type: Literal["WEB_PATH_SQA_EVENT"]
    target: str = ""
    web_app_id: int
    web_path_id: int
    workflow_name: str = ""
    milestone_name: str
    measured_param: str
    measured_value: float
    deep_link: str = ""


class NetworkChangeEvent(EventBase):
    """The sequence of BGP autonomous systems between source and target changed.

    Attributes:
        old_asn_sequence: AS networks the traceroute took on the previous test.
        new_asn_sequence: AS networks the traceroute took on the test that
            triggered this event.
    """

    type: Literal["NETWORK_CHANGE_EVENT"]
    target: str
    path_id: int | None = None
    path_name: str = ""
    traceroute_protocol: TracerouteProtocol
    old_asn_sequence: str
    new_asn_sequence: str
    deep_link: str = ""
    tags: list[TagObject] = Field(default_factory=list)


Event = Annotated[
    Union[
        TestEvent,
        SequencerEvent,
        ServiceQualityEvent,
        WebApplicationEvent,
        NetworkChangeEvent,
    ],
    Field(discriminator="type"),
]

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(Event)

_KNOWN_TYPES = frozenset(t.value for t in EventType)


def decode_event(payload: Mapping[str, Any]) -> Event:
    """Validate a decoded JSON object into one of the five event models.

    Args:
        payload: The JSON object AppNeta posted.

    Returns:
        The matching event model.

    Raises:
        UnsupportedEventType: ``type`` is missing or not a known family.
        MalformedEventField: ``type`` is known but the fields don't validate.
    """
    if not isinstance(payload, Mapping):
        raise UnsupportedEventType(type(payload).__name__)
    event_type = payload.get("type")
    if not isinstance(event_type, str) or event_type not in _KNOWN_TYPES:
        raise UnsupportedEventType(event_type)
    try:
        return _EVENT_ADAPTER.validate_python(dict(payload))
    except ValidationError as exc:
        first = exc.errors()[0]
        # loc is (discriminator tag, field, ...) for tagged unions.
        loc = [str(part) for part in first["loc"][1:]] or ["<root>"]
        raise MalformedEventField(".".join(loc), first["msg"]) from exc
