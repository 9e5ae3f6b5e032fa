"""
Event fingerprinting for the relay's deduplication store.

A fingerprint is the subset of an event's fields that decides whether
two events of the same family are "the same alert":

============================  =================================================
Family                        Fields
============================  =================================================
``TEST_EVENT``                sequencerHost, testId, testStatus
``SEQUENCER_EVENT``           sequencerHost, sequencerStatus
``SQA_EVENT``                 pathId, measuredValue
``WEB_PATH_SQA_EVENT``        sequencerHost, webAppId, webPathId,
                              milestoneName, measuredParam, measuredValue
``NETWORK_CHANGE_EVENT``      protocol, source, target, path
============================  =================================================

Store keys are ``dedup:{event_type}:{query}`` where *query* is the
fingerprint URL-encoded with its keys sorted, so logically equal
fingerprints always produce the same key.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlencode

from relay_common.models import (
    Event,
    EventType,
    NetworkChangeEvent,
    SequencerEvent,
    ServiceQualityEvent,
    TestEvent,
    WebApplicationEvent,
)

from .formatting import format_as_path

Fingerprint = dict[str, str]

KEY_PREFIX = "dedup"


def _stringify(value: Any) -> str:
    return str(getattr(value, "value", value))


def _test_fields(event: TestEvent) -> dict[str, Any]:
    return {
        "sequencerHost": event.sequencer_host,
        "testId": event.test_id,
        "testStatus": event.test_status,
    }


def _sequencer_fields(event: SequencerEvent) -> dict[str, Any]:
    return {
        "sequencerHost": event.sequencer_host,
        "sequencerStatus": event.sequencer_status,
    }


def _service_quality_fields(event: ServiceQualityEvent) -> dict[str, Any]:
    return {
        "pathId": event.path_id,
        "measuredValue": event.measured_value,
    }


def _web_application_fields(event: WebApplicationEvent) -> dict[str, Any]:
    return {
        "sequencerHost": event.sequencer_host,
        "webAppId": event.web_app_id,
        "webPathId": event.web_path_id,
        "milestoneName": event.milestone_name,
        "measuredParam": event.measured_param,
        "measuredValue": event.measured_value,
    }


_FIELD_EXTRACTORS: dict[EventType, Callable[[Any], dict[str, Any]]] = {
    EventType.TEST_EVENT: _test_fields,
    EventType.SEQUENCER_EVENT: _sequencer_fields,
    EventType.SQA_EVENT: _service_quality_fields,
    EventType.WEB_PATH_SQA_EVENT: _web_application_fields,
}


def network_change_fingerprint(event: NetworkChangeEvent, *, use_old_path: bool = False) -> Fingerprint:
    """Fingerprint a path change using either its new or its old AS path.

    Raises:
        MalformedEventField: The chosen hop sequence has no numeric hops.
    """
    if use_old_path:
        path = format_as_path(event.old_asn_sequence, field="oldAsnSequence")
    else:
        path = format_as_path(event.new_asn_sequence, field="newAsnSequence")
    return {
        "protocol": _stringify(event.traceroute_protocol),
        "source": event.sequencer_host,
        "target": event.target,
        "path": path,
    }


def build_fingerprint(event: Event, *, use_old_path: bool = False) -> Fingerprint:
    """Return the identity-defining fields of *event* as strings.

    *use_old_path* only matters for network change events, which are
    fingerprinted on their new AS path unless it is set.
    """
    if isinstance(event, NetworkChangeEvent):
        return network_change_fingerprint(event, use_old_path=use_old_path)
    fields = _FIELD_EXTRACTORS[event.event_type](event)
    return {name: _stringify(value) for name, value in fields.items()}


def fingerprint_key(event_type: EventType, fingerprint: Mapping[str, str]) -> str:
    """Serialise *fingerprint* into its store key."""
    query = urlencode(sorted(fingerprint.items()))
    return f"{KEY_PREFIX}:{event_type.value}:{query}"
