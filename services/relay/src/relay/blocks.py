"""
Slack Block Kit rendering for AppNeta events.

Builds the ``{"text": ..., "blocks": [...]}`` message posted to Slack for
each event family.  Every message shares the same frame: header with
the event description, italic event-type label, context line with the
AppNeta logo, a field section with a status image, and a bold UTC
timestamp footer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timezone
from typing import Any

from relay_common.errors import UnsupportedEventType
from relay_common.models import (
    Event,
    NetworkChangeEvent,
    SequencerEvent,
    SequencerStatus,
    ServiceQualityEvent,
    TestEvent,
    TestStatus,
    WebApplicationEvent,
)

from .formatting import (
    format_as_path,
    get_event_type,
    get_service_quality_status,
    make_title,
    md_bold,
    md_italic,
    md_label,
)

LOGO_URL = "https://www.appneta.com/images/graphics/appneta_branding/android-icon-192x192.png"
WARN = (
    "https://emojipedia-us.s3.dualstack.us-west-1.amazonaws.com/thumbs/240/apple/237/"
    "warning-sign_26a0.png"
)
OK = (
    "https://emojipedia-us.s3.dualstack.us-west-1.amazonaws.com/thumbs/240/apple/237/"
    "white-heavy-check-mark_2705.png"
)

_CLEAR_RE = re.compile(r".*\sclear|clears|cleared.*", re.IGNORECASE)

# Slack rejects header blocks whose text exceeds this.
HEADER_MAX_CHARS = 150

SlackMessage = dict[str, Any]


@dataclass(frozen=True)
class _Common:
    time: str
    event_type: str
    detail: str
    clear: bool


def _parse_common(event: Event) -> _Common:
    """Extract the properties every message shows."""
    ts = event.event_time
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return _Common(
        time=ts.strftime("%Y %m %d %H:%M:%S UTC"),
        event_type=get_event_type(event.event_type),
        detail=event.description,
        clear=bool(_CLEAR_RE.search(event.description)),
    )


def _header_text(text: str) -> str:
    if len(text) <= HEADER_MAX_CHARS:
        return text
    return text[: HEADER_MAX_CHARS - 1] + "\u2026"


def _frame_head(common: _Common, context_name: str) -> list[dict[str, Any]]:
    header = _header_text(common.detail or common.event_type)
    return [
        {"type": "header", "text": {"type": "plain_text", "text": header}},
        {"type": "section", "text": {"type": "mrkdwn", "text": md_italic(common.event_type)}},
        {
            "type": "context",
            "elements": [
                {"type": "image", "image_url": LOGO_URL, "alt_text": "AppNeta"},
                {"type": "mrkdwn", "text": context_name or "-"},
            ],
        },
        {"type": "divider"},
    ]


def _fields_section(fields: list[str], status_image: str) -> dict[str, Any]:
    return {
        "type": "section",
        "fields": [{"type": "mrkdwn", "text": text} for text in fields],
        "accessory": {"type": "image", "image_url": status_image, "alt_text": "Status"},
    }


def _deep_link(url: str) -> list[dict[str, Any]]:
    return [
        {"type": "divider"},
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f":arrow_upper_right: *<{url}|Open in AppNeta Portal>*",
            },
        },
    ]


def _footer(common: _Common) -> dict[str, Any]:
    return {"type": "context", "elements": [{"type": "mrkdwn", "text": md_bold(common.time)}]}


def _cleared(common: _Common, text: str) -> str:
    return f"CLEARED {text}" if common.clear else text


def _network_change_block(event: NetworkChangeEvent) -> SlackMessage:
    common = _parse_common(event)
    fields = [
        md_label("Measurement", "AS Path"),
        md_label("Protocol", event.traceroute_protocol.value.upper()),
        md_label("Source", event.sequencer_host),
        md_label("Target", event.target),
        md_label("Previous", format_as_path(event.old_asn_sequence, "oldAsnSequence"), code=True),
        md_label("New", format_as_path(event.new_asn_sequence, "newAsnSequence"), code=True),
    ]
    return {
        "text": _cleared(common, f"Path change between {event.sequencer_host} and {event.target}"),
        "blocks": [
            *_frame_head(common, event.path_name),
            _fields_section(fields, OK if common.clear else WARN),
            *_deep_link(event.deep_link),
            _footer(common),
        ],
    }


def _service_quality_block(event: ServiceQualityEvent) -> SlackMessage:
    common = _parse_common(event)
    measurement = make_title(event.measured_param)
    fields = [
        md_label("Measurement", measurement),
        md_label("Value", f"{event.measured_value:g}%"),
        md_label("Source", event.sequencer_host),
        md_label("Target", event.target),
    ]
    status = {
        "type": "section",
        "text": {
            "type": "mrkdwn",
            "text": md_label("Status", get_service_quality_status(event.path_service_quality)),
        },
    }
    return {
        "text": _cleared(common, f"{measurement} to {event.target}"),
        "blocks": [
            *_frame_head(common, event.path_name),
            _fields_section(fields, OK if common.clear else WARN),
            status,
            *_deep_link(event.deep_link),
            _footer(common),
        ],
    }


def _sequencer_block(event: SequencerEvent) -> SlackMessage:
    common = _parse_common(event)
    status = make_title(event.sequencer_status)
    if event.sequencer_status is SequencerStatus.UNAVAILABLE:
        image = WARN
    elif event.sequencer_status is SequencerStatus.AVAILABLE:
        image = OK
    else:
        image = OK if common.clear else WARN
    fields = [
        md_label("Monitoring Point", event.sequencer_host),
        md_label("Status", status),
    ]
    return {
        "text": _cleared(common, f"{event.sequencer_name} is {status}"),
        "blocks": [
            *_frame_head(common, event.sequencer_name),
            _fields_section(fields, image),
            _footer(common),
        ],
    }


def _test_block(event: TestEvent) -> SlackMessage:
    common = _parse_common(event)
    status = make_title(event.test_status)
    if event.test_status is TestStatus.FAILED:
        image = WARN
    elif event.test_status is TestStatus.COMPLETED:
        image = OK
    else:
        image = OK if common.clear else WARN
    fields = [
        md_label("Data Readiness", make_title(event.data_readiness)),
        md_label("Voice Readiness", make_title(event.voice_readiness)),
        md_label("Test Status", status),
        md_label("Source", event.sequencer_host),
        md_label("Target", event.target),
    ]
    return {
        "text": _cleared(common, f"{event.name} is {status}"),
        "blocks": [
            *_frame_head(common, event.name),
            _fields_section(fields, image),
            _footer(common),
        ],
    }


def _web_application_block(event: WebApplicationEvent) -> SlackMessage:
    common = _parse_common(event)
    measurement = make_title(event.measured_param)
    fields = [
        md_label("Measurement", measurement),
        md_label("Value", f"{event.measured_value:g}", code=True),
        md_label("Source", event.sequencer_host),
        md_label("Target", event.target),
    ]
    return {
        "text": _cleared(common, f"{measurement} to {event.target} is {event.measured_value:g}"),
        "blocks": [
            *_frame_head(common, event.workflow_name),
            _fields_section(fields, OK if common.clear else WARN),
            *_deep_link(event.deep_link),
            _footer(common),
        ],
    }


def get_block(event: Event) -> SlackMessage:
    """Render *event* as a Slack message.

    Raises:
        UnsupportedEventType: *event* is not one of the five families.
    """
    if isinstance(event, TestEvent):
        return _test_block(event)
    if isinstance(event, SequencerEvent):
        return _sequencer_block(event)
    if isinstance(event, ServiceQualityEvent):
        return _service_quality_block(event)
    if isinstance(event, NetworkChangeEvent):
        return _network_change_block(event)
    if isinstance(event, WebApplicationEvent):
        return _web_application_block(event)
    raise UnsupportedEventType(getattr(event, "type", type(event).__name__))
