"""
Text formatting helpers for the relay.

Human-readable labels for AppNeta shorthand, Slack ``mrkdwn`` helpers,
and AS-path normalisation shared by the fingerprint builder and the
Slack message renderer.
"""

from __future__ import annotations

import re

from relay_common.errors import MalformedEventField
from relay_common.models import EventType, ServiceQuality

_HOP_RE = re.compile(r"\d+")

# Terms that keep their own capitalisation.
_SPECIAL_TERMS = {
    term.lower(): term
    for term in (
        "MOS", "RTT", "QoS", "HTTP", "DHCP", "SQA", "NA",
        "IP", "IPv4", "IPv6", "BGP", "ASN",
    )
}

# Minor words left lowercase unless they start the title.
_MINOR_WORDS = frozenset(
    {"a", "an", "and", "as", "at", "but", "by", "for", "in", "is",
     "nor", "of", "on", "or", "the", "to", "via", "vs"}
)

_EVENT_TYPE_LABELS: dict[str, str] = {
    EventType.SQA_EVENT.value: "Service Quality Event",
    EventType.SEQUENCER_EVENT.value: "Sequencer Event",
    EventType.NETWORK_CHANGE_EVENT.value: "Network Change Event",
    EventType.TEST_EVENT.value: "Test Event",
    EventType.WEB_PATH_SQA_EVENT.value: "Web Application Event",
}

_SERVICE_QUALITY_LABELS: dict[str, str] = {
    ServiceQuality.SQA_NOT_VIOLATED.value: (
        "The target is responding to test packets, and the path is not "
        "violating any alert thresholds."
    ),
    ServiceQuality.INDETERMINATE.value: "The path status is unknown.",
    ServiceQuality.SQA_VIOLATED.value: (
        "The target is responding to test packets, but the path is "
        "violating one or more alert thresholds."
    ),
    ServiceQuality.DISABLED.value: "Monitoring is disabled on the path.",
}


def _value(source: object) -> str:
    return str(getattr(source, "value", source))


def make_title(source: object) -> str:
    """Title-case an AppNeta shorthand string.

    Underscores become spaces and known acronyms keep their canonical
    capitalisation, e.g. ``"HTTP_TOTAL_TIME"`` -> ``"HTTP Total Time"``.
    Non-string input yields ``""``.
    """
    source = getattr(source, "value", source)
    if not isinstance(source, str):
        return ""
    words = source.replace("_", " ").split()
    titled: list[str] = []
    for index, word in enumerate(words):
        lowered = word.lower()
        if lowered in _SPECIAL_TERMS:
            titled.append(_SPECIAL_TERMS[lowered])
        elif index > 0 and lowered in _MINOR_WORDS:
            titled.append(lowered)
        else:
            titled.append(lowered[:1].upper() + lowered[1:])
    return " ".join(titled)


def get_event_type(event_type: object) -> str:
    """Map an event discriminant to a readable label."""
    label = _EVENT_TYPE_LABELS.get(_value(event_type), "Unknown Event Type")
    return make_title(label)


def get_service_quality_status(status: object) -> str:
    """Map a service-quality status to AppNeta's documented description."""
    return _SERVICE_QUALITY_LABELS.get(_value(status), "Unknown Target Status")


def format_as_path(sequence: str, field: str = "asn_sequence") -> str:
    """Normalise an AS-path string to its numeric hops joined by spaces.

    ``"AS100 AS200"``, ``"100,200"`` and ``"[100] -> [200]"`` all become
    ``"100 200"``.

    Raises:
        MalformedEventField: *sequence* contains no numeric hop.
    """
    hops = _HOP_RE.findall(sequence or "")
    if not hops:
        raise MalformedEventField(field, f"no numeric hops in {sequence!r}")
    return " ".join(hops)


# ── mrkdwn ──


def md_code(source: object) -> str:
    return f"`{source}`"


def md_bold(source: object) -> str:
    return f"*{source}*"


def md_italic(source: object) -> str:
    return f"_{source}_"


def md_label(label: object, value: object, code: bool = False) -> str:
    """Format a bold label above its (optionally code-formatted) value."""
    if code:
        value = md_code(value)
    return f"{md_bold(label)}:\n{value}"
