"""Tests for relay text formatting helpers."""

from __future__ import annotations

import pytest

from relay_common.errors import MalformedEventField
from relay_common.models import EventType, Readiness, ServiceQuality, TestStatus

from relay.formatting import (
    format_as_path,
    get_event_type,
    get_service_quality_status,
    make_title,
    md_bold,
    md_code,
    md_italic,
    md_label,
)


class TestMakeTitle:

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("HTTP_TOTAL_TIME", "HTTP Total Time"),
            ("DATA_LOSS", "Data Loss"),
            ("MOS_OF_THE_CALL", "MOS of the Call"),
            ("voip_rtt", "Voip RTT"),
            ("ipv6_qos", "IPv6 QoS"),
            ("THE_PATH", "The Path"),
            ("", ""),
        ],
    )
    def test_strings(self, source, expected) -> None:
        assert make_title(source) == expected

    def test_enum_members_use_their_value(self) -> None:
        assert make_title(TestStatus.FAILED) == "Failed"
        assert make_title(Readiness.VERY_POOR) == "Very Poor"

    @pytest.mark.parametrize("source", [None, 42, 3.5, ["A"]])
    def test_non_strings_yield_empty(self, source) -> None:
        assert make_title(source) == ""


class TestLabels:

    def test_event_type_labels(self) -> None:
        assert get_event_type(EventType.SQA_EVENT) == "Service Quality Event"
        assert get_event_type("WEB_PATH_SQA_EVENT") == "Web Application Event"

    def test_unknown_event_type(self) -> None:
        assert get_event_type("BGP_EVENT") == "Unknown Event Type"

    def test_service_quality_status(self) -> None:
        assert get_service_quality_status(ServiceQuality.DISABLED) == (
            "Monitoring is disabled on the path."
        )
        assert "violating one or more" in get_service_quality_status("SQA_VIOLATED")

    def test_unknown_service_quality_status(self) -> None:
        assert get_service_quality_status("SOMETHING") == "Unknown Target Status"


class TestFormatAsPath:

    def test_normalises_hops(self) -> None:
        assert format_as_path("AS7018 AS3356 AS15169") == "7018 3356 15169"

    def test_malformed_names_field(self) -> None:
        with pytest.raises(MalformedEventField) as info:
            format_as_path("private", field="oldAsnSequence")
        assert info.value.field == "oldAsnSequence"
        assert "private" in info.value.reason


class TestMarkdown:

    def test_wrappers(self) -> None:
        assert md_code("x") == "`x`"
        assert md_bold("x") == "*x*"
        assert md_italic("x") == "_x_"

    def test_label(self) -> None:
        assert md_label("Target", "example.com") == "*Target*:\nexample.com"
        assert md_label("New", "1 2", code=True) == "*New*:\n`1 2`"
