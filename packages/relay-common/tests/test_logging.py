"""
Tests for relay-common structured logging setup.
"""

from __future__ import annotations

import json

import structlog

from relay_common.logging import configure_logging


class TestConfigureLogging:

    def teardown_method(self) -> None:
        structlog.reset_defaults()

    def test_production_renders_json(self, capsys) -> None:
        configure_logging("INFO", "production")
        structlog.get_logger().info("event_forwarded", event_type="SQA_EVENT")
        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "event_forwarded"
        assert record["event_type"] == "SQA_EVENT"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filters_lower_levels(self, capsys) -> None:
        configure_logging("WARNING", "production")
        structlog.get_logger().info("hidden")
        assert "hidden" not in capsys.readouterr().out

    def test_unknown_level_falls_back_to_info(self, capsys) -> None:
        configure_logging("CHATTY", "production")
        structlog.get_logger().info("shown")
        assert "shown" in capsys.readouterr().out

    def test_development_renders_console(self, capsys) -> None:
        configure_logging("DEBUG", "development")
        structlog.get_logger().debug("dev_line")
        out = capsys.readouterr().out
        assert "dev_line" in out
        assert not out.lstrip().startswith("{")
