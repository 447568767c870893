"""Tests for logging configuration helpers."""

import logging

from herald.infrastructure.logging_config import (
    HERALD_ENV,
    add_runtime_info,
    get_logger,
    resolve_level,
)


class TestRuntimeInfo:
    def test_tags_service_and_environment(self):
        event = add_runtime_info(None, "info", {"event": "robot_added"})

        assert event["service"] == "herald"
        assert event["environment"] == HERALD_ENV

    def test_keeps_explicit_values(self):
        event = add_runtime_info(None, "info", {"event": "x", "service": "plugin"})
        assert event["service"] == "plugin"


class TestLevels:
    def test_resolve_level(self):
        assert resolve_level("WARNING ") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR
        assert resolve_level("chatty") == logging.INFO

    def test_get_logger_applies_level(self):
        get_logger("herald", level="critical")
        assert logging.getLogger("herald").level == logging.CRITICAL

    def test_get_logger_without_level_leaves_stdlib_level(self):
        logging.getLogger("herald").setLevel(logging.WARNING)
        get_logger("herald")
        assert logging.getLogger("herald").level == logging.WARNING
