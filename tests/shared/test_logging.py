"""Tests for stdout logging configuration and context propagation."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

import pytest

from packages.recall_shared.config import LoggingSettings
from packages.recall_shared.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_context,
    get_logger,
    log_context,
)
from packages.recall_shared.logging.config import ContextFilter


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """Drop handlers installed by ``configure_logging`` and reset context."""
    root = logging.getLogger()
    level = root.level
    clear_context()
    yield
    clear_context()
    for handler in list(root.handlers):
        if any(isinstance(item, ContextFilter) for item in handler.filters):
            root.removeHandler(handler)
    root.setLevel(level)


def test_json_output_includes_core_and_context_fields() -> None:
    stream = io.StringIO()
    configure_logging(level="INFO", service="recall", environment="test", stream=stream)

    with log_context({"record_id": "01ABC"}):
        get_logger("recall.test").info("saved")

    payload = json.loads(stream.getvalue().strip())
    assert payload["message"] == "saved"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "recall.test"
    assert payload["service"] == "recall"
    assert payload["environment"] == "test"
    assert payload["record_id"] == "01ABC"
    assert "timestamp" in payload


def test_plain_output_appends_sorted_context() -> None:
    stream = io.StringIO()
    configure_logging(level="DEBUG", json_output=False, stream=stream)
    bind_context(b="2", a="1")

    get_logger("recall.test").debug("hello")

    assert stream.getvalue().rstrip().endswith("hello a=1 b=2")


def test_reconfiguring_replaces_existing_handler() -> None:
    """Repeated configuration never duplicates emission."""
    stream = io.StringIO()
    configure_logging(stream=stream)
    configure_logging(stream=stream)

    get_logger("recall.test").warning("once")

    assert stream.getvalue().count("once") == 1


def test_level_filters_lower_records() -> None:
    stream = io.StringIO()
    configure_logging(level="WARNING", stream=stream)

    get_logger("recall.test").info("hidden")

    assert stream.getvalue() == ""


def test_log_context_is_restored_after_block() -> None:
    bind_context(service="recall")

    with log_context({"operation": "save", "ignored": None}):
        assert get_context() == {"service": "recall", "operation": "save"}

    assert get_context() == {"service": "recall"}


def test_clear_context_removes_selected_keys() -> None:
    bind_context(a=1, b=2)

    clear_context("a")

    assert get_context() == {"b": "2"}


def test_logging_settings_defaults() -> None:
    settings = LoggingSettings()

    assert settings.level == "INFO"
    assert settings.json_output is True
    assert settings.service == "recall"
