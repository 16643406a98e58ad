"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from vidtube.core.logger import JSONFormatter, configure_logging, ensure_request_id


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    # Act
    configure_logging("DEBUG")

    # Assert
    assert logging.getLogger().level == logging.DEBUG
    configure_logging("WARNING")


def test_json_formatter_includes_extras() -> None:
    record = logging.LogRecord("vidtube", logging.INFO, __file__, 1, "auth.login", None, None)
    record.request_id = "rid-1"
    record.event = "auth.login"
    record.user_id = 3

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "auth.login"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "rid-1"
    assert payload["event"] == "auth.login"
    assert payload["user_id"] == 3
    assert "elapsed_ms" not in payload


def test_request_id_outside_request_is_none(app) -> None:
    assert ensure_request_id() is None


def test_request_id_header_is_echoed(client) -> None:
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"
