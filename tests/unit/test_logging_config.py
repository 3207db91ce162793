"""
Unit tests for structlog configuration.
"""

import json
import logging

import pytest
import structlog

from query_reexecution import logging_config
from query_reexecution.config import Settings
from query_reexecution.logging_config import (
    bind_query_context,
    clear_query_context,
    configure_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """configure_logging() is process-global; put everything back afterwards."""
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    clear_query_context()
    structlog.reset_defaults()


def _json_events(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def test_production_renders_json_with_query_context(capsys):
    configure_logging("INFO", "production")
    bind_query_context("q_1", attempt=2)

    structlog.get_logger("tests.logging").warning("Query attempt failed", error_type="DagRuntimeError")

    events = _json_events(capsys.readouterr().out)
    (event,) = [e for e in events if e["event"] == "Query attempt failed"]
    assert event["query_id"] == "q_1"
    assert event["attempt"] == 2
    assert event["app"] == "query-reexecution"
    assert event["level"] == "warning"
    assert event["error_type"] == "DagRuntimeError"


def test_defaults_come_from_settings(monkeypatch, capsys):
    monkeypatch.setattr(
        logging_config,
        "settings",
        Settings(_env_file=None, LOG_LEVEL="WARNING", ENVIRONMENT="production"),
    )

    configure_logging()
    structlog.get_logger("tests.logging").info("filtered out")
    structlog.get_logger("tests.logging").error("kept")

    assert logging.getLogger().level == logging.WARNING
    events = [e["event"] for e in _json_events(capsys.readouterr().out)]
    assert events == ["kept"]


def test_development_does_not_render_json(capsys):
    configure_logging("INFO", "development")

    structlog.get_logger("tests.logging").info("console line")

    output = capsys.readouterr().out
    assert "console line" in output
    assert _json_events(output) == []
