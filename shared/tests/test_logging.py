"""
Tests for structured logging.
"""

import json
import logging
from uuid import uuid4
from shared.logging import get_logger, set_job_id, reset_job_id, get_job_id, JSONFormatter


def test_get_logger_creates_logger():
    """Test that get_logger creates a logger instance."""
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "test_module"


def test_get_logger_does_not_duplicate_handlers():
    """Calling get_logger twice keeps the same handlers."""
    first = get_logger("test_module_handlers")
    handler_count = len(first.handlers)
    second = get_logger("test_module_handlers")
    assert second is first
    assert len(second.handlers) == handler_count


def test_logger_outputs_json_format(caplog):
    """Test that logger outputs JSON format with extra fields."""
    logger = get_logger("test_module")
    logger.setLevel(logging.INFO)

    logger.info("Synced clips", extra={"clip_count": 4, "shot_ids": ["a", "b"]})

    assert len(caplog.records) > 0
    log_data = json.loads(JSONFormatter().format(caplog.records[-1]))

    assert log_data["level"] == "INFO"
    assert log_data["message"] == "Synced clips"
    assert log_data["clip_count"] == 4
    assert log_data["shot_ids"] == "['a', 'b']"
    assert log_data["timestamp"].endswith("Z")


def test_logger_includes_job_id(caplog):
    """Test that logger includes job_id when set in context."""
    logger = get_logger("test_module")
    logger.setLevel(logging.INFO)

    job_id = uuid4()
    set_job_id(job_id)

    try:
        logger.info("Test message")
        log_data = json.loads(JSONFormatter().format(caplog.records[-1]))
        assert log_data["job_id"] == str(job_id)
        assert get_job_id() == job_id
    finally:
        set_job_id(None)


def test_reset_job_id_restores_previous():
    """Resetting with the token restores the outer job_id."""
    outer = uuid4()
    outer_token = set_job_id(outer)
    try:
        inner_token = set_job_id(uuid4())
        reset_job_id(inner_token)
        assert get_job_id() == outer
    finally:
        reset_job_id(outer_token)
    assert get_job_id() is None


def test_logger_includes_exception(caplog):
    """Exception text is included."""
    logger = get_logger("test_module")

    try:
        raise ValueError("bad beat list")
    except ValueError:
        logger.exception("Failed")

    log_data = json.loads(JSONFormatter().format(caplog.records[-1]))
    assert "bad beat list" in log_data["exception"]
