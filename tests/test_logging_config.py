# tests/test_logging_config.py
"""Tests for logging setup and formatters."""

import json
import logging

from studydesk.logging_config import ConsoleFormatter, JSONFormatter, setup_logging


def _record(message: str, level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord("studydesk.sync", level, __file__, 10, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_data():
    record = _record("Sync pass complete", extra_data={"created": 3, "duration_ms": 1.5})

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["logger"] == "studydesk.sync"
    assert data["message"] == "Sync pass complete"
    assert data["created"] == 3


def test_console_formatter_without_colors():
    record = _record("Skipping unknown category folder: Misc")

    output = ConsoleFormatter(use_colors=False).format(record)

    assert output == "[INFO] studydesk.sync - Skipping unknown category folder: Misc"


def test_console_formatter_appends_duration():
    record = _record("Sync pass complete", extra_data={"duration_ms": 12.345})

    output = ConsoleFormatter(use_colors=False).format(record)

    assert output.endswith("(12.35ms)")


def test_setup_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "logs" / "studydesk.jsonl"

    setup_logging("DEBUG", json_file=str(log_file), enable_console_logging=False)
    logger = logging.getLogger("studydesk.test")
    logger.warning("Skipping unreadable folder %s", "GS1/Vision")
    for handler in logging.getLogger("studydesk").handlers:
        handler.flush()

    lines = log_file.read_text().strip().splitlines()
    assert json.loads(lines[-1])["message"] == "Skipping unreadable folder GS1/Vision"

    package_logger = logging.getLogger("studydesk")
    assert package_logger.level == logging.DEBUG
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()


def test_setup_logging_replaces_handlers():
    setup_logging("INFO")
    setup_logging("INFO")

    handlers = logging.getLogger("studydesk").handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, ConsoleFormatter)
    handlers.clear()
