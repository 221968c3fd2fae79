from __future__ import annotations

import logging

from taskboard.app.config import Settings
from taskboard.app.core.logging_config import LOG_FORMAT, TaskRecordFormatter, configure_logging, resolve_level


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("taskboard.test", logging.INFO, __file__, 1, "task saved", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_fills_missing_extras() -> None:
    line = TaskRecordFormatter(LOG_FORMAT).format(_record())
    assert "op=- task=- backend=- task saved" in line


def test_formatter_keeps_given_extras() -> None:
    line = TaskRecordFormatter(LOG_FORMAT).format(_record(op="create", task="abc", backend="memory"))
    assert "op=create task=abc backend=memory" in line


def test_level_comes_from_settings() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        assert configure_logging(Settings(app_log_level="debug")) == logging.DEBUG
        assert root.level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

        assert configure_logging(Settings(app_log_level="warning")) == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        root.setLevel(previous)


def test_unknown_level_name_means_info() -> None:
    assert resolve_level("chatty") == logging.INFO
