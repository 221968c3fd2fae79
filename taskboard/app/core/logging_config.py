"""Process-wide logging setup driven by ``Settings``."""

import logging
from typing import Optional

from taskboard.app.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s op=%(op)s task=%(task)s backend=%(backend)s %(message)s"

# structured extras the repositories and service attach to their records
TASK_EXTRAS = ("op", "task", "backend")

_handler: Optional[logging.Handler] = None


class TaskRecordFormatter(logging.Formatter):
    """Formatter that tolerates records logged without the task extras."""

    def format(self, record: logging.LogRecord) -> str:
        for key in TASK_EXTRAS:
            if not hasattr(record, key):
                setattr(record, key, "-")
        return super().format(record)


def resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Optional[Settings] = None) -> int:
    """Install the task formatter once and apply the configured level.

    Safe to call for every app instance; only the level is re-applied.
    Returns the numeric level in effect.
    """
    global _handler

    settings = settings or get_settings()
    level = resolve_level(settings.app_log_level)

    root = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(TaskRecordFormatter(LOG_FORMAT))
        root.addHandler(_handler)
    root.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)

    # statement echo is only useful when debugging queries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if level <= logging.DEBUG else logging.WARNING)
    return level
