"""Repository backend selection and FastAPI dependency providers."""

from __future__ import annotations

import logging

from fastapi import Request

from taskboard.adapters.task_repository_memory import MemoryTaskRepository
from taskboard.adapters.task_repository_sql import SQLAlchemyTaskRepository
from taskboard.app.config import Settings
from taskboard.app.core.context import RequestContext
from taskboard.app.core.errors import NotInitializedError, StorageError
from taskboard.ports.task_repository import ITaskRepository

logger = logging.getLogger(__name__)


def create_task_repository(settings: Settings) -> ITaskRepository:
    """Return the task repository implementation.

    ``TASK_REPO_BACKEND=memory`` skips the database entirely. Otherwise the
    SQL backend is tried first; with ``TASK_REPO_BACKEND=sql`` a failure is
    raised, with the default selector it falls back to memory.
    """
    backend = (settings.task_repo_backend or "").strip().lower()
    logger.info("TaskRepository backend=%s", backend or "auto")

    if backend == "memory":
        return MemoryTaskRepository()

    try:
        return SQLAlchemyTaskRepository.connect(
            settings.database_url,
            connect_timeout=settings.db_connect_timeout,
        )
    except StorageError as exc:
        if backend == "sql":
            raise
        logger.warning(
            "Failed to connect to database, using in-memory storage instead: %s",
            exc.message,
            extra={"backend": MemoryTaskRepository.backend},
        )
        return MemoryTaskRepository()


def get_task_app(request: Request):
    task_app = getattr(request.app.state, "task_app", None)
    if task_app is None:
        raise NotInitializedError()
    return task_app


def get_request_context(request: Request) -> RequestContext:
    task_app = get_task_app(request)
    timeout = task_app.settings.request_timeout
    return RequestContext(timeout if timeout and timeout > 0 else None)
