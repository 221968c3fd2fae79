"""Application shell: wires repository -> service -> use case -> handler."""

from __future__ import annotations

import logging
from typing import Optional

from taskboard.app.config import Settings, get_settings
from taskboard.app.core.context import RequestContext
from taskboard.app.core.errors import NotInitializedError
from taskboard.app.deps import create_task_repository
from taskboard.app.handlers.task_handler import TaskHandler
from taskboard.app.services.task_service import TaskService
from taskboard.app.services.task_usecase import TaskUseCase
from taskboard.ports.task_repository import ITaskRepository

logger = logging.getLogger(__name__)


class TaskApp:
    """Owns the repository for the process lifetime and exposes the boundary.

    Every operation takes and returns JSON text, exactly like ``TaskHandler``;
    ``ctx`` defaults to the context given at startup.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.repository: Optional[ITaskRepository] = None
        self.handler: Optional[TaskHandler] = None
        self._ctx = RequestContext.background()

    def startup(self, ctx: Optional[RequestContext] = None) -> None:
        if ctx is not None:
            self._ctx = ctx

        self.repository = create_task_repository(self.settings)
        service = TaskService(self.repository)
        use_case = TaskUseCase(service)
        self.handler = TaskHandler(use_case)
        logger.info("TaskApp started", extra={"backend": self.repository.backend})

    def shutdown(self) -> None:
        if self.repository is not None:
            self.repository.close()
        self.handler = None
        logger.info("TaskApp stopped")

    @property
    def backend(self) -> Optional[str]:
        return self.repository.backend if self.repository is not None else None

    def _ready(self, ctx: Optional[RequestContext]) -> tuple[TaskHandler, RequestContext]:
        if self.handler is None:
            raise NotInitializedError()
        return self.handler, ctx or self._ctx

    def create_task(self, request_json: str, ctx: Optional[RequestContext] = None) -> str:
        handler, ctx = self._ready(ctx)
        return handler.create_task(ctx, request_json)

    def get_task(self, task_id: str, ctx: Optional[RequestContext] = None) -> str:
        handler, ctx = self._ready(ctx)
        return handler.get_task(ctx, task_id)

    def get_tasks(self, filter_json: str = "", ctx: Optional[RequestContext] = None) -> str:
        handler, ctx = self._ready(ctx)
        return handler.get_tasks(ctx, filter_json)

    def update_task(self, request_json: str, ctx: Optional[RequestContext] = None) -> str:
        handler, ctx = self._ready(ctx)
        return handler.update_task(ctx, request_json)

    def delete_task(self, task_id: str, ctx: Optional[RequestContext] = None) -> None:
        handler, ctx = self._ready(ctx)
        handler.delete_task(ctx, task_id)

    def toggle_task_status(self, task_id: str, ctx: Optional[RequestContext] = None) -> str:
        handler, ctx = self._ready(ctx)
        return handler.toggle_task_status(ctx, task_id)

    def get_tasks_by_status(self, status: int, ctx: Optional[RequestContext] = None) -> str:
        handler, ctx = self._ready(ctx)
        return handler.get_tasks_by_status(ctx, status)

    def get_tasks_by_priority(self, priority: int, ctx: Optional[RequestContext] = None) -> str:
        handler, ctx = self._ready(ctx)
        return handler.get_tasks_by_priority(ctx, priority)

    def get_tasks_by_date_range(
        self, date_from: str, date_to: str, ctx: Optional[RequestContext] = None
    ) -> str:
        handler, ctx = self._ready(ctx)
        return handler.get_tasks_by_date_range(ctx, date_from, date_to)

    def get_overdue_tasks(self, ctx: Optional[RequestContext] = None) -> str:
        handler, ctx = self._ready(ctx)
        return handler.get_overdue_tasks(ctx)

    def count_tasks(self, ctx: Optional[RequestContext] = None) -> int:
        self._ready(ctx)
        return self.repository.count(ctx or self._ctx)
