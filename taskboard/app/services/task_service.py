"""Task business rules: validation, identity and timestamps, status toggle."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from taskboard.app.core.context import RequestContext
from taskboard.app.core.errors import TaskError, ValidationError
from taskboard.app.schemas import (
    CreateTaskRequest,
    FilterOptions,
    Status,
    Task,
    UpdateTaskRequest,
    ensure_utc,
    utcnow,
)
from taskboard.ports.task_repository import ITaskRepository
from taskboard.ports.task_service import ITaskService

logger = logging.getLogger(__name__)


def _require(value: str, field: str) -> None:
    if not value:
        raise ValidationError(f"{field} is required")


class TaskService(ITaskService):
    def __init__(self, repo: ITaskRepository, clock: Optional[Callable[[], datetime]] = None):
        self._repo = repo
        self._clock = clock or utcnow

    def _now(self) -> datetime:
        return ensure_utc(self._clock())

    def _touch(self, task: Task) -> None:
        # never move updated_at backwards, even if the clock does
        task.updated_at = max(self._now(), task.updated_at)

    def _load(self, ctx: RequestContext, task_id: str) -> Task:
        try:
            return self._repo.get_by_id(ctx, task_id)
        except TaskError as exc:
            raise exc.wrap("failed to get task") from exc

    def _save(self, ctx: RequestContext, task: Task) -> None:
        try:
            self._repo.update(ctx, task)
        except TaskError as exc:
            raise exc.wrap("failed to update task") from exc

    def create_task(self, ctx: RequestContext, request: CreateTaskRequest) -> Task:
        _require(request.title, "title")

        now = self._now()
        task = Task(
            id=str(uuid.uuid4()),
            title=request.title,
            description=request.description,
            priority=request.priority,
            status=Status.ACTIVE,
            due_date=request.due_date,
            created_at=now,
            updated_at=now,
        )

        try:
            self._repo.create(ctx, task)
        except TaskError as exc:
            raise exc.wrap("failed to create task") from exc

        logger.info("task created", extra={"op": "create", "task": task.id})
        return task

    def get_task(self, ctx: RequestContext, task_id: str) -> Task:
        _require(task_id, "id")
        return self._load(ctx, task_id)

    def get_tasks(self, ctx: RequestContext, filters: Optional[FilterOptions] = None) -> List[Task]:
        try:
            return self._repo.get_all(ctx, filters)
        except TaskError as exc:
            raise exc.wrap("failed to list tasks") from exc

    def update_task(self, ctx: RequestContext, request: UpdateTaskRequest) -> Task:
        _require(request.id, "id")
        _require(request.title, "title")

        task = self._load(ctx, request.id)
        task.title = request.title
        task.description = request.description
        task.priority = request.priority
        task.status = request.status
        task.due_date = request.due_date
        self._touch(task)

        self._save(ctx, task)
        logger.info("task updated", extra={"op": "update", "task": task.id})
        return task

    def delete_task(self, ctx: RequestContext, task_id: str) -> None:
        _require(task_id, "id")

        # explicit existence check so a missing id is reported as "failed to get task"
        self._load(ctx, task_id)
        try:
            self._repo.delete(ctx, task_id)
        except TaskError as exc:
            raise exc.wrap("failed to delete task") from exc
        logger.info("task deleted", extra={"op": "delete", "task": task_id})

    def toggle_task_status(self, ctx: RequestContext, task_id: str) -> Task:
        _require(task_id, "id")

        task = self._load(ctx, task_id)
        if task.status == Status.ACTIVE:
            task.status = Status.COMPLETED
        else:
            task.status = Status.ACTIVE
        self._touch(task)

        self._save(ctx, task)
        logger.info("task toggled status=%s", task.status.name, extra={"op": "toggle", "task": task.id})
        return task
