"""Application use cases: pass-through task operations plus filter presets."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from taskboard.app.core.context import RequestContext
from taskboard.app.schemas import (
    ORDER_ASC,
    ORDER_DESC,
    SORT_CREATED_AT,
    SORT_DUE_DATE,
    CreateTaskRequest,
    FilterOptions,
    Priority,
    Status,
    Task,
    UpdateTaskRequest,
    ensure_utc,
    utcnow,
)
from taskboard.ports.task_service import ITaskService


class TaskUseCase:
    def __init__(self, service: ITaskService, clock: Optional[Callable[[], datetime]] = None):
        self._service = service
        self._clock = clock or utcnow

    def create_task(self, ctx: RequestContext, request: CreateTaskRequest) -> Task:
        return self._service.create_task(ctx, request)

    def get_task(self, ctx: RequestContext, task_id: str) -> Task:
        return self._service.get_task(ctx, task_id)

    def get_tasks(self, ctx: RequestContext, filters: Optional[FilterOptions] = None) -> List[Task]:
        return self._service.get_tasks(ctx, filters)

    def update_task(self, ctx: RequestContext, request: UpdateTaskRequest) -> Task:
        return self._service.update_task(ctx, request)

    def delete_task(self, ctx: RequestContext, task_id: str) -> None:
        self._service.delete_task(ctx, task_id)

    def toggle_task_status(self, ctx: RequestContext, task_id: str) -> Task:
        return self._service.toggle_task_status(ctx, task_id)

    def get_tasks_by_status(self, ctx: RequestContext, status: Status) -> List[Task]:
        filters = FilterOptions(status=status, sort_by=SORT_CREATED_AT, sort_order=ORDER_DESC)
        return self._service.get_tasks(ctx, filters)

    def get_tasks_by_priority(self, ctx: RequestContext, priority: Priority) -> List[Task]:
        filters = FilterOptions(priority=priority, sort_by=SORT_CREATED_AT, sort_order=ORDER_DESC)
        return self._service.get_tasks(ctx, filters)

    def get_tasks_by_date_range(self, ctx: RequestContext, date_from: datetime, date_to: datetime) -> List[Task]:
        filters = FilterOptions(
            date_from=ensure_utc(date_from),
            date_to=ensure_utc(date_to),
            sort_by=SORT_CREATED_AT,
            sort_order=ORDER_DESC,
        )
        return self._service.get_tasks(ctx, filters)

    def get_overdue_tasks(self, ctx: RequestContext) -> List[Task]:
        """Active tasks created up to now, earliest due date first.

        The cutoff applies to ``created_at``, not ``due_date``.
        """

        filters = FilterOptions(
            status=Status.ACTIVE,
            date_to=ensure_utc(self._clock()),
            sort_by=SORT_DUE_DATE,
            sort_order=ORDER_ASC,
        )
        return self._service.get_tasks(ctx, filters)
