"""Port interface for task business logic."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from taskboard.app.core.context import RequestContext
from taskboard.app.schemas import CreateTaskRequest, FilterOptions, Task, UpdateTaskRequest


@runtime_checkable
class ITaskService(Protocol):
    def create_task(self, ctx: RequestContext, request: CreateTaskRequest) -> Task:
        ...

    def get_task(self, ctx: RequestContext, task_id: str) -> Task:
        ...

    def get_tasks(self, ctx: RequestContext, filters: Optional[FilterOptions] = None) -> List[Task]:
        ...

    def update_task(self, ctx: RequestContext, request: UpdateTaskRequest) -> Task:
        ...

    def delete_task(self, ctx: RequestContext, task_id: str) -> None:
        ...

    def toggle_task_status(self, ctx: RequestContext, task_id: str) -> Task:
        ...
