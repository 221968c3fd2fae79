"""Port interface for task persistence (repository boundary)."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from taskboard.app.core.context import RequestContext
from taskboard.app.schemas import FilterOptions, Task


@runtime_checkable
class ITaskRepository(Protocol):
    """Task repository abstraction shared by the memory and SQL backends.

    Every method returns copies; mutating a returned task never changes
    stored state. Missing ids raise ``NotFoundError``.
    """

    backend: str

    def create(self, ctx: RequestContext, task: Task) -> None:
        """Persist a new task. Raises ``AlreadyExistsError`` on a reused id."""

    def get_by_id(self, ctx: RequestContext, task_id: str) -> Task:
        """Return a task by id."""

    def get_all(self, ctx: RequestContext, filters: Optional[FilterOptions] = None) -> List[Task]:
        """Return tasks matching ``filters`` in the filter's sort order."""

    def update(self, ctx: RequestContext, task: Task) -> None:
        """Replace the stored record for ``task.id``."""

    def delete(self, ctx: RequestContext, task_id: str) -> None:
        """Remove a task by id."""

    def count(self, ctx: RequestContext) -> int:
        """Return the number of stored tasks."""

    def close(self) -> None:
        """Release held resources. Safe to call more than once."""
