"""In-memory task repository (fallback when the database is unreachable)."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from taskboard.app.core.context import RequestContext
from taskboard.app.core.errors import AlreadyExistsError, NotFoundError
from taskboard.app.schemas import FilterOptions, Task
from taskboard.app.task_repo_utils import filter_and_sort
from taskboard.ports.task_repository import ITaskRepository

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many readers or one writer. Writers wait for active readers to drain."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class MemoryTaskRepository(ITaskRepository):
    """Task repository holding copies of tasks in a dict keyed by id."""

    backend = "memory"

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}
        self._lock = ReadWriteLock()

    def create(self, ctx: RequestContext, task: Task) -> None:
        ctx.check()
        with self._lock.write():
            if task.id in self._tasks:
                raise AlreadyExistsError(f"task {task.id} already exists")
            self._tasks[task.id] = task.model_copy()
        logger.debug("task stored", extra={"op": "create", "task": task.id, "backend": self.backend})
        ctx.check()

    def get_by_id(self, ctx: RequestContext, task_id: str) -> Task:
        ctx.check()
        with self._lock.read():
            task = self._tasks.get(task_id)
            if task is None:
                raise NotFoundError()
            found = task.model_copy()
        ctx.check()
        return found

    def get_all(self, ctx: RequestContext, filters: Optional[FilterOptions] = None) -> List[Task]:
        ctx.check()
        with self._lock.read():
            snapshot = [task.model_copy() for task in self._tasks.values()]
        ctx.check()
        return filter_and_sort(snapshot, filters)

    def update(self, ctx: RequestContext, task: Task) -> None:
        ctx.check()
        with self._lock.write():
            if task.id not in self._tasks:
                raise NotFoundError()
            self._tasks[task.id] = task.model_copy()
        logger.debug("task replaced", extra={"op": "update", "task": task.id, "backend": self.backend})
        ctx.check()

    def delete(self, ctx: RequestContext, task_id: str) -> None:
        ctx.check()
        with self._lock.write():
            if task_id not in self._tasks:
                raise NotFoundError()
            del self._tasks[task_id]
        logger.debug("task removed", extra={"op": "delete", "task": task_id, "backend": self.backend})
        ctx.check()

    def count(self, ctx: RequestContext) -> int:
        ctx.check()
        with self._lock.read():
            return len(self._tasks)

    def close(self) -> None:
        return
