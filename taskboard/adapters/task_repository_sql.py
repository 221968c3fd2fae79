"""SQLAlchemy-backed task repository."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.app.core.context import RequestContext
from taskboard.app.core.errors import AlreadyExistsError, NotFoundError, StorageError
from taskboard.app.db import create_db_engine, ensure_schema, make_session_factory, ping
from taskboard.app.models import TaskRecord
from taskboard.app.schemas import (
    SORT_CREATED_AT,
    SORT_DUE_DATE,
    SORT_PRIORITY,
    SORT_TITLE,
    FilterOptions,
    Priority,
    Status,
    Task,
    ensure_utc,
)
from taskboard.app.task_repo_utils import resolve_sort
from taskboard.ports.task_repository import ITaskRepository

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SORT_TITLE: TaskRecord.title,
    SORT_PRIORITY: TaskRecord.priority,
    SORT_DUE_DATE: TaskRecord.due_date,
    SORT_CREATED_AT: TaskRecord.created_at,
}


def _record_to_task(record: TaskRecord) -> Task:
    try:
        return Task(
            id=record.id,
            title=record.title,
            description=record.description or "",
            priority=Priority(record.priority),
            status=Status(record.status),
            due_date=record.due_date,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
    except ValueError as exc:
        raise StorageError(f"failed to scan task {record.id}: {exc}", operation="scan", cause=exc) from exc


def _task_values(task: Task) -> Dict[str, Any]:
    return {
        "title": task.title,
        "description": task.description,
        "priority": int(task.priority),
        "status": int(task.status),
        "due_date": ensure_utc(task.due_date),
        "updated_at": ensure_utc(task.updated_at),
    }


class SQLAlchemyTaskRepository(ITaskRepository):
    """Task repository over a single ``tasks`` table.

    Each call opens its own session and issues one statement, so there is no
    atomicity across calls; row locking is left to the database.
    """

    backend = "sql"

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = make_session_factory(engine)
        self._closed = False

    @classmethod
    def connect(cls, database_url: str, *, connect_timeout: int = 5) -> "SQLAlchemyTaskRepository":
        """Open the database, check it answers and create the schema."""

        try:
            engine = create_db_engine(database_url, connect_timeout=connect_timeout)
        except (SQLAlchemyError, ImportError, ValueError) as exc:
            raise StorageError(f"failed to open database: {exc}", operation="open", cause=exc) from exc

        try:
            ping(engine)
        except SQLAlchemyError as exc:
            engine.dispose()
            raise StorageError(f"failed to ping database: {exc}", operation="ping", cause=exc) from exc

        try:
            ensure_schema(engine)
        except SQLAlchemyError as exc:
            engine.dispose()
            raise StorageError(f"failed to create table: {exc}", operation="schema", cause=exc) from exc

        repo = cls(engine)
        try:
            total = repo.count(RequestContext.background())
        except StorageError:
            repo.close()
            raise
        logger.info(
            "TaskRepository ready url=%s total=%s",
            engine.url.render_as_string(hide_password=True),
            total,
            extra={"backend": cls.backend},
        )
        return repo

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        if self._closed:
            raise StorageError(f"{operation}: repository is closed", operation=operation)
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(f"{operation} failed: {exc}", operation=operation, cause=exc) from exc
        finally:
            session.close()

    def create(self, ctx: RequestContext, task: Task) -> None:
        ctx.check()
        with self._session("create") as session:
            record = TaskRecord(
                id=task.id,
                created_at=ensure_utc(task.created_at),
                **_task_values(task),
            )
            session.add(record)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise AlreadyExistsError(f"task {task.id} already exists", cause=exc) from exc
        logger.debug("task inserted", extra={"op": "create", "task": task.id, "backend": self.backend})
        ctx.check()

    def get_by_id(self, ctx: RequestContext, task_id: str) -> Task:
        ctx.check()
        with self._session("get") as session:
            record = session.query(TaskRecord).filter(TaskRecord.id == task_id).first()
            if record is None:
                raise NotFoundError()
            task = _record_to_task(record)
        ctx.check()
        return task

    def get_all(self, ctx: RequestContext, filters: Optional[FilterOptions] = None) -> List[Task]:
        ctx.check()
        with self._session("list") as session:
            query = session.query(TaskRecord)
            if filters is not None:
                if filters.status is not None:
                    query = query.filter(TaskRecord.status == int(filters.status))
                if filters.priority is not None:
                    query = query.filter(TaskRecord.priority == int(filters.priority))
                if filters.date_from is not None:
                    query = query.filter(TaskRecord.created_at >= ensure_utc(filters.date_from))
                if filters.date_to is not None:
                    query = query.filter(TaskRecord.created_at <= ensure_utc(filters.date_to))

            field, descending = resolve_sort(filters)
            column = _SORT_COLUMNS[field]
            ordering = column.desc() if descending else column.asc()
            if field == SORT_DUE_DATE:
                # NULLS LAST in both directions, portable across dialects
                query = query.order_by(TaskRecord.due_date.is_(None), ordering)
            else:
                query = query.order_by(ordering)

            tasks = [_record_to_task(record) for record in query.all()]
        ctx.check()
        return tasks

    def update(self, ctx: RequestContext, task: Task) -> None:
        ctx.check()
        with self._session("update") as session:
            matched = (
                session.query(TaskRecord)
                .filter(TaskRecord.id == task.id)
                .update(_task_values(task), synchronize_session=False)
            )
            session.commit()
        if not matched:
            raise NotFoundError()
        logger.debug("task updated", extra={"op": "update", "task": task.id, "backend": self.backend})
        ctx.check()

    def delete(self, ctx: RequestContext, task_id: str) -> None:
        ctx.check()
        with self._session("delete") as session:
            matched = (
                session.query(TaskRecord)
                .filter(TaskRecord.id == task_id)
                .delete(synchronize_session=False)
            )
            session.commit()
        if not matched:
            raise NotFoundError()
        logger.debug("task deleted", extra={"op": "delete", "task": task_id, "backend": self.backend})
        ctx.check()

    def count(self, ctx: RequestContext) -> int:
        ctx.check()
        with self._session("count") as session:
            return session.query(TaskRecord).count()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._engine.dispose()
