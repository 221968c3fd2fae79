"""JSON text boundary: decode requests, call the use case, encode results."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from taskboard.app.core.context import RequestContext
from taskboard.app.core.errors import DecodeError
from taskboard.app.schemas import (
    CreateTaskRequest,
    FilterOptions,
    Priority,
    Status,
    Task,
    UpdateTaskRequest,
)
from taskboard.app.services.task_usecase import TaskUseCase

ModelT = TypeVar("ModelT", bound=BaseModel)

_TASK_LIST = TypeAdapter(List[Task])
_DATETIME = TypeAdapter(datetime)


def _decode(model: Type[ModelT], payload: str, what: str) -> ModelT:
    try:
        return model.model_validate_json(payload or "{}")
    except PydanticValidationError as exc:
        raise DecodeError(f"invalid {what} format: {exc}", cause=exc) from exc


def _decode_enum(enum_type, value: int, what: str):
    try:
        return enum_type(int(value))
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"invalid {what}: {value!r}", cause=exc) from exc


def _decode_datetime(value: str, what: str) -> datetime:
    try:
        return _DATETIME.validate_python(value)
    except PydanticValidationError as exc:
        raise DecodeError(f"invalid {what}: {value!r}", cause=exc) from exc


def encode_task(task: Task) -> str:
    return task.to_json()


def encode_tasks(tasks: List[Task]) -> str:
    return _TASK_LIST.dump_json(tasks, by_alias=True, exclude_none=True).decode("utf-8")


class TaskHandler:
    def __init__(self, use_case: TaskUseCase):
        self._use_case = use_case

    def create_task(self, ctx: RequestContext, request_json: str) -> str:
        request = _decode(CreateTaskRequest, request_json, "request")
        return encode_task(self._use_case.create_task(ctx, request))

    def get_task(self, ctx: RequestContext, task_id: str) -> str:
        return encode_task(self._use_case.get_task(ctx, task_id))

    def get_tasks(self, ctx: RequestContext, filter_json: str = "") -> str:
        """An empty ``filter_json`` means no filter at all (newest first)."""

        filters: Optional[FilterOptions] = None
        if filter_json:
            filters = _decode(FilterOptions, filter_json, "filter")
        return encode_tasks(self._use_case.get_tasks(ctx, filters))

    def update_task(self, ctx: RequestContext, request_json: str) -> str:
        request = _decode(UpdateTaskRequest, request_json, "request")
        return encode_task(self._use_case.update_task(ctx, request))

    def delete_task(self, ctx: RequestContext, task_id: str) -> None:
        self._use_case.delete_task(ctx, task_id)

    def toggle_task_status(self, ctx: RequestContext, task_id: str) -> str:
        return encode_task(self._use_case.toggle_task_status(ctx, task_id))

    def get_tasks_by_status(self, ctx: RequestContext, status: int) -> str:
        value = _decode_enum(Status, status, "status")
        return encode_tasks(self._use_case.get_tasks_by_status(ctx, value))

    def get_tasks_by_priority(self, ctx: RequestContext, priority: int) -> str:
        value = _decode_enum(Priority, priority, "priority")
        return encode_tasks(self._use_case.get_tasks_by_priority(ctx, value))

    def get_tasks_by_date_range(self, ctx: RequestContext, date_from: str, date_to: str) -> str:
        start = _decode_datetime(date_from, "dateFrom")
        end = _decode_datetime(date_to, "dateTo")
        return encode_tasks(self._use_case.get_tasks_by_date_range(ctx, start, end))

    def get_overdue_tasks(self, ctx: RequestContext) -> str:
        return encode_tasks(self._use_case.get_overdue_tasks(ctx))
