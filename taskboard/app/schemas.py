"""Task entity and request / filter value types shared by every layer."""

from datetime import datetime, timezone
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

SORT_TITLE = "title"
SORT_PRIORITY = "priority"
SORT_DUE_DATE = "due_date"
SORT_CREATED_AT = "created_at"
SORT_FIELDS = (SORT_TITLE, SORT_PRIORITY, SORT_DUE_DATE, SORT_CREATED_AT)

ORDER_ASC = "asc"
ORDER_DESC = "desc"


class Priority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


class Status(IntEnum):
    ACTIVE = 0
    COMPLETED = 1


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class Task(WireModel):
    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.LOW
    status: Status = Status.ACTIVE
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v):
        return "" if v is None else v


class CreateTaskRequest(WireModel):
    # title defaults to "" so that a missing title is reported by the
    # service as a validation failure rather than a decode failure
    title: str = ""
    description: str = ""
    priority: Priority = Priority.LOW
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class UpdateTaskRequest(WireModel):
    id: str = ""
    title: str = ""
    description: str = ""
    priority: Priority = Priority.LOW
    status: Status = Status.ACTIVE
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class FilterOptions(WireModel):
    status: Optional[Status] = None
    priority: Optional[Priority] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    sort_by: str = ""
    sort_order: str = ""

    @field_validator("date_from", "date_to")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @property
    def descending(self) -> bool:
        return self.sort_order == ORDER_DESC
