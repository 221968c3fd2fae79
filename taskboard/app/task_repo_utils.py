"""Filter matching and ordering rules shared by the task repositories."""

from __future__ import annotations

from typing import Iterable, List, Optional

from taskboard.app.schemas import (
    SORT_CREATED_AT,
    SORT_DUE_DATE,
    SORT_FIELDS,
    SORT_PRIORITY,
    SORT_TITLE,
    FilterOptions,
    Task,
)


def resolve_sort(filters: Optional[FilterOptions]) -> tuple[str, bool]:
    """Return ``(sort_field, descending)`` for a filter.

    No ``sortBy`` at all means newest first. An explicit but unknown field
    sorts by creation time in the requested direction.
    """

    if filters is None or not filters.sort_by:
        return SORT_CREATED_AT, True
    field = filters.sort_by if filters.sort_by in SORT_FIELDS else SORT_CREATED_AT
    return field, filters.descending


def matches_filter(task: Task, filters: Optional[FilterOptions]) -> bool:
    if filters is None:
        return True
    if filters.status is not None and task.status != filters.status:
        return False
    if filters.priority is not None and task.priority != filters.priority:
        return False
    if filters.date_from is not None and task.created_at < filters.date_from:
        return False
    if filters.date_to is not None and task.created_at > filters.date_to:
        return False
    return True


def sort_tasks(tasks: Iterable[Task], filters: Optional[FilterOptions]) -> List[Task]:
    field, descending = resolve_sort(filters)
    items = list(tasks)

    if field == SORT_DUE_DATE:
        # undated tasks always go last, whatever the direction
        dated = [t for t in items if t.due_date is not None]
        undated = [t for t in items if t.due_date is None]
        dated.sort(key=lambda t: t.due_date, reverse=descending)
        return dated + undated

    if field == SORT_TITLE:
        key = lambda t: t.title  # noqa: E731
    elif field == SORT_PRIORITY:
        key = lambda t: int(t.priority)  # noqa: E731
    else:
        key = lambda t: t.created_at  # noqa: E731
    return sorted(items, key=key, reverse=descending)


def filter_and_sort(tasks: Iterable[Task], filters: Optional[FilterOptions]) -> List[Task]:
    return sort_tasks((t for t in tasks if matches_filter(t, filters)), filters)
