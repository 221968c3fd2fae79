from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from taskboard.adapters.task_repository_memory import MemoryTaskRepository
from taskboard.adapters.task_repository_sql import SQLAlchemyTaskRepository
from taskboard.app.core.context import RequestContext
from taskboard.app.core.errors import AlreadyExistsError, CancelledError, NotFoundError
from taskboard.app.schemas import FilterOptions, Priority, Status, Task

BASE = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _task(
    task_id: str,
    *,
    title: str = "task",
    minutes: int = 0,
    priority: Priority = Priority.LOW,
    status: Status = Status.ACTIVE,
    due_in_days: int | None = None,
) -> Task:
    created = BASE + timedelta(minutes=minutes)
    due = BASE + timedelta(days=due_in_days) if due_in_days is not None else None
    return Task(
        id=task_id,
        title=title,
        description=f"about {title}",
        priority=priority,
        status=status,
        due_date=due,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    if request.param == "memory":
        repository = MemoryTaskRepository()
    else:
        repository = SQLAlchemyTaskRepository.connect("sqlite://")
    yield repository
    repository.close()


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext.background()


def _ids(tasks: list[Task]) -> list[str]:
    return [t.id for t in tasks]


def test_create_then_get_round_trips_all_fields(repo, ctx) -> None:
    task = _task("a", title="Buy milk", priority=Priority.HIGH, due_in_days=2)
    repo.create(ctx, task)

    loaded = repo.get_by_id(ctx, "a")
    assert loaded.model_dump() == task.model_dump()
    assert loaded.due_date.tzinfo is not None
    assert repo.count(ctx) == 1


def test_get_missing_raises_not_found(repo, ctx) -> None:
    with pytest.raises(NotFoundError):
        repo.get_by_id(ctx, "missing")


def test_create_rejects_reused_id(repo, ctx) -> None:
    repo.create(ctx, _task("a", title="first"))
    with pytest.raises(AlreadyExistsError):
        repo.create(ctx, _task("a", title="second"))
    assert repo.get_by_id(ctx, "a").title == "first"


def test_returned_tasks_are_copies(repo, ctx) -> None:
    original = _task("a", title="original")
    repo.create(ctx, original)
    original.title = "mutated after create"

    loaded = repo.get_by_id(ctx, "a")
    loaded.title = "mutated after get"
    listed = repo.get_all(ctx)
    listed[0].status = Status.COMPLETED

    again = repo.get_by_id(ctx, "a")
    assert again.title == "original"
    assert again.status == Status.ACTIVE


def test_get_all_without_filter_is_newest_first(repo, ctx) -> None:
    for i, task_id in enumerate(["old", "mid", "new"]):
        repo.create(ctx, _task(task_id, minutes=i))

    assert _ids(repo.get_all(ctx)) == ["new", "mid", "old"]
    assert _ids(repo.get_all(ctx, FilterOptions())) == ["new", "mid", "old"]


def test_status_and_priority_filters_combine(repo, ctx) -> None:
    repo.create(ctx, _task("a", minutes=0, status=Status.COMPLETED, priority=Priority.HIGH))
    repo.create(ctx, _task("b", minutes=1, status=Status.COMPLETED, priority=Priority.LOW))
    repo.create(ctx, _task("c", minutes=2, status=Status.ACTIVE, priority=Priority.HIGH))

    completed = repo.get_all(ctx, FilterOptions(status=Status.COMPLETED))
    assert sorted(_ids(completed)) == ["a", "b"]

    both = repo.get_all(ctx, FilterOptions(status=Status.COMPLETED, priority=Priority.HIGH))
    assert _ids(both) == ["a"]


def test_date_range_is_inclusive_on_created_at(repo, ctx) -> None:
    for i in range(5):
        repo.create(ctx, _task(f"t{i}", minutes=i * 10))

    filters = FilterOptions(
        date_from=BASE + timedelta(minutes=10),
        date_to=BASE + timedelta(minutes=30),
    )
    assert _ids(repo.get_all(ctx, filters)) == ["t3", "t2", "t1"]


def test_sort_by_priority_desc(repo, ctx) -> None:
    repo.create(ctx, _task("low", minutes=0, priority=Priority.LOW))
    repo.create(ctx, _task("high", minutes=1, priority=Priority.HIGH))
    repo.create(ctx, _task("medium", minutes=2, priority=Priority.MEDIUM))

    tasks = repo.get_all(ctx, FilterOptions(sort_by="priority", sort_order="desc"))
    assert _ids(tasks) == ["high", "medium", "low"]


def test_sort_by_title_both_directions(repo, ctx) -> None:
    for i, title in enumerate(["banana", "apple", "cherry"]):
        repo.create(ctx, _task(title, title=title, minutes=i))

    assert _ids(repo.get_all(ctx, FilterOptions(sort_by="title"))) == ["apple", "banana", "cherry"]
    assert _ids(repo.get_all(ctx, FilterOptions(sort_by="title", sort_order="desc"))) == [
        "cherry",
        "banana",
        "apple",
    ]


@pytest.mark.parametrize(
    "order,expected",
    [
        ("asc", ["soon", "later", "none-1", "none-2"]),
        ("desc", ["later", "soon", "none-1", "none-2"]),
    ],
)
def test_sort_by_due_date_puts_undated_last(repo, ctx, order, expected) -> None:
    repo.create(ctx, _task("none-1", minutes=0))
    repo.create(ctx, _task("later", minutes=1, due_in_days=5))
    repo.create(ctx, _task("soon", minutes=2, due_in_days=1))
    repo.create(ctx, _task("none-2", minutes=3))

    tasks = repo.get_all(ctx, FilterOptions(sort_by="due_date", sort_order=order))
    assert _ids(tasks)[:2] == expected[:2]
    assert sorted(_ids(tasks)[2:]) == expected[2:]


def test_explicit_sort_field_without_order_is_ascending(repo, ctx) -> None:
    for i, task_id in enumerate(["first", "second", "third"]):
        repo.create(ctx, _task(task_id, minutes=i))

    assert _ids(repo.get_all(ctx, FilterOptions(sort_by="created_at"))) == ["first", "second", "third"]
    assert _ids(repo.get_all(ctx, FilterOptions(sort_by="created_at", sort_order="sideways"))) == [
        "first",
        "second",
        "third",
    ]


def test_update_replaces_record(repo, ctx) -> None:
    repo.create(ctx, _task("a", title="before"))
    changed = repo.get_by_id(ctx, "a")
    changed.title = "after"
    changed.status = Status.COMPLETED
    changed.due_date = None
    changed.updated_at = BASE + timedelta(hours=1)
    repo.update(ctx, changed)

    loaded = repo.get_by_id(ctx, "a")
    assert loaded.title == "after"
    assert loaded.status == Status.COMPLETED
    assert loaded.due_date is None
    assert loaded.created_at == BASE
    assert loaded.updated_at == BASE + timedelta(hours=1)


def test_update_missing_raises_not_found(repo, ctx) -> None:
    with pytest.raises(NotFoundError):
        repo.update(ctx, _task("ghost"))
    assert repo.count(ctx) == 0


def test_delete_twice_raises_not_found_second_time(repo, ctx) -> None:
    repo.create(ctx, _task("a"))
    repo.delete(ctx, "a")
    with pytest.raises(NotFoundError):
        repo.delete(ctx, "a")
    with pytest.raises(NotFoundError):
        repo.get_by_id(ctx, "a")


def test_cancelled_context_aborts_before_storage(repo) -> None:
    ctx = RequestContext.background()
    ctx.cancel()
    with pytest.raises(CancelledError):
        repo.create(ctx, _task("a"))
    with pytest.raises(CancelledError):
        repo.get_all(ctx)
    assert repo.count(RequestContext.background()) == 0


def test_close_is_idempotent(repo) -> None:
    repo.close()
    repo.close()
