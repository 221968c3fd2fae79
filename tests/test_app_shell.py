from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from taskboard.app.config import Settings
from taskboard.app.core.errors import NotInitializedError, StorageError
from taskboard.app.shell import TaskApp


def _settings(**overrides) -> Settings:
    return Settings(**overrides)


def test_operations_before_startup_raise_not_initialized() -> None:
    task_app = TaskApp(_settings(task_repo_backend="memory"))
    with pytest.raises(NotInitializedError, match="database not initialized"):
        task_app.get_tasks("")
    with pytest.raises(NotInitializedError):
        task_app.delete_task("x")


def test_unreachable_database_falls_back_to_memory(tmp_path: Path, caplog) -> None:
    url = f"sqlite:///{tmp_path / 'no-such-dir' / 'tasks.db'}"
    task_app = TaskApp(_settings(database_url=url))

    with caplog.at_level(logging.WARNING):
        task_app.startup()

    assert task_app.backend == "memory"
    assert any(
        r.levelno == logging.WARNING and "in-memory storage" in r.getMessage() for r in caplog.records
    )
    created = json.loads(task_app.create_task(json.dumps({"title": "still works"})))
    assert json.loads(task_app.get_task(created["id"]))["title"] == "still works"
    task_app.shutdown()


def test_forced_sql_backend_does_not_fall_back(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'no-such-dir' / 'tasks.db'}"
    task_app = TaskApp(_settings(database_url=url, task_repo_backend="sql"))
    with pytest.raises(StorageError):
        task_app.startup()


def test_sql_backend_persists_across_restarts(tmp_path: Path) -> None:
    settings = _settings(database_url=f"sqlite:///{tmp_path / 'tasks.db'}")

    first = TaskApp(settings)
    first.startup()
    assert first.backend == "sql"
    created = json.loads(first.create_task(json.dumps({"title": "durable", "priority": 1})))
    first.shutdown()
    first.shutdown()

    second = TaskApp(settings)
    second.startup()
    try:
        assert json.loads(second.get_task(created["id"]))["title"] == "durable"
        assert second.count_tasks() == 1
        assert [t["id"] for t in json.loads(second.get_tasks_by_priority(1))] == [created["id"]]
    finally:
        second.shutdown()


def test_shutdown_disables_boundary() -> None:
    task_app = TaskApp(_settings(task_repo_backend="memory"))
    task_app.startup()
    task_app.shutdown()
    with pytest.raises(NotInitializedError):
        task_app.get_overdue_tasks()
