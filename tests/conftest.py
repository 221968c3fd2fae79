from __future__ import annotations

import pytest

from taskboard.app.core.context import RequestContext
from taskboard.app.services.task_service import TaskService
from taskboard.app.services.task_usecase import TaskUseCase
from tests.fakes import FakeClock, SpyRepository


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def repo() -> SpyRepository:
    return SpyRepository()


@pytest.fixture()
def ctx() -> RequestContext:
    return RequestContext.background()


@pytest.fixture()
def service(repo: SpyRepository, clock: FakeClock) -> TaskService:
    return TaskService(repo, clock=clock)


@pytest.fixture()
def use_case(service: TaskService, clock: FakeClock) -> TaskUseCase:
    return TaskUseCase(service, clock=clock)
