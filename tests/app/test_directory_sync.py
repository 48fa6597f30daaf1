from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from dirsync import app as app_module
from dirsync.config import SyncConfig
from dirsync.domain.scheduler import WorkerState
from tests.helpers.directory import (
    FakeDirectorySource,
    FakeDirectoryUnitOfWork,
    FakeLocalUserRepository,
    SourceUnavailableError,
    make_local_user,
    make_upstream_user,
)


@pytest.fixture(autouse=True)
def _no_database_startup(monkeypatch: pytest.MonkeyPatch) -> list[bool]:
    calls: list[bool] = []
    monkeypatch.setattr(app_module, "startup", lambda: calls.append(True))
    return calls


def test_sync_directory_once_reconciles_with_given_collaborators() -> None:
    repository = FakeLocalUserRepository([make_local_user("gone", "Gone")])
    source = FakeDirectorySource([[make_upstream_user("u1", "Alice")]])

    result = app_module.sync_directory_once(
        source=source,
        unit_of_work_factory=lambda: FakeDirectoryUnitOfWork(repository),
        page_size=50,
    )

    assert result.completed is True
    assert result.inserted == 1
    assert result.soft_deleted == 1
    assert source.calls == [{"page_token": None, "page_size": 50}]
    assert repository.items["gone"].deleted is True


def test_sync_directory_once_uses_configured_page_size(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DIRSYNC_PAGE_SIZE", "20")
    source = FakeDirectorySource([[]])
    repository = FakeLocalUserRepository()

    app_module.sync_directory_once(
        source=source,
        unit_of_work_factory=lambda: FakeDirectoryUnitOfWork(repository),
    )

    assert source.calls[0]["page_size"] == 20


def test_sync_directory_once_starts_database_without_factory(
    monkeypatch: pytest.MonkeyPatch,
    _no_database_startup: list[bool],
) -> None:
    repository = FakeLocalUserRepository()
    monkeypatch.setattr(
        app_module,
        "SqlAlchemyDirectoryUnitOfWork",
        lambda: FakeDirectoryUnitOfWork(repository),
    )

    app_module.sync_directory_once(source=FakeDirectorySource([[make_upstream_user("u1")]]))

    assert _no_database_startup == [True]
    assert "u1" in repository.items


def test_sync_directory_once_propagates_source_errors() -> None:
    repository = FakeLocalUserRepository()
    source = FakeDirectorySource([[make_upstream_user("u1", "Alice")]], fail_on_page=1)

    with pytest.raises(SourceUnavailableError):
        app_module.sync_directory_once(
            source=source,
            unit_of_work_factory=lambda: FakeDirectoryUnitOfWork(repository),
        )


def test_built_worker_runs_cycles_with_configured_page_size() -> None:
    repository = FakeLocalUserRepository()
    source = FakeDirectorySource([[make_upstream_user("u1", "Alice")]])
    worker = app_module.build_directory_sync_worker(
        source=source,
        unit_of_work_factory=lambda: FakeDirectoryUnitOfWork(repository),
        sync_config=SyncConfig(poll_interval_minutes=5, page_size=10),
    )

    result = asyncio.run(worker.run_once())

    assert worker.poll_interval == timedelta(minutes=5)
    assert result is not None
    assert result.inserted == 1
    assert source.calls == [{"page_token": None, "page_size": 10}]
    assert worker.state is WorkerState.SUCCEEDED


def test_run_directory_sync_returns_after_stop() -> None:
    repository = FakeLocalUserRepository()
    source = FakeDirectorySource([[make_upstream_user("u1", "Alice")]])
    worker = app_module.build_directory_sync_worker(
        source=source,
        unit_of_work_factory=lambda: FakeDirectoryUnitOfWork(repository),
        sync_config=SyncConfig(poll_interval_minutes=60),
    )

    async def scenario() -> None:
        stop_event = asyncio.Event()
        runner = asyncio.create_task(app_module.run_directory_sync(stop_event, worker=worker))
        while worker.cycle_count == 0 or worker.state is not WorkerState.SLEEPING:
            await asyncio.sleep(0)
        stop_event.set()
        await asyncio.wait_for(runner, timeout=1)

    asyncio.run(scenario())

    assert worker.cycle_count == 1
    assert worker.failure_count == 0
    assert worker.state is WorkerState.CANCELLED
    assert "u1" in repository.items
