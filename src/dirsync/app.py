"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from dirsync.adapters.identity_toolkit import IdentityToolkitSource
from dirsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyDirectoryUnitOfWork, startup
from dirsync.config import SyncConfig, get_sync_config
from dirsync.domain.ports.unit_of_work import DirectoryUnitOfWork
from dirsync.domain.reconciliation import ReconciliationResult, reconcile_directory
from dirsync.domain.scheduler import DirectorySyncWorker

if TYPE_CHECKING:
    from dirsync.domain.ports.fetching import DirectorySource

UnitOfWorkFactory = Callable[[], DirectoryUnitOfWork]


log = getLogger(__name__)


def build_directory_sync_worker(
    *,
    source: DirectorySource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    sync_config: SyncConfig | None = None,
) -> DirectorySyncWorker:
    """Wire the reconciliation cycle to its collaborators.

    The upstream source and the database are set up here, once; configuration or
    connection problems raise immediately instead of failing every cycle.
    """

    effective_config = sync_config or get_sync_config()
    effective_source = source or IdentityToolkitSource()
    if unit_of_work_factory is None:
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyDirectoryUnitOfWork

    cycle = partial(
        _run_cycle,
        source=effective_source,
        unit_of_work_factory=effective_uow,
        page_size=effective_config.page_size,
    )
    return DirectorySyncWorker(cycle, poll_interval=effective_config.poll_interval)


async def _run_cycle(
    stop_event: asyncio.Event,
    *,
    source: DirectorySource,
    unit_of_work_factory: UnitOfWorkFactory,
    page_size: int,
) -> ReconciliationResult:
    return await reconcile_directory(
        source=source,
        unit_of_work_factory=unit_of_work_factory,
        page_size=page_size,
        stop_event=stop_event,
    )


async def run_directory_sync(
    stop_event: asyncio.Event,
    *,
    worker: DirectorySyncWorker | None = None,
) -> DirectorySyncWorker:
    """Run the sync loop until ``stop_event`` is set; return the worker for inspection."""

    effective_worker = worker or build_directory_sync_worker()
    log.info(
        "Starting directory sync worker: interval=%s",
        effective_worker.poll_interval,
    )
    await effective_worker.start(stop_event)
    return effective_worker


def sync_directory_once(
    *,
    source: DirectorySource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    page_size: int | None = None,
) -> ReconciliationResult:
    """Run a single reconciliation pass synchronously."""

    effective_source = source or IdentityToolkitSource()
    if unit_of_work_factory is None:
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyDirectoryUnitOfWork
    effective_page_size = page_size or get_sync_config().page_size

    result = asyncio.run(
        reconcile_directory(
            source=effective_source,
            unit_of_work_factory=effective_uow,
            page_size=effective_page_size,
        )
    )

    log.info(
        f"Finished directory sync: fetched={result.fetched}, inserted={result.inserted}, "
        f"updated={result.updated}, restored={result.restored}, "
        f"soft_deleted={result.soft_deleted}"
    )
    return result
