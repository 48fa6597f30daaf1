"""Background loop driving reconciliation passes at a fixed interval."""

from __future__ import annotations

import asyncio
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import timedelta

    from dirsync.domain.reconciliation import ReconciliationResult

type ReconciliationCycle = Callable[[asyncio.Event], Awaitable[ReconciliationResult]]

log = getLogger(__name__)


class WorkerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SLEEPING = "sleeping"
    CANCELLED = "cancelled"


class DirectorySyncWorker:
    """Runs a reconciliation cycle forever until cancelled.

    Failures never stop the loop: they are logged, counted and followed by the
    regular delay. ``failure_count`` is cumulative for the lifetime of the worker
    and is meant to be read by monitoring.
    """

    def __init__(
        self,
        cycle: ReconciliationCycle,
        *,
        poll_interval: timedelta,
    ) -> None:
        if poll_interval.total_seconds() <= 0:
            raise ValueError("Poll interval must be positive")
        self._cycle = cycle
        self._poll_interval = poll_interval
        self._state = WorkerState.IDLE
        self._failure_count = 0
        self._cycle_count = 0
        self._last_result: ReconciliationResult | None = None
        self._last_error: Exception | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def last_result(self) -> ReconciliationResult | None:
        return self._last_result

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def poll_interval(self) -> timedelta:
        return self._poll_interval

    def start(self, stop_event: asyncio.Event) -> asyncio.Task[None]:
        """Launch the loop as a detached task on the running event loop."""

        if self._task is not None and not self._task.done():
            raise RuntimeError("Directory sync worker is already running")
        log.info("Directory sync worker started")
        self._task = asyncio.create_task(self.run(stop_event), name="directory-sync")
        return self._task

    async def run(self, stop_event: asyncio.Event) -> None:
        log.info("Starting directory sync loop (interval=%s)", self._poll_interval)
        try:
            while not stop_event.is_set():
                await self.run_once(stop_event)
                if stop_event.is_set():
                    break
                self._state = WorkerState.SLEEPING
                await self._sleep(stop_event)
        finally:
            self._state = WorkerState.CANCELLED
            log.info("Directory sync loop stopped after %s cycles", self._cycle_count)

    async def run_once(
        self,
        stop_event: asyncio.Event | None = None,
    ) -> ReconciliationResult | None:
        self._state = WorkerState.RUNNING
        self._cycle_count += 1
        log.info("Running directory sync")
        try:
            result = await self._cycle(stop_event or asyncio.Event())
        except Exception as exc:
            self._failure_count += 1
            self._last_error = exc
            self._state = WorkerState.FAILED
            log.exception("Error syncing users (failure #%s)", self._failure_count)
            return None

        self._last_result = result
        self._state = WorkerState.SUCCEEDED
        log.info(
            "Directory sync finished: pages=%s, fetched=%s, inserted=%s, updated=%s, "
            "restored=%s, soft_deleted=%s, completed=%s",
            result.pages,
            result.fetched,
            result.inserted,
            result.updated,
            result.restored,
            result.soft_deleted,
            result.completed,
        )
        return result

    async def _sleep(self, stop_event: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self._poll_interval.total_seconds())
        except TimeoutError:
            return
