"""One full reconciliation pass of the local directory against upstream."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from dirsync.domain.merge import apply_upstream
from dirsync.domain.model import LocalUser

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable

    from dirsync.domain.model import UpstreamUser
    from dirsync.domain.ports.fetching import DirectoryPage, DirectorySource
    from dirsync.domain.ports.persistence import LocalUserRepository
    from dirsync.domain.ports.unit_of_work import DirectoryUnitOfWork

DEFAULT_PAGE_SIZE = 500

log = getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ReconciliationResult:
    """Counters describing a single reconciliation pass."""

    pages: int = 0
    fetched: int = 0
    inserted: int = 0
    updated: int = 0
    restored: int = 0
    soft_deleted: int = 0
    completed: bool = False


async def reconcile_directory(
    *,
    source: DirectorySource,
    unit_of_work_factory: Callable[[], DirectoryUnitOfWork],
    page_size: int = DEFAULT_PAGE_SIZE,
    now_provider: Callable[[], datetime] = utcnow,
    stop_event: asyncio.Event | None = None,
) -> ReconciliationResult:
    """Reconcile every local user with the full upstream listing.

    Each page is merged and committed before the next one is requested, so a
    failure part-way through keeps the pages already written. Users missing
    upstream are soft-deleted only once the listing has been read to the end;
    an aborted or stopped pass never deletes anyone.
    """

    result = ReconciliationResult()

    with unit_of_work_factory() as uow:
        repository = uow.repositories.users
        baseline = {user.id: user for user in repository.list_active()}
        known = dict(baseline)
        seen: set[str] = set()
        log.info("Loaded %s active local users", len(baseline))

        page_token: str | None = None
        while True:
            page = await source.list_page(page_token=page_token, page_size=page_size)
            result.pages += 1
            result.fetched += len(page.users)
            _apply_page(page, repository, known, seen, result, now=now_provider())
            uow.commit()
            log.debug("Persisted page %s (%s users)", result.pages, len(page.users))

            if page.is_last:
                break
            if stop_event is not None and stop_event.is_set():
                log.info("Stop requested after page %s; skipping deletions", result.pages)
                return result
            page_token = page.next_page_token

        now = now_provider()
        for user_id, user in baseline.items():
            if user_id in seen:
                continue
            log.info("Soft-deleting user %s", user_id)
            user.soft_delete(now=now)
            result.soft_deleted += 1
        uow.commit()

    result.completed = True
    return result


def _apply_page(
    page: DirectoryPage,
    repository: LocalUserRepository,
    known: dict[str, LocalUser],
    seen: set[str],
    result: ReconciliationResult,
    *,
    now: datetime,
) -> None:
    unmatched: dict[str, UpstreamUser] = {}
    for upstream in page.users:
        seen.add(upstream.id)
        local = known.get(upstream.id)
        if local is None:
            unmatched[upstream.id] = upstream
            continue
        if apply_upstream(local, upstream, now=now):
            result.updated += 1

    if not unmatched:
        return

    for restored in repository.list_deleted(unmatched.keys()):
        upstream = unmatched.pop(restored.id)
        log.info("User %s reappeared upstream; restoring", restored.id)
        restored.restore(now=now)
        apply_upstream(restored, upstream, now=now)
        known[restored.id] = restored
        result.restored += 1

    for upstream in unmatched.values():
        log.info("Adding user %s", upstream.id)
        user = LocalUser.from_upstream(upstream, now=now)
        repository.add(user)
        known[user.id] = user
        result.inserted += 1
