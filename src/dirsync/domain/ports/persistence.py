"""Ports for persisting the local user directory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from dirsync.domain.model import LocalUser

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class LocalUserRepository(Repository[LocalUser], Protocol):
    """Persistence contract for local user records.

    Loaded records are tracked: mutating them in memory is enough, the owning
    unit of work flushes the changes on commit.
    """

    def get(self, user_id: str) -> LocalUser | None: ...

    def list_active(self) -> Sequence[LocalUser]: ...

    def list_deleted(self, user_ids: Collection[str]) -> Sequence[LocalUser]: ...
