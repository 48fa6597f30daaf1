"""Ports for reading the upstream user directory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dirsync.domain.model import UpstreamUser


@dataclass(frozen=True, slots=True)
class DirectoryPage:
    """One page of the upstream listing. A missing token marks the last page."""

    users: tuple[UpstreamUser, ...] = ()
    next_page_token: str | None = None

    @property
    def is_last(self) -> bool:
        return not self.next_page_token


@runtime_checkable
class DirectorySource(Protocol):
    """Paginated, read-only enumeration of upstream identities."""

    async def list_page(
        self,
        *,
        page_token: str | None = None,
        page_size: int = 500,
    ) -> DirectoryPage: ...


__all__ = ["DirectoryPage", "DirectorySource"]
