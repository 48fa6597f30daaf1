"""Directory entities: the locally owned user projection and its upstream source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class UpstreamUser:
    """An identity as listed by the upstream provider. Never persisted as-is."""

    id: str
    display_name: str | None = None
    email: str | None = None
    disabled: bool | None = None
    created_at: datetime | None = None

    @property
    def preferred_display_name(self) -> str | None:
        """Display name, else email; blank values count as missing."""

        for candidate in (self.display_name, self.email):
            if candidate is not None and candidate.strip():
                return candidate
        return None


@dataclass(eq=False, kw_only=True)
class LocalUser:
    """Durable local copy of an upstream identity.

    ``display_name`` and ``disabled`` are the effective values the rest of the
    system reads and may edit. The ``last_synced_*`` fields hold the last upstream
    value the reconciler observed and are written by the reconciler only; a
    difference between the two marks a local override.
    """

    id: str
    display_name: str | None
    last_synced_display_name: str | None
    disabled: bool
    last_synced_disabled: bool
    deleted: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_upstream(cls, upstream: UpstreamUser, *, now: datetime) -> LocalUser:
        """Seed a record with identical effective and baseline values."""

        display_name = upstream.preferred_display_name
        disabled = upstream.disabled if upstream.disabled is not None else True
        return cls(
            id=upstream.id,
            display_name=display_name,
            last_synced_display_name=display_name,
            disabled=disabled,
            last_synced_disabled=disabled,
            created_at=upstream.created_at or now,
            updated_at=now,
        )

    @property
    def display_name_overridden(self) -> bool:
        return self.display_name != self.last_synced_display_name

    @property
    def disabled_overridden(self) -> bool:
        return self.disabled != self.last_synced_disabled

    def override_display_name(self, value: str) -> None:
        """Administrative edit; survives later upstream renames."""
        self.display_name = value

    def override_disabled(self, value: bool) -> None:  # noqa: FBT001
        self.disabled = value

    def soft_delete(self, *, now: datetime) -> None:
        self.deleted = True
        self.updated_at = now

    def restore(self, *, now: datetime) -> None:
        self.deleted = False
        self.updated_at = now
