"""Synchronisation defaults for the directory worker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import float_env_var, int_env_var
from .errors import ConfigurationError

DEFAULT_POLL_INTERVAL_MINUTES = 1.0
DEFAULT_PAGE_SIZE = 500
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True, slots=True)
class SyncConfig:
    poll_interval_minutes: float = DEFAULT_POLL_INTERVAL_MINUTES
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.poll_interval_minutes <= 0:
            raise ConfigurationError("Poll interval must be a positive number of minutes")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ConfigurationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def poll_interval(self) -> timedelta:
        return timedelta(minutes=self.poll_interval_minutes)


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        poll_interval_minutes=float_env_var(
            "DIRSYNC_POLL_INTERVAL_MINUTES", DEFAULT_POLL_INTERVAL_MINUTES
        ),
        page_size=int_env_var("DIRSYNC_PAGE_SIZE", DEFAULT_PAGE_SIZE),
    )
