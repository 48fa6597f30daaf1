"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import DirectoryPage, DirectorySource
from .persistence import LocalUserRepository, Repository
from .unit_of_work import (
    DirectoryRepositories,
    DirectoryUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DirectoryPage",
    "DirectoryRepositories",
    "DirectorySource",
    "DirectoryUnitOfWork",
    "LocalUserRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
