"""SQLAlchemy adapter package for dirsync."""

from __future__ import annotations

from .mappings import create_all_tables, local_user_table, mapper_registry, start_mappers
from .repositories import SqlAlchemyLocalUserRepository
from .unit_of_work import (
    SqlAlchemyDirectoryUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyDirectoryUnitOfWork",
    "SqlAlchemyLocalUserRepository",
    "StartupError",
    "create_all_tables",
    "local_user_table",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
