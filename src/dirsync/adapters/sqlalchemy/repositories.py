"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from dirsync.adapters.sqlalchemy.mappings import local_user_table
from dirsync.domain.model import LocalUser

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from sqlalchemy.orm import Session

# Keeps ``IN (...)`` lists below SQLite's bound-parameter limit.
_IN_CHUNK_SIZE = 500


class SqlAlchemyLocalUserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: LocalUser) -> None:
        self.session.add(entity)

    def get(self, user_id: str) -> LocalUser | None:
        return self.session.get(LocalUser, user_id)

    def list_active(self) -> Sequence[LocalUser]:
        stmt = (
            select(LocalUser)
            .where(local_user_table.c.deleted.is_(False))
            .order_by(local_user_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

    def list_deleted(self, user_ids: Collection[str]) -> Sequence[LocalUser]:
        ids = sorted(set(user_ids))
        found: list[LocalUser] = []
        for start in range(0, len(ids), _IN_CHUNK_SIZE):
            chunk = ids[start : start + _IN_CHUNK_SIZE]
            stmt = (
                select(LocalUser)
                .where(local_user_table.c.deleted.is_(True))
                .where(local_user_table.c.id.in_(chunk))
            )
            found.extend(self.session.execute(stmt).scalars().all())
        return found


if TYPE_CHECKING:
    from dirsync.domain.ports.persistence import LocalUserRepository

    _session_stub = cast("Session", object())
    _repo_check: LocalUserRepository = SqlAlchemyLocalUserRepository(_session_stub)
