from __future__ import annotations

from datetime import UTC, datetime

from dirsync.domain.model import LocalUser
from tests.helpers.directory import make_local_user, make_upstream_user

NOW = datetime(2024, 6, 1, tzinfo=UTC)


def test_from_upstream_seeds_identical_baseline() -> None:
    created = datetime(2023, 5, 4, tzinfo=UTC)
    upstream = make_upstream_user("u1", None, email="a@example.com", created_at=created)

    user = LocalUser.from_upstream(upstream, now=NOW)

    assert user.display_name == user.last_synced_display_name == "a@example.com"
    assert user.created_at == created
    assert user.updated_at == NOW
    assert not user.display_name_overridden
    assert not user.disabled_overridden


def test_from_upstream_without_name_or_status() -> None:
    user = LocalUser.from_upstream(make_upstream_user("u1", disabled=None), now=NOW)

    assert user.display_name is None
    assert user.disabled is True
    assert user.last_synced_disabled is True
    assert user.created_at == NOW


def test_overrides_only_touch_effective_fields() -> None:
    user = make_local_user("u1", "Alice")

    user.override_display_name("Al")
    user.override_disabled(True)

    assert user.last_synced_display_name == "Alice"
    assert user.last_synced_disabled is False
    assert user.display_name_overridden
    assert user.disabled_overridden


def test_soft_delete_and_restore_bump_updated_at() -> None:
    user = make_local_user("u1", "Alice")

    user.soft_delete(now=NOW)
    assert user.deleted is True
    assert user.updated_at == NOW

    later = datetime(2024, 7, 1, tzinfo=UTC)
    user.restore(now=later)
    assert user.deleted is False
    assert user.updated_at == later
