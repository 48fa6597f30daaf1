from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from dirsync.domain.merge import (
    UnresolvableFieldError,
    apply_upstream,
    merge_disabled,
    merge_display_name,
    merge_field,
    resolve_display_name,
)
from tests.helpers.directory import SEEDED_AT, make_local_user, make_upstream_user

NOW = datetime(2024, 6, 1, 12, tzinfo=UTC)


@pytest.mark.parametrize(
    ("effective", "last_synced"),
    [("Alice", "Alice"), ("Al", "Alice"), (None, None)],
)
def test_merge_field_is_noop_when_upstream_unchanged(
    effective: str | None, last_synced: str | None
) -> None:
    result = merge_field(effective, last_synced, last_synced)

    assert result.upstream_changed is False
    assert result.mutated is False
    assert result.effective == effective
    assert result.last_synced == last_synced


@pytest.mark.parametrize(
    ("value", "upstream"),
    [("Alice", "Alicia"), (None, "Bob"), (False, True), (True, False)],
)
def test_merge_field_propagates_clean_upstream_change(
    value: str | bool | None, upstream: str | bool
) -> None:
    result = merge_field(value, value, upstream)

    assert result.propagated is True
    assert result.effective == upstream
    assert result.last_synced == upstream


@pytest.mark.parametrize(
    ("effective", "last_synced", "upstream"),
    [("Al", "Alice", "Alicia"), (True, False, True), ("Local", "Old", "Older")],
)
def test_merge_field_preserves_local_override_but_advances_baseline(
    effective: str | bool, last_synced: str | bool, upstream: str | bool
) -> None:
    result = merge_field(effective, last_synced, upstream)

    assert result.locally_modified is True
    assert result.propagated is False
    assert result.effective == effective
    assert result.last_synced == upstream


def test_resolve_display_name_falls_back_to_email() -> None:
    upstream = make_upstream_user("u1", None, email="alice@example.com")

    assert resolve_display_name(upstream) == "alice@example.com"


def test_resolve_display_name_rejects_missing_values() -> None:
    upstream = make_upstream_user("u1", "  ", email=None)

    with pytest.raises(UnresolvableFieldError):
        resolve_display_name(upstream)


def test_merge_display_name_keeps_override_and_tracks_upstream() -> None:
    user = make_local_user("u1", "Al", synced_name="Alice")

    changed = merge_display_name(user, make_upstream_user("u1", "Alicia"), now=NOW)

    assert changed is True
    assert user.display_name == "Al"
    assert user.last_synced_display_name == "Alicia"
    assert user.updated_at == NOW


def test_merge_display_name_uses_email_when_upstream_name_removed() -> None:
    user = make_local_user("u1", "Alice")

    merge_display_name(user, make_upstream_user("u1", None, email="alice@example.com"), now=NOW)

    assert user.display_name == "alice@example.com"
    assert user.last_synced_display_name == "alice@example.com"


def test_merge_display_name_skips_unresolvable_value(caplog: pytest.LogCaptureFixture) -> None:
    user = make_local_user("u1", "Alice")

    with caplog.at_level(logging.WARNING, logger="dirsync.domain.merge"):
        changed = merge_display_name(user, make_upstream_user("u1", None, email=None), now=NOW)

    assert changed is False
    assert user.display_name == "Alice"
    assert user.last_synced_display_name == "Alice"
    assert user.updated_at == SEEDED_AT
    assert "No display name or email" in caplog.text


def test_merge_disabled_propagates_upstream_status() -> None:
    user = make_local_user("u1", "Alice", disabled=False)

    changed = merge_disabled(user, make_upstream_user("u1", "Alice", disabled=True), now=NOW)

    assert changed is True
    assert user.disabled is True
    assert user.last_synced_disabled is True


def test_merge_disabled_unknown_status_only_advances_baseline() -> None:
    user = make_local_user("u1", "Alice", disabled=False)
    upstream = make_upstream_user("u1", "Alice", disabled=None)

    changed = merge_disabled(user, upstream, now=NOW)

    assert changed is True
    assert user.last_synced_disabled is True
    assert user.disabled is False
    assert user.updated_at == NOW

    # Second pass with the same unknown status sees no further change.
    later = datetime(2024, 6, 2, tzinfo=UTC)
    assert merge_disabled(user, upstream, now=later) is False
    assert user.updated_at == NOW


def test_apply_upstream_merges_attributes_independently() -> None:
    # Name overridden locally, disabled status untouched.
    user = make_local_user("u1", "Al", synced_name="Alice", disabled=False)

    changed = apply_upstream(user, make_upstream_user("u1", "Alicia", disabled=True), now=NOW)

    assert changed is True
    assert user.display_name == "Al"
    assert user.last_synced_display_name == "Alicia"
    assert user.disabled is True
    assert user.last_synced_disabled is True


def test_apply_upstream_leaves_unchanged_record_untouched() -> None:
    user = make_local_user("u1", "Al", synced_name="Alice", disabled=True, synced_disabled=False)

    changed = apply_upstream(user, make_upstream_user("u1", "Alice", disabled=False), now=NOW)

    assert changed is False
    assert user.display_name == "Al"
    assert user.disabled is True
    assert user.updated_at == SEEDED_AT
