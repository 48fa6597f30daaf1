"""Three-way merge rule for synchronised user attributes.

Each attribute keeps two values locally: the *effective* value the application
uses and the *last synced* value, i.e. what upstream reported the last time we
looked. Comparing the three values tells apart an upstream change (upstream
differs from last synced) from a local override (effective differs from last
synced). Upstream changes always advance the baseline; they only reach the
effective value when it has not been overridden locally.

Attributes are merged independently of each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from dirsync.domain.model import LocalUser, UpstreamUser

log = getLogger(__name__)

DISABLED_WHEN_UNKNOWN = True


class UnresolvableFieldError(ValueError):
    """Raised when no usable upstream value exists for an attribute."""


@dataclass(frozen=True, slots=True)
class FieldMerge[T]:
    """Outcome of merging one attribute of one record."""

    effective: T
    last_synced: T
    upstream_changed: bool
    locally_modified: bool

    @property
    def propagated(self) -> bool:
        return self.upstream_changed and not self.locally_modified

    @property
    def mutated(self) -> bool:
        return self.upstream_changed


def merge_field[T](effective: T, last_synced: T, upstream_current: T) -> FieldMerge[T]:
    """Apply the three-way rule to one attribute without mutating anything."""

    upstream_changed = upstream_current != last_synced
    locally_modified = effective != last_synced
    if not upstream_changed:
        return FieldMerge(effective, last_synced, upstream_changed, locally_modified)
    return FieldMerge(
        effective=effective if locally_modified else upstream_current,
        last_synced=upstream_current,
        upstream_changed=True,
        locally_modified=locally_modified,
    )


def resolve_display_name(upstream: UpstreamUser) -> str:
    """Upstream display name, falling back to the email address."""

    candidate = upstream.preferred_display_name
    if candidate is not None:
        return candidate
    raise UnresolvableFieldError(f"No display name or email to sync for user {upstream.id}")


def merge_display_name(user: LocalUser, upstream: UpstreamUser, *, now: datetime) -> bool:
    try:
        upstream_current = resolve_display_name(upstream)
    except UnresolvableFieldError as exc:
        log.warning("%s; keeping local display name", exc)
        return False

    result = merge_field(user.display_name, user.last_synced_display_name, upstream_current)
    if not result.mutated:
        return False

    log.info("Upstream display name changed for user %s", user.id)
    if result.locally_modified:
        log.info("Display name of user %s was overridden locally; not propagating", user.id)
    user.last_synced_display_name = result.last_synced
    user.display_name = result.effective
    user.updated_at = now
    return True


def merge_disabled(user: LocalUser, upstream: UpstreamUser, *, now: datetime) -> bool:
    # An unknown upstream status counts as disabled for the baseline but is never
    # propagated to the effective value.
    known = upstream.disabled is not None
    upstream_current = upstream.disabled if upstream.disabled is not None else DISABLED_WHEN_UNKNOWN

    result = merge_field(user.disabled, user.last_synced_disabled, upstream_current)
    if not result.mutated:
        return False

    log.info("Upstream disabled status changed for user %s", user.id)
    user.last_synced_disabled = result.last_synced
    if result.locally_modified:
        log.info("Disabled status of user %s was overridden locally; not propagating", user.id)
    elif known:
        user.disabled = result.effective
    else:
        log.warning("Upstream disabled status unknown for user %s; keeping local status", user.id)
    user.updated_at = now
    return True


def apply_upstream(user: LocalUser, upstream: UpstreamUser, *, now: datetime) -> bool:
    """Merge every synchronised attribute; return whether the record changed."""

    name_changed = merge_display_name(user, upstream, now=now)
    disabled_changed = merge_disabled(user, upstream, now=now)
    return name_changed or disabled_changed
