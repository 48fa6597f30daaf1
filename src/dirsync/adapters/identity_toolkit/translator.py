"""Translate Identity Toolkit payloads into domain records."""

from __future__ import annotations

from collections.abc import Mapping

from dirsync.domain.model import UpstreamUser

from .schema import UserInfoPayload

type UserInfoInput = UserInfoPayload | Mapping[str, object]


def parse_upstream_user(payload: UserInfoInput) -> UpstreamUser:
    model = (
        payload if isinstance(payload, UserInfoPayload) else UserInfoPayload.model_validate(payload)
    )
    return UpstreamUser(
        id=model.local_id,
        display_name=model.display_name,
        email=model.email,
        disabled=model.disabled,
        created_at=model.created_at,
    )
