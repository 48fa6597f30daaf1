"""Pydantic models describing the Identity Toolkit account listing payloads."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class IdentityToolkitBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UserInfoPayload(IdentityToolkitBaseModel):
    local_id: str = Field(alias="localId")
    email: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    disabled: bool | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")

    _normalize_strings = field_validator("email", "display_name", mode="before")(_blank_to_none)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_epoch_millis(cls, value: object) -> object:
        if value is None or isinstance(value, datetime):
            return value
        if isinstance(value, (int, str)):
            return datetime.fromtimestamp(int(value) / 1000, tz=UTC)
        return value


class DownloadAccountResponse(IdentityToolkitBaseModel):
    users: list[UserInfoPayload] = Field(default_factory=list[UserInfoPayload])
    next_page_token: str | None = Field(default=None, alias="nextPageToken")

    _normalize_token = field_validator("next_page_token", mode="before")(_blank_to_none)


class ErrorDetail(IdentityToolkitBaseModel):
    code: int
    message: str
    status: str | None = None


class ErrorResponse(IdentityToolkitBaseModel):
    error: ErrorDetail
