"""Public interface for the Identity Toolkit adapter."""

from __future__ import annotations

from .client import IdentityProviderError, IdentityToolkitSource
from .schema import DownloadAccountResponse, UserInfoPayload
from .translator import parse_upstream_user

__all__ = [
    "DownloadAccountResponse",
    "IdentityProviderError",
    "IdentityToolkitSource",
    "UserInfoPayload",
    "parse_upstream_user",
]
