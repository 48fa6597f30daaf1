"""Directory source backed by the Identity Toolkit account listing API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from dirsync.adapters.http_resilience import ResilientClient
from dirsync.config.identity import IdentityProviderConfig, get_identity_provider_config
from dirsync.domain.ports.fetching import DirectoryPage, DirectorySource

from .schema import DownloadAccountResponse, ErrorResponse
from .translator import parse_upstream_user

if TYPE_CHECKING:
    from collections.abc import Callable

    from dirsync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class IdentityProviderError(RuntimeError):
    """Raised when the identity provider returns an application-level error."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class IdentityToolkitSource:
    config: IdentityProviderConfig = field(default_factory=get_identity_provider_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    @property
    def accounts_url(self) -> str:
        return f"{self.config.base_url}/projects/{self.config.project_id}/accounts:batchGet"

    async def list_page(
        self,
        *,
        page_token: str | None = None,
        page_size: int = 500,
    ) -> DirectoryPage:
        params: dict[str, str | int] = {"maxResults": page_size}
        if page_token:
            params["nextPageToken"] = page_token

        async with self.client_factory(self.config.resilience) as client:
            response = await self._perform_request(client=client, params=httpx.QueryParams(params))

        users = tuple(parse_upstream_user(user) for user in response.users)
        log.debug("Fetched %s upstream users (more=%s)", len(users), bool(response.next_page_token))
        return DirectoryPage(users=users, next_page_token=response.next_page_token)

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        params: httpx.QueryParams,
    ) -> DownloadAccountResponse:
        response = await client.get(
            self.accounts_url,
            params=params,
            headers={"Authorization": f"Bearer {self.config.access_token}"},
        )

        if response.is_error:
            self._raise_api_error(response)
            response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise IdentityProviderError("Unexpected identity provider response payload")
        return DownloadAccountResponse.model_validate(payload)

    @staticmethod
    def _raise_api_error(response: httpx.Response) -> None:
        try:
            payload = response.json()
        except ValueError:
            return
        if not isinstance(payload, dict) or "error" not in payload:
            return
        error_payload = ErrorResponse.model_validate(payload)
        log.error(
            "Identity provider error %s: %s",
            error_payload.error.code,
            error_payload.error.message,
        )
        raise IdentityProviderError(
            error_payload.error.message,
            code=error_payload.error.code,
        ) from None


if TYPE_CHECKING:
    _source_check: DirectorySource = IdentityToolkitSource()
