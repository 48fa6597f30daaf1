"""Identity provider configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

IDENTITY_TOOLKIT_BASE_URL = "https://identitytoolkit.googleapis.com/v1"
IDENTITY_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True, slots=True)
class IdentityProviderConfig:
    """Holds credentials and transport settings for the upstream user directory."""

    project_id: str
    access_token: str
    resilience: ResilienceConfig

    @property
    def base_url(self) -> str:
        return self.resilience.base_url or IDENTITY_TOOLKIT_BASE_URL


def get_identity_provider_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> IdentityProviderConfig:
    values = require_env_vars(("IDENTITY_PROJECT_ID", "IDENTITY_ACCESS_TOKEN"))
    base_url = optional_env_var("IDENTITY_BASE_URL") or IDENTITY_TOOLKIT_BASE_URL
    return IdentityProviderConfig(
        project_id=values["IDENTITY_PROJECT_ID"],
        access_token=values["IDENTITY_ACCESS_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="identity-toolkit",
            base_url=base_url.rstrip("/"),
            timeout_seconds=IDENTITY_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
