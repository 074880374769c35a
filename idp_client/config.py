"""
Environment-driven settings for the identity-platform client.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client settings loaded from ``IDP_*`` environment variables or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_prefix="IDP_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Tenant
    domain: str = Field(default="", description="Tenant domain, e.g. tenant.example.com")
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    # Management API
    token: Optional[str] = Field(default=None, description="Management API access token")
    telemetry: bool = True

    # Transport
    timeout_ms: int = Field(default=10000, ge=0)
    retry_enabled: bool = True
    max_attempts: int = Field(default=3, ge=1, le=10)

    # ID token validation
    id_token_signing_alg: str = "RS256"
    clock_tolerance: int = Field(default=60, ge=0)

    # Applied by the from_settings builders; left unset, logging is not touched
    log_level: Optional[str] = None


def get_settings(**overrides) -> ClientSettings:
    """Load settings, letting explicit keyword arguments win over the environment."""
    return ClientSettings(**overrides)
