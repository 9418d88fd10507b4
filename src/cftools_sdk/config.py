"""Configuration management for the CFTools client."""

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, SecretStr

logger = logging.getLogger(__name__)

DATA_API_URL = "https://data.cftools.cloud"
ENTERPRISE_API_URL = "https://epoch.cftools.cloud"

_TRUE_VALUES = ("1", "true", "yes", "on")


class CacheConfiguration(BaseModel):
    """Seconds the result of each read operation stays cached.

    Only used when the client is built with a cache.
    """

    game_server_details: int = Field(default=10)
    leaderboard: int = Field(default=30)
    player_details: int = Field(default=10)
    priority_queue: int = Field(default=20)
    whitelist: int = Field(default=20)
    banlist: int = Field(default=10)
    server_info: int = Field(default=30)
    game_sessions: int = Field(default=10)
    # CFTools ids never change for an identifier
    resolve: int = Field(default=60 * 60 * 24 * 365)


class ClientConfig(BaseModel):
    """Settings used by ``CFToolsClientBuilder`` and the CLI."""

    base_url: str = Field(default=DATA_API_URL, description="Data API origin")
    enterprise_base_url: str = Field(
        default=ENTERPRISE_API_URL, description="Enterprise API origin"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    user_agent: str = Field(
        default="cftools-sdk-python", description="User-Agent sent with every request"
    )
    token_lifetime_seconds: int = Field(
        default=23 * 60 * 60,
        description="How long an issued bearer token is treated as valid",
    )
    server_api_id: Optional[str] = Field(
        default=None, description="Default server api id for server-bound operations"
    )
    application_id: Optional[str] = Field(default=None, description="Application id")
    secret: Optional[SecretStr] = Field(default=None, description="Application secret")
    enterprise_token: Optional[SecretStr] = Field(
        default=None, description="Enterprise API access token"
    )
    static_token: Optional[SecretStr] = Field(
        default=None,
        description="Pre-issued bearer token seeding the authorization cache",
    )
    account_creation: bool = Field(
        default=False, description="Enable the account creation lookup fallback"
    )

    @property
    def has_credentials(self) -> bool:
        return bool(
            self.application_id
            and self.secret is not None
            and self.secret.get_secret_value()
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build a configuration from ``CFTOOLS_*`` environment variables.

        Args:
            environ: Mapping to read from, defaults to ``os.environ``

        Returns:
            ClientConfig with every variable found applied
        """
        env = os.environ if environ is None else environ
        values = {}
        mapping = {
            "CFTOOLS_SERVER_API_ID": "server_api_id",
            "CFTOOLS_APPLICATION_ID": "application_id",
            "CFTOOLS_SECRET": "secret",
            "CFTOOLS_ENTERPRISE_TOKEN": "enterprise_token",
            "CFTOOLS_API_TOKEN": "static_token",
            "CFTOOLS_BASE_URL": "base_url",
        }
        for variable, field_name in mapping.items():
            value = env.get(variable)
            if value:
                values[field_name] = value

        account_creation = env.get("CFTOOLS_ACCOUNT_CREATION")
        if account_creation:
            values["account_creation"] = account_creation.lower() in _TRUE_VALUES

        logger.debug(f"Loaded configuration keys from environment: {sorted(values)}")
        return cls(**values)
