"""Fluent construction of CFTools clients."""

import logging
from datetime import timedelta
from typing import Any, Optional

from .api_clients.auth import (
    AuthorizationProvider,
    CFToolsAuthorizationProvider,
    EnterpriseAuthorizationProvider,
    NoOpAuthorizationProvider,
)
from .api_clients.base_client import CFToolsClient
from .api_clients.caching_client import CachingCFToolsClient
from .api_clients.cftools_client import HttpCFToolsClient
from .api_clients.executor import ResilientRequestExecutor
from .api_clients.resolver import IdentifierResolver
from .api_clients.transport import HttpClientFactory, HttpTransport
from .cache import Cache, InMemoryCache
from .config import CacheConfiguration, ClientConfig
from .models import LoginCredentials, ServerApiId

logger = logging.getLogger(__name__)


class CFToolsClientBuilder:
    """Collects settings and builds a ready to use ``CFToolsClient``.

    Example:
        client = (
            CFToolsClientBuilder()
            .with_server_api_id("abc")
            .with_credentials("app-id", "secret")
            .build()
        )
    """

    def __init__(self) -> None:
        self._config = ClientConfig()
        self._cache: Optional[Cache] = None
        self._cache_configuration = CacheConfiguration()
        self._http_client_factory: Optional[HttpClientFactory] = None

    def _update(self, **values: Any) -> None:
        self._config = ClientConfig(**{**self._config.model_dump(), **values})

    def with_config(self, config: ClientConfig) -> "CFToolsClientBuilder":
        """Replace all settings with the given configuration."""
        self._config = config.model_copy()
        return self

    def with_server_api_id(self, server_api_id: str) -> "CFToolsClientBuilder":
        self._update(server_api_id=server_api_id)
        return self

    def with_credentials(
        self, application_id: str, secret: str
    ) -> "CFToolsClientBuilder":
        self._update(application_id=application_id, secret=secret)
        return self

    def with_enterprise_api(self, enterprise_token: str) -> "CFToolsClientBuilder":
        """Use the enterprise API; logins then send the access token."""
        self._update(enterprise_token=enterprise_token)
        return self

    def with_account_creation_api(self, enabled: bool = True) -> "CFToolsClientBuilder":
        """Create CFTools accounts for unknown Steam64 ids on lookup.

        Raises:
            ValueError: If the enterprise API was not configured before
        """
        if enabled and self._config.enterprise_token is None:
            raise ValueError(
                "Account creation requires the enterprise API, "
                "call with_enterprise_api() first"
            )
        self._update(account_creation=enabled)
        return self

    def with_static_token(self, token: str) -> "CFToolsClientBuilder":
        """Seed the authorization with an already issued token."""
        self._update(static_token=token)
        return self

    def with_cache(self, cache: Optional[Cache] = None) -> "CFToolsClientBuilder":
        """Cache read operations, in memory unless a cache is given."""
        self._cache = cache if cache is not None else InMemoryCache()
        return self

    def with_cache_configuration(self, **overrides: Any) -> "CFToolsClientBuilder":
        self._cache_configuration = CacheConfiguration(
            **{**self._cache_configuration.model_dump(), **overrides}
        )
        return self

    def with_http_client(self, factory: HttpClientFactory) -> "CFToolsClientBuilder":
        """Use httpx clients created by the factory, e.g. for proxies or mocks.

        The factory is called again whenever the client needs a new session
        after being closed.
        """
        self._http_client_factory = factory
        return self

    def build(self) -> CFToolsClient:
        """Build the client.

        Raises:
            ValueError: If a static token is configured without credentials,
                or account creation is enabled without the enterprise API
        """
        config = self._config
        enterprise = config.enterprise_token is not None
        if config.account_creation and not enterprise:
            raise ValueError("Account creation requires the enterprise API")
        base_url = config.enterprise_base_url if enterprise else config.base_url

        transport = HttpTransport(
            base_url,
            timeout=config.timeout,
            user_agent=config.user_agent,
            client_factory=self._http_client_factory,
        )

        executor = ResilientRequestExecutor(transport, self._auth_provider(config))
        resolver = IdentifierResolver(executor, account_creation=config.account_creation)
        server_api_id = (
            ServerApiId(config.server_api_id) if config.server_api_id else None
        )
        cftools_client: CFToolsClient = HttpCFToolsClient(
            executor, resolver, server_api_id=server_api_id
        )
        logger.debug(
            f"Built client for {base_url} "
            f"(provider={type(executor.auth_provider).__name__}, "
            f"cache={self._cache is not None})"
        )

        if self._cache is not None:
            cftools_client = CachingCFToolsClient(
                self._cache,
                self._cache_configuration,
                cftools_client,
                server_api_id=server_api_id,
            )
        return cftools_client

    @staticmethod
    def _auth_provider(config: ClientConfig) -> AuthorizationProvider:
        static_token = (
            config.static_token.get_secret_value() if config.static_token else None
        )
        if not config.has_credentials:
            if static_token:
                raise ValueError("A static token needs application credentials")
            return NoOpAuthorizationProvider()

        assert config.application_id is not None and config.secret is not None
        credentials = LoginCredentials(
            config.application_id, config.secret.get_secret_value()
        )
        token_lifetime = timedelta(seconds=config.token_lifetime_seconds)
        if config.enterprise_token is not None:
            return EnterpriseAuthorizationProvider(
                credentials,
                config.enterprise_token.get_secret_value(),
                token=static_token,
                token_lifetime=token_lifetime,
            )
        return CFToolsAuthorizationProvider(
            credentials, token=static_token, token_lifetime=token_lifetime
        )
