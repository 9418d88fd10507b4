"""Authorization providers for the CFTools Cloud API.

A provider owns the single cached ``Authorization`` of a client. It hands out
the cached credential while it is valid, performs the login exchange when it
is missing or expired, and drops it when the executor reports that the
service rejected it as expired.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

import httpx

from ..exceptions import CFToolsError, InvalidCredentials
from ..models import Authorization, LoginCredentials
from .transport import HttpTransport, RequestOptions

logger = logging.getLogger(__name__)

LOGIN_PATH = "v1/auth/register"
DEFAULT_TOKEN_LIFETIME = timedelta(hours=23)
ENTERPRISE_TOKEN_HEADER = "X-Enterprise-Access-Token"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthorizationProvider(ABC):
    """Provides the credential attached to authenticated requests."""

    #: Whether report_expired() followed by provide() can yield a new credential
    can_refresh: bool = True

    @abstractmethod
    async def provide(self, transport: HttpTransport) -> Optional[Authorization]:
        """Return a currently valid credential, logging in if needed."""

    @abstractmethod
    def report_expired(self) -> None:
        """Drop the cached credential so the next provide() logs in again."""


class NoOpAuthorizationProvider(AuthorizationProvider):
    """Provider of anonymous clients; never yields a credential."""

    can_refresh = False

    async def provide(self, transport: HttpTransport) -> Optional[Authorization]:
        return None

    def report_expired(self) -> None:
        pass


class CFToolsAuthorizationProvider(AuthorizationProvider):
    """Logs in with application credentials and caches the issued token."""

    def __init__(
        self,
        credentials: LoginCredentials,
        token: Optional[str] = None,
        token_lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
        clock: Clock = _utcnow,
    ):
        """Initialize the provider.

        Args:
            credentials: Application id and secret used for the login exchange
            token: Pre-issued token seeding the cache, skipping the first login
            token_lifetime: Validity assumed for every issued token
            clock: Source of the current time (timezone aware)
        """
        self.credentials = credentials
        self.token_lifetime = token_lifetime
        self._clock = clock
        self._authorization: Optional[Authorization] = None
        self._auth_lock = asyncio.Lock()
        if token:
            self._authorization = self._issue(token)

    @property
    def authorization(self) -> Optional[Authorization]:
        """The cached credential, if any."""
        return self._authorization

    async def provide(self, transport: HttpTransport) -> Optional[Authorization]:
        """Get a valid credential, performing the login exchange on a cache miss.

        Concurrent callers during a miss wait for the same login.

        Raises:
            InvalidCredentials: If the login exchange rejects the credentials
        """
        async with self._auth_lock:
            current = self._authorization
            if current is not None and current.is_valid(self._clock()):
                return current

            if current is not None:
                logger.debug("Cached token expired, requesting a new one")
            self._authorization = await self._login(transport)
            return self._authorization

    def report_expired(self) -> None:
        if self._authorization is not None:
            logger.debug("Token reported as expired, clearing cached credential")
        self._authorization = None

    def _issue(self, token: str) -> Authorization:
        now = self._clock()
        return Authorization(
            token=token, created=now, expires_at=now + self.token_lifetime
        )

    def _login_headers(self) -> Dict[str, str]:
        return {}

    async def _login(self, transport: HttpTransport) -> Authorization:
        options = RequestOptions(
            json={
                "application_id": self.credentials.application_id,
                "secret": self.credentials.secret,
            },
            headers=self._login_headers(),
        )
        logger.info(
            f"Requesting API token for application {self.credentials.application_id}"
        )
        try:
            response = await transport.post(LOGIN_PATH, options)
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (403, 500):
                raise InvalidCredentials(str(e.request.url)) from e
            raise

        try:
            body = response.json()
        except ValueError:
            body = None
        token = body.get("token") if isinstance(body, dict) else None
        if not token or not isinstance(token, str):
            raise CFToolsError(
                "No valid token in login response", url=str(response.request.url)
            )
        return self._issue(token)


class EnterpriseAuthorizationProvider(CFToolsAuthorizationProvider):
    """Login exchange of the enterprise API, which needs an access token header."""

    def __init__(
        self,
        credentials: LoginCredentials,
        enterprise_token: str,
        token: Optional[str] = None,
        token_lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
        clock: Clock = _utcnow,
    ):
        super().__init__(
            credentials, token=token, token_lifetime=token_lifetime, clock=clock
        )
        self.enterprise_token = enterprise_token

    def _login_headers(self) -> Dict[str, str]:
        return {ENTERPRISE_TOKEN_HEADER: self.enterprise_token}
