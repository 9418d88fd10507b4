"""HTTP transport for the CFTools Cloud API.

A thin layer over ``httpx.AsyncClient``: it knows the base origin and the
default headers, and turns non-2xx responses into ``httpx.HTTPStatusError``.
It knows nothing about tokens or the CFTools error format.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

HttpClientFactory = Callable[[], httpx.AsyncClient]


@dataclass
class RequestOptions:
    """Per-request options.

    ``context`` is an opaque bag travelling with the request; the transport
    does not interpret it.
    """

    params: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    json: Optional[Any] = None
    context: Dict[str, Any] = field(default_factory=dict)


class HttpTransport:
    """Sends requests relative to a base origin."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        user_agent: Optional[str] = None,
        client_factory: Optional[HttpClientFactory] = None,
    ):
        """Initialize the transport.

        Args:
            base_url: API origin, e.g. https://data.cftools.cloud
            timeout: Request timeout in seconds
            user_agent: Optional User-Agent header value
            client_factory: Creates pre-configured httpx clients (proxies,
                mounts, mock transports). Called again for a new session
                after ``close()``, so it should return a fresh client.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self.client_factory = client_factory
        self._session: Optional[httpx.AsyncClient] = None

    @property
    def default_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers

    @property
    def session(self) -> httpx.AsyncClient:
        """Get or create the HTTP session."""
        if self._session is None or self._session.is_closed:
            if self.client_factory is not None:
                session = self.client_factory()
                session.headers.update(self.default_headers)
            else:
                session = httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout, connect=10.0),
                    headers=self.default_headers,
                    follow_redirects=True,
                )
            self._session = session
        return self._session

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self, method: str, path: str, options: Optional[RequestOptions] = None
    ) -> httpx.Response:
        """Send a request and return the successful response.

        Raises:
            httpx.HTTPStatusError: If the server answers with a non-2xx status
            httpx.HTTPError: If the request cannot be completed
        """
        options = options or RequestOptions()
        params = {k: v for k, v in options.params.items() if v is not None}
        response = await self.session.request(
            method,
            self.url_for(path),
            params=params or None,
            headers=options.headers or None,
            json=options.json,
        )
        logger.debug(f"{method} {response.request.url.path} -> {response.status_code}")
        response.raise_for_status()
        return response

    async def get(
        self, path: str, options: Optional[RequestOptions] = None
    ) -> httpx.Response:
        return await self.request("GET", path, options)

    async def post(
        self, path: str, options: Optional[RequestOptions] = None
    ) -> httpx.Response:
        return await self.request("POST", path, options)

    async def delete(
        self, path: str, options: Optional[RequestOptions] = None
    ) -> httpx.Response:
        return await self.request("DELETE", path, options)

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None and not self._session.is_closed:
            await self._session.aclose()
        self._session = None

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
