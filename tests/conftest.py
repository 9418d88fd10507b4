"""
Shared pytest fixtures for CFTools SDK tests.

Provides a controllable clock, a transport bound to the data API origin and
helpers registering the login and lookup exchanges on ``httpx_mock``.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from cftools_sdk.api_clients.auth import CFToolsAuthorizationProvider
from cftools_sdk.api_clients.executor import ResilientRequestExecutor
from cftools_sdk.api_clients.transport import HttpTransport
from cftools_sdk.models import LoginCredentials

API_URL = "https://data.cftools.cloud"


class FakeClock:
    """Timezone aware clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def api_url() -> str:
    return API_URL


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def credentials() -> LoginCredentials:
    return LoginCredentials(application_id="app-id", secret="app-secret")


@pytest_asyncio.fixture
async def transport():
    transport = HttpTransport(API_URL)
    yield transport
    await transport.close()


@pytest.fixture
def auth_provider(credentials, clock) -> CFToolsAuthorizationProvider:
    return CFToolsAuthorizationProvider(credentials, clock=clock)


@pytest.fixture
def executor(transport, auth_provider) -> ResilientRequestExecutor:
    return ResilientRequestExecutor(transport, auth_provider)


@pytest.fixture
def mock_login(httpx_mock):
    """Register one successful login exchange per call."""

    def _register(token: str = "token-1", url: str = API_URL) -> None:
        httpx_mock.add_response(
            method="POST",
            url=f"{url}/v1/auth/register",
            json={"token": token},
        )

    return _register


@pytest.fixture
def mock_lookup(httpx_mock):
    """Register one successful identifier lookup per call."""

    def _register(identifier: str, cftools_id: str, url: str = API_URL) -> None:
        httpx_mock.add_response(
            method="GET",
            url=f"{url}/v1/users/lookup?identifier={identifier}",
            json={"status": True, "cftools_id": cftools_id},
        )

    return _register


@pytest.fixture
def game_server_payload() -> dict:
    """Game server entry as returned by the game server details route."""
    return {
        "_object": {"error": "GameServerQueryError.NONE"},
        "name": "Test Server",
        "version": "1.24.157551",
        "map": "chernarusplus",
        "rank": 12,
        "rating": 87.5,
        "online": True,
        "status": {"players": 10, "slots": 60, "queue": {"size": 2}},
        "security": {"battleye": True, "vac": True, "password": False},
        "mods": [{"file_id": 1559212036, "name": "CF"}],
        "host": {"address": "127.0.0.1", "game_port": 2302, "query_port": 27016},
        "geolocation": {
            "available": True,
            "city": {"name": "Frankfurt"},
            "continent": "EU",
            "country": {"code": "DE", "name": "Germany"},
            "timezone": "Europe/Berlin",
        },
        "environment": {
            "perspectives": {"1rd": True, "3rd": False},
            "time": "12:00",
            "time_acceleration": {"general": 4.0, "night": 8.0},
        },
        "attributes": {
            "dlc": False,
            "dlcs": {"livonia": False},
            "experimental": False,
            "hive": "public",
            "modded": True,
            "official": False,
            "whitelist": False,
        },
    }
