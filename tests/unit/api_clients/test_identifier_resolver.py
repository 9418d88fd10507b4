"""Unit tests for IdentifierResolver."""

import pytest

from cftools_sdk.api_clients.resolver import IdentifierResolver
from cftools_sdk.exceptions import AccountCreationFailed, ResourceNotFound
from cftools_sdk.models import (
    BattlEyeGUID,
    BohemiaInteractiveId,
    CFToolsId,
    IPAddress,
    SteamId64,
)

LOOKUP_URL = "https://data.cftools.cloud/v1/users/lookup"
STEAM_ID = "76561198012345678"


def add_not_found(httpx_mock, identifier=STEAM_ID):
    httpx_mock.add_response(
        method="GET",
        url=f"{LOOKUP_URL}?identifier={identifier}",
        status_code=404,
        json={"status": False, "error": "not-found"},
    )


def add_create(httpx_mock, notice, cftools_id="cf-new"):
    httpx_mock.add_response(
        method="GET",
        url=f"{LOOKUP_URL}?identifier={STEAM_ID}&create=true",
        json={"status": True, "cftools_id": cftools_id, "notice": notice},
    )


@pytest.mark.asyncio
class TestResolve:
    """Test identifier resolution."""

    async def test_cftools_id_needs_no_request(self, httpx_mock, executor):
        """Test that a canonical id is returned without any HTTP call."""
        resolver = IdentifierResolver(executor)

        result = await resolver.resolve(CFToolsId("cf-1"))

        assert result == CFToolsId("cf-1")
        assert httpx_mock.get_requests() == []

    @pytest.mark.parametrize(
        "identifier",
        [
            SteamId64(STEAM_ID),
            BattlEyeGUID("be-guid"),
            BohemiaInteractiveId("bohemia-id"),
        ],
    )
    async def test_secondary_id_is_looked_up_once(
        self, httpx_mock, executor, mock_login, mock_lookup, identifier
    ):
        """Test that one lookup call returns the id from the body."""
        mock_login()
        mock_lookup(identifier.id, "cf-42")
        resolver = IdentifierResolver(executor)

        result = await resolver.resolve(identifier)

        assert result == CFToolsId("cf-42")
        assert len(httpx_mock.get_requests(method="GET")) == 1

    async def test_unknown_identifier_raises_not_found(
        self, httpx_mock, executor, mock_login
    ):
        """Test that a 404 lookup surfaces as ResourceNotFound."""
        mock_login()
        add_not_found(httpx_mock)
        resolver = IdentifierResolver(executor)

        with pytest.raises(ResourceNotFound):
            await resolver.resolve(SteamId64(STEAM_ID))

    async def test_ip_address_cannot_be_resolved(self, httpx_mock, executor):
        """Test that IP addresses are rejected before any request."""
        resolver = IdentifierResolver(executor)

        with pytest.raises(ValueError):
            await resolver.resolve(IPAddress("127.0.0.1"))

        assert httpx_mock.get_requests() == []


@pytest.mark.asyncio
class TestAccountCreation:
    """Test the account creation fallback of the enterprise API."""

    async def test_creates_account_for_unknown_steam_id(
        self, httpx_mock, executor, mock_login
    ):
        """Test that a confirmed creation returns the new id."""
        mock_login()
        add_not_found(httpx_mock)
        add_create(httpx_mock, "Account created")
        resolver = IdentifierResolver(executor, account_creation=True)

        result = await resolver.resolve(SteamId64(STEAM_ID))

        assert result == CFToolsId("cf-new")
        lookups = httpx_mock.get_requests(method="GET")
        assert len(lookups) == 2
        assert lookups[1].url.params["create"] == "true"

    async def test_unexpected_notice_raises_with_text(
        self, httpx_mock, executor, mock_login
    ):
        """Test that any other notice fails the creation."""
        mock_login()
        add_not_found(httpx_mock)
        add_create(httpx_mock, "Account exists")
        resolver = IdentifierResolver(executor, account_creation=True)

        with pytest.raises(AccountCreationFailed) as exc_info:
            await resolver.resolve(SteamId64(STEAM_ID))

        assert exc_info.value.notice == "Account exists"
        assert exc_info.value.identifier == STEAM_ID

    async def test_creation_disabled_keeps_not_found(
        self, httpx_mock, executor, mock_login
    ):
        """Test that without the flag the 404 is raised unchanged."""
        mock_login()
        add_not_found(httpx_mock)
        resolver = IdentifierResolver(executor, account_creation=False)

        with pytest.raises(ResourceNotFound):
            await resolver.resolve(SteamId64(STEAM_ID))

        assert len(httpx_mock.get_requests(method="GET")) == 1

    async def test_creation_only_for_steam_ids(self, httpx_mock, executor, mock_login):
        """Test that other identifier kinds never trigger account creation."""
        mock_login()
        add_not_found(httpx_mock, identifier="be-guid")
        resolver = IdentifierResolver(executor, account_creation=True)

        with pytest.raises(ResourceNotFound):
            await resolver.resolve(BattlEyeGUID("be-guid"))

        assert len(httpx_mock.get_requests(method="GET")) == 1
