"""Unit tests for the authorization providers.

Covers credential caching, the expiry boundary, forced refresh after an
expired-token report and the login exchange failure modes.
"""

import asyncio
import json
from datetime import timedelta

import httpx
import pytest

from cftools_sdk.api_clients.auth import (
    ENTERPRISE_TOKEN_HEADER,
    CFToolsAuthorizationProvider,
    EnterpriseAuthorizationProvider,
    NoOpAuthorizationProvider,
)
from cftools_sdk.api_clients.transport import HttpTransport
from cftools_sdk.exceptions import CFToolsError, InvalidCredentials
from cftools_sdk.models import Authorization


@pytest.mark.asyncio
class TestCredentialCaching:
    """Test that the provider reuses a valid credential."""

    async def test_two_provides_perform_one_login(
        self, httpx_mock, transport, auth_provider, mock_login
    ):
        """Test that back-to-back provide() calls share one login exchange."""
        mock_login("token-1")

        first = await auth_provider.provide(transport)
        second = await auth_provider.provide(transport)

        assert first is second
        assert first.token == "token-1"
        assert len(httpx_mock.get_requests()) == 1

    async def test_login_sends_application_credentials(
        self, httpx_mock, transport, auth_provider, mock_login
    ):
        """Test that the login exchange posts application id and secret."""
        mock_login()

        await auth_provider.provide(transport)

        request = httpx_mock.get_request()
        assert request.method == "POST"
        assert json.loads(request.content) == {
            "application_id": "app-id",
            "secret": "app-secret",
        }

    async def test_issued_token_lives_23_hours(
        self, transport, auth_provider, clock, mock_login
    ):
        """Test that a fresh credential expires 23 hours after issuance."""
        mock_login()

        authorization = await auth_provider.provide(transport)

        assert authorization.created == clock.now
        assert authorization.expires_at == clock.now + timedelta(hours=23)

    async def test_concurrent_provides_share_one_login(
        self, httpx_mock, transport, auth_provider, mock_login
    ):
        """Test that concurrent callers during a cache miss wait for one login."""
        mock_login()

        results = await asyncio.gather(
            auth_provider.provide(transport),
            auth_provider.provide(transport),
            auth_provider.provide(transport),
        )

        assert results[0] is results[1] is results[2]
        assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
class TestExpiry:
    """Test the expiry boundary and the report_expired() protocol."""

    async def test_credential_expiring_now_is_invalid(
        self, httpx_mock, transport, auth_provider, clock, mock_login
    ):
        """Test that expires_at == now triggers a new login."""
        mock_login("token-1")
        mock_login("token-2")

        await auth_provider.provide(transport)
        clock.advance(hours=23)
        authorization = await auth_provider.provide(transport)

        assert authorization.token == "token-2"
        assert len(httpx_mock.get_requests()) == 2

    async def test_credential_expiring_after_now_is_reused(
        self, httpx_mock, transport, auth_provider, clock, mock_login
    ):
        """Test that a credential one second before expiry is still used."""
        mock_login("token-1")

        await auth_provider.provide(transport)
        clock.advance(hours=23, seconds=-1)
        authorization = await auth_provider.provide(transport)

        assert authorization.token == "token-1"
        assert len(httpx_mock.get_requests()) == 1

    async def test_stale_seeded_credential_is_replaced(
        self, httpx_mock, transport, credentials, clock, mock_login
    ):
        """Test that a credential issued 24 hours ago is not handed out."""
        provider = CFToolsAuthorizationProvider(credentials, token="T1", clock=clock)
        clock.advance(hours=24)
        mock_login("T2")

        authorization = await provider.provide(transport)

        assert authorization.token == "T2"
        assert len(httpx_mock.get_requests()) == 1

    async def test_report_expired_forces_new_login(
        self, httpx_mock, transport, auth_provider, mock_login
    ):
        """Test that provide() after report_expired() logs in again."""
        mock_login("token-1")
        mock_login("token-2")

        await auth_provider.provide(transport)
        auth_provider.report_expired()
        authorization = await auth_provider.provide(transport)

        assert authorization.token == "token-2"

    async def test_report_expired_is_idempotent(self, transport, auth_provider):
        """Test that reporting twice without a credential is harmless."""
        auth_provider.report_expired()
        auth_provider.report_expired()

        assert auth_provider.authorization is None


@pytest.mark.asyncio
class TestLoginFailures:
    """Test failures of the login exchange."""

    @pytest.mark.parametrize("status_code", [403, 500])
    async def test_rejected_login_raises_invalid_credentials(
        self, httpx_mock, transport, auth_provider, status_code
    ):
        """Test that 403 and 500 from the login route mean invalid credentials."""
        httpx_mock.add_response(
            method="POST",
            url="https://data.cftools.cloud/v1/auth/register",
            status_code=status_code,
            json={"status": False, "error": "bad-secret"},
        )

        with pytest.raises(InvalidCredentials) as exc_info:
            await auth_provider.provide(transport)

        assert exc_info.value.url == "https://data.cftools.cloud/v1/auth/register"
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert auth_provider.authorization is None

    async def test_other_login_failures_pass_through(
        self, httpx_mock, transport, auth_provider
    ):
        """Test that other statuses propagate as the original httpx error."""
        httpx_mock.add_response(
            method="POST",
            url="https://data.cftools.cloud/v1/auth/register",
            status_code=502,
            text="Bad Gateway",
        )

        with pytest.raises(httpx.HTTPStatusError):
            await auth_provider.provide(transport)

    async def test_login_without_token_raises(
        self, httpx_mock, transport, auth_provider
    ):
        """Test that a 200 login response without a token is an error."""
        httpx_mock.add_response(
            method="POST",
            url="https://data.cftools.cloud/v1/auth/register",
            json={"status": True},
        )

        with pytest.raises(CFToolsError, match="No valid token"):
            await auth_provider.provide(transport)


@pytest.mark.asyncio
class TestProviderVariants:
    """Test the enterprise and anonymous providers."""

    async def test_enterprise_login_sends_access_token(
        self, httpx_mock, credentials, clock, mock_login
    ):
        """Test that the enterprise provider adds its access token header."""
        provider = EnterpriseAuthorizationProvider(
            credentials, "enterprise-secret", clock=clock
        )
        mock_login("token-e", url="https://epoch.cftools.cloud")

        async with HttpTransport("https://epoch.cftools.cloud") as transport:
            authorization = await provider.provide(transport)

        assert authorization.token == "token-e"
        request = httpx_mock.get_request()
        assert request.headers[ENTERPRISE_TOKEN_HEADER] == "enterprise-secret"

    async def test_noop_provider_never_yields_credential(self, transport):
        """Test that the anonymous provider returns None and cannot refresh."""
        provider = NoOpAuthorizationProvider()

        assert await provider.provide(transport) is None
        assert provider.can_refresh is False

    async def test_seeded_token_skips_first_login(
        self, httpx_mock, transport, credentials, clock
    ):
        """Test that a pre-issued token is used without a login exchange."""
        provider = CFToolsAuthorizationProvider(
            credentials, token="static", clock=clock
        )

        authorization = await provider.provide(transport)

        assert authorization.token == "static"
        assert httpx_mock.get_requests() == []


class TestAuthorization:
    """Test the Authorization value type."""

    def test_valid_strictly_before_expiry(self, clock):
        """Test that validity ends at the expiry instant."""
        authorization = Authorization(
            token="t", created=clock.now, expires_at=clock.now + timedelta(hours=1)
        )

        assert authorization.is_valid(clock.now)
        assert not authorization.is_valid(clock.now + timedelta(hours=1))
        assert not authorization.is_valid(clock.now + timedelta(hours=2))

    def test_expiry_before_creation_is_rejected(self, clock):
        """Test that expires_at must not precede created."""
        with pytest.raises(ValueError):
            Authorization(
                token="t", created=clock.now, expires_at=clock.now - timedelta(1)
            )

    def test_token_is_not_in_repr(self, clock):
        """Test that the bearer token does not leak through repr()."""
        authorization = Authorization(
            token="super-secret", created=clock.now, expires_at=clock.now
        )

        assert "super-secret" not in repr(authorization)
        assert authorization.as_header() == {"Authorization": "Bearer super-secret"}
