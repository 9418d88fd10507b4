"""Unit tests for ClientConfig and CacheConfiguration."""

from cftools_sdk.config import (
    DATA_API_URL,
    ENTERPRISE_API_URL,
    CacheConfiguration,
    ClientConfig,
)


class TestClientConfig:
    """Test defaults and environment loading."""

    def test_defaults(self):
        config = ClientConfig()

        assert config.base_url == DATA_API_URL
        assert config.enterprise_base_url == ENTERPRISE_API_URL
        assert config.token_lifetime_seconds == 23 * 60 * 60
        assert config.account_creation is False
        assert config.has_credentials is False

    def test_from_env(self):
        config = ClientConfig.from_env(
            {
                "CFTOOLS_SERVER_API_ID": "server-1",
                "CFTOOLS_APPLICATION_ID": "app-id",
                "CFTOOLS_SECRET": "app-secret",
                "CFTOOLS_ENTERPRISE_TOKEN": "enterprise",
                "CFTOOLS_API_TOKEN": "static",
                "CFTOOLS_ACCOUNT_CREATION": "true",
                "UNRELATED": "ignored",
            }
        )

        assert config.server_api_id == "server-1"
        assert config.application_id == "app-id"
        assert config.secret.get_secret_value() == "app-secret"
        assert config.enterprise_token.get_secret_value() == "enterprise"
        assert config.static_token.get_secret_value() == "static"
        assert config.account_creation is True
        assert config.has_credentials is True

    def test_empty_variables_are_ignored(self):
        config = ClientConfig.from_env(
            {"CFTOOLS_SERVER_API_ID": "", "CFTOOLS_ACCOUNT_CREATION": "no"}
        )

        assert config.server_api_id is None
        assert config.account_creation is False

    def test_secrets_are_masked(self):
        config = ClientConfig(application_id="app-id", secret="app-secret")

        assert "app-secret" not in repr(config)
        assert "app-secret" not in str(config)


class TestCacheConfiguration:
    def test_defaults(self):
        config = CacheConfiguration()

        assert config.game_server_details == 10
        assert config.leaderboard == 30
        assert config.player_details == 10
        assert config.priority_queue == 20
        assert config.whitelist == 20
        assert config.banlist == 10
        assert config.server_info == 30
        assert config.game_sessions == 10
        assert config.resolve >= 60 * 60 * 24 * 365
