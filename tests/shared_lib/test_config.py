"""Unit tests for environment settings."""

import pytest

from shared_lib.config import BASE_CHAIN_ID, ZORA_FACTORY_BASE, Settings

ENV_VARS = (
    "PINATA_JWT",
    "PINATA_GATEWAY",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHANNEL_ID",
    "RPC_URL",
    "CHAIN_ID",
    "DEPLOYER_PRIVATE_KEY",
    "ZORA_FACTORY_ADDRESS",
    "ZORA_API_URL",
    "ZORA_API_KEY",
    "SCRAPER_URL",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Empty environment and an empty .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("")
    return env_file


class TestSettingsFromEnv:
    """Tests for Settings.from_env."""

    def test_defaults(self, clean_env):
        """Test defaults target Base mainnet with the public factory."""
        settings = Settings.from_env(str(clean_env))

        assert settings.chain_id == BASE_CHAIN_ID
        assert settings.zora_factory_address == ZORA_FACTORY_BASE
        assert settings.pinata_gateway == "gateway.pinata.cloud"
        assert settings.pinata_jwt is None
        assert settings.telegram_bot_token is None

    def test_reads_environment(self, clean_env, monkeypatch):
        """Test values come from environment variables."""
        monkeypatch.setenv("PINATA_JWT", "jwt-123")
        monkeypatch.setenv("CHAIN_ID", "84532")
        monkeypatch.setenv("SUPABASE_URL", "https://xyz.supabase.co")

        settings = Settings.from_env(str(clean_env))

        assert settings.pinata_jwt == "jwt-123"
        assert settings.chain_id == 84532
        assert settings.supabase_url == "https://xyz.supabase.co"

    def test_reads_dotenv_file(self, clean_env):
        """Test values are loaded from the .env file."""
        clean_env.write_text("TELEGRAM_BOT_TOKEN=123:abc\nTELEGRAM_CHANNEL_ID=@coins\n")

        settings = Settings.from_env(str(clean_env))

        assert settings.telegram_bot_token == "123:abc"
        assert settings.telegram_channel_id == "@coins"

    def test_blank_values_fall_back_to_defaults(self, clean_env, monkeypatch):
        """Test whitespace-only values are treated as unset."""
        monkeypatch.setenv("PINATA_GATEWAY", "   ")

        settings = Settings.from_env(str(clean_env))

        assert settings.pinata_gateway == "gateway.pinata.cloud"
