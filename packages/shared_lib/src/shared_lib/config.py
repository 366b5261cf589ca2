"""
Process-wide settings.

Settings are resolved once at startup from the environment (and a local
`.env` file, if present) and then passed explicitly into each client.
Clients validate the pieces they need at construction time.
"""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

BASE_CHAIN_ID = 8453
ZORA_FACTORY_BASE = "0x777777751622c0d3258f214F9DF38E35BF45baF3"


def _env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


class Settings(BaseModel):
    """Credentials and endpoints for every external system."""

    pinata_jwt: str | None = None
    pinata_gateway: str = "gateway.pinata.cloud"

    supabase_url: str | None = None
    supabase_key: str | None = None

    telegram_bot_token: str | None = None
    telegram_channel_id: str | None = None

    rpc_url: str = "https://mainnet.base.org"
    chain_id: int = BASE_CHAIN_ID
    deployer_private_key: str | None = None
    zora_factory_address: str = ZORA_FACTORY_BASE
    zora_api_url: str = "https://api-sdk.zora.engineering"
    zora_api_key: str | None = None

    scraper_url: str | None = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> "Settings":
        """
        Build settings from environment variables.

        ## Parameters
        - `dotenv_path`: optional explicit `.env` path; by default python-dotenv
          searches upwards from the working directory.

        ## Notes
        Existing environment variables take precedence over `.env` values.
        """
        load_dotenv(dotenv_path)

        defaults = cls()
        settings = cls(
            pinata_jwt=_env("PINATA_JWT"),
            pinata_gateway=_env("PINATA_GATEWAY", defaults.pinata_gateway),
            supabase_url=_env("SUPABASE_URL"),
            supabase_key=_env("SUPABASE_KEY"),
            telegram_bot_token=_env("TELEGRAM_BOT_TOKEN"),
            telegram_channel_id=_env("TELEGRAM_CHANNEL_ID"),
            rpc_url=_env("RPC_URL", defaults.rpc_url),
            chain_id=int(_env("CHAIN_ID", str(defaults.chain_id))),
            deployer_private_key=_env("DEPLOYER_PRIVATE_KEY"),
            zora_factory_address=_env(
                "ZORA_FACTORY_ADDRESS", defaults.zora_factory_address
            ),
            zora_api_url=_env("ZORA_API_URL", defaults.zora_api_url),
            zora_api_key=_env("ZORA_API_KEY"),
            scraper_url=_env("SCRAPER_URL"),
            log_level=_env("LOG_LEVEL", defaults.log_level),
        )
        logger.debug(f"Settings loaded for chain {settings.chain_id}")
        return settings
