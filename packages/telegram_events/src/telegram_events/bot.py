import asyncio
import logging

import aiohttp
from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.exceptions import AiogramError
from aiogram.utils.token import TokenValidationError

from shared_lib.baseclient.exceptions import ConfigurationError

from telegram_events.exceptions import NotificationError

logger = logging.getLogger(__name__)

DELIVERY_ERRORS = (AiogramError, aiohttp.ClientError, asyncio.TimeoutError)


class TelegramNotifier:
    """Posts HTML messages to a single Telegram channel with aiogram."""

    def __init__(self, token: str | None, channel_id: str | None):
        """
        Args:
            token: Bot token from BotFather
            channel_id: Destination chat or channel id (e.g. "@channel" or "-100...")

        Raises:
            ConfigurationError: If either credential is missing or the token is malformed.
        """
        if not token or not channel_id:
            raise ConfigurationError("Telegram bot token and channel id are required")
        try:
            self.bot = Bot(token=token)
        except TokenValidationError as e:
            raise ConfigurationError(f"Invalid Telegram bot token: {e}") from e
        self.channel_id = channel_id
        logger.info("✅ Telegram notifications enabled")

    async def send_text(self, text: str) -> None:
        try:
            await self.bot.send_message(
                chat_id=self.channel_id, text=text, parse_mode=ParseMode.HTML
            )
        except DELIVERY_ERRORS as e:
            raise NotificationError(f"sendMessage failed: {e}") from e

    async def send_photo(self, photo_url: str, caption: str) -> None:
        """Send a photo by URL; Telegram fetches it server-side."""
        try:
            await self.bot.send_photo(
                chat_id=self.channel_id,
                photo=photo_url,
                caption=caption,
                parse_mode=ParseMode.HTML,
            )
        except DELIVERY_ERRORS as e:
            raise NotificationError(f"sendPhoto failed: {e}") from e

    async def close(self) -> None:
        await self.bot.session.close()
