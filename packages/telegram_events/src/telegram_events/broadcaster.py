"""
Best-effort delivery of notification events.

`EventBroadcaster.notify` never raises for delivery problems: a failed photo
falls back once to plain text with a note, and a failed text is logged and
dropped. Nothing is retried.
"""

import logging

from telegram_events.bot import TelegramNotifier
from telegram_events.events import IMAGE_FALLBACK_NOTE, NotificationEvent
from telegram_events.exceptions import NotificationError

logger = logging.getLogger(__name__)


class EventBroadcaster:
    def __init__(self, notifier: TelegramNotifier):
        self.notifier = notifier

    async def notify(self, event: NotificationEvent) -> bool:
        """Render and send `event`. Returns True if a message was delivered."""
        message = event.render()

        if event.image:
            try:
                await self.notifier.send_photo(event.image, message)
                logger.info(f"Sent {event.kind} event with photo for {event.symbol}")
                return True
            except NotificationError as e:
                logger.warning(f"Photo delivery failed, falling back to text: {e.message}")
                message += IMAGE_FALLBACK_NOTE

        try:
            await self.notifier.send_text(message)
        except NotificationError as e:
            logger.error(f"Dropped {event.kind} event for {event.symbol}: {e.message}")
            return False

        logger.info(f"Sent {event.kind} event for {event.symbol}")
        return True

    async def close(self) -> None:
        await self.notifier.close()
