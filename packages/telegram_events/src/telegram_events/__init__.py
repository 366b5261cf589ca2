from telegram_events.bot import TelegramNotifier
from telegram_events.broadcaster import EventBroadcaster
from telegram_events.events import (
    IMAGE_FALLBACK_NOTE,
    BuyEvent,
    NewCoinEvent,
    NotificationEvent,
    SellEvent,
    TradingEvent,
    explorer_links,
    short_addr,
)
from telegram_events.exceptions import NotificationError

__version__ = "0.1.0"

__all__ = [
    "TelegramNotifier",
    "EventBroadcaster",
    "NotificationError",
    # Events
    "NotificationEvent",
    "NewCoinEvent",
    "TradingEvent",
    "BuyEvent",
    "SellEvent",
    "IMAGE_FALLBACK_NOTE",
    "explorer_links",
    "short_addr",
]
