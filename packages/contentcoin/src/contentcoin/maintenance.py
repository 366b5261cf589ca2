"""One-off catalog maintenance jobs run from the command line."""

import asyncio
import logging

from catalog import CatalogStore, classify_content_type
from catalog.exceptions import CatalogError
from telegram_events import EventBroadcaster

from contentcoin.events import new_coin_event

logger = logging.getLogger(__name__)

RESEND_DELAY = 1.0


async def backfill_types(store: CatalogStore) -> tuple[int, int]:
    """Write a `type` into every coin whose metadata predates it.

    Returns:
        (updated, failed) row counts. A failed row is logged and skipped.
    """
    rows = await store.list_untyped_coins()
    logger.info(f"Found {len(rows)} coins without a content type")

    updated = failed = 0
    for row in rows:
        metadata = row.get("metadata") or {}
        content_type = classify_content_type(metadata)
        try:
            await store.update_coin(
                str(row["id"]), {"metadata": {**metadata, "type": content_type}}
            )
        except CatalogError as e:
            failed += 1
            logger.error(f"Failed to backfill coin {row['id']}: {e.message}")
            continue
        updated += 1
        logger.info(f"Coin {row['id']} -> {content_type}")

    return updated, failed


async def resend_events(
    store: CatalogStore,
    broadcaster: EventBroadcaster,
    gateway: str,
    delay: float = RESEND_DELAY,
) -> int:
    """Announce every catalogued coin again, newest first.

    Returns the number of events delivered. `delay` spaces out sends to stay
    under the bot API's rate limit.
    """
    sent = 0
    async for coin in store.iter_coins():
        if await broadcaster.notify(new_coin_event(coin, gateway, placeholder="?")):
            sent += 1
        await asyncio.sleep(delay)
    logger.info(f"Re-sent {sent} new-coin events")
    return sent
