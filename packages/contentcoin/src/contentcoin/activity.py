"""Trading-activity refresh: live stats merged into a coin's catalog row."""

import logging

from catalog import CatalogStore, CoinRecord
from catalog.exceptions import CoinNotFoundError
from shared_lib.config import BASE_CHAIN_ID
from telegram_events import EventBroadcaster
from zora import ZoraClient

from contentcoin.events import trading_event

logger = logging.getLogger(__name__)


class TradingActivityRefresher:
    def __init__(
        self,
        store: CatalogStore,
        stats_client: ZoraClient,
        broadcaster: EventBroadcaster | None = None,
        chain_id: int = BASE_CHAIN_ID,
    ):
        self.store = store
        self.stats_client = stats_client
        self.broadcaster = broadcaster
        self.chain_id = chain_id

    async def refresh(self, address: str) -> CoinRecord:
        """
        Pull live stats for the coin at `address` into its row and announce
        the activity.

        Raises:
            CoinNotFoundError: The address is not catalogued.
            StatsUnavailableError: Live stats could not be fetched.
            PersistenceError: The row could not be updated.
        """
        coin = await self.store.get_by_address(address)
        if coin is None:
            raise CoinNotFoundError(f"No catalogued coin at {address}")

        stats = await self.stats_client.get_coin_stats(coin.coin_address, self.chain_id)
        metadata = coin.metadata.model_copy(
            update={
                "market_cap": stats.market_cap,
                "price": stats.price,
                "volume_24h": stats.volume_24h,
                "holders": stats.holders,
                "total_supply": stats.total_supply,
            }
        )
        updated = await self.store.update_coin(coin.id, {"metadata": metadata})
        logger.info(
            f"Refreshed {coin.symbol}: market cap {stats.market_cap}, holders {stats.holders}"
        )

        if self.broadcaster is not None:
            try:
                await self.broadcaster.notify(trading_event(updated, stats))
            except Exception:
                logger.exception(f"Trading announcement for {coin.coin_address} failed")
        return updated
