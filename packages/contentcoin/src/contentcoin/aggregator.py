"""
Creator rankings: catalog rows joined with live coin stats.

Stats are fetched concurrently (bounded by a semaphore). A coin whose stats
lookup fails ranks with zeroed stats instead of failing the whole view.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime

from catalog import CatalogStore, CoinFilter, CoinRecord, CreatorRecord
from catalog.exceptions import CatalogError
from shared_lib.config import BASE_CHAIN_ID
from shared_lib.pydantic import APIBaseModel
from shared_lib.utils.date import EPOCH
from zora import CoinStats, ZoraClient
from zora.exceptions import StatsUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8


class RankedCoin(APIBaseModel):
    coin: CoinRecord
    stats: CoinStats

    @property
    def created_at(self) -> datetime:
        """Live creation time, falling back to the catalog's."""
        if self.stats.created_at != EPOCH:
            return self.stats.created_at
        return self.coin.created_at

    def sort_key(self) -> tuple[float, float, int, float, str]:
        """Ascending sort puts the best coin first.

        Market cap, then price, then holders, then most recent creation, all
        descending. The contract address breaks any remaining tie.
        """
        return (
            -self.stats.market_cap,
            -self.stats.price,
            -self.stats.holders,
            -self.created_at.timestamp(),
            self.coin.coin_address.lower(),
        )


class CreatorRanking(APIBaseModel):
    wallet_address: str
    creator: CreatorRecord | None = None
    coins: list[RankedCoin]

    @property
    def top_coin(self) -> RankedCoin:
        return self.coins[0]

    @property
    def display_name(self) -> str:
        return self.creator.display_name if self.creator else self.wallet_address[:6]


class CreatorAggregator:
    """Builds the creator leaderboard.

    Attributes:
        store: Catalog store the coins are read from
        stats_client: Live stats source
        chain_id: Chain the coins live on
        concurrency: Maximum in-flight stats lookups
    """

    def __init__(
        self,
        store: CatalogStore,
        stats_client: ZoraClient,
        chain_id: int = BASE_CHAIN_ID,
        concurrency: int = DEFAULT_CONCURRENCY,
    ):
        self.store = store
        self.stats_client = stats_client
        self.chain_id = chain_id
        self.concurrency = concurrency

    async def live_stats(self, coins: list[CoinRecord]) -> list[RankedCoin]:
        """Stats for every coin, zeroed for those whose lookup failed."""
        semaphore = asyncio.Semaphore(self.concurrency)

        async def lookup(coin: CoinRecord) -> RankedCoin:
            async with semaphore:
                try:
                    stats = await self.stats_client.get_coin_stats(
                        coin.coin_address, self.chain_id
                    )
                except StatsUnavailableError as e:
                    logger.warning(f"Using zero stats for {coin.coin_address}: {e.message}")
                    stats = CoinStats.zero(coin.coin_address, created_at=coin.created_at)
            return RankedCoin(coin=coin, stats=stats)

        return list(await asyncio.gather(*(lookup(coin) for coin in coins)))

    async def _creator(self, wallet: str) -> CreatorRecord | None:
        try:
            return await self.store.get_creator(wallet)
        except CatalogError as e:
            logger.warning(f"Creator lookup failed for {wallet}: {e.message}")
            return None

    async def rank_creators(self, filter: CoinFilter | None = None) -> list[CreatorRanking]:
        """
        Group catalogued coins by creator and rank them.

        ## Returns
        - Creators ordered by their top coin, each with coins ordered by
          `RankedCoin.sort_key`.

        ## Raises
        - `PersistenceError` if the catalog itself cannot be read.
        """
        coins = [coin async for coin in self.store.iter_coins(filter)]
        ranked = await self.live_stats(coins)

        by_creator: dict[str, list[RankedCoin]] = defaultdict(list)
        for item in ranked:
            by_creator[item.coin.creator_wallet].append(item)

        wallets = list(by_creator)
        creators = await asyncio.gather(*(self._creator(wallet) for wallet in wallets))

        rankings = [
            CreatorRanking(
                wallet_address=wallet,
                creator=creator,
                coins=sorted(by_creator[wallet], key=RankedCoin.sort_key),
            )
            for wallet, creator in zip(wallets, creators)
        ]
        rankings.sort(key=lambda ranking: ranking.top_coin.sort_key())
        logger.info(f"Ranked {len(rankings)} creators over {len(coins)} coins")
        return rankings
