"""Client for Zora's public coin API (live market stats)."""

import logging
from typing import Any

from shared_lib.baseclient import Client
from shared_lib.baseclient.exceptions import ClientError

from zora.exceptions import StatsUnavailableError
from zora.models import CoinStats

logger = logging.getLogger(__name__)


def parse_coin_stats(address: str, token: dict[str, Any]) -> CoinStats:
    """Map a `zora20Token` object onto CoinStats.

    The API exposes no per-token price, so price is derived as market cap
    over total supply when both are positive.
    """
    media = token.get("mediaContent") or {}
    preview = media.get("previewImage") or {}

    stats = CoinStats(
        address=token.get("address") or address,
        market_cap=token.get("marketCap"),
        holders=token.get("uniqueHolders"),
        volume_24h=token.get("volume24h"),
        total_supply=token.get("totalSupply"),
        image=preview.get("medium") or preview.get("small") or "",
        created_at=token.get("createdAt"),
    )
    if stats.market_cap > 0 and stats.total_supply > 0:
        stats.price = stats.market_cap / stats.total_supply
    return stats


class ZoraClient(Client):
    """Read-only access to live coin stats.

    Example:
        >>> async with ZoraClient() as client:
        ...     stats = await client.get_coin_stats("0x...", chain_id=8453)
        ...     print(stats.market_cap, stats.holders)
    """

    BASE_URL = "https://api-sdk.zora.engineering"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float = 10.0,
    ):
        headers = {"api-key": api_key} if api_key else {}
        super().__init__(base_url=base_url, timeout=timeout, headers=headers)

    async def get_coin_stats(self, address: str, chain_id: int) -> CoinStats:
        """Fetch live stats for one coin.

        Raises:
            StatsUnavailableError: On transport errors or when the API has no
                record of the coin.
        """
        try:
            result = await self._get(
                "/coin", params={"address": address, "chain": chain_id}
            )
        except ClientError as e:
            raise StatsUnavailableError(f"Stats lookup failed for {address}: {e.message}") from e

        token = (result or {}).get("zora20Token")
        if not token:
            raise StatsUnavailableError(f"No coin found at {address} on chain {chain_id}")
        return parse_coin_stats(address, token)
