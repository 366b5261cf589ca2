"""Builds channel events from catalog rows."""

from catalog.models import CoinRecord
from shared_lib.utils.date import utc_now_iso
from telegram_events import NewCoinEvent, TradingEvent, explorer_links
from zora.models import CoinStats


def ipfs_to_http(uri: str | None, gateway: str) -> str | None:
    """Gateway URL for an `ipfs://` reference; other values pass through."""
    if uri and uri.startswith("ipfs://"):
        host = gateway.removeprefix("https://").removeprefix("http://").rstrip("/")
        return f"https://{host}/ipfs/{uri.removeprefix('ipfs://')}"
    return uri or None


def new_coin_event(
    coin: CoinRecord, gateway: str, placeholder: str | None = None
) -> NewCoinEvent:
    meta = coin.metadata
    links = explorer_links(coin.coin_address)
    return NewCoinEvent(
        name=coin.name,
        symbol=coin.symbol,
        market_cap=meta.market_cap if meta.market_cap is not None else placeholder,
        price=meta.price if meta.price is not None else placeholder,
        total_supply=meta.total_supply if meta.total_supply is not None else placeholder,
        creator=coin.creator_wallet,
        created_at=coin.created_at.isoformat(),
        contract=coin.coin_address,
        description=meta.description or "",
        image=ipfs_to_http(meta.image, gateway),
        zora_url=meta.zora_url or links["zora_url"],
        base_scan_url=meta.base_scan_url or links["base_scan_url"],
        dex_screener_url=meta.dex_screener_url or links["dex_screener_url"],
    )


def trading_event(coin: CoinRecord, stats: CoinStats) -> TradingEvent:
    return TradingEvent(
        name=coin.name,
        symbol=coin.symbol,
        market_cap=stats.market_cap,
        volume_24h=stats.volume_24h,
        total_supply=stats.total_supply,
        holders=stats.holders,
        creator=coin.creator_wallet,
        contract=coin.coin_address,
        created_at=coin.created_at.isoformat(),
        activity_at=utc_now_iso(),
        **explorer_links(coin.coin_address),
    )
