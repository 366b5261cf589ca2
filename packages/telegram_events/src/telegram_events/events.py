"""
Notification events and their channel templates.

Events are ephemeral: built, rendered and sent, never stored. Every field is
optional and renders as a placeholder when absent, so a template never fails
on missing data.
"""

import html
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import Field

from shared_lib.pydantic import APIBaseModel

PLACEHOLDER = "N/A"
IMAGE_FALLBACK_NOTE = "\n\n[Image could not be loaded]"


def short_addr(addr: str | None) -> str:
    """0x1234...abcd"""
    return f"{addr[:6]}...{addr[-4:]}" if addr else ""


def explorer_links(address: str) -> dict[str, str]:
    """Zora, BaseScan and DexScreener pages for a coin on Base."""
    return {
        "zora_url": f"https://zora.co/coin/base:{address}",
        "base_scan_url": f"https://basescan.org/token/{address}",
        "dex_screener_url": f"https://dexscreener.com/base/{address}",
    }


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _safe(value: Any, placeholder: str = PLACEHOLDER) -> str:
    return html.escape(str(value)) if _present(value) else placeholder


class _EventBase(APIBaseModel):
    name: str | None = None
    symbol: str | None = None
    market_cap: Any = None
    total_supply: Any = None
    creator: str | None = None
    contract: str | None = None
    created_at: Any = None
    zora_url: str | None = None
    base_scan_url: str | None = None
    dex_screener_url: str | None = None
    image: str | None = None

    def _creator_line(self) -> str:
        if not self.creator:
            return f"👤 {PLACEHOLDER}\n"
        return f'👤 <a href="https://zora.co/profile/{self.creator}">{short_addr(self.creator)}</a>\n'

    def _links(self) -> str:
        links = [
            f'<a href="{self.zora_url}">View on Zora</a>' if self.zora_url else None,
            f'<a href="{self.base_scan_url}">BaseScan</a>' if self.base_scan_url else None,
            f'<a href="{self.dex_screener_url}">DexScreener</a>'
            if self.dex_screener_url
            else None,
        ]
        joined = " | ".join(link for link in links if link)
        return f"\n🔗 {joined}" if joined else ""

    def render(self) -> str:
        raise NotImplementedError


class NewCoinEvent(_EventBase):
    kind: Literal["new_coin"] = "new_coin"
    price: Any = None
    description: str | None = None

    def render(self) -> str:
        description = (
            f"📝 {html.escape(self.description)}\n" if self.description else ""
        )
        return (
            "🆕🪙 <b>NEW CREATOR COIN CREATED</b>\n\n"
            f"📛 {_safe(self.name)} ({_safe(self.symbol)})\n"
            f"💰 Market Cap: ${_safe(self.market_cap)}\n"
            f"💵 Price: ${_safe(self.price)}\n"
            f"📊 Total Supply: {_safe(self.total_supply)}\n"
            f"{self._creator_line()}"
            f"📅 Created: {_safe(self.created_at)}\n"
            f"📄 Contract: {short_addr(self.contract) or PLACEHOLDER}\n"
            f"{description}"
            f"{self._links()}"
        )


class TradingEvent(_EventBase):
    kind: Literal["trading"] = "trading"
    volume_24h: Any = None
    holders: Any = None
    activity_at: Any = None

    def render(self) -> str:
        return (
            "🔄📊 <b>TRADING ACTIVITY</b>\n\n"
            f"📛 {_safe(self.name)} ({_safe(self.symbol)})\n"
            f"💰 Market Cap: ${_safe(self.market_cap)}\n"
            f"📊 24h Volume: ${_safe(self.volume_24h)}\n"
            f"📊 Total Supply: {_safe(self.total_supply)}\n"
            f"👥 Holders: {_safe(self.holders)}\n"
            f"{self._creator_line()}"
            f"📄 Contract: {short_addr(self.contract) or PLACEHOLDER}\n"
            f"📅 Created: {_safe(self.created_at)}\n"
            f"⏰ Activity: {_safe(self.activity_at)}\n"
            f"{self._links()}"
        )


class _SideEvent(_EventBase):
    holders: Any = None
    activity_at: Any = None

    HEADER: ClassVar[str] = ""

    def render(self) -> str:
        return (
            f"{self.HEADER}\n\n"
            f"📛 {_safe(self.name)} ({_safe(self.symbol)})\n"
            f"💰 Market Cap: ${_safe(self.market_cap)}\n"
            f"📊 Total Supply: {_safe(self.total_supply)}\n"
            f"👥 Holders: {_safe(self.holders)}\n"
            f"{self._creator_line()}"
            f"📄 Contract: {short_addr(self.contract) or PLACEHOLDER}\n"
            f"📅 Created: {_safe(self.created_at)}\n"
            f"⏰ Activity: {_safe(self.activity_at)}\n"
            f"{self._links()}"
        )


class BuyEvent(_SideEvent):
    kind: Literal["buy"] = "buy"

    HEADER: ClassVar[str] = "🟢💰 BUY ACTIVITY"


class SellEvent(_SideEvent):
    kind: Literal["sell"] = "sell"

    HEADER: ClassVar[str] = "🔴💸 SELL ACTIVITY"


NotificationEvent = Annotated[
    Union[NewCoinEvent, TradingEvent, BuyEvent, SellEvent], Field(discriminator="kind")
]
