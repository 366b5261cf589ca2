"""Models for coin deployment and live coin stats."""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from shared_lib.pydantic import APIBaseModel
from shared_lib.utils.date import EPOCH, parse_timestamp


class DeployParams(APIBaseModel):
    """Arguments of a coin deployment.

    Attributes:
        name: Token name
        symbol: Ticker symbol
        uri: Metadata URI (`ipfs://<cid>`)
        payout_recipient: Address receiving creator rewards
        platform_referrer: Address credited as referrer
        chain_id: Chain the coin is deployed on
    """

    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    uri: str = Field(..., min_length=1)
    payout_recipient: str
    platform_referrer: str
    chain_id: int


class DeployResult(APIBaseModel):
    """Outcome of a mined deployment: the point of no return."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str
    tx_hash: str
    chain_id: int


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class CoinStats(APIBaseModel):
    """Live market data for one coin.

    Missing or malformed numbers coerce to zero so rankings never fail on a
    partially populated response.
    """

    address: str
    market_cap: float = 0.0
    price: float = 0.0
    holders: int = 0
    volume_24h: float = 0.0
    total_supply: float = 0.0
    image: str = ""
    created_at: datetime = EPOCH

    @field_validator("market_cap", "price", "volume_24h", "total_supply", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        return _to_float(v)

    @field_validator("holders", mode="before")
    @classmethod
    def coerce_holders(cls, v: Any) -> int:
        return int(_to_float(v))

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: Any) -> datetime:
        return parse_timestamp(v)

    @classmethod
    def zero(cls, address: str, created_at: Any = None) -> "CoinStats":
        """Stand-in for a coin whose stats lookup failed."""
        return cls(address=address, created_at=created_at)
