"""Catalog row models.

Rows use the persisted snake_case layout. The `metadata` JSON column is a
closed tagged union over content kinds, stored with camelCase keys.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from shared_lib.pydantic import APIBaseModel

ContentType = Literal["blog", "image", "music"]

# Row columns a coin update may touch. The contract address, creator and id
# are fixed for the life of a row.
MUTABLE_COIN_FIELDS = frozenset(
    {"name", "symbol", "transaction_hash", "ipfs_uri", "ipfs_hash", "gateway_url", "metadata"}
)


def normalize_wallet(value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Wallet address must be a non-empty string")
    return value.strip().lower()


def classify_content_type(metadata: dict[str, Any]) -> ContentType:
    """Content kind of a legacy row that predates the `type` field."""
    if metadata.get("image") and not metadata.get("audio"):
        return "image"
    return "blog"


class _PayloadBase(APIBaseModel):
    model_config = ConfigDict(
        populate_by_name=True, alias_generator=to_camel, extra="allow"
    )

    title: str | None = None
    description: str | None = None
    image: str | None = None
    tags: list[str] = Field(default_factory=list)

    # ipfs pointers, mirrored from the row for older clients
    ipfs_uri: str | None = None
    ipfs_hash: str | None = None
    gateway_url: str | None = None

    # trading-activity refreshes
    market_cap: float | None = None
    price: float | None = None
    volume_24h: float | None = Field(default=None, alias="volume24h")
    holders: int | None = None
    total_supply: float | None = None

    zora_url: str | None = None
    base_scan_url: str | None = None
    dex_screener_url: str | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BlogPayload(_PayloadBase):
    type: Literal["blog"] = "blog"
    original_url: str | None = None
    author: str | None = None
    publish_date: str | None = None
    content: str | None = None


class ImagePayload(_PayloadBase):
    type: Literal["image"] = "image"


class MusicPayload(_PayloadBase):
    type: Literal["music"] = "music"
    audio: str | None = None


CoinPayload = Annotated[
    Union[BlogPayload, ImagePayload, MusicPayload], Field(discriminator="type")
]


def _with_type(metadata: Any) -> Any:
    if isinstance(metadata, dict) and not metadata.get("type"):
        return {**metadata, "type": classify_content_type(metadata)}
    return metadata


class CreatorRecord(APIBaseModel):
    """A creator identity keyed by wallet address."""

    wallet_address: str
    email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("wallet_address", mode="before")
    @classmethod
    def normalize_address(cls, v: Any) -> str:
        return normalize_wallet(v)

    @property
    def display_name(self) -> str:
        if self.email:
            return self.email.split("@")[0]
        return self.wallet_address[:6]


class NewCoin(APIBaseModel):
    """Insert payload for a freshly deployed coin."""

    creator_wallet: str
    name: str
    symbol: str
    coin_address: str
    transaction_hash: str | None = None
    ipfs_uri: str | None = None
    ipfs_hash: str | None = None
    gateway_url: str | None = None
    metadata: CoinPayload

    @field_validator("creator_wallet", mode="before")
    @classmethod
    def normalize_creator(cls, v: Any) -> str:
        return normalize_wallet(v)

    def to_row(self) -> dict[str, Any]:
        row = self.model_dump(mode="json", exclude={"metadata"}, exclude_none=True)
        row["metadata"] = self.metadata.to_json()
        return row


class CoinRecord(APIBaseModel):
    """A catalogued coin, as stored."""

    id: str
    creator_wallet: str
    name: str
    symbol: str
    coin_address: str
    transaction_hash: str | None = None
    ipfs_uri: str | None = None
    ipfs_hash: str | None = None
    gateway_url: str | None = None
    metadata: CoinPayload
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def fill_legacy_type(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {**data, "metadata": _with_type(data.get("metadata") or {})}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> str:
        return str(v)

    @property
    def content_type(self) -> ContentType:
        return self.metadata.type

    def is_owned_by(self, wallet: str) -> bool:
        return self.creator_wallet.lower() == wallet.strip().lower()


class CoinFilter(APIBaseModel):
    """Optional narrowing for `list_coins`."""

    creator_wallet: str | None = None
    content_type: ContentType | None = None
    search: str | None = None

    @field_validator("creator_wallet", mode="before")
    @classmethod
    def normalize_creator(cls, v: Any) -> Any:
        return normalize_wallet(v) if v else None


class CatalogStats(APIBaseModel):
    total_coins: int
    total_creators: int


class CreatorStats(APIBaseModel):
    wallet_address: str
    user_coins: int
