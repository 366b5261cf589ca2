"""
Catalog store backed by Supabase's PostgREST API.

The store is the durable, queryable record of coins and creators. It is
authoritative for a coin once the first insert succeeds; before that the
coin-creation pipeline owns the record.
"""

import asyncio
import logging
from typing import Any, AsyncIterator

from web3 import Web3

from shared_lib.baseclient import Client
from shared_lib.baseclient.exceptions import ClientError, ConfigurationError, HTTPError
from shared_lib.utils.date import utc_now_iso

from catalog.exceptions import (
    AuthorizationError,
    CatalogError,
    CoinNotFoundError,
    DuplicateAddressError,
    PersistenceError,
)
from catalog.models import (
    MUTABLE_COIN_FIELDS,
    CatalogStats,
    CoinFilter,
    CoinRecord,
    CreatorRecord,
    CreatorStats,
    NewCoin,
    normalize_wallet,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"
RETURN_ROWS = {"Prefer": "return=representation"}

# PostgREST reserves these inside filter values
_RESERVED = str.maketrans("", "", ',()"*\\')


def _is_malformed_id(error: HTTPError) -> bool:
    """PostgREST rejected an id that is not a UUID."""
    body = error.response_body if isinstance(error.response_body, dict) else {}
    return body.get("code") == INVALID_TEXT_REPRESENTATION


def _parse_total(content_range: str | None) -> int:
    """Total from a `Content-Range` header such as "0-0/42" or "*/0"."""
    if not content_range or "/" not in content_range:
        raise PersistenceError(f"Missing row count in response: {content_range!r}")
    total = content_range.rsplit("/", 1)[1]
    if total == "*":
        raise PersistenceError("Row count was not computed")
    return int(total)


class CatalogStore(Client):
    """Coin and creator catalog.

    Example:
        >>> async with CatalogStore(url="https://xyz.supabase.co", key="...") as store:
        ...     creator = await store.upsert_creator("0xABC...")
        ...     coins = await store.list_coins(limit=20)
    """

    def __init__(self, url: str | None, key: str | None, timeout: float = 15.0):
        """
        Args:
            url: Supabase project URL.
            key: Supabase API key (anon or service role).

        Raises:
            ConfigurationError: If either is missing.
        """
        if not url or not key:
            raise ConfigurationError("Supabase URL and key are required")
        super().__init__(
            base_url=f"{url.rstrip('/')}/rest/v1",
            timeout=timeout,
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
            },
        )

    async def _rest(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        try:
            return await self._fetch(method, endpoint, **kwargs)
        except ClientError as e:
            raise PersistenceError(f"{method} {endpoint} failed: {e.message}") from e

    # -----------------------------------Creators-----------------------------------#

    async def upsert_creator(self, wallet: str, email: str | None = None) -> CreatorRecord:
        """Create or touch the creator for `wallet`. Idempotent on wallet.

        An omitted email leaves any stored email unchanged.
        """
        row: dict[str, Any] = {
            "wallet_address": normalize_wallet(wallet),
            "updated_at": utc_now_iso(),
        }
        if email:
            row["email"] = email

        rows = await self._rest(
            "POST",
            "/users",
            params={"on_conflict": "wallet_address"},
            payload=row,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        if not rows:
            raise PersistenceError(f"Upsert returned no row for {row['wallet_address']}")
        return CreatorRecord.model_validate(rows[0])

    async def get_creator(self, wallet: str) -> CreatorRecord | None:
        rows = await self._rest(
            "GET",
            "/users",
            params={
                "select": "*",
                "wallet_address": f"eq.{normalize_wallet(wallet)}",
                "limit": 1,
            },
        )
        return CreatorRecord.model_validate(rows[0]) if rows else None

    # -----------------------------------Coins-----------------------------------#

    async def insert_coin(self, coin: NewCoin) -> CoinRecord:
        """Insert a coin row.

        Raises:
            DuplicateAddressError: The contract address is already catalogued.
            PersistenceError: Any other storage failure.
        """
        try:
            rows = await self._fetch(
                "POST", "/coins", payload=coin.to_row(), headers=RETURN_ROWS
            )
        except HTTPError as e:
            body = e.response_body if isinstance(e.response_body, dict) else {}
            if e.status_code == 409 or body.get("code") == UNIQUE_VIOLATION:
                raise DuplicateAddressError(coin.coin_address) from e
            raise PersistenceError(f"Insert of {coin.coin_address} failed: {e.message}") from e
        except ClientError as e:
            raise PersistenceError(f"Insert of {coin.coin_address} failed: {e.message}") from e

        if not rows:
            raise PersistenceError(f"Insert returned no row for {coin.coin_address}")
        record = CoinRecord.model_validate(rows[0])
        logger.info(f"Catalogued {record.symbol} at {record.coin_address} (id {record.id})")
        return record

    async def list_coins(
        self,
        filter: CoinFilter | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[CoinRecord]:
        """Coins matching `filter`, newest first."""
        params: dict[str, Any] = {
            "select": "*",
            "order": "created_at.desc",
            "limit": limit,
            "offset": offset,
        }
        if filter is not None:
            if filter.creator_wallet:
                params["creator_wallet"] = f"eq.{filter.creator_wallet}"
            if filter.content_type:
                params["metadata->>type"] = f"eq.{filter.content_type}"
            term = (filter.search or "").translate(_RESERVED).strip()
            if term:
                pattern = f'"*{term}*"'
                params["or"] = (
                    f"(name.ilike.{pattern},symbol.ilike.{pattern},"
                    f"metadata->>title.ilike.{pattern},"
                    f"metadata->>description.ilike.{pattern})"
                )

        rows = await self._rest("GET", "/coins", params=params)
        return [CoinRecord.model_validate(row) for row in rows or []]

    async def iter_coins(
        self, filter: CoinFilter | None = None, page_size: int = 200
    ) -> AsyncIterator[CoinRecord]:
        """Every matching coin, newest first, fetched page by page."""
        offset = 0
        while True:
            page = await self.list_coins(filter, limit=page_size, offset=offset)
            for coin in page:
                yield coin
            if len(page) < page_size:
                return
            offset += page_size

    async def get_by_address(self, address: str) -> CoinRecord | None:
        """Case-insensitive lookup by contract address.

        Anything that is not a 20-byte hex address matches nothing.
        """
        address = (address or "").strip()
        if not Web3.is_address(address):
            return None
        rows = await self._rest(
            "GET",
            "/coins",
            params={"select": "*", "coin_address": f"ilike.{address}", "limit": 1},
        )
        return CoinRecord.model_validate(rows[0]) if rows else None

    async def get_coin(self, coin_id: str) -> CoinRecord | None:
        try:
            rows = await self._fetch(
                "GET", "/coins", params={"select": "*", "id": f"eq.{coin_id}", "limit": 1}
            )
        except HTTPError as e:
            if _is_malformed_id(e):
                return None
            raise PersistenceError(f"GET /coins failed: {e.message}") from e
        except ClientError as e:
            raise PersistenceError(f"GET /coins failed: {e.message}") from e
        return CoinRecord.model_validate(rows[0]) if rows else None

    async def delete_coin(self, coin_id: str, requester_wallet: str) -> None:
        """Remove a coin from the catalog. The token itself stays live on-chain.

        Raises:
            CoinNotFoundError: No coin with `coin_id`.
            AuthorizationError: `requester_wallet` is not the coin's creator.
        """
        coin = await self.get_coin(coin_id)
        if coin is None:
            raise CoinNotFoundError(f"Coin {coin_id} not found")
        if not coin.is_owned_by(requester_wallet):
            logger.warning(f"Rejected delete of coin {coin_id} by {requester_wallet}")
            raise AuthorizationError(f"{requester_wallet} does not own coin {coin_id}")

        await self._rest(
            "DELETE",
            "/coins",
            params={"id": f"eq.{coin_id}", "creator_wallet": f"eq.{coin.creator_wallet}"},
            headers={"Prefer": "return=minimal"},
        )
        logger.info(f"Deleted coin {coin_id} ({coin.coin_address}) from catalog")

    async def update_coin(self, coin_id: str, fields: dict[str, Any]) -> CoinRecord:
        """Apply a partial update and return the updated row.

        Raises:
            CatalogError: `fields` touches an immutable column.
            CoinNotFoundError: No coin with `coin_id`.
        """
        immutable = set(fields) - MUTABLE_COIN_FIELDS
        if immutable:
            raise CatalogError(f"Cannot update immutable fields: {sorted(immutable)}")

        changes = dict(fields)
        metadata = changes.get("metadata")
        if metadata is not None and hasattr(metadata, "to_json"):
            changes["metadata"] = metadata.to_json()
        changes["updated_at"] = utc_now_iso()

        try:
            rows = await self._fetch(
                "PATCH",
                "/coins",
                params={"id": f"eq.{coin_id}"},
                payload=changes,
                headers=RETURN_ROWS,
            )
        except HTTPError as e:
            if _is_malformed_id(e):
                raise CoinNotFoundError(f"Coin {coin_id} not found") from e
            raise PersistenceError(f"PATCH /coins failed: {e.message}") from e
        except ClientError as e:
            raise PersistenceError(f"PATCH /coins failed: {e.message}") from e
        if not rows:
            raise CoinNotFoundError(f"Coin {coin_id} not found")
        return CoinRecord.model_validate(rows[0])

    async def list_untyped_coins(self, limit: int = 1000) -> list[dict[str, Any]]:
        """Raw `{id, metadata}` rows whose metadata has no `type` yet."""
        rows = await self._rest(
            "GET",
            "/coins",
            params={"select": "id,metadata", "metadata->>type": "is.null", "limit": limit},
        )
        return rows or []

    # -----------------------------------Stats-----------------------------------#

    async def count_coins(self, creator_wallet: str | None = None) -> int:
        params: dict[str, Any] = {"select": "id", "limit": 1}
        if creator_wallet:
            params["creator_wallet"] = f"eq.{normalize_wallet(creator_wallet)}"
        try:
            response = await self._request(
                "GET", "/coins", params=params, headers={"Prefer": "count=exact"}
            )
        except ClientError as e:
            raise PersistenceError(f"Coin count failed: {e.message}") from e
        return _parse_total(response.headers.get("content-range"))

    async def count_creators(self) -> int:
        """Distinct creator wallets across all coins (set cardinality in SQL)."""
        result = await self._rest("POST", "/rpc/count_distinct_creators", payload={})
        return int(result or 0)

    async def coin_stats(self) -> CatalogStats:
        total_coins, total_creators = await asyncio.gather(
            self.count_coins(), self.count_creators()
        )
        return CatalogStats(total_coins=total_coins, total_creators=total_creators)

    async def creator_stats(self, wallet: str) -> CreatorStats:
        wallet = normalize_wallet(wallet)
        return CreatorStats(wallet_address=wallet, user_coins=await self.count_coins(wallet))
