"""Shared fakes for the application-level tests."""

import hashlib

import pytest
from unittest.mock import AsyncMock, Mock

from web3 import Web3

from catalog import CoinRecord, CreatorRecord
from pinata import ContentPublisher, PinnedFile
from zora import DeployResult

CREATOR = "0x" + "ab" * 20
COIN = Web3.to_checksum_address("0x" + "cd" * 20)
TX_HASH = "0x" + "ee" * 32
CREATED_AT = "2025-01-01T00:00:00+00:00"


def coin_row(**overrides):
    row = {
        "id": "1",
        "creator_wallet": CREATOR,
        "name": "Cat",
        "symbol": "CAT",
        "coin_address": COIN,
        "metadata": {"type": "image", "image": "ipfs://bafyimg", "description": "A cat"},
        "created_at": CREATED_AT,
        "updated_at": CREATED_AT,
    }
    row.update(overrides)
    return row


def record_from_new(new_coin, coin_id="1"):
    """What the catalog would hand back for an inserted NewCoin."""
    return CoinRecord.model_validate(
        {**new_coin.to_row(), "id": coin_id, "created_at": CREATED_AT, "updated_at": CREATED_AT}
    )


@pytest.fixture
def pinata_client():
    """Pinata stand-in whose CIDs are derived from the uploaded bytes."""

    async def upload_file(content, filename, content_type="application/octet-stream"):
        return PinnedFile(cid="bafy" + hashlib.sha256(content).hexdigest()[:20], name=filename)

    client = Mock()
    client.gateway = "gw.test"
    client.upload_file = AsyncMock(side_effect=upload_file)
    client.gateway_url = Mock(side_effect=lambda cid: f"https://gw.test/ipfs/{cid}")
    return client


@pytest.fixture
def publisher(pinata_client):
    return ContentPublisher(pinata_client)


@pytest.fixture
def deployer():
    deployer = Mock()
    deployer.deploy = AsyncMock(
        return_value=DeployResult(address=COIN, tx_hash=TX_HASH, chain_id=8453)
    )
    return deployer


@pytest.fixture
def store():
    store = Mock()
    store.upsert_creator = AsyncMock(return_value=CreatorRecord(wallet_address=CREATOR))
    store.insert_coin = AsyncMock(side_effect=record_from_new)
    store.get_by_address = AsyncMock(return_value=None)
    store.get_creator = AsyncMock(return_value=None)
    store.update_coin = AsyncMock()
    return store


@pytest.fixture
def broadcaster():
    broadcaster = Mock()
    broadcaster.notify = AsyncMock(return_value=True)
    return broadcaster


@pytest.fixture
def make_row():
    return coin_row
