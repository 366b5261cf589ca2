"""
Unit tests for catalog row models.

Tests cover:
- Wallet normalization
- Legacy rows without a metadata type
- Metadata union round trip to camelCase JSON
"""

import pytest
from pydantic import ValidationError

from catalog import (
    BlogPayload,
    CoinFilter,
    CoinRecord,
    CreatorRecord,
    ImagePayload,
    NewCoin,
    classify_content_type,
    normalize_wallet,
)

WALLET = "0x" + "Ab" * 20


def _row(**overrides):
    row = {
        "id": 7,
        "creator_wallet": WALLET.lower(),
        "name": "Hello",
        "symbol": "HELLO",
        "coin_address": "0x" + "cd" * 20,
        "metadata": {"type": "blog", "title": "Hello", "originalUrl": "https://a.b/c"},
        "created_at": "2025-01-01T00:00:00+00:00",
        "updated_at": "2025-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    return row


class TestWallets:
    """Tests for wallet normalization."""

    def test_lowercases_and_strips(self):
        assert normalize_wallet(f"  {WALLET} ") == WALLET.lower()

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            normalize_wallet("   ")

    def test_creator_record_normalizes(self):
        creator = CreatorRecord(wallet_address=WALLET)

        assert creator.wallet_address == WALLET.lower()
        assert creator.display_name == WALLET.lower()[:6]

    def test_display_name_from_email(self):
        creator = CreatorRecord(wallet_address=WALLET, email="alice@example.com")

        assert creator.display_name == "alice"

    def test_filter_normalizes_creator(self):
        assert CoinFilter(creator_wallet=WALLET).creator_wallet == WALLET.lower()
        assert CoinFilter(creator_wallet="").creator_wallet is None


class TestCoinRecord:
    """Tests for CoinRecord parsing."""

    def test_blog_row(self):
        """Test a typed row parses into the matching payload."""
        coin = CoinRecord.model_validate(_row())

        assert coin.id == "7"
        assert isinstance(coin.metadata, BlogPayload)
        assert coin.metadata.original_url == "https://a.b/c"
        assert coin.content_type == "blog"

    def test_legacy_image_row(self):
        """Test an untyped row with an image is classified as image."""
        coin = CoinRecord.model_validate(_row(metadata={"image": "ipfs://bafyimg"}))

        assert isinstance(coin.metadata, ImagePayload)

    def test_legacy_empty_row(self):
        """Test an untyped row without an image defaults to blog."""
        coin = CoinRecord.model_validate(_row(metadata=None))

        assert coin.content_type == "blog"

    def test_unknown_type_rejected(self):
        """Test the metadata union is closed."""
        with pytest.raises(ValidationError):
            CoinRecord.model_validate(_row(metadata={"type": "video"}))

    def test_ownership_is_case_insensitive(self):
        coin = CoinRecord.model_validate(_row())

        assert coin.is_owned_by(WALLET.upper().replace("0X", "0x"))
        assert not coin.is_owned_by("0x" + "00" * 20)

    def test_unknown_metadata_keys_survive(self):
        """Test extra metadata keys round-trip through to_json."""
        coin = CoinRecord.model_validate(
            _row(metadata={"type": "blog", "customField": 1, "volume24h": 5})
        )

        out = coin.metadata.to_json()
        assert out["customField"] == 1
        assert out["volume24h"] == 5.0
        assert "ipfsUri" not in out


class TestClassification:
    """Tests for classify_content_type."""

    @pytest.mark.parametrize(
        "metadata,expected",
        [
            ({"image": "x.png"}, "image"),
            ({"image": "x.png", "audio": "y.mp3"}, "blog"),
            ({}, "blog"),
        ],
    )
    def test_classify(self, metadata, expected):
        assert classify_content_type(metadata) == expected


class TestNewCoin:
    """Tests for the insert payload."""

    def test_to_row(self):
        coin = NewCoin(
            creator_wallet=WALLET,
            name="Cat",
            symbol="CAT",
            coin_address="0x" + "cd" * 20,
            ipfs_uri="ipfs://bafymeta",
            metadata=ImagePayload(image="ipfs://bafyimg", ipfs_uri="ipfs://bafymeta"),
        )

        row = coin.to_row()

        assert row["creator_wallet"] == WALLET.lower()
        assert "transaction_hash" not in row
        assert row["metadata"] == {
            "type": "image",
            "image": "ipfs://bafyimg",
            "tags": [],
            "ipfsUri": "ipfs://bafymeta",
        }
