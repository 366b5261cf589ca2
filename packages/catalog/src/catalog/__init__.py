from catalog.exceptions import (
    AuthorizationError,
    CatalogError,
    CoinNotFoundError,
    DuplicateAddressError,
    PersistenceError,
)
from catalog.models import (
    BlogPayload,
    CatalogStats,
    CoinFilter,
    CoinPayload,
    CoinRecord,
    ContentType,
    CreatorRecord,
    CreatorStats,
    ImagePayload,
    MusicPayload,
    NewCoin,
    classify_content_type,
    normalize_wallet,
)
from catalog.store import CatalogStore

__version__ = "0.1.0"

__all__ = [
    # Store
    "CatalogStore",
    # Exceptions
    "CatalogError",
    "PersistenceError",
    "DuplicateAddressError",
    "AuthorizationError",
    "CoinNotFoundError",
    # Models
    "ContentType",
    "BlogPayload",
    "ImagePayload",
    "MusicPayload",
    "CoinPayload",
    "CreatorRecord",
    "NewCoin",
    "CoinRecord",
    "CoinFilter",
    "CatalogStats",
    "CreatorStats",
    "classify_content_type",
    "normalize_wallet",
]
