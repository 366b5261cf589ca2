"""Exceptions raised by the catalog store."""


class CatalogError(Exception):
    """Base exception for catalog operations.

    Attributes:
        message: Description of the error
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class PersistenceError(CatalogError):
    """A catalog read or write failed at the storage layer."""

    pass


class DuplicateAddressError(PersistenceError):
    """A coin with the same contract address is already catalogued."""

    def __init__(self, coin_address: str) -> None:
        self.coin_address = coin_address
        super().__init__(f"Coin {coin_address} is already in the catalog")


class AuthorizationError(CatalogError):
    """The requester does not own the coin it tried to change."""

    pass


class CoinNotFoundError(CatalogError):
    """No catalog row matches the given id or address."""

    pass
