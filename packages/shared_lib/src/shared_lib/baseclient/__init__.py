"""
Base HTTP clients for building API clients.

This package provides base classes for async HTTP clients (httpx and
aiohttp flavours) with built-in proxy support, JSON handling and error
translation.
"""

from .client import BaseClient as Client
from .aiohttp_client import BaseAioHttpClient

__version__ = "0.1.0"
__all__ = [
    "Client",
    "BaseAioHttpClient",
]
