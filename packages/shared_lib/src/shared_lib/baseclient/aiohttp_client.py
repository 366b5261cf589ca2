"""
Base HTTP client for building API clients using aiohttp.

This module provides an abstract base class for creating async HTTP clients
using aiohttp. It mirrors BaseClient's error translation so callers only
catch `HTTPError`/`ProxyError` regardless of the transport underneath.
"""

from abc import ABC
from typing import Any
import asyncio
import json
import logging

import aiohttp
from aiohttp import ClientTimeout

from .exceptions import HTTPError, ProxyError, ConfigurationError


logger = logging.getLogger(__name__)


def _error_body(text: str) -> dict | list | None:
    """JSON error body when there is one; plain text is wrapped as a message."""
    if not text:
        return None
    try:
        body = json.loads(text)
    except ValueError:
        return {"message": text}
    return body if isinstance(body, (dict, list)) else {"message": text}


class BaseAioHttpClient(ABC):
    """
    Abstract base class for building HTTP API clients using aiohttp.

    This class provides a foundation for creating async HTTP clients with
    built-in support for:
    - Proxy configuration
    - Custom headers
    - Automatic JSON response parsing
    - Proper resource cleanup

    Must be constructed inside a running event loop.

    Attributes:
        BASE_URL (str): Default base URL for API requests. Should be overridden
                       by subclasses or via constructor.
        session (aiohttp.ClientSession): The underlying aiohttp client session.

    Example:
        >>> class MyAPIClient(BaseAioHttpClient):
        ...     BASE_URL = "https://api.example.com"
        ...
        ...     async def get_user(self, user_id: int):
        ...         return await self._fetch("GET", f"/users/{user_id}")
        ...
        >>> async with MyAPIClient(proxy="proxy.example.com:8080") as client:
        ...     user = await client.get_user(123)
    """

    BASE_URL: str = "https://api.example.com"

    def __init__(
        self,
        base_url: str | None = None,
        proxy: str | None = None,
        timeout: float = 30.0,
        **kwargs: Any,
    ):
        """
        Initialize the base aiohttp client.

        Args:
            base_url: Custom base URL to override the class BASE_URL attribute.
            proxy: Proxy URL in format "host:port" or "http://host:port".
            timeout: Request timeout in seconds. Defaults to 30.0.
            **kwargs: Additional arguments passed to aiohttp.ClientSession.
                     Common options include:
                     - headers: Custom headers dict
                     - connector: Custom TCPConnector instance
                     - trust_env: Trust environment variables for proxy config

        Raises:
            ConfigurationError: If proxy or configuration is invalid.
        """
        self.proxy = proxy
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

        proxy_url = None
        if self.proxy is not None:
            if not isinstance(self.proxy, str):
                raise ConfigurationError(f"Invalid proxy configuration: {self.proxy!r}")
            proxy_url = self.proxy if self.proxy.startswith("http") else f"http://{self.proxy}"
            logger.debug(f"Proxy configured: {proxy_url}")

        default_headers = {
            "Accept": "application/json",
            "User-Agent": "ContentCoin/0.1.0",
        }
        headers = {**default_headers, **kwargs.pop("headers", {})}

        self.session = aiohttp.ClientSession(
            headers=headers,
            timeout=ClientTimeout(total=timeout),
            **kwargs,
        )

        self._proxy_url = proxy_url

        logger.info(f"{type(self).__name__} initialized with base URL: {self.base_url}")

    async def _fetch(
        self,
        method: str,
        endpoint: str = "",
        params: dict[str, Any] | None = None,
        payload: Any = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> Any:
        """
        Perform an HTTP request and return the decoded JSON body.

        The body is read before the status is checked, so an error response's
        JSON (e.g. `{"error": "..."}`) is kept on `HTTPError.response_body`.
        An empty body decodes to None.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH, etc.).
            endpoint: API endpoint path (will be appended to BASE_URL).
            params: Query parameters for the request.
            payload: JSON payload for POST/PUT/PATCH requests.
            headers: Additional headers for this specific request.
            **kwargs: Additional arguments passed to aiohttp request method.

        Raises:
            HTTPError: If the request fails, returns an error status code
                or a success body that is not JSON.
            ProxyError: If there's a proxy-related connection issue.
        """
        url = f"{self.base_url}{endpoint}"

        if self._proxy_url and "proxy" not in kwargs:
            kwargs["proxy"] = self._proxy_url

        try:
            logger.debug(f"{method} {url}")
            async with self.session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=headers,
                **kwargs,
            ) as response:
                status = response.status
                text = await response.text()
        except aiohttp.ClientProxyConnectionError as e:
            logger.error(f"Proxy error: {e}")
            raise ProxyError(f"Proxy connection failed: {e}") from e
        except (aiohttp.ServerTimeoutError, asyncio.TimeoutError) as e:
            logger.error(f"Request timeout: {e}")
            raise HTTPError(f"Request timed out: {e}") from e
        except aiohttp.ClientError as e:
            logger.error(f"Connection error: {e}")
            raise HTTPError(f"Connection failed: {e}") from e

        logger.debug(f"Response status: {status}")
        if status >= 400:
            logger.error(f"HTTP error {status} from {method} {url}")
            raise HTTPError(
                f"Request failed with status {status}",
                status_code=status,
                response_body=_error_body(text),
            )
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            logger.error(f"Invalid JSON from {method} {endpoint}: {e}")
            raise HTTPError(f"Invalid JSON response: {e}", status_code=status) from e

    async def _get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Convenience method for GET requests."""
        return await self._fetch("GET", endpoint, params=params, **kwargs)

    async def _post(
        self,
        endpoint: str,
        payload: Any = None,
        **kwargs: Any,
    ) -> Any:
        """Convenience method for POST requests."""
        return await self._fetch("POST", endpoint, payload=payload, **kwargs)

    async def close(self) -> None:
        """Close the aiohttp session and release resources."""
        if not self.session.closed:
            await self.session.close()
        logger.info(f"{type(self).__name__} closed")

    async def __aenter__(self):
        """Enable use as async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Ensure session is closed when exiting context."""
        await self.close()
