"""
Base HTTP client for building API clients.

This module provides an abstract base class for creating async HTTP clients
using httpx. The Pinata, Supabase and Zora clients all inherit from it, so
error translation and JSON handling live in one place.
"""

from abc import ABC
from typing import Any
import logging

import httpx

from .exceptions import HTTPError, ProxyError, ConfigurationError


logger = logging.getLogger(__name__)


def _response_body(response: httpx.Response) -> Any:
    """Best-effort decode of an error body for diagnostics."""
    try:
        return response.json()
    except ValueError:
        return {"raw": response.text}


class BaseClient(ABC):
    """
    Abstract base class for building HTTP API clients.

    This class provides a foundation for creating async HTTP clients with
    built-in support for:
    - Proxy configuration
    - Custom headers (API keys, bearer tokens)
    - Automatic JSON response parsing, including empty bodies
    - Access to raw responses when headers matter (e.g. row counts)
    - Proper resource cleanup

    Attributes:
        BASE_URL (str): Default base URL for API requests. Should be overridden
                       by subclasses or via constructor.
        client (httpx.AsyncClient): The underlying httpx async client.

    Example:
        >>> class MyAPIClient(BaseClient):
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
        Initialize the base client.

        Args:
            base_url: Custom base URL to override the class BASE_URL attribute.
            proxy: Proxy URL in format "host:port" or "http://host:port".
            timeout: Request timeout in seconds. Defaults to 30.0.
            **kwargs: Additional arguments passed to httpx.AsyncClient.
                     Common options include:
                     - headers: Custom headers dict
                     - verify: SSL verification (bool or path to cert)
                     - follow_redirects: Whether to follow redirects (bool)

        Raises:
            ConfigurationError: If proxy format is invalid.
        """
        self.proxy = proxy
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

        if self.proxy is not None:
            try:
                proxy_url = (
                    self.proxy
                    if self.proxy.startswith("http")
                    else f"http://{self.proxy}"
                )
                kwargs["proxy"] = proxy_url
                logger.debug(f"Proxy configured: {proxy_url}")
            except Exception as e:
                raise ConfigurationError(f"Invalid proxy configuration: {e}") from e

        if "timeout" not in kwargs:
            kwargs["timeout"] = timeout

        headers = kwargs.pop("headers", None) or {}
        self.client = httpx.AsyncClient(**kwargs)

        # Set default headers; per-client headers win
        default_headers = {
            "Accept": "application/json",
            "User-Agent": "ContentCoin/0.1.0",
        }
        self.client.headers.update(default_headers)
        self.client.headers.update(headers)

        logger.info(f"{type(self).__name__} initialized with base URL: {self.base_url}")

    async def _request(
        self,
        method: str,
        endpoint: str = "",
        params: dict[str, Any] | None = None,
        payload: Any = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Perform an HTTP request and return the raw response.

        Use this when the caller needs response headers; otherwise prefer
        `_fetch`, which also decodes the body.

        Raises:
            HTTPError: If the request fails or returns an error status code.
            ProxyError: If there's a proxy-related connection issue.
        """
        url = f"{self.base_url}{endpoint}"

        try:
            logger.debug(f"{method} {url}")
            response = await self.client.request(
                method,
                url,
                params=params,
                json=payload,
                headers=headers,
                **kwargs,
            )
            response.raise_for_status()

            logger.debug(f"Response status: {response.status_code}")
            return response

        except httpx.ProxyError as e:
            logger.error(f"Proxy error: {e}")
            raise ProxyError(f"Proxy connection failed: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code}: {e}")
            raise HTTPError(
                f"Request failed with status {e.response.status_code}",
                status_code=e.response.status_code,
                response_body=_response_body(e.response),
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Request timeout: {e}")
            raise HTTPError(f"Request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Transport error: {e}")
            raise HTTPError(f"Request failed: {e}") from e

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

        This is the core method for making HTTP requests. It handles URL
        construction, error handling, and JSON parsing. An empty body
        (e.g. 204 No Content) decodes to None.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH, etc.).
            endpoint: API endpoint path (will be appended to BASE_URL).
            params: Query parameters for the request.
            payload: JSON payload for POST/PUT/PATCH requests.
            headers: Additional headers for this specific request.
            **kwargs: Additional arguments passed to httpx request method
                     (e.g. `files` and `data` for multipart uploads).

        Returns:
            Parsed JSON response (dict, list or scalar), or None.

        Raises:
            HTTPError: If the request fails, returns an error status code
                or the body is not JSON.
            ProxyError: If there's a proxy-related connection issue.

        Example:
            >>> await self._fetch("GET", "/users", params={"page": 1})
            >>> await self._fetch("POST", "/users", payload={"name": "John"})
        """
        response = await self._request(
            method,
            endpoint,
            params=params,
            payload=payload,
            headers=headers,
            **kwargs,
        )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {method} {endpoint}: {e}")
            raise HTTPError(
                f"Invalid JSON response: {e}", status_code=response.status_code
            ) from e

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

    async def _patch(
        self,
        endpoint: str,
        payload: Any = None,
        **kwargs: Any,
    ) -> Any:
        """Convenience method for PATCH requests."""
        return await self._fetch("PATCH", endpoint, payload=payload, **kwargs)

    async def _delete(
        self,
        endpoint: str,
        **kwargs: Any,
    ) -> Any:
        """Convenience method for DELETE requests."""
        return await self._fetch("DELETE", endpoint, **kwargs)

    async def close(self) -> None:
        """
        Close the HTTP client and release resources.

        Example:
            >>> client = MyAPIClient()
            >>> try:
            ...     await client.get_data()
            ... finally:
            ...     await client.close()
        """
        await self.client.aclose()
        logger.info(f"{type(self).__name__} closed")

    async def __aenter__(self):
        """Enable use as async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Ensure client is closed when exiting context."""
        await self.close()
