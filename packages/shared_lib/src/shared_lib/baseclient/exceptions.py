"""
Transport-level exceptions shared by every client package.

Clients built on BaseClient or BaseAioHttpClient translate library errors
(httpx, aiohttp) into these, so domain packages only need to catch one
family when wrapping them into their own errors.
"""


class ClientError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, *args, **kwargs):
        super().__init__(message, *args)
        self.message = message
        self.details = kwargs


class HTTPError(ClientError):
    """Raised when an HTTP request fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict | list | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.status_code = status_code
        self.response_body = response_body

    @property
    def is_transient(self) -> bool:
        """True for timeouts, transport failures and 5xx/429 responses."""
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


class ProxyError(ClientError):
    """Raised when there's an issue with the proxy configuration or connection."""

    pass


class ConfigurationError(ClientError):
    """Raised when a client is constructed without required settings."""

    pass
