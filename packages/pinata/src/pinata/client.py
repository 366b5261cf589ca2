"""Client for Pinata's v3 file upload API."""

import logging

import backoff

from shared_lib.baseclient import Client
from shared_lib.baseclient.exceptions import ConfigurationError, HTTPError

from pinata.models import PinnedFile

logger = logging.getLogger(__name__)

MAX_UPLOAD_TRIES = 3


def _giveup(e: Exception) -> bool:
    return not (isinstance(e, HTTPError) and e.is_transient)


class PinataClient(Client):
    """Uploads files to Pinata's public IPFS network.

    Attributes:
        BASE_URL: Pinata upload endpoint
        gateway: Host name of the dedicated (or public) gateway used to build
            HTTP-resolvable URLs for uploaded content.

    Example:
        >>> async with PinataClient(jwt="...", gateway="example.mypinata.cloud") as client:
        ...     pinned = await client.upload_file(b"hello", "hello.txt", "text/plain")
        ...     print(client.gateway_url(pinned.cid))
    """

    BASE_URL = "https://uploads.pinata.cloud/v3"

    def __init__(
        self,
        jwt: str | None,
        gateway: str = "gateway.pinata.cloud",
        base_url: str | None = None,
        timeout: float = 60.0,
    ):
        """
        Args:
            jwt: Pinata API JWT. Required.
            gateway: Gateway host, with or without scheme.
            base_url: Override for the upload endpoint.
            timeout: Upload timeout in seconds.

        Raises:
            ConfigurationError: If `jwt` or `gateway` is missing.
        """
        if not jwt:
            raise ConfigurationError("Pinata JWT is required")
        if not gateway:
            raise ConfigurationError("Pinata gateway is required")

        self.gateway = gateway.removeprefix("https://").removeprefix("http://").rstrip("/")
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {jwt}"},
        )

    @backoff.on_exception(
        backoff.expo,
        HTTPError,
        max_tries=MAX_UPLOAD_TRIES,
        giveup=_giveup,
    )
    async def upload_file(
        self,
        content: bytes,
        filename: str,
        content_type: str = "application/octet-stream",
    ) -> PinnedFile:
        """Upload one file to the public network.

        Retried on transient failures only; content addressing makes a
        repeated upload of the same bytes resolve to the same CID.

        Raises:
            HTTPError: If the upload fails or the response carries no CID.
        """
        result = await self._fetch(
            "POST",
            "/files",
            files={"file": (filename, content, content_type)},
            data={"network": "public", "name": filename},
        )

        data = (result or {}).get("data") or {}
        if not data.get("cid"):
            raise HTTPError("Pinata response did not include a CID", response_body=result)

        pinned = PinnedFile(**data)
        logger.info(f"Pinned {filename} ({len(content)} bytes) as {pinned.cid}")
        return pinned

    def gateway_url(self, cid: str) -> str:
        """HTTP URL that resolves `cid` through the configured gateway."""
        return f"https://{self.gateway}/ipfs/{cid}"
