"""Models for Pinata upload responses and published content."""

from typing import Any

from pydantic import ConfigDict, Field

from shared_lib.pydantic import APIBaseModel


class PinnedFile(APIBaseModel):
    """A file accepted by Pinata's v3 upload endpoint.

    Attributes:
        id: Pinata's internal file id
        cid: Content identifier (hash-derived)
        name: File name given at upload
        size: Size in bytes
        mime_type: MIME type recorded by Pinata
    """

    id: str | None = None
    cid: str
    name: str | None = None
    size: int | None = None
    mime_type: str | None = None

    @property
    def ipfs_uri(self) -> str:
        return f"ipfs://{self.cid}"


class PublishedContent(APIBaseModel):
    """The (content identifier, gateway URL, metadata) triple for a coin.

    Immutable once produced. `metadata` is the exact document that was
    uploaded, including the rewritten `image` field when a binary was
    published alongside it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content_id: str = Field(..., min_length=1)
    ipfs_uri: str
    gateway_url: str
    metadata: dict[str, Any]
    image_content_id: str | None = None

    def to_response(self) -> dict[str, Any]:
        """Wire shape of the metadata upload endpoint."""
        return {
            "ipfsHash": self.content_id,
            "ipfsUri": self.ipfs_uri,
            "gatewayUrl": self.gateway_url,
            "metadata": self.metadata,
        }
