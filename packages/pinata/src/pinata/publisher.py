"""
Content-addressed publishing of coin metadata.

`ContentPublisher.publish` is a two-step upload: the optional binary goes
first and the metadata's `image` field is rewritten to point at it, then the
metadata document is serialized to canonical JSON and uploaded as a second
object. The second object's CID is the token's metadata pointer.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any

from shared_lib.baseclient.exceptions import ClientError, HTTPError

from pinata.client import PinataClient
from pinata.exceptions import PublishError
from pinata.models import PublishedContent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BinaryContent:
    """An uploaded file waiting to be published."""

    content: bytes
    filename: str
    content_type: str = "application/octet-stream"


def canonical_json(document: dict[str, Any]) -> bytes:
    """Serialize deterministically: sorted keys, no insignificant whitespace."""
    return json.dumps(
        document, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


class ContentPublisher:
    """Publishes a binary plus a JSON metadata document to Pinata."""

    def __init__(self, client: PinataClient):
        self.client = client

    async def publish(
        self,
        binary: BinaryContent | None,
        metadata: dict[str, Any],
    ) -> PublishedContent:
        """
        Publish `binary` (optional) and `metadata`.

        ## Returns
        - `PublishedContent` whose `content_id` is the metadata document's
          CID. Only returned once every referenced object was accepted.

        ## Raises
        - `PublishError` on any storage failure; no partial result escapes.

        ## Notes
        Safe to retry wholesale: identical bytes produce identical CIDs.
        """
        document = dict(metadata)
        image_cid = None

        try:
            if binary is not None:
                pinned_image = await self.client.upload_file(
                    binary.content, binary.filename, binary.content_type
                )
                image_cid = pinned_image.cid
                document["image"] = pinned_image.ipfs_uri

            body = canonical_json(document)
            digest = hashlib.sha256(body).hexdigest()[:16]
            kind = document.get("type") or "coin"
            pinned_metadata = await self.client.upload_file(
                body, f"{kind}-metadata-{digest}.json", "application/json"
            )
        except HTTPError as e:
            logger.error(f"Metadata publish failed: {e.message}")
            raise PublishError(e.message, transient=e.is_transient) from e
        except ClientError as e:
            logger.error(f"Metadata publish failed: {e.message}")
            raise PublishError(e.message, transient=True) from e

        if not pinned_metadata.cid:
            raise PublishError("Storage returned an empty content identifier")

        published = PublishedContent(
            content_id=pinned_metadata.cid,
            ipfs_uri=pinned_metadata.ipfs_uri,
            gateway_url=self.client.gateway_url(pinned_metadata.cid),
            metadata=document,
            image_content_id=image_cid,
        )
        logger.info(f"Published {kind} metadata as {published.ipfs_uri}")
        return published
