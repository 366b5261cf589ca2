from pinata.client import PinataClient
from pinata.exceptions import PublishError
from pinata.models import PinnedFile, PublishedContent
from pinata.publisher import BinaryContent, ContentPublisher, canonical_json

__version__ = "0.1.0"

__all__ = [
    "PinataClient",
    "ContentPublisher",
    "BinaryContent",
    "canonical_json",
    "PublishError",
    "PinnedFile",
    "PublishedContent",
]
