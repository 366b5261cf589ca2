"""
Content normalization: from a content source to the metadata document that
gets published and referenced by the token's URI.

Pure transforms. Scraping itself lives in `contentcoin.scraper`.
"""

import re
from typing import Any
from urllib.parse import urlparse

from pydantic import Field

from catalog.models import ContentType
from shared_lib.pydantic import APIBaseModel, CamelModel

from contentcoin.exceptions import ValidationError

UNKNOWN = "Unknown"
DEFAULT_BLOG_NAME = "Blog Post Coin"
DEFAULT_IMAGE_NAME = "Image Coin"

NAME_MAX_LENGTH = 50
SYMBOL_SOURCE_LENGTH = 10


class ScrapedArticle(CamelModel):
    """An article as returned by the scrape service."""

    url: str
    title: str = ""
    description: str = ""
    author: str = ""
    publish_date: str = ""
    image: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    scraped_at: str | None = None


class Attribute(APIBaseModel):
    trait_type: str
    value: str


class ContentPointer(APIBaseModel):
    uri: str
    mime: str = "text/html"


class MetadataDocument(APIBaseModel):
    """Token metadata as published to IPFS.

    `type` is the discriminator consumers use to tell content kinds apart.
    """

    name: str
    description: str
    image: str
    type: ContentType
    external_url: str = ""
    attributes: list[Attribute] = Field(default_factory=list)
    content: ContentPointer | None = None

    def attribute(self, trait_type: str) -> str | None:
        for attribute in self.attributes:
            if attribute.trait_type == trait_type:
                return attribute.value
        return None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def source_hostname(url: str) -> str:
    """Hostname of an http(s) URL.

    Raises:
        ValidationError: If the URL cannot be parsed or has no host.
    """
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except (ValueError, AttributeError) as e:
        raise ValidationError(f"Invalid source URL {url!r}: {e}") from e
    if parsed.scheme not in ("http", "https") or not hostname:
        raise ValidationError(f"Invalid source URL {url!r}")
    return hostname


def derive_token_identity(
    title: str, name: str | None = None, symbol: str | None = None
) -> tuple[str, str]:
    """(name, symbol) for a coin; whichever is not given comes from `title`.

    A derived name is the first 50 characters of the title. A derived symbol
    is its first 10 characters, upper-cased, with anything but A-Z dropped.

    Raises:
        ValidationError: If the result has an empty name or symbol.
    """
    title = (title or "").strip()
    name = (name or "").strip() or title[:NAME_MAX_LENGTH]
    symbol = (symbol or "").strip().upper() or re.sub(
        r"[^A-Z]", "", title[:SYMBOL_SOURCE_LENGTH].upper()
    )
    if not name or not symbol:
        raise ValidationError(
            f"Cannot derive a token name and symbol from title {title!r}; provide them explicitly"
        )
    return name, symbol


def normalize_blog(article: ScrapedArticle) -> MetadataDocument:
    """
    Metadata for a blog-post coin.

    ## Notes
    - Missing author and publish date render as "Unknown".
    - Source is the article URL's hostname.

    ## Raises
    - `ValidationError` if the article has no URL or it is unparsable.
    """
    if not article.url or not article.url.strip():
        raise ValidationError("Blog source URL is required")

    url = article.url.strip()
    hostname = source_hostname(url)

    return MetadataDocument(
        name=article.title or DEFAULT_BLOG_NAME,
        description=f"A coin representing the blog post: {article.title}",
        image=article.image or "",
        type="blog",
        external_url=url,
        attributes=[
            Attribute(trait_type="Author", value=article.author or UNKNOWN),
            Attribute(trait_type="Source", value=hostname),
            Attribute(trait_type="Type", value="Blog Post"),
            Attribute(trait_type="Original Link", value=url),
            Attribute(trait_type="Publish Date", value=article.publish_date or UNKNOWN),
        ],
        content=ContentPointer(uri=url),
    )


def normalize_image(
    name: str | None, symbol: str | None = None, description: str | None = None
) -> MetadataDocument:
    """Metadata for an image coin. `image` is filled in once the file is published."""
    name = (name or "").strip() or DEFAULT_IMAGE_NAME
    return MetadataDocument(
        name=name,
        description=(description or "").strip()
        or f"A coin representing the image: {name}",
        image="",
        type="image",
        attributes=[
            Attribute(trait_type="Type", value="Image"),
            Attribute(trait_type="Symbol", value=(symbol or "").strip()),
        ],
    )
