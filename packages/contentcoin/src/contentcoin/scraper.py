"""Client for the article scrape service."""

import logging

from pydantic import ValidationError as ModelValidationError

from shared_lib.baseclient import BaseAioHttpClient
from shared_lib.baseclient.exceptions import ClientError, ConfigurationError, HTTPError

from contentcoin.exceptions import ScrapeError
from contentcoin.metadata import ScrapedArticle

logger = logging.getLogger(__name__)


class ArticleScraper(BaseAioHttpClient):
    """Extracts title, author, image and body from a blog URL.

    The service takes `{"url": ...}` and answers with a `ScrapedArticle`
    payload, or `{"error": ...}` with a non-2xx status.

    Example:
        >>> async with ArticleScraper("https://app.example.com/api/scrape") as scraper:
        ...     article = await scraper.scrape("https://medium.com/@x/hello")
    """

    def __init__(self, endpoint: str | None, timeout: float = 30.0):
        if not endpoint:
            raise ConfigurationError("Scraper endpoint URL is required")
        super().__init__(base_url=endpoint, timeout=timeout)

    async def scrape(self, url: str) -> ScrapedArticle:
        """
        Raises:
            ScrapeError: The service failed or returned an unusable payload.
        """
        try:
            data = await self._post("", payload={"url": url})
        except HTTPError as e:
            body = e.response_body if isinstance(e.response_body, dict) else {}
            raise ScrapeError(f"Failed to scrape {url}: {body.get('error') or e.message}") from e
        except ClientError as e:
            raise ScrapeError(f"Failed to scrape {url}: {e.message}") from e

        if not isinstance(data, dict):
            raise ScrapeError(f"Unexpected scrape response for {url}")
        if data.get("error"):
            raise ScrapeError(f"Failed to scrape {url}: {data['error']}")

        try:
            article = ScrapedArticle.model_validate({"url": url, **data})
        except ModelValidationError as e:
            raise ScrapeError(f"Malformed scrape response for {url}: {e}") from e

        logger.info(f"Scraped {url}: {article.title!r}")
        return article
