"""
Coin-creation pipeline.

Normalizing -> Publishing -> Deploying -> Persisting -> Notifying -> Done

Deployment is the point of no return. Every failure before it raises
`PipelineFailure` and leaves nothing behind (publishing is content-addressed,
so a rerun re-uses the same identifiers). Every failure after it is
downgraded to a warning on a still-successful `CreationResult`: a minted
coin is never hidden from its creator because the catalog write failed.
Such a result is `PARTIALLY_COMPLETED` and can be finished with `resume`.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

from pydantic import ValidationError as ModelValidationError
from web3 import Web3

from catalog import CatalogStore, CoinPayload, CoinRecord, NewCoin
from catalog.exceptions import CatalogError, DuplicateAddressError
from catalog.models import BlogPayload, ImagePayload
from pinata import BinaryContent, ContentPublisher, PublishedContent
from pinata.exceptions import PublishError
from shared_lib.config import BASE_CHAIN_ID
from shared_lib.pydantic import APIBaseModel
from telegram_events import EventBroadcaster, explorer_links
from zora import DeployParams, DeployResult, TokenDeployer
from zora.exceptions import ChainMismatchError, DeploymentError

from contentcoin.events import new_coin_event
from contentcoin.exceptions import PipelineFailure, ScrapeError, ValidationError
from contentcoin.metadata import (
    MetadataDocument,
    ScrapedArticle,
    derive_token_identity,
    normalize_blog,
    normalize_image,
)
from contentcoin.scraper import ArticleScraper

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    NORMALIZING = "normalizing"
    PUBLISHING = "publishing"
    DEPLOYING = "deploying"
    PERSISTING = "persisting"
    NOTIFYING = "notifying"
    DONE = "done"


class PipelineOutcome(str, Enum):
    DONE = "done"
    PARTIALLY_COMPLETED = "partially_completed"


@dataclass
class BlogSource:
    """A blog post, either pre-scraped or to be scraped from `url`."""

    url: str
    article: ScrapedArticle | None = None
    name: str | None = None
    symbol: str | None = None


@dataclass
class ImageSource:
    content: bytes
    filename: str
    name: str
    symbol: str
    content_type: str = "application/octet-stream"
    description: str | None = None


ContentSource = Union[BlogSource, ImageSource]


@dataclass
class CreationRequest:
    creator_wallet: str
    source: ContentSource
    email: str | None = None
    platform_referrer: str | None = None


class CreationResult(APIBaseModel):
    """What the caller gets back once the coin exists on-chain.

    `coin` is None when the catalog write failed; `warnings` then says so and
    `deployment` still carries the contract address and transaction hash.
    """

    outcome: PipelineOutcome
    creator_wallet: str
    email: str | None = None
    name: str
    symbol: str
    deployment: DeployResult
    published: PublishedContent
    payload: CoinPayload
    coin: CoinRecord | None = None
    warnings: list[str] = []

    @property
    def coin_address(self) -> str:
        return self.deployment.address

    @property
    def tx_hash(self) -> str:
        return self.deployment.tx_hash

    @property
    def partially_completed(self) -> bool:
        return self.outcome == PipelineOutcome.PARTIALLY_COMPLETED


@dataclass
class _Normalized:
    document: MetadataDocument
    binary: BinaryContent | None
    name: str
    symbol: str
    article: ScrapedArticle | None = None
    description: str | None = None


class CoinCreationPipeline:
    """Sequences normalizer, publisher, deployer, catalog and broadcaster.

    Attributes:
        publisher: Content-addressed publisher
        deployer: Token deployer bound to a signing session
        store: Catalog store
        broadcaster: Event broadcaster, or None when notifications are off
        scraper: Article scraper for blog requests that carry only a URL
        chain_id: Chain every coin is deployed on
    """

    def __init__(
        self,
        publisher: ContentPublisher,
        deployer: TokenDeployer,
        store: CatalogStore,
        broadcaster: EventBroadcaster | None = None,
        scraper: ArticleScraper | None = None,
        chain_id: int = BASE_CHAIN_ID,
    ):
        self.publisher = publisher
        self.deployer = deployer
        self.store = store
        self.broadcaster = broadcaster
        self.scraper = scraper
        self.chain_id = chain_id

    async def run(self, request: CreationRequest) -> CreationResult:
        """
        Create a coin for `request`.

        ## Returns
        - `CreationResult` with outcome DONE, or PARTIALLY_COMPLETED when the
          coin was deployed but could not be catalogued.

        ## Raises
        - `PipelineFailure` for any failure before deployment succeeded.
        """
        logger.info(f"Creating coin for {request.creator_wallet} [{PipelineStage.NORMALIZING.value}]")
        try:
            normalized = await self._normalize(request)
        except (ValidationError, ScrapeError) as e:
            raise PipelineFailure(PipelineStage.NORMALIZING, e) from e

        logger.info(f"Publishing metadata for {normalized.symbol} [{PipelineStage.PUBLISHING.value}]")
        try:
            published = await self.publisher.publish(
                normalized.binary, normalized.document.to_json()
            )
        except PublishError as e:
            raise PipelineFailure(PipelineStage.PUBLISHING, e) from e

        logger.info(f"Deploying {normalized.symbol} [{PipelineStage.DEPLOYING.value}]")
        params = DeployParams(
            name=normalized.name,
            symbol=normalized.symbol,
            uri=published.ipfs_uri,
            payout_recipient=request.creator_wallet,
            platform_referrer=request.platform_referrer or request.creator_wallet,
            chain_id=self.chain_id,
        )
        try:
            deployment = await self.deployer.deploy(params)
        except (ChainMismatchError, DeploymentError) as e:
            raise PipelineFailure(PipelineStage.DEPLOYING, e) from e

        # Past this line the coin exists; nothing below may raise.
        result = CreationResult(
            outcome=PipelineOutcome.PARTIALLY_COMPLETED,
            creator_wallet=request.creator_wallet,
            email=request.email,
            name=normalized.name,
            symbol=normalized.symbol,
            deployment=deployment,
            published=published,
            payload=self._payload(normalized, published, deployment),
        )
        return await self._finish(result)

    async def resume(self, result: CreationResult) -> CreationResult:
        """Finish a PARTIALLY_COMPLETED result without deploying again.

        A row that already exists for the contract address counts as
        persisted. A DONE result is returned unchanged.
        """
        if not result.partially_completed:
            return result
        logger.info(f"Resuming catalog write for {result.coin_address}")
        return await self._finish(result.model_copy(update={"warnings": []}))

    async def _finish(self, result: CreationResult) -> CreationResult:
        logger.info(f"Persisting {result.coin_address} [{PipelineStage.PERSISTING.value}]")
        try:
            coin = await self._persist(result)
        except (CatalogError, ModelValidationError) as e:
            logger.exception(f"Coin {result.coin_address} deployed but not catalogued")
            warning = (
                f"Coin deployed at {result.coin_address} (tx {result.tx_hash}) "
                f"but the catalog entry failed to save: {e}"
            )
            return result.model_copy(
                update={
                    "outcome": PipelineOutcome.PARTIALLY_COMPLETED,
                    "warnings": [*result.warnings, warning],
                }
            )

        result = result.model_copy(update={"coin": coin})

        logger.info(f"Announcing {result.coin_address} [{PipelineStage.NOTIFYING.value}]")
        warnings = list(result.warnings)
        if self.broadcaster is not None:
            try:
                event = new_coin_event(coin, self.publisher.client.gateway)
                await self.broadcaster.notify(event)
            except Exception as e:
                logger.exception(f"Announcement of {result.coin_address} failed")
                warnings.append(f"Coin created but the channel announcement failed: {e}")

        logger.info(f"Coin {result.symbol} at {result.coin_address} [{PipelineStage.DONE.value}]")
        return result.model_copy(update={"outcome": PipelineOutcome.DONE, "warnings": warnings})

    async def _persist(self, result: CreationResult) -> CoinRecord:
        await self.store.upsert_creator(result.creator_wallet, result.email)
        new_coin = NewCoin(
            creator_wallet=result.creator_wallet,
            name=result.name,
            symbol=result.symbol,
            coin_address=result.coin_address,
            transaction_hash=result.tx_hash,
            ipfs_uri=result.published.ipfs_uri,
            ipfs_hash=result.published.content_id,
            gateway_url=result.published.gateway_url,
            metadata=result.payload,
        )
        try:
            return await self.store.insert_coin(new_coin)
        except DuplicateAddressError:
            existing = await self.store.get_by_address(result.coin_address)
            if existing is None:
                raise
            logger.info(f"Coin {result.coin_address} already catalogued as {existing.id}")
            return existing

    async def _normalize(self, request: CreationRequest) -> _Normalized:
        if not request.creator_wallet or not Web3.is_address(request.creator_wallet):
            raise ValidationError("A connected wallet address is required")
        if request.platform_referrer and not Web3.is_address(request.platform_referrer):
            raise ValidationError(f"Invalid platform referrer {request.platform_referrer!r}")

        source = request.source
        if isinstance(source, ImageSource):
            return self._normalize_image(source)
        if isinstance(source, BlogSource):
            return await self._normalize_blog(source)
        raise ValidationError(f"Unsupported content source {type(source).__name__}")

    def _normalize_image(self, source: ImageSource) -> _Normalized:
        if not source.content:
            raise ValidationError("Image file is required")
        name = (source.name or "").strip()
        symbol = (source.symbol or "").strip().upper()
        if not name or not symbol:
            raise ValidationError("Token name and symbol are required")

        return _Normalized(
            document=normalize_image(name, symbol, source.description),
            binary=BinaryContent(
                content=source.content,
                filename=source.filename or "image",
                content_type=source.content_type,
            ),
            name=name,
            symbol=symbol,
            description=source.description,
        )

    async def _normalize_blog(self, source: BlogSource) -> _Normalized:
        if not source.url or not source.url.strip():
            raise ValidationError("Blog URL is required")

        article = source.article
        if article is None:
            if self.scraper is None:
                raise ValidationError("Scraped article data is required (no scraper configured)")
            article = await self.scraper.scrape(source.url.strip())

        document = normalize_blog(article)
        name, symbol = derive_token_identity(article.title, source.name, source.symbol)

        return _Normalized(document=document, binary=None, name=name, symbol=symbol, article=article)

    def _payload(
        self,
        normalized: _Normalized,
        published: PublishedContent,
        deployment: DeployResult,
    ) -> CoinPayload:
        """Catalog metadata for the new row."""
        common = dict(
            ipfs_uri=published.ipfs_uri,
            ipfs_hash=published.content_id,
            gateway_url=published.gateway_url,
            **explorer_links(deployment.address),
        )
        article = normalized.article
        if article is not None:
            return BlogPayload(
                title=article.title or normalized.name,
                description=article.description or normalized.document.description,
                image=article.image or None,
                original_url=normalized.document.external_url,
                author=article.author or None,
                publish_date=article.publish_date or None,
                content=article.content or None,
                tags=article.tags,
                **common,
            )
        return ImagePayload(
            title=normalized.name,
            description=normalized.description or normalized.document.description,
            image=published.metadata.get("image"),
            **common,
        )
