from contentcoin.aggregator import CreatorAggregator, CreatorRanking, RankedCoin
from contentcoin.activity import TradingActivityRefresher
from contentcoin.exceptions import PipelineFailure, ScrapeError, ValidationError
from contentcoin.metadata import (
    Attribute,
    MetadataDocument,
    ScrapedArticle,
    derive_token_identity,
    normalize_blog,
    normalize_image,
)
from contentcoin.pipeline import (
    BlogSource,
    CoinCreationPipeline,
    CreationRequest,
    CreationResult,
    ImageSource,
    PipelineOutcome,
    PipelineStage,
)
from contentcoin.scraper import ArticleScraper

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "CoinCreationPipeline",
    "CreationRequest",
    "CreationResult",
    "BlogSource",
    "ImageSource",
    "PipelineStage",
    "PipelineOutcome",
    # Read path
    "CreatorAggregator",
    "CreatorRanking",
    "RankedCoin",
    "TradingActivityRefresher",
    # Normalizer
    "ScrapedArticle",
    "MetadataDocument",
    "Attribute",
    "normalize_blog",
    "normalize_image",
    "derive_token_identity",
    "ArticleScraper",
    # Exceptions
    "ValidationError",
    "ScrapeError",
    "PipelineFailure",
]
