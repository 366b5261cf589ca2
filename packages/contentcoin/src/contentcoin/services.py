"""
Service container: every client built once from `Settings` and shared.

Must be built inside a running event loop (the scraper's aiohttp session
binds to it).
"""

import logging
from dataclasses import dataclass

from catalog import CatalogStore
from pinata import ContentPublisher, PinataClient
from shared_lib.config import Settings
from telegram_events import EventBroadcaster, TelegramNotifier
from zora import SigningSession, TokenDeployer, ZoraClient

from contentcoin.activity import TradingActivityRefresher
from contentcoin.aggregator import CreatorAggregator
from contentcoin.pipeline import CoinCreationPipeline
from contentcoin.scraper import ArticleScraper

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> CatalogStore:
    return CatalogStore(url=settings.supabase_url, key=settings.supabase_key)


def build_broadcaster(settings: Settings) -> EventBroadcaster | None:
    """Broadcaster for the configured channel, or None when credentials are absent."""
    if not settings.telegram_bot_token or not settings.telegram_channel_id:
        logger.info("ℹ️ Telegram notifications disabled (no credentials)")
        return None
    return EventBroadcaster(
        TelegramNotifier(settings.telegram_bot_token, settings.telegram_channel_id)
    )


@dataclass
class Services:
    settings: Settings
    store: CatalogStore
    pinata: PinataClient
    publisher: ContentPublisher
    zora: ZoraClient
    session: SigningSession
    deployer: TokenDeployer
    pipeline: CoinCreationPipeline
    aggregator: CreatorAggregator
    refresher: TradingActivityRefresher
    broadcaster: EventBroadcaster | None = None
    scraper: ArticleScraper | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Services":
        """
        Raises:
            ConfigurationError: If a required credential is missing.
        """
        store = build_store(settings)
        pinata = PinataClient(jwt=settings.pinata_jwt, gateway=settings.pinata_gateway)
        publisher = ContentPublisher(pinata)
        zora = ZoraClient(base_url=settings.zora_api_url, api_key=settings.zora_api_key)
        session = SigningSession.from_private_key(
            settings.rpc_url, settings.deployer_private_key
        )
        deployer = TokenDeployer(session, settings.zora_factory_address)
        broadcaster = build_broadcaster(settings)

        scraper = None
        if settings.scraper_url:
            scraper = ArticleScraper(settings.scraper_url)
        else:
            logger.info("ℹ️ No scraper configured; blog requests must carry article data")

        return cls(
            settings=settings,
            store=store,
            pinata=pinata,
            publisher=publisher,
            zora=zora,
            session=session,
            deployer=deployer,
            pipeline=CoinCreationPipeline(
                publisher,
                deployer,
                store,
                broadcaster=broadcaster,
                scraper=scraper,
                chain_id=settings.chain_id,
            ),
            aggregator=CreatorAggregator(store, zora, chain_id=settings.chain_id),
            refresher=TradingActivityRefresher(
                store, zora, broadcaster=broadcaster, chain_id=settings.chain_id
            ),
            broadcaster=broadcaster,
            scraper=scraper,
        )

    async def aclose(self) -> None:
        await self.store.close()
        await self.pinata.close()
        await self.zora.close()
        await self.session.close()
        if self.broadcaster is not None:
            await self.broadcaster.close()
        if self.scraper is not None:
            await self.scraper.close()
