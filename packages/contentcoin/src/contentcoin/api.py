"""
HTTP API.

Coin creation answers 201 whenever the coin exists on-chain, including when
the catalog write failed (`status: "partially_completed"` plus `warnings`).
Failures before deployment answer 4xx/5xx and mean nothing happened.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, File, Form, Header, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as ModelValidationError

from catalog import CoinFilter, CoinRecord, ContentType
from catalog.exceptions import AuthorizationError, CoinNotFoundError, PersistenceError
from pinata import BinaryContent
from pinata.exceptions import PublishError
from shared_lib.config import Settings
from shared_lib.pydantic import CamelModel
from zora.exceptions import ChainMismatchError, DeploymentError, StatsUnavailableError

from contentcoin.aggregator import CreatorRanking
from contentcoin.exceptions import PipelineFailure, ValidationError
from contentcoin.metadata import ScrapedArticle, normalize_blog, normalize_image
from contentcoin.pipeline import BlogSource, CreationRequest, CreationResult, ImageSource
from contentcoin.services import Services

logger = logging.getLogger(__name__)


class BlogCoinRequest(CamelModel):
    creator_wallet: str
    url: str
    article: ScrapedArticle | None = None
    name: str | None = None
    symbol: str | None = None
    email: str | None = None
    platform_referrer: str | None = None


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def coin_json(coin: CoinRecord) -> dict[str, Any]:
    """Row shape: snake_case columns, camelCase metadata as stored."""
    return {
        **coin.model_dump(mode="json", exclude={"metadata"}),
        "metadata": coin.metadata.to_json(),
    }


def creation_json(result: CreationResult) -> dict[str, Any]:
    return {
        "status": result.outcome.value,
        "coinAddress": result.coin_address,
        "txHash": result.tx_hash,
        "chainId": result.deployment.chain_id,
        "name": result.name,
        "symbol": result.symbol,
        "ipfsHash": result.published.content_id,
        "ipfsUri": result.published.ipfs_uri,
        "gatewayUrl": result.published.gateway_url,
        "coin": coin_json(result.coin) if result.coin else None,
        "warnings": result.warnings,
    }


def ranking_json(ranking: CreatorRanking) -> dict[str, Any]:
    return {
        "wallet": ranking.wallet_address,
        "displayName": ranking.display_name,
        "email": ranking.creator.email if ranking.creator else None,
        "coins": [
            {
                **coin_json(item.coin),
                "live": item.stats.model_dump(mode="json", by_alias=True),
            }
            for item in ranking.coins
        ],
    }


def failure_response(failure: PipelineFailure) -> JSONResponse:
    cause = failure.cause
    if isinstance(cause, ValidationError):
        return _error(400, cause.message, stage=failure.stage.value)
    if isinstance(cause, ChainMismatchError):
        return _error(
            409,
            cause.message,
            stage=failure.stage.value,
            remediation=cause.remediation,
            expectedChainId=cause.expected_chain_id,
            actualChainId=cause.actual_chain_id,
        )
    extra: dict[str, Any] = {"stage": failure.stage.value, "retryable": failure.retryable}
    if isinstance(cause, DeploymentError) and cause.tx_hash:
        extra["txHash"] = cause.tx_hash
    return _error(502, str(cause), **extra)


def _services(request: Request) -> Services:
    return request.app.state.services


def create_app(services: Services | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the API app.

    ## Parameters
    - `services`: pre-built services (tests); otherwise they are built from
      `settings` (or the environment) at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "services", None) is not None:
            yield
            return
        app.state.services = Services.from_settings(settings or Settings.from_env())
        try:
            yield
        finally:
            await app.state.services.aclose()

    app = FastAPI(
        title="ContentCoin API",
        description="Turn blog posts and images into Zora coins",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PersistenceError)
    async def persistence_error(request: Request, exc: PersistenceError):
        logger.error(f"Catalog error on {request.url.path}: {exc.message}")
        return _error(502, "Catalog unavailable")

    @app.exception_handler(CoinNotFoundError)
    async def not_found(request: Request, exc: CoinNotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(AuthorizationError)
    async def forbidden(request: Request, exc: AuthorizationError):
        return _error(403, exc.message)

    @app.get("/")
    async def root():
        return {"name": "ContentCoin API", "version": "0.1.0", "status": "running"}

    # -----------------------------------Metadata-----------------------------------#

    @app.post("/api/upload-metadata")
    async def upload_metadata(request: Request):
        """Publish image or blog metadata to IPFS without deploying."""
        publisher = _services(request).publisher
        content_type = request.headers.get("content-type", "")

        if "multipart/form-data" in content_type:
            form = await request.form()
            image = form.get("image")
            if image is None or isinstance(image, str):
                return _error(400, "Image file is required")
            document = normalize_image(
                str(form.get("name") or ""), str(form.get("symbol") or "")
            )
            binary = BinaryContent(
                content=await image.read(),
                filename=image.filename or "image",
                content_type=image.content_type or "application/octet-stream",
            )
        else:
            try:
                body = await request.json()
            except ValueError:
                return _error(400, "Blog data is required")
            blog_data = body.get("blogData") if isinstance(body, dict) else None
            if not blog_data:
                return _error(400, "Blog data is required")
            try:
                document = normalize_blog(ScrapedArticle.model_validate(blog_data))
            except ModelValidationError as e:
                return _error(400, f"Invalid blog data: {e.errors()[0]['msg']}")
            except ValidationError as e:
                return _error(400, e.message)
            binary = None

        try:
            published = await publisher.publish(binary, document.to_json())
        except PublishError as e:
            return _error(500, f"Failed to upload to IPFS: {e.message}")
        return published.to_response()

    # -----------------------------------Creation-----------------------------------#

    @app.post("/api/coins/blog", status_code=201)
    async def create_blog_coin(body: BlogCoinRequest, request: Request):
        creation = CreationRequest(
            creator_wallet=body.creator_wallet,
            source=BlogSource(
                url=body.url, article=body.article, name=body.name, symbol=body.symbol
            ),
            email=body.email,
            platform_referrer=body.platform_referrer,
        )
        try:
            result = await _services(request).pipeline.run(creation)
        except PipelineFailure as e:
            return failure_response(e)
        return creation_json(result)

    @app.post("/api/coins/image", status_code=201)
    async def create_image_coin(
        request: Request,
        image: UploadFile = File(...),
        name: str = Form(...),
        symbol: str = Form(...),
        creator_wallet: str = Form(..., alias="creatorWallet"),
        description: str | None = Form(None),
        email: str | None = Form(None),
    ):
        creation = CreationRequest(
            creator_wallet=creator_wallet,
            source=ImageSource(
                content=await image.read(),
                filename=image.filename or "image",
                content_type=image.content_type or "application/octet-stream",
                name=name,
                symbol=symbol,
                description=description,
            ),
            email=email,
        )
        try:
            result = await _services(request).pipeline.run(creation)
        except PipelineFailure as e:
            return failure_response(e)
        return creation_json(result)

    # -----------------------------------Catalog-----------------------------------#

    @app.get("/api/coins")
    async def list_coins(
        request: Request,
        creator: str | None = None,
        type: ContentType | None = None,
        search: str | None = None,
        limit: int = Query(50, ge=1, le=200),
        offset: int = Query(0, ge=0),
    ):
        coin_filter = CoinFilter(creator_wallet=creator, content_type=type, search=search)
        coins = await _services(request).store.list_coins(coin_filter, limit=limit, offset=offset)
        return {"coins": [coin_json(coin) for coin in coins], "limit": limit, "offset": offset}

    @app.get("/api/coins/{address}")
    async def get_coin(address: str, request: Request):
        coin = await _services(request).store.get_by_address(address)
        if coin is None:
            return _error(404, f"No catalogued coin at {address}")
        return coin_json(coin)

    @app.delete("/api/coins/{coin_id}", status_code=204)
    async def delete_coin(
        coin_id: str,
        request: Request,
        wallet: str = Header(..., alias="X-Wallet-Address"),
    ):
        await _services(request).store.delete_coin(coin_id, wallet)
        return Response(status_code=204)

    @app.post("/api/coins/{address}/refresh")
    async def refresh_coin(address: str, request: Request):
        try:
            coin = await _services(request).refresher.refresh(address)
        except StatsUnavailableError as e:
            return _error(502, e.message)
        return coin_json(coin)

    # -----------------------------------Stats-----------------------------------#

    @app.get("/api/stats")
    async def stats(request: Request, wallet: str | None = None):
        store = _services(request).store
        totals = await store.coin_stats()
        body: dict[str, Any] = {
            "totalCoins": totals.total_coins,
            "totalCreators": totals.total_creators,
        }
        if wallet:
            body["userCoins"] = (await store.creator_stats(wallet)).user_coins
        return body

    @app.get("/api/creators")
    async def creators(request: Request, type: ContentType | None = None):
        coin_filter = CoinFilter(content_type=type) if type else None
        rankings = await _services(request).aggregator.rank_creators(coin_filter)
        return {"creators": [ranking_json(ranking) for ranking in rankings]}

    return app
