"""
Command line entry point.

    python -m contentcoin serve [--host 0.0.0.0] [--port 8000]
    python -m contentcoin backfill-types
    python -m contentcoin resend-events [--delay 1.0]
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from shared_lib.baseclient.exceptions import ConfigurationError
from shared_lib.config import Settings
from shared_lib.logging import setup_logging

from contentcoin.api import create_app
from contentcoin.maintenance import RESEND_DELAY, backfill_types, resend_events
from contentcoin.services import build_broadcaster, build_store

logger = logging.getLogger("contentcoin")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="contentcoin", description="ContentCoin service")
    parser.add_argument("--env-file", dest="env_file", default=None, help="Path to a .env file")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    commands.add_parser("backfill-types", help="Classify coins that have no content type")

    resend = commands.add_parser("resend-events", help="Announce every coin again")
    resend.add_argument("--delay", type=float, default=RESEND_DELAY)

    return parser.parse_args(argv)


async def _backfill(settings: Settings) -> int:
    async with build_store(settings) as store:
        updated, failed = await backfill_types(store)
    logger.info(f"Backfill done: {updated} updated, {failed} failed")
    return 1 if failed else 0


async def _resend(settings: Settings, delay: float) -> int:
    broadcaster = build_broadcaster(settings)
    if broadcaster is None:
        raise ConfigurationError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHANNEL_ID are required")
    try:
        async with build_store(settings) as store:
            await resend_events(store, broadcaster, settings.pinata_gateway, delay=delay)
    finally:
        await broadcaster.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = Settings.from_env(args.env_file)
    setup_logging(settings.log_level)

    try:
        if args.command == "serve":
            uvicorn.run(create_app(settings=settings), host=args.host, port=args.port)
            return 0
        if args.command == "backfill-types":
            return asyncio.run(_backfill(settings))
        return asyncio.run(_resend(settings, args.delay))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
