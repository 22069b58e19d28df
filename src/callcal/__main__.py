"""call-cal-bot entry point."""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import NoReturn

import structlog

from callcal.config.settings import settings
from callcal.core.logging import configure_logging

logger = structlog.get_logger()


async def start_services() -> None:
    """Start the Discord bot and the API server over one shared store."""
    from callcal.api.app import create_app
    from callcal.db import AttendanceStore, create_engine
    from callcal.integrations.discord.bot import CallCalBot
    from callcal.services.attendance import AttendanceService

    store = AttendanceStore(create_engine(settings))
    await store.create_schema()
    service = AttendanceService(store)

    bot = CallCalBot(service)
    app = create_app(service)

    # Start uvicorn server
    import uvicorn

    config = uvicorn.Config(
        app,
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)

    async def run_bot() -> None:
        token = settings.discord_bot_token.get_secret_value()
        if not token:
            logger.warning("DISCORD_BOT_TOKEN not set, bot disabled")
            return
        try:
            logger.info("Starting Discord bot connection...")
            await bot.start(token)
        except Exception as e:
            logger.error("Discord bot error", error=str(e), exc_info=True)
            raise

    async def run_server() -> None:
        try:
            await server.serve()
        except Exception as e:
            logger.error("API server error", error=str(e))
            raise

    def signal_handler(sig: signal.Signals) -> None:
        logger.info("Received shutdown signal", signal=sig.name)
        server.should_exit = True
        asyncio.ensure_future(bot.close())

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))

    try:
        logger.info(
            "Starting call-cal-bot",
            version="0.1.0",
            environment=settings.app_env,
            api_port=settings.app_port,
        )
        await asyncio.gather(
            run_bot(),
            run_server(),
            return_exceptions=True,
        )
    finally:
        if not bot.is_closed():
            await bot.close()
        await store.close()
        logger.info("call-cal-bot shutdown complete")


def main() -> NoReturn:
    """Main entry point."""
    configure_logging(settings.log_level)
    try:
        asyncio.run(start_services())
    except KeyboardInterrupt:
        pass
    sys.exit(0)


if __name__ == "__main__":
    main()
