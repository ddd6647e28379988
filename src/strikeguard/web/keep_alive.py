"""
Minimal HTTP endpoint that answers health checks while the bot runs.

Some hosting platforms stop services that do not listen on a port; this
serves ``GET /`` on the configured host and port using aiohttp.
"""

from aiohttp import web

from strikeguard.configuration.app_configuration import KeepAliveSettings
from strikeguard.util.logger import get_logger

logger = get_logger("keep_alive")

KEEP_ALIVE_TEXT = "Bot is running fine!"


async def handle_root(request: web.Request) -> web.Response:
    return web.Response(text=KEEP_ALIVE_TEXT)


def create_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", handle_root)
    return app


async def start_keep_alive(settings: KeepAliveSettings) -> web.AppRunner | None:
    """Start the keep-alive server if enabled, returning its runner.

    Returns None when the server is disabled or fails to bind; a failure here
    never stops the bot.
    """
    if not settings.enabled:
        return None

    runner = web.AppRunner(create_app())
    try:
        await runner.setup()
        site = web.TCPSite(runner, settings.host, settings.port)
        await site.start()
    except (OSError, OverflowError) as exc:
        logger.error("Failed to start keep-alive server on %s:%d: %s", settings.host, settings.port, exc)
        await runner.cleanup()
        return None

    logger.info("Keep-alive server listening on %s:%d", settings.host, settings.port)
    return runner


async def stop_keep_alive(runner: web.AppRunner | None) -> None:
    if runner is None:
        return
    await runner.cleanup()
    logger.info("Keep-alive server stopped")
