"""
Rush Bot - Health Check Server
==============================

HTTP health check endpoint for external monitoring.

DESIGN:
    Lightweight aiohttp server running inside the bot's event loop.
    The /health endpoint returns JSON with connection state and the
    number of minigames currently running, without exposing anything
    sensitive.
"""

from aiohttp import web
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from src.core.logger import logger
from src.core.config import NY_TZ
from src.core.constants import HEALTH_CHECK_PORT

if TYPE_CHECKING:
    from src.bot import RushBot


# =============================================================================
# Health Check Server
# =============================================================================

class HealthCheckServer:
    """
    Simple HTTP health check server for monitoring.

    Attributes:
        bot: Reference to the main bot instance.
        port: Port number for the HTTP server.
        app: aiohttp Application instance.
        runner: aiohttp AppRunner for lifecycle management.
    """

    def __init__(self, bot: "RushBot", port: int = HEALTH_CHECK_PORT) -> None:
        self.bot = bot
        self.port = port
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None

        self.app.router.add_get("/health", self.health_handler)
        self.app.router.add_get("/", self.health_handler)

    # =========================================================================
    # Request Handlers
    # =========================================================================

    def build_status(self) -> dict:
        """Collect the status payload served by /health."""
        is_connected = self.bot.is_ready()
        registry = getattr(self.bot, "registry", None)

        games = {"wordrush": 0, "sentencerush": 0}
        if registry is not None:
            for game in registry.active_games():
                games[game.kind] = games.get(game.kind, 0) + 1

        return {
            "status": "healthy" if is_connected else "starting",
            "bot": self.bot.config.bot_name,
            "connected": is_connected,
            "guilds": len(self.bot.guilds),
            "active_games": sum(games.values()),
            "games": games,
            "timestamp": datetime.now(NY_TZ).isoformat(),
        }

    async def health_handler(self, request: web.Request) -> web.Response:
        """Handle health check requests."""
        try:
            status = self.build_status()
            logger.debug(f"Health check: {status['status']}")
            return web.json_response(status)
        except Exception as e:
            logger.error("Health Check Error", [
                ("Error", str(e)[:100]),
            ])
            return web.json_response(
                {"status": "error", "error": str(e)},
                status=500,
            )

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        """Start the health check server on all interfaces."""
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()
            site = web.TCPSite(self.runner, "0.0.0.0", self.port)
            await site.start()

            logger.tree("Health Server Started", [
                ("Port", str(self.port)),
                ("Endpoint", f"http://0.0.0.0:{self.port}/health"),
            ], emoji="🏥")

        except OSError as e:
            logger.error("Health Server Startup Failed", [
                ("Port", str(self.port)),
                ("Error", str(e)[:100]),
            ])

    async def stop(self) -> None:
        """Stop the health check server. Safe to call if never started."""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.info("Health check server stopped")


__all__ = ["HealthCheckServer"]
