"""
Rush Bot - Main Bot Class
=========================

Discord client hosting the WordRush and SentenceRush minigames.

Features:
- /wordrush and /sentencerush slash command groups
- One running game per channel across both games
- Per-guild stats and settings in JSON files
- Health check HTTP endpoint
"""

from datetime import datetime

import discord
from discord.ext import commands

from src.core.config import get_config
from src.core.logger import logger
from src.services.minigames import GameRegistry, GameStatsStore
from src.services.sentencerush import SentenceRushConfigStore, SentenceRushService
from src.services.sentencerush.settings import STORE_FILE as SENTENCERUSH_CONFIG_FILE
from src.services.wordrush import WordRushConfigStore, WordRushService
from src.services.wordrush.settings import STORE_FILE as WORDRUSH_CONFIG_FILE
from src.utils.async_utils import gather_with_logging


# =============================================================================
# RushBot Class
# =============================================================================

class RushBot(commands.Bot):
    """
    Main Discord bot class.

    DESIGN: Central owner of the game machinery:
    - One GameRegistry shared by both games (one game per channel)
    - A stats store and a settings store per game kind
    - A GameService per game kind, used by the command cogs

    INITIALIZATION ORDER:
    1. __init__: stores, registry, services
    2. setup_hook (before on_ready): command cogs, command tree sync
    3. on_ready: footer, error webhook, health server
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self) -> None:
        self.config = get_config()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.start_time: datetime = datetime.now()
        self.health_server = None
        self._ready_initialized: bool = False

        data_dir = self.config.data_dir
        self.registry = GameRegistry()

        self.wordrush_stats = GameStatsStore(data_dir / "wordrush_stats.json", "WordRush")
        self.sentencerush_stats = GameStatsStore(data_dir / "sentencerush_stats.json", "SentenceRush")
        self.wordrush_config = WordRushConfigStore(data_dir / WORDRUSH_CONFIG_FILE)
        self.sentencerush_config = SentenceRushConfigStore(data_dir / SENTENCERUSH_CONFIG_FILE)

        self.wordrush_service = WordRushService(
            self,
            self.registry,
            self.wordrush_stats,
            self.wordrush_config,
            lobby_seconds=self.config.lobby_seconds,
        )
        self.sentencerush_service = SentenceRushService(
            self,
            self.registry,
            self.sentencerush_stats,
            self.sentencerush_config,
            lobby_seconds=self.config.lobby_seconds,
        )

        logger.info("Bot Instance Created")

    @property
    def game_services(self):
        return (self.wordrush_service, self.sentencerush_service)

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Load cogs and sync commands before on_ready."""
        from src.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
                logger.info(f"Cog Loaded: {cog.split('.')[-1]}")
            except Exception as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        try:
            guild_id = self.config.sync_guild_id
            if guild_id:
                guild = discord.Object(id=guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
            else:
                synced = await self.tree.sync()
            logger.tree("Commands Synced", [
                ("Count", str(len(synced))),
                ("Scope", f"Guild {guild_id}" if guild_id else "Global"),
            ], emoji="✅")
        except Exception as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        """Finish startup once connected."""
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
        ], emoji="🚀")

        from src.utils.footer import init_footer
        init_footer(self, self.config.bot_name)

        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        if self.config.health_port:
            from src.core.health import HealthCheckServer
            self.health_server = HealthCheckServer(self, self.config.health_port)
            await self.health_server.start()

        logger.tree("RUSH READY", [
            ("Games", "WordRush, SentenceRush"),
            ("Lobby", f"{self.config.lobby_seconds}s"),
            ("Data Dir", str(self.config.data_dir)),
            ("Health Server", "Running" if self.health_server else "Disabled"),
        ], emoji="🔥")

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def shutdown(self) -> None:
        """Stop every running game, then close the connection."""
        logger.info("Initiating Graceful Shutdown")

        await gather_with_logging(
            *[(f"{service.title} Shutdown", service.shutdown()) for service in self.game_services],
            context="Bot Shutdown",
        )

        if self.health_server:
            await self.health_server.stop()
            self.health_server = None

        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")

    async def close(self) -> None:
        """Override close to ensure proper shutdown."""
        await self.shutdown()


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["RushBot"]
