"""
Rush Bot - Game Service Base
============================

Command-facing entry point for one game kind.

The command layer only talks to a service:
    start(interaction, **options) -> StartResult
    join(game, user)              -> JoinResult
    leave(game, user_id)          -> LeaveResult
    stop(guild_id, channel_id)    -> StopResult
    get_active_game(guild_id, channel_id)

start() registers the game, sends the lobby and schedules the engine as
a background task. Only a failed lobby send is reported back as an
error; everything after that is announced in the channel.
"""

import asyncio
from typing import Any, Dict, Optional, Set, Type, TYPE_CHECKING

import discord

from src.core.constants import LOBBY_TICK_SECONDS, LOBBY_WINDOW_SECONDS
from src.core.logger import logger
from src.services.minigames.engine import TurnEngine
from src.services.minigames.game import BaseGame, JoinResult, LeaveResult, StopResult
from src.services.minigames.lobby import LobbyError
from src.services.minigames.outcome import OutcomeReporter
from src.services.minigames.registry import GameRegistry, StartResult
from src.services.minigames.settings import GuildSettingsStore
from src.services.minigames.state import GameState
from src.services.minigames.stats import GameStatsStore
from src.utils.error_handler import ErrorHandler

if TYPE_CHECKING:
    from discord.ext import commands


class GameSetupError(Exception):
    """Raised by build_game() when a game cannot be created."""

    pass


class GameService:
    """
    Base service wiring a game class and its engine to the registry.

    Subclasses set game_cls / engine_cls and implement build_game().
    """

    game_cls: Type[BaseGame] = BaseGame
    engine_cls: Type[TurnEngine] = TurnEngine

    def __init__(
        self,
        bot: "commands.Bot",
        registry: GameRegistry,
        stats: GameStatsStore,
        settings: GuildSettingsStore,
        *,
        lobby_seconds: float = LOBBY_WINDOW_SECONDS,
        lobby_tick_seconds: float = LOBBY_TICK_SECONDS,
    ) -> None:
        self.bot = bot
        self.registry = registry
        self.stats = stats
        self.settings = settings
        self.reporter = OutcomeReporter(stats)
        self.lobby_seconds = lobby_seconds
        self.lobby_tick_seconds = lobby_tick_seconds

        self._tasks: Set[asyncio.Task] = set()
        self._engines: Dict[str, TurnEngine] = {}

    @property
    def title(self) -> str:
        return self.game_cls.title

    # =========================================================================
    # Game Construction (override)
    # =========================================================================

    def build_game(self, interaction: discord.Interaction, options: Dict[str, Any]) -> BaseGame:
        """
        Create the game for a start request. Runs inside the registry's
        check-and-insert, so it must not await.

        Raises:
            GameSetupError: If the game cannot be created with these settings.
        """
        raise NotImplementedError

    def build_engine(self, game: BaseGame) -> TurnEngine:
        return self.engine_cls(
            self.bot,
            game,
            registry=self.registry,
            reporter=self.reporter,
            lobby_seconds=self.lobby_seconds,
            lobby_tick_seconds=self.lobby_tick_seconds,
        )

    # =========================================================================
    # Commands
    # =========================================================================

    def get_active_game(self, guild_id: Optional[int], channel_id: Optional[int]) -> Optional[BaseGame]:
        game = self.registry.get(guild_id, channel_id)
        return game if isinstance(game, self.game_cls) else None

    async def start(self, interaction: discord.Interaction, **options: Any) -> StartResult:
        """
        Start a game in the interaction's channel.

        Returns:
            StartResult with the game on success. On failure nothing is
            left registered.
        """
        guild_id = interaction.guild_id
        channel_id = interaction.channel_id
        channel = interaction.channel

        if guild_id is None or channel_id is None or channel is None or not hasattr(channel, "send"):
            return StartResult(ok=False, error="Unable to access this channel.")

        try:
            result = self.registry.start(
                guild_id,
                channel_id,
                lambda: self.build_game(interaction, options),
            )
        except GameSetupError as e:
            return StartResult(ok=False, error=str(e))

        if not result.ok or result.game is None:
            return result

        game = result.game
        engine = self.build_engine(game)

        try:
            await engine.open_lobby()
        except LobbyError as e:
            game.stop(GameState.ERROR, "lobby-failed")
            game.finish()
            self.registry.remove(guild_id, channel_id, game)
            return StartResult(ok=False, error=str(e))

        self._engines[game.id] = engine
        task = asyncio.create_task(engine.run(), name=f"{game.kind}-{game.id}")
        self._tasks.add(task)
        task.add_done_callback(lambda t, game_id=game.id: self._on_task_done(t, game_id))

        logger.tree(f"{self.title} Created", [
            ("Game", game.id),
            ("Host", f"{interaction.user} ({interaction.user.id})"),
            ("Guild", str(guild_id)),
            ("Channel", str(channel_id)),
            ("Turn", f"{game.turn_seconds}s"),
        ], emoji="🎮")
        return result

    async def join(self, game: BaseGame, user: discord.abc.User) -> JoinResult:
        result = game.join(user)
        if result.joined:
            engine = self._engines.get(game.id)
            if engine is not None:
                await engine.lobby.refresh()
        return result

    async def leave(self, game: BaseGame, user_id: int) -> LeaveResult:
        result = game.leave(user_id)
        if result.left:
            logger.tree(f"{self.title} Player Left", [
                ("User", str(user_id)),
                ("Game", game.id),
                ("Players", str(len(game.players))),
                ("Host", str(game.host_id)),
            ], emoji="➖")
            engine = self._engines.get(game.id)
            if engine is not None and game.state is GameState.WAITING:
                await engine.lobby.refresh()
        return result

    def stop(self, guild_id: Optional[int], channel_id: Optional[int], reason: str = "stopped") -> StopResult:
        game = self.get_active_game(guild_id, channel_id)
        if game is None:
            return StopResult(ok=False, error=f"No active {self.title} game in this channel.")
        if not game.stop(GameState.STOPPED, reason):
            return StopResult(ok=False, error=f"This {self.title} game is already ending.")
        return StopResult(ok=True)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def running_tasks(self) -> int:
        return len(self._tasks)

    def _on_task_done(self, task: asyncio.Task, game_id: str) -> None:
        self._tasks.discard(task)
        self._engines.pop(game_id, None)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            ErrorHandler.handle(error, location=f"{type(self).__name__}.run", game_id=game_id)

    async def shutdown(self, timeout: float = 5.0) -> None:
        """Stop every game of this kind and wait for their loops to exit."""
        for game in self.registry.active_games(self.game_cls.kind):
            game.stop(GameState.STOPPED, "shutdown")

        if not self._tasks:
            return
        tasks = list(self._tasks)
        done, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()

        logger.tree(f"{self.title} Shutdown", [
            ("Finished", str(len(done))),
            ("Cancelled", str(len(pending))),
        ], emoji="🛑")


__all__ = ["GameService", "GameSetupError"]
