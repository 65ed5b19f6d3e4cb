"""
Rush Bot - Turn Engine
======================

Drives one game from lobby to outcome.

Lifecycle:
    lobby window -> start check -> turn loop -> outcome -> registry removal

Each loop iteration hands the turn to exactly one player: play_turn()
opens a single collector and returns only after it has fully ended, so
a new input window never starts before the previous one is closed.

Exhaustion rule:
    IDLE_ROUNDS_LIMIT full rounds in which nobody submitted anything end
    the game with timeout_exhausted. Nobody is ever eliminated for
    missing a turn.

Subclasses provide the game rules (play_turn, on_round_complete) and the
rendering hooks.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

import discord

from src.core.constants import IDLE_ROUNDS_LIMIT, LOBBY_TICK_SECONDS, LOBBY_WINDOW_SECONDS
from src.core.logger import logger
from src.services.minigames.embeds import build_ended_embed, build_not_enough_players_embed
from src.services.minigames.game import BaseGame
from src.services.minigames.lobby import LobbyController
from src.services.minigames.outcome import OutcomeReporter
from src.services.minigames.registry import GameRegistry
from src.services.minigames.state import GameState
from src.services.minigames.stats import PlayerStats
from src.utils.async_utils import safe_async_operation
from src.utils.error_handler import ErrorHandler

if TYPE_CHECKING:
    from discord.ext import commands


@dataclass
class TurnResult:
    """
    What happened during one player's turn.

    Attributes:
        submitted: The player sent at least one message.
        won: The submission won the game.
        reason: How the collector ended.
    """

    submitted: bool
    won: bool = False
    reason: str = "time"


class TurnEngine:
    """
    Base game loop shared by every minigame.

    Attributes:
        bot: Bot the turn collectors subscribe to, also used for user lookups.
        game: The game being driven.
        registry: Registry the game is removed from when the loop exits.
        reporter: Records won games in the stats store.
        lobby: Join window in front of the game.
    """

    idle_rounds_limit: int = IDLE_ROUNDS_LIMIT

    def __init__(
        self,
        bot: "commands.Bot",
        game: BaseGame,
        *,
        registry: GameRegistry,
        reporter: OutcomeReporter,
        lobby_seconds: float = LOBBY_WINDOW_SECONDS,
        lobby_tick_seconds: float = LOBBY_TICK_SECONDS,
    ) -> None:
        self.bot = bot
        self.game = game
        self.registry = registry
        self.reporter = reporter
        self.lobby = LobbyController(
            game,
            self.render_lobby,
            seconds=lobby_seconds,
            tick_seconds=lobby_tick_seconds,
        )
        self.turns_this_round = 0
        self.idle_turns = 0

    # =========================================================================
    # Game Rules (override)
    # =========================================================================

    async def play_turn(self, user_id: int) -> TurnResult:
        """Run one player's turn. Must not return before its collector ended."""
        raise NotImplementedError

    async def on_game_started(self) -> None:
        """Called once after the lobby closed with enough players."""

    async def on_round_complete(self) -> None:
        """Called after every player has had one turn."""

    # =========================================================================
    # Rendering (override)
    # =========================================================================

    def render_lobby(self, game: BaseGame, seconds_left: int) -> discord.Embed:
        raise NotImplementedError

    async def render_status(self) -> None:
        """Re-render the game's status message after a turn."""

    async def announce_outcome(self, winner_stats: Optional[PlayerStats]) -> None:
        """Announce the terminal outcome. Default covers every non-won ending."""
        game = self.game
        if game.outcome is GameState.NOT_ENOUGH_PLAYERS:
            embed = build_not_enough_players_embed(game)
        else:
            embed = build_ended_embed(game, self.outcome_text())
        await self.edit_lobby_message(embed=embed, view=None)

    def outcome_text(self) -> str:
        """Human-readable description of a non-won outcome."""
        game = self.game
        outcome = game.outcome
        if outcome is GameState.STOPPED:
            if game.stop_reason == "shutdown":
                return f"{game.title} ended because the bot is restarting."
            return f"{game.title} stopped."
        if outcome is GameState.NO_PLAYERS:
            return "No players remaining."
        if outcome is GameState.TIMEOUT_EXHAUSTED:
            return (
                f"Nobody answered for {self.idle_rounds_limit} full rounds, "
                f"so {game.title} timed out."
            )
        if outcome is GameState.ERROR:
            return f"{game.title} ended because of an unexpected error."
        return f"{game.title} ended."

    # =========================================================================
    # Shared Render Helpers
    # =========================================================================

    async def edit_lobby_message(self, **kwargs) -> None:
        message = self.game.lobby_message
        if message is None:
            return
        kwargs.setdefault("allowed_mentions", discord.AllowedMentions.none())
        await safe_async_operation(
            f"{self.game.title} Status Edit",
            message.edit(**kwargs),
        )

    async def send(self, **kwargs) -> Optional[discord.Message]:
        kwargs.setdefault("allowed_mentions", discord.AllowedMentions.none())
        return await safe_async_operation(
            f"{self.game.title} Send",
            self.game.channel.send(**kwargs),
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def open_lobby(self) -> None:
        """Send the lobby message. Raises LobbyError on failure."""
        await self.lobby.open()

    async def run(self) -> GameState:
        """
        Drive the game to completion.

        The game is always finished and removed from the registry on
        exit, whatever happened inside.

        Returns:
            The terminal outcome.
        """
        game = self.game
        try:
            enough = await self.lobby.wait()
            if game.is_stopped:
                pass
            elif not enough:
                game.stop(GameState.NOT_ENOUGH_PLAYERS, "not-enough-players")
            else:
                game.begin()
                logger.tree(f"{game.title} Started", [
                    ("Game", game.id),
                    ("Channel", str(game.channel_id)),
                    ("Players", str(len(game.players))),
                    ("Turn", f"{game.turn_seconds}s"),
                ], emoji="▶️")
                await self.on_game_started()
                await self._play()

        except asyncio.CancelledError:
            game.stop(GameState.STOPPED, "shutdown")
            raise

        except Exception as e:
            ErrorHandler.handle(
                e,
                location=f"{type(self).__name__}.run",
                game_id=game.id,
                guild_id=game.guild_id,
                channel_id=game.channel_id,
            )
            if not game.is_stopped:
                game.stop(GameState.ERROR, "error")

        finally:
            self.lobby.close()
            try:
                await self._report()
            finally:
                outcome = game.outcome or GameState.ERROR
                game.finish()
                self.registry.remove(game.guild_id, game.channel_id, game)

        return outcome

    async def _play(self) -> None:
        game = self.game
        self.turns_this_round = 0
        self.idle_turns = 0

        while not game.is_stopped:
            user_id = game.current_player()
            if user_id is None:
                game.stop(GameState.NO_PLAYERS, "no-players")
                break

            result = await self.play_turn(user_id)
            game.current_turn_user_id = None
            if game.is_stopped:
                break

            logger.debug(f"{game.title} Turn Result", [
                ("Game", game.id),
                ("User", str(user_id)),
                ("Submitted", str(result.submitted)),
                ("Reason", result.reason),
            ])

            if result.won:
                game.declare_winner(user_id)
                break

            self.idle_turns = 0 if result.submitted else self.idle_turns + 1

            if game.advance_turn(user_id) is None:
                game.stop(GameState.NO_PLAYERS, "no-players")
                break

            if self.idle_turns >= self.idle_rounds_limit * len(game.players):
                game.stop(GameState.TIMEOUT_EXHAUSTED, "timeout-exhausted")
                break

            self.turns_this_round += 1
            if self.turns_this_round >= len(game.players):
                self.turns_this_round = 0
                await self.on_round_complete()

            await self.render_status()

    async def _report(self) -> None:
        game = self.game
        winner_stats = await self.reporter.record(game)

        logger.tree(f"{game.title} Finished", [
            ("Game", game.id),
            ("Channel", str(game.channel_id)),
            ("Outcome", game.outcome.value if game.outcome else "unknown"),
            ("Winner", str(game.winner_id) if game.winner_id else "None"),
            ("Players", str(len(game.started_player_ids or game.players))),
        ], emoji="🏁")

        try:
            await self.announce_outcome(winner_stats)
        except Exception as e:
            ErrorHandler.handle(e, location=f"{type(self).__name__}.announce_outcome", game_id=game.id)


__all__ = ["TurnEngine", "TurnResult"]
