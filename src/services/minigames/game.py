"""
Rush Bot - Base Game
====================

In-memory state shared by every minigame: roster, turn cursor,
lifecycle state and the single live collector slot.

Games are never persisted. Every mutation happens on the event loop
that runs the game, so no locking is needed; the state machine and the
one-collector rule keep turns strictly sequential.
"""

import secrets
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, TYPE_CHECKING

import discord

from src.core.logger import logger
from src.services.minigames.collector import MessageCollector
from src.services.minigames.state import CancelToken, GameState, OUTCOMES, transition
from src.utils.members import profile_name

if TYPE_CHECKING:
    from discord.ext import commands


# =============================================================================
# Result Types
# =============================================================================

@dataclass
class JoinResult:
    ok: bool
    joined: bool = False
    error: Optional[str] = None


@dataclass
class LeaveResult:
    ok: bool
    left: bool = False
    error: Optional[str] = None


@dataclass
class StopResult:
    ok: bool
    error: Optional[str] = None


# =============================================================================
# Base Game
# =============================================================================

class BaseGame:
    """
    One in-progress minigame scoped to a guild channel.

    Subclasses set the class attributes and add their own progress state
    (scores, revealed letters, ...).

    Attributes:
        id: Opaque id generated at creation.
        guild_id: Guild the game runs in.
        channel_id: Channel the game runs in.
        channel: Channel object used for sending.
        host_id: User who started the game (transfers when they leave).
        state: Current GameState.
        players: User ids in join order; turn order follows it.
        player_set: Set mirror of players.
        profiles: Display names captured on join.
        turn_index: Position of the current turn in players.
        current_turn_user_id: Cache of players[turn_index] during a turn.
        turn_seconds: Turn window, fixed at creation.
        winner_id: Winner once the game is won.
        outcome: Terminal outcome, kept after the game reaches ended.
        stop_reason: Reason string of the terminal outcome.
        started_player_ids: Roster snapshot taken when play begins.
        current_collector: The one live MessageCollector, if any.
        token: Cancellation token for the whole game.
        last_result: Text of the last turn's result for rendering.
        lobby_message: Message carrying the lobby / status embed.
    """

    kind: str = "minigame"
    title: str = "Minigame"
    min_players: int = 1
    max_players: int = 6

    def __init__(
        self,
        *,
        guild_id: int,
        channel_id: int,
        channel: Any,
        host: Any,
        turn_seconds: int,
    ) -> None:
        self.id = f"{int(time.time() * 1000)}-{secrets.token_hex(3)}"
        self.guild_id = guild_id
        self.channel_id = channel_id
        self.channel = channel
        self.host_id: Optional[int] = host.id
        self.state = GameState.WAITING

        self.players: List[int] = []
        self.player_set: Set[int] = set()
        self.profiles: Dict[int, str] = {}
        self.turn_index = 0
        self.current_turn_user_id: Optional[int] = None
        self.turn_seconds = turn_seconds

        self.winner_id: Optional[int] = None
        self.outcome: Optional[GameState] = None
        self.stop_reason: Optional[str] = None
        self.started_player_ids: Optional[List[int]] = None
        self.current_collector: Optional[MessageCollector] = None
        self.token = CancelToken()
        self.started_at = time.time()
        self.last_result: Optional[str] = None
        self.lobby_message: Optional[discord.Message] = None

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} id={self.id} channel={self.channel_id} "
            f"state={self.state.value} players={len(self.players)}>"
        )

    # =========================================================================
    # Derived State
    # =========================================================================

    @property
    def stage(self) -> str:
        return self.state.stage

    @property
    def is_stopped(self) -> bool:
        return self.state in OUTCOMES or self.state is GameState.ENDED

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    def set_state(self, target: GameState) -> None:
        """Move to a new state; raises InvalidTransition if not allowed."""
        self.state = transition(self.state, target)

    def display_name(self, user_id: int) -> str:
        return self.profiles.get(user_id) or f"<@{user_id}>"

    def config_snapshot(self) -> Dict[str, Any]:
        """Settings recorded with a finished game in the stats history."""
        return {"turnSeconds": self.turn_seconds}

    # =========================================================================
    # Roster
    # =========================================================================

    def join(self, user: Any) -> JoinResult:
        """
        Add a player during the join window.

        Joining twice is a successful no-op (joined=False).
        """
        if self.state is not GameState.WAITING:
            return JoinResult(ok=False, error="The join window is closed.")
        if user.id in self.player_set:
            return JoinResult(ok=True, joined=False)
        if self.is_full:
            return JoinResult(
                ok=False,
                error=f"This {self.title} lobby is full (max {self.max_players} players).",
            )

        self.players.append(user.id)
        self.player_set.add(user.id)
        name = profile_name(user)
        if name:
            self.profiles[user.id] = name
        return JoinResult(ok=True, joined=True)

    def leave(self, user_id: int) -> LeaveResult:
        """
        Remove a player at any stage before the game ends.

        The host role moves to the next player in join order; an empty
        roster stops the game with no_players. If the leaving player is
        mid-turn, their collector ends with "player-left".
        """
        if self.is_stopped:
            return LeaveResult(ok=False, error=f"This {self.title} game has already ended.")
        if user_id not in self.player_set:
            return LeaveResult(ok=True, left=False)

        self.players.remove(user_id)
        self.player_set.discard(user_id)
        self.profiles.pop(user_id, None)
        self.on_player_removed(user_id)

        if self.players and self.turn_index >= len(self.players):
            self.turn_index = 0

        if self.host_id == user_id:
            self.host_id = self.players[0] if self.players else None

        if not self.players:
            self.stop(GameState.NO_PLAYERS, "no-players")
        elif self.current_turn_user_id == user_id and self.current_collector is not None:
            self.current_collector.stop("player-left")

        return LeaveResult(ok=True, left=True)

    def on_player_removed(self, user_id: int) -> None:
        """Hook for subclasses to drop per-player progress."""

    # =========================================================================
    # Turns
    # =========================================================================

    def current_player(self) -> Optional[int]:
        """User id whose turn it is, clamping a stale turn_index."""
        if not self.players:
            return None
        if self.turn_index >= len(self.players):
            self.turn_index = 0
        return self.players[self.turn_index]

    def advance_turn(self, after_user_id: Optional[int] = None) -> Optional[int]:
        """
        Move the turn cursor to the next player.

        Args:
            after_user_id: Player whose turn just finished. If they left
                mid-turn, the player who slid into their slot goes next.

        Returns:
            The next player's id, or None if the roster is empty.
        """
        if not self.players:
            self.turn_index = 0
            return None

        if after_user_id is None or after_user_id in self.player_set:
            anchor = (
                self.players.index(after_user_id)
                if after_user_id is not None
                else self.turn_index
            )
            self.turn_index = (anchor + 1) % len(self.players)
        else:
            self.turn_index %= len(self.players)

        return self.players[self.turn_index]

    def open_collector(
        self,
        bot: "commands.Bot",
        user_id: int,
        *,
        seconds: float,
        limit: Optional[int] = None,
    ) -> MessageCollector:
        """
        Open the turn's input window for one player.

        Raises:
            RuntimeError: If a collector is already live for this game.
        """
        if self.current_collector is not None and self.current_collector.is_live:
            raise RuntimeError(f"Game {self.id} already has a live collector")

        collector = MessageCollector(
            bot,
            channel_id=self.channel_id,
            user_id=user_id,
            seconds=seconds,
            limit=limit,
            token=self.token,
            on_end=self._release_collector,
        )
        self.current_collector = collector
        self.current_turn_user_id = user_id
        return collector

    def _release_collector(self, collector: MessageCollector) -> None:
        if self.current_collector is collector:
            self.current_collector = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def begin(self) -> None:
        """Close the lobby and start play, snapshotting the roster."""
        self.set_state(GameState.PLAYING)
        self.started_player_ids = list(self.players)
        self.turn_index = 0

    def stop(self, outcome: GameState = GameState.STOPPED, reason: Optional[str] = None) -> bool:
        """
        Move to a terminal outcome and cancel everything awaiting input.

        Returns:
            True if this call stopped the game, False if it was already stopped.
        """
        if self.is_stopped:
            return False

        self.set_state(outcome)
        self.outcome = outcome
        self.stop_reason = reason or outcome.value
        self.token.cancel(self.stop_reason)

        logger.tree(f"{self.title} Stopping", [
            ("Game", self.id),
            ("Channel", str(self.channel_id)),
            ("Outcome", outcome.value),
            ("Reason", self.stop_reason),
        ], emoji="🛑")
        return True

    def declare_winner(self, user_id: int) -> bool:
        if self.is_stopped:
            return False
        self.winner_id = user_id
        return self.stop(GameState.WON, "winner")

    def finish(self) -> None:
        """Move a stopped game to ended."""
        if self.state in OUTCOMES:
            self.set_state(GameState.ENDED)


__all__ = ["BaseGame", "JoinResult", "LeaveResult", "StopResult"]
