"""
Rush Bot - Game Registry
========================

Process-wide map from (guild, channel) to the active game.

DESIGN:
    One registry is created by the bot and shared by every game kind,
    so a channel never runs two minigames at once. start() checks and
    inserts without awaiting in between, which makes it atomic on the
    single event loop even under concurrent slash commands.

    Nothing here is persisted: a restart drops every active game.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from src.core.logger import logger
from src.services.minigames.game import BaseGame


GameKey = Tuple[int, int]


@dataclass
class StartResult:
    """Outcome of a start request; `game` is set only when ok."""

    ok: bool
    game: Optional[BaseGame] = None
    error: Optional[str] = None


class GameRegistry:
    """In-memory registry enforcing at most one game per channel."""

    def __init__(self) -> None:
        self._games: Dict[GameKey, BaseGame] = {}

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, key: GameKey) -> bool:
        return key in self._games

    def __iter__(self) -> Iterator[BaseGame]:
        return iter(list(self._games.values()))

    def get(self, guild_id: Optional[int], channel_id: Optional[int]) -> Optional[BaseGame]:
        if guild_id is None or channel_id is None:
            return None
        return self._games.get((guild_id, channel_id))

    def start(
        self,
        guild_id: int,
        channel_id: int,
        factory: Callable[[], BaseGame],
    ) -> StartResult:
        """
        Create and register a game if the channel is free.

        Args:
            guild_id: Guild the game runs in.
            channel_id: Channel the game runs in.
            factory: Synchronous callable building the new game.

        Returns:
            StartResult with the new game, or an error naming the game
            already running. The existing game is never touched.
        """
        key = (guild_id, channel_id)
        existing = self._games.get(key)
        if existing is not None:
            return StartResult(
                ok=False,
                error=(
                    f"A {existing.title} game hosted by <@{existing.host_id}> "
                    "is already running in this channel."
                ),
            )

        game = factory()
        self._games[key] = game

        logger.tree("Game Registered", [
            ("Game", game.title),
            ("ID", game.id),
            ("Guild", str(guild_id)),
            ("Channel", str(channel_id)),
            ("Active Games", str(len(self._games))),
        ], emoji="🎲")
        return StartResult(ok=True, game=game)

    def remove(
        self,
        guild_id: int,
        channel_id: int,
        game: Optional[BaseGame] = None,
    ) -> bool:
        """
        Drop the channel's game.

        Args:
            game: When given, only remove if it is still the registered game.

        Returns:
            True if a game was removed.
        """
        key = (guild_id, channel_id)
        current = self._games.get(key)
        if current is None:
            return False
        if game is not None and current is not game:
            return False

        del self._games[key]
        logger.debug("Game Unregistered", [
            ("ID", current.id),
            ("Channel", str(channel_id)),
            ("Active Games", str(len(self._games))),
        ])
        return True

    def active_games(self, kind: Optional[str] = None) -> List[BaseGame]:
        games = list(self._games.values())
        if kind is not None:
            games = [game for game in games if game.kind == kind]
        return games


__all__ = ["GameRegistry", "StartResult"]
