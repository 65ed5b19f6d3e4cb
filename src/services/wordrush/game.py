"""
Rush Bot - WordRush Game State
==============================

Score-based race: each valid word is one point and the first player to
reach target_wins wins. Missing a turn costs nothing; players only
leave the game by leaving it themselves.
"""

from typing import Any, Dict, List, Optional

from src.core.constants import (
    WORDRUSH_MAX_PLAYERS,
    WORDRUSH_MIN_PLAYERS,
)
from src.services.minigames.game import BaseGame


class WordRushGame(BaseGame):
    """
    WordRush game.

    Attributes:
        target_wins: Points needed to win, fixed at creation.
        scores: Points per player.
        letters: The current turn's prompt.
    """

    kind = "wordrush"
    title = "WordRush"
    min_players = WORDRUSH_MIN_PLAYERS
    max_players = WORDRUSH_MAX_PLAYERS

    def __init__(self, *, target_wins: int, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.target_wins = target_wins
        self.scores: Dict[int, int] = {}
        self.letters: Optional[List[str]] = None

    def config_snapshot(self) -> Dict[str, Any]:
        return {"turnSeconds": self.turn_seconds, "targetWins": self.target_wins}

    def begin(self) -> None:
        super().begin()
        self.scores = {user_id: 0 for user_id in self.players}

    def on_player_removed(self, user_id: int) -> None:
        self.scores.pop(user_id, None)

    def award_point(self, user_id: int) -> int:
        """Add one point; returns the player's new score."""
        self.scores[user_id] = self.scores.get(user_id, 0) + 1
        return self.scores[user_id]

    def has_reached_target(self, user_id: int) -> bool:
        return self.scores.get(user_id, 0) >= self.target_wins

    def standings(self) -> List[int]:
        """Player ids by score (highest first), join order breaking ties."""
        order = {user_id: index for index, user_id in enumerate(self.players)}
        return sorted(self.players, key=lambda uid: (-self.scores.get(uid, 0), order[uid]))


__all__ = ["WordRushGame"]
