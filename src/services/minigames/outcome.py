"""
Rush Bot - Outcome Reporter
===========================

Records finished games in the stats store.

Only a won game touches the stats. Every participant's gamesPlayed goes
up, only the winner's wins do. A failed write is logged and swallowed so
the result announcement still goes out.
"""

import asyncio
import time
from typing import Optional

from src.core.constants import MS_PER_SECOND
from src.core.logger import logger
from src.core.storage import StoreError
from src.services.minigames.game import BaseGame
from src.services.minigames.state import GameState
from src.services.minigames.stats import GameStatsStore, GameSummary, PlayerStats


class OutcomeReporter:
    """Turns a finished game into one stats record."""

    def __init__(self, stats: GameStatsStore) -> None:
        self.stats = stats

    async def record(self, game: BaseGame) -> Optional[PlayerStats]:
        """
        Record a won game.

        Returns:
            The winner's stats after recording (the previous totals if
            the write failed), or None when the game was not won.
        """
        if game.outcome is not GameState.WON or game.winner_id is None:
            return None

        roster = game.started_player_ids or list(game.player_set)
        player_ids = list(roster)
        if game.winner_id not in player_ids:
            player_ids.append(game.winner_id)

        summary = GameSummary(
            winner_id=game.winner_id,
            player_ids=player_ids,
            finished_at=int(time.time() * MS_PER_SECOND),
            settings=game.config_snapshot(),
        )

        try:
            await asyncio.to_thread(self.stats.record_game, game.guild_id, summary)
        except StoreError as e:
            logger.error(f"{game.title} Stats Write Failed", [
                ("Game", game.id),
                ("Guild", str(game.guild_id)),
                ("Winner", str(game.winner_id)),
                ("Error", str(e)[:100]),
            ])

        return self.stats.get_stats(game.guild_id, game.winner_id)


__all__ = ["OutcomeReporter"]
