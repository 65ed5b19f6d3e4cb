"""
Tests for src/services/minigames/outcome.py

Covers recording of finished games.
"""

import threading
from unittest.mock import MagicMock, patch

import pytest

from src.core.storage import JsonFileStore, StoreError
from src.services.minigames.outcome import OutcomeReporter
from src.services.minigames.stats import GameStatsStore
from src.services.wordrush.game import WordRushGame
from tests.conftest import CHANNEL_ID, GUILD_ID, make_user


@pytest.fixture
def stats(data_dir):
    return GameStatsStore(data_dir / "wordrush_stats.json", "WordRush")


def started_game(*user_ids) -> WordRushGame:
    game = WordRushGame(
        guild_id=GUILD_ID,
        channel_id=CHANNEL_ID,
        channel=MagicMock(),
        host=make_user(user_ids[0]),
        turn_seconds=10,
        target_wins=3,
    )
    for user_id in user_ids:
        game.join(make_user(user_id))
    game.begin()
    return game


class TestOutcomeReporter:
    """Tests for OutcomeReporter.record()."""

    @pytest.mark.asyncio
    async def test_won_game_recorded(self, stats):
        game = started_game(1, 2)
        game.declare_winner(2)

        winner_stats = await OutcomeReporter(stats).record(game)

        assert winner_stats.wins == 1
        assert stats.get_stats(GUILD_ID, 1).games_played == 1
        history = stats.get_history(GUILD_ID)
        assert history[0]["winnerId"] == "2"
        assert history[0]["targetWins"] == 3

    @pytest.mark.asyncio
    async def test_players_who_left_still_count(self, stats):
        game = started_game(1, 2, 3)
        game.leave(3)
        game.declare_winner(1)

        await OutcomeReporter(stats).record(game)

        assert stats.get_stats(GUILD_ID, 3).games_played == 1

    @pytest.mark.asyncio
    async def test_non_won_outcomes_not_recorded(self, stats):
        game = started_game(1, 2)
        game.stop()

        assert await OutcomeReporter(stats).record(game) is None
        assert stats.get_leaderboard(GUILD_ID) == []

    @pytest.mark.asyncio
    async def test_write_failure_is_swallowed(self, stats):
        game = started_game(1, 2)
        game.declare_winner(1)

        with patch.object(JsonFileStore, "write", side_effect=StoreError("disk full")):
            winner_stats = await OutcomeReporter(stats).record(game)

        assert winner_stats is not None
        assert winner_stats.wins == 0

    @pytest.mark.asyncio
    async def test_write_runs_off_the_event_loop(self, stats):
        game = started_game(1, 2)
        game.declare_winner(1)
        writer_threads = []
        real_write = JsonFileStore.write

        def tracking_write(store, data):
            writer_threads.append(threading.current_thread())
            real_write(store, data)

        with patch.object(JsonFileStore, "write", tracking_write):
            winner_stats = await OutcomeReporter(stats).record(game)

        assert winner_stats.wins == 1
        assert writer_threads
        assert threading.main_thread() not in writer_threads
