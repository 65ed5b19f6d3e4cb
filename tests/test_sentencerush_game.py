"""
Full SentenceRush game runs against a scripted bot, plus the hint button
and the turn countdown.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.services.minigames.outcome import OutcomeReporter
from src.services.minigames.registry import GameRegistry
from src.services.minigames.state import GameState
from src.services.minigames.stats import GameStatsStore
from src.services.sentencerush.engine import SentenceRushEngine
from src.services.sentencerush.game import SentenceRushGame
from src.services.sentencerush.sentences import build_sentences
from src.services.sentencerush.service import SentenceRushService
from src.services.sentencerush.settings import SentenceRushConfigStore
from src.services.sentencerush.views import HintView
from tests.conftest import CHANNEL_ID, GUILD_ID, make_message, replies


SENTENCE = build_sentences(["The cat sat."])[0]


@pytest.fixture
def stats(data_dir):
    return GameStatsStore(data_dir / "sentencerush_stats.json", "SentenceRush")


@pytest.fixture
def registry():
    return GameRegistry()


def new_game(channel, *users, turn_seconds=1.0) -> SentenceRushGame:
    game = SentenceRushGame(
        guild_id=GUILD_ID,
        channel_id=CHANNEL_ID,
        channel=channel,
        host=users[0],
        turn_seconds=turn_seconds,
        sentence=SENTENCE,
        min_words=3,
        max_words=8,
    )
    for user in users:
        game.join(user)
    return game


@pytest.fixture
def setup_game(fake_bot, channel, registry, stats):
    def factory(*users, turn_seconds=1.0):
        game = new_game(channel, *users, turn_seconds=turn_seconds)
        registry.start(GUILD_ID, CHANNEL_ID, lambda: game)
        engine = SentenceRushEngine(
            fake_bot,
            game,
            registry=registry,
            reporter=OutcomeReporter(stats),
            lobby_seconds=0.05,
            lobby_tick_seconds=0.01,
        )
        return game, engine

    return factory


async def run(engine):
    await engine.open_lobby()
    try:
        return await asyncio.wait_for(engine.run(), 5)
    finally:
        engine.bot.cancel_scripts()


def embed_values(channel):
    values = []
    for call in channel.send.call_args_list:
        embed = call.kwargs.get("embed")
        if embed is not None:
            values.extend(field.value for field in embed.fields)
    return values


# =============================================================================
# Game Runs
# =============================================================================

class TestSentenceRushGame:
    """End-to-end SentenceRush runs."""

    @pytest.mark.asyncio
    async def test_solving_the_sentence_wins(self, fake_bot, setup_game, host, channel, stats, registry):
        game, engine = setup_game(host)
        fake_bot.play_turns(game, (host, ["The", "cat", "sat!"]))

        outcome = await run(engine)

        assert outcome is GameState.WON
        assert game.winner_id == host.id
        assert stats.get_stats(GUILD_ID, host.id).wins == 1
        texts = [call.kwargs.get("content") for call in channel.send.call_args_list]
        assert f"<@{host.id}> it is your turn. You have 1.0s to guess the sentence." in texts
        assert f"SentenceRush winner: <@{host.id}> (total wins: **1**)" in texts
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_guess_right_after_prompt_is_kept(self, fake_bot, setup_game, host, channel, status_message):
        game, engine = setup_game(host)
        prompt = f"<@{host.id}> it is your turn."

        async def send(*args, **kwargs):
            if (kwargs.get("content") or "").startswith(prompt):
                for text in ("the", "cat", "sat"):
                    fake_bot.post(make_message(host, text))
            return status_message

        channel.send.side_effect = send

        outcome = await run(engine)

        assert outcome is GameState.WON
        assert game.winner_id == host.id

    @pytest.mark.asyncio
    async def test_wrong_guess_reveals_letters_then_times_out(self, fake_bot, setup_game, host, channel):
        game, engine = setup_game(host, turn_seconds=0.2)
        fake_bot.play_turns(game, (host, ["the", "dog", "sat"]))

        outcome = await run(engine)

        assert outcome is GameState.TIMEOUT_EXHAUSTED
        assert all(game.revealed[index] for index in (0, 1, 2, 8, 9, 10))
        assert f"<@{host.id}>: T|H|E / D|O|G / S|A|T" in embed_values(channel)
        # One hint per completed round before the game ran out.
        assert game.hints_given == 2
        # Spaces, six matched letters and two hints; one letter stays hidden.
        assert game.revealed.count(True) == 10
        assert game.last_guess == "_No guess submitted._"

    @pytest.mark.asyncio
    async def test_each_message_fills_next_word(self, fake_bot, setup_game, host, player):
        game, engine = setup_game(host, player)
        fake_bot.play_turns(game, (host, ["the cat", "sat"]), (player, ["the", "cat", "sat"]))

        outcome = await run(engine)

        assert outcome is GameState.WON
        assert game.winner_id == player.id

    @pytest.mark.asyncio
    async def test_hint_view_attached_and_stopped(self, fake_bot, setup_game, host, status_message):
        game, engine = setup_game(host)
        fake_bot.play_turns(game, (host, ["the", "cat", "sat"]))

        await run(engine)

        views = [
            call.kwargs.get("view")
            for call in status_message.edit.call_args_list
            if isinstance(call.kwargs.get("view"), HintView)
        ]
        assert views
        assert engine.hint_view.is_finished()
        assert status_message.edit.call_args.kwargs["view"] is None


# =============================================================================
# Hint Button Tests
# =============================================================================

class TestHintView:
    """Tests for the one-shot hint button."""

    @pytest.mark.asyncio
    async def test_hint_flow(self, channel, host, player, other, make_interaction):
        game = new_game(channel, host, player)
        game.begin()
        on_hint = AsyncMock()
        view = HintView(game, on_hint)

        outsider = make_interaction(other)
        await view.hint_button.callback(outsider)
        assert replies(outsider) == ["Only active players can use a hint."]

        first = make_interaction(host)
        await view.hint_button.callback(first)
        assert replies(first)[0].startswith("Hint unlocked: **")
        assert game.hints_given == 1
        assert host.id in game.hint_used
        on_hint.assert_awaited_once()

        second = make_interaction(host)
        await view.hint_button.callback(second)
        assert replies(second) == ["You already used your hint this game."]

    @pytest.mark.asyncio
    async def test_hint_when_all_revealed(self, channel, host, make_interaction):
        game = new_game(channel, host)
        game.begin()
        game.revealed = [True] * len(game.revealed)
        view = HintView(game, AsyncMock())

        interaction = make_interaction(host)
        await view.hint_button.callback(interaction)

        assert replies(interaction) == ["All letters are already revealed."]
        assert host.id not in game.hint_used

    @pytest.mark.asyncio
    async def test_hint_in_lobby(self, channel, host, make_interaction):
        game = new_game(channel, host)
        view = HintView(game, AsyncMock())

        interaction = make_interaction(host)
        await view.hint_button.callback(interaction)

        assert replies(interaction) == ["The game is not active right now."]


# =============================================================================
# Countdown Tests
# =============================================================================

class TestCountdown:
    """Tests for the final-seconds countdown."""

    @pytest.mark.asyncio
    async def test_short_turns_have_no_countdown(self, fake_bot, setup_game, host, channel):
        game, engine = setup_game(host)
        collector = MagicMock()
        collector.ended = asyncio.Event()

        await engine._countdown(collector, 5)

        channel.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_countdown_messages(self, monkeypatch, setup_game, host, channel):
        monkeypatch.setattr("src.services.sentencerush.engine.SENTENCERUSH_COUNTDOWN_SECONDS", 2)
        game, engine = setup_game(host)
        collector = MagicMock()
        collector.ended = asyncio.Event()

        await engine._countdown(collector, 2)

        assert [call.args[0] for call in channel.send.call_args_list] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_countdown_stops_when_turn_ends(self, setup_game, host, channel):
        game, engine = setup_game(host)
        collector = MagicMock()
        collector.ended = asyncio.Event()
        collector.ended.set()

        await engine._countdown(collector, 30)

        channel.send.assert_not_called()


# =============================================================================
# Service Tests
# =============================================================================

class TestSentenceRushService:
    """Tests for SentenceRushService.start()."""

    @pytest.fixture
    def service(self, fake_bot, registry, stats, data_dir):
        return SentenceRushService(
            fake_bot,
            registry,
            stats,
            SentenceRushConfigStore(data_dir / "sentencerush_config.json"),
            lobby_seconds=5,
            lobby_tick_seconds=0.01,
        )

    @pytest.mark.asyncio
    async def test_start_uses_guild_settings(self, service, host, make_interaction):
        service.settings.set_config(GUILD_ID, {"minWords": 4, "maxWords": 5, "turnSeconds": 45})

        result = await service.start(make_interaction(host))

        game = result.game
        assert result.ok
        assert game.turn_seconds == 45
        assert 4 <= game.word_count <= 5
        assert game.players == [host.id]

        await service.shutdown(timeout=2)

    @pytest.mark.asyncio
    async def test_no_matching_sentence(self, monkeypatch, service, registry, host, make_interaction):
        monkeypatch.setattr("src.services.sentencerush.service.pick_sentence", lambda low, high: None)

        result = await service.start(make_interaction(host))

        assert not result.ok
        assert result.error == "No sentences are available for SentenceRush with the current settings."
        assert len(registry) == 0
