"""
Tests for the lobby, the Join button and GameService.start/join/stop.
"""

import asyncio
from unittest.mock import MagicMock

import discord
import pytest

from src.services.minigames.registry import GameRegistry
from src.services.minigames.state import GameState
from src.services.minigames.stats import GameStatsStore
from src.services.wordrush import WordRushConfigStore, WordRushService
from tests.conftest import CHANNEL_ID, GUILD_ID, make_user, replies


@pytest.fixture
def registry():
    return GameRegistry()


@pytest.fixture
def service(fake_bot, registry, data_dir):
    return WordRushService(
        fake_bot,
        registry,
        GameStatsStore(data_dir / "wordrush_stats.json", "WordRush"),
        WordRushConfigStore(data_dir / "wordrush_config.json"),
        lobby_seconds=5,
        lobby_tick_seconds=0.01,
    )


async def wait_for_tasks(service):
    tasks = list(service._tasks)
    if tasks:
        await asyncio.wait_for(asyncio.gather(*tasks, return_exceptions=True), 2)


# =============================================================================
# Start Tests
# =============================================================================

class TestStart:
    """Tests for GameService.start()."""

    @pytest.mark.asyncio
    async def test_start_opens_lobby(self, service, registry, host, make_interaction, channel):
        result = await service.start(make_interaction(host))

        assert result.ok
        game = result.game
        assert registry.get(GUILD_ID, CHANNEL_ID) is game
        assert game.players == [host.id]
        assert game.state is GameState.WAITING
        assert isinstance(channel.send.call_args.kwargs["view"], discord.ui.View)
        assert service.running_tasks == 1

        service.stop(GUILD_ID, CHANNEL_ID)
        await wait_for_tasks(service)

    @pytest.mark.asyncio
    async def test_start_options_override_guild_config(self, service, host, make_interaction):
        service.settings.set_config(GUILD_ID, {"turnSeconds": 30, "targetWins": 10})

        result = await service.start(make_interaction(host), turn_seconds=15, target_wins=None)

        assert result.game.turn_seconds == 15
        assert result.game.target_wins == 10
        service.stop(GUILD_ID, CHANNEL_ID)
        await wait_for_tasks(service)

    @pytest.mark.asyncio
    async def test_second_start_rejected(self, service, host, player, make_interaction):
        first = await service.start(make_interaction(host))
        second = await service.start(make_interaction(player))

        assert not second.ok
        assert "already running" in second.error
        assert service.get_active_game(GUILD_ID, CHANNEL_ID) is first.game

        service.stop(GUILD_ID, CHANNEL_ID)
        await wait_for_tasks(service)

    @pytest.mark.asyncio
    async def test_lobby_send_failure(self, service, registry, host, make_interaction, channel):
        response = MagicMock(status=403, reason="Forbidden")
        channel.send.side_effect = discord.Forbidden(response, "Missing Access")

        result = await service.start(make_interaction(host))

        assert not result.ok
        assert "Could not open the WordRush lobby" in result.error
        assert len(registry) == 0
        assert service.running_tasks == 0

    @pytest.mark.asyncio
    async def test_unusable_channel(self, service, host, make_interaction):
        interaction = make_interaction(host)
        interaction.channel = None
        result = await service.start(interaction)
        assert result.error == "Unable to access this channel."


# =============================================================================
# Lobby Window Tests
# =============================================================================

class TestLobbyWindow:
    """Tests for the join window."""

    @pytest.mark.asyncio
    async def test_not_enough_players(self, service, registry, host, make_interaction, status_message):
        service.lobby_seconds = 0.05
        result = await service.start(make_interaction(host))
        await wait_for_tasks(service)

        game = result.game
        assert game.outcome is GameState.NOT_ENOUGH_PLAYERS
        assert game.state is GameState.ENDED
        assert len(registry) == 0
        embed = status_message.edit.call_args.kwargs["embed"]
        assert embed.title == "WordRush Cancelled"
        assert status_message.edit.call_args.kwargs["view"] is None

    @pytest.mark.asyncio
    async def test_stop_during_lobby(self, service, registry, host, make_interaction):
        result = await service.start(make_interaction(host))

        stop = service.stop(GUILD_ID, CHANNEL_ID)
        assert stop.ok
        again = service.stop(GUILD_ID, CHANNEL_ID)
        assert not again.ok

        await wait_for_tasks(service)
        assert result.game.outcome is GameState.STOPPED
        assert len(registry) == 0
        assert not service.stop(GUILD_ID, CHANNEL_ID).ok

    @pytest.mark.asyncio
    async def test_service_join_refreshes_lobby(self, service, host, player, make_interaction, status_message):
        result = await service.start(make_interaction(host))

        joined = await service.join(result.game, player)
        repeat = await service.join(result.game, player)

        assert joined.joined
        assert repeat.ok and not repeat.joined
        assert result.game.players == [host.id, player.id]
        assert status_message.edit.await_count >= 1

        service.stop(GUILD_ID, CHANNEL_ID)
        await wait_for_tasks(service)

    @pytest.mark.asyncio
    async def test_shutdown_stops_games(self, service, registry, host, make_interaction):
        result = await service.start(make_interaction(host))

        await service.shutdown(timeout=2)

        assert result.game.stop_reason == "shutdown"
        assert len(registry) == 0
        assert service.running_tasks == 0


# =============================================================================
# Join Button Tests
# =============================================================================

class TestJoinView:
    """Tests for the lobby Join button."""

    @pytest.mark.asyncio
    async def test_button_joins(self, service, host, player, make_interaction):
        result = await service.start(make_interaction(host))
        view = service._engines[result.game.id].lobby.view
        interaction = make_interaction(player)

        await view.join_button.callback(interaction)

        assert player.id in result.game.player_set
        assert replies(interaction) == ["Joined WordRush!"]

        again = make_interaction(player)
        await view.join_button.callback(again)
        assert replies(again) == ["You are already in this WordRush game."]

        service.stop(GUILD_ID, CHANNEL_ID)
        await wait_for_tasks(service)

    @pytest.mark.asyncio
    async def test_button_after_close(self, service, host, player, make_interaction):
        result = await service.start(make_interaction(host))
        lobby = service._engines[result.game.id].lobby
        lobby.close()
        interaction = make_interaction(player)

        await lobby.view.join_button.callback(interaction)

        assert replies(interaction) == ["The join window is closed."]
        assert lobby.view.join_button.disabled
        service.stop(GUILD_ID, CHANNEL_ID)
        await wait_for_tasks(service)

    @pytest.mark.asyncio
    async def test_button_disabled_when_full(self, service, host, make_interaction):
        result = await service.start(make_interaction(host))
        game = result.game
        lobby = service._engines[game.id].lobby
        for user_id in range(1, game.max_players):
            game.join(make_user(user_id))

        lobby.view.sync()

        assert game.is_full
        assert lobby.view.join_button.disabled
        service.stop(GUILD_ID, CHANNEL_ID)
        await wait_for_tasks(service)
