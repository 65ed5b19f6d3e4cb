"""
Tests for the shared slash-command handlers and the command cogs.
"""

import asyncio
import threading
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.commands import minigame_helpers as helpers
from src.commands.sentencerush import SentenceRushCog
from src.commands.wordrush import WordRushCog, settings_rows, setup
from src.core.storage import JsonFileStore, StoreError
from src.services.minigames.registry import GameRegistry
from src.services.minigames.stats import GameStatsStore, GameSummary
from src.services.wordrush import WordRushConfigStore, WordRushService
from src.services.wordrush.embeds import build_game_status_embed
from tests.conftest import CHANNEL_ID, GUILD_ID, HOST_ID, PLAYER_ID, replies, reply_embeds


@pytest.fixture
def service(fake_bot, data_dir):
    return WordRushService(
        fake_bot,
        GameRegistry(),
        GameStatsStore(data_dir / "wordrush_stats.json", "WordRush"),
        WordRushConfigStore(data_dir / "wordrush_config.json"),
        lobby_seconds=5,
        lobby_tick_seconds=0.01,
    )


async def stop_all(service):
    await asyncio.wait_for(service.shutdown(timeout=2), 3)


# =============================================================================
# Game Flow
# =============================================================================

class TestGameFlowCommands:
    """Tests for start / join / leave / stop / status."""

    @pytest.mark.asyncio
    async def test_start_reply(self, service, host, make_interaction):
        interaction = make_interaction(host)

        await helpers.handle_start(interaction, service)

        interaction.response.defer.assert_awaited_once()
        assert replies(interaction) == ["WordRush lobby opened. Players have 5s to join."]
        await stop_all(service)

    @pytest.mark.asyncio
    async def test_start_error_reply(self, service, host, player, make_interaction):
        await helpers.handle_start(make_interaction(host), service)
        second = make_interaction(player)

        await helpers.handle_start(second, service)

        assert "already running" in replies(second)[0]
        await stop_all(service)

    @pytest.mark.asyncio
    async def test_join_without_game(self, service, player, make_interaction):
        interaction = make_interaction(player)
        await helpers.handle_join(interaction, service)
        assert replies(interaction) == ["No active WordRush game in this channel."]

    @pytest.mark.asyncio
    async def test_join_and_leave(self, service, host, player, make_interaction):
        await helpers.handle_start(make_interaction(host), service)

        joined = make_interaction(player)
        await helpers.handle_join(joined, service)
        again = make_interaction(player)
        await helpers.handle_join(again, service)
        left = make_interaction(player)
        await helpers.handle_leave(left, service)
        not_in = make_interaction(player)
        await helpers.handle_leave(not_in, service)

        assert replies(joined) == ["Joined WordRush!"]
        assert replies(again) == ["You are already in this WordRush game."]
        assert replies(left) == ["You left WordRush."]
        assert replies(not_in) == ["You are not in this WordRush game."]
        await stop_all(service)

    @pytest.mark.asyncio
    async def test_stop_requires_host_or_moderator(self, service, host, other, make_interaction):
        await helpers.handle_start(make_interaction(host), service)

        interaction = make_interaction(other)
        await helpers.handle_stop(interaction, service)

        assert replies(interaction) == ["Only the host or a moderator can stop this WordRush game."]
        assert service.get_active_game(GUILD_ID, CHANNEL_ID) is not None
        await stop_all(service)

    @pytest.mark.asyncio
    async def test_host_stops_game(self, service, host, make_interaction):
        await helpers.handle_start(make_interaction(host), service)
        game = service.get_active_game(GUILD_ID, CHANNEL_ID)

        interaction = make_interaction(host)
        await helpers.handle_stop(interaction, service)

        assert replies(interaction) == [f"WordRush stopped by <@{HOST_ID}>."]
        assert interaction.response.send_message.call_args.kwargs["ephemeral"] is False
        assert game.stop_reason == "stopped"
        await stop_all(service)

    @pytest.mark.asyncio
    async def test_channel_manager_stops_game(self, service, host, other, make_interaction):
        await helpers.handle_start(make_interaction(host), service)
        other.guild_permissions.manage_channels = True

        interaction = make_interaction(other)
        await helpers.handle_stop(interaction, service)

        assert replies(interaction)[0].startswith("WordRush stopped by")
        await stop_all(service)

    @pytest.mark.asyncio
    async def test_status(self, service, host, make_interaction):
        await helpers.handle_start(make_interaction(host), service)

        interaction = make_interaction(host)
        await helpers.handle_status(interaction, service, build_game_status_embed)

        embed = reply_embeds(interaction)[0]
        assert embed.title == "WordRush Status"
        assert "Lobby is open" in embed.description
        await stop_all(service)


# =============================================================================
# Stats
# =============================================================================

class TestStatsCommands:
    """Tests for stats and leaderboard."""

    @pytest.mark.asyncio
    async def test_stats_defaults_to_caller(self, service, host, make_interaction):
        service.stats.record_game(GUILD_ID, GameSummary(winner_id=HOST_ID, player_ids=[HOST_ID, PLAYER_ID]))

        interaction = make_interaction(host)
        await helpers.handle_stats(interaction, service, None)

        embed = reply_embeds(interaction)[0]
        assert embed.title == "WordRush Stats"
        assert embed.fields[0].value == "1"
        assert embed.fields[1].value == "1"

    @pytest.mark.asyncio
    async def test_leaderboard_resolves_names(self, service, fake_bot, host, make_interaction):
        service.stats.record_game(GUILD_ID, GameSummary(winner_id=PLAYER_ID, player_ids=[HOST_ID, PLAYER_ID]))

        interaction = make_interaction(host)
        await helpers.handle_leaderboard(interaction, service, fake_bot)

        embed = reply_embeds(interaction)[0]
        lines = embed.description.splitlines()
        assert lines[0].startswith("🥇 Member222222222")
        assert "Member111111111" in lines[1]
        assert interaction.response.send_message.call_args.kwargs["ephemeral"] is False

    @pytest.mark.asyncio
    async def test_empty_leaderboard(self, service, fake_bot, host, make_interaction):
        interaction = make_interaction(host)
        await helpers.handle_leaderboard(interaction, service, fake_bot)
        assert "No WordRush games" in reply_embeds(interaction)[0].description


# =============================================================================
# Settings
# =============================================================================

class TestSettingsCommand:
    """Tests for the settings subcommand."""

    @pytest.mark.asyncio
    async def test_show_current(self, service, host, make_interaction):
        interaction = make_interaction(host)

        await helpers.handle_settings(interaction, service, {"turnSeconds": None}, settings_rows)

        embed = reply_embeds(interaction)[0]
        assert embed.title == "WordRush Settings"
        assert [field.value for field in embed.fields] == ["10s", "5"]

    @pytest.mark.asyncio
    async def test_change_needs_manage_server(self, service, host, make_interaction):
        interaction = make_interaction(host)

        await helpers.handle_settings(interaction, service, {"turnSeconds": 20}, settings_rows)

        assert replies(interaction) == ["You need Manage Server to change WordRush settings."]
        assert service.settings.get_config(GUILD_ID)["turnSeconds"] == 10

    @pytest.mark.asyncio
    async def test_change_saved(self, service, host, make_interaction):
        host.guild_permissions.manage_guild = True
        interaction = make_interaction(host)

        await helpers.handle_settings(
            interaction, service, {"turnSeconds": 20, "targetWins": None}, settings_rows,
        )

        assert service.settings.get_config(GUILD_ID) == {"turnSeconds": 20, "targetWins": 5}
        assert [field.value for field in reply_embeds(interaction)[0].fields] == ["20s", "5"]

    @pytest.mark.asyncio
    async def test_failed_save(self, service, host, make_interaction):
        host.guild_permissions.manage_guild = True
        interaction = make_interaction(host)

        with patch.object(JsonFileStore, "write", side_effect=StoreError("disk full")):
            await helpers.handle_settings(interaction, service, {"targetWins": 3}, settings_rows)

        assert replies(interaction) == ["Could not save WordRush settings. Try again later."]

    @pytest.mark.asyncio
    async def test_save_runs_off_the_event_loop(self, service, host, make_interaction):
        host.guild_permissions.manage_guild = True
        interaction = make_interaction(host)
        writer_threads = []
        real_write = JsonFileStore.write

        def tracking_write(store, data):
            writer_threads.append(threading.current_thread())
            real_write(store, data)

        with patch.object(JsonFileStore, "write", tracking_write):
            await helpers.handle_settings(interaction, service, {"targetWins": 3}, settings_rows)

        assert service.settings.get_config(GUILD_ID)["targetWins"] == 3
        assert writer_threads
        assert threading.main_thread() not in writer_threads


# =============================================================================
# Cogs
# =============================================================================

class TestCogs:
    """Tests for cog construction and loading."""

    @pytest.mark.asyncio
    async def test_wordrush_subcommands(self, service):
        bot = MagicMock()
        bot.wordrush_service = service

        cog = WordRushCog(bot)

        names = {command.name for command in cog.wordrush_group.commands}
        assert names == {"start", "join", "leave", "stop", "status", "stats", "leaderboard", "settings"}
        assert cog.service is service

    @pytest.mark.asyncio
    async def test_sentencerush_subcommands(self):
        bot = MagicMock()

        cog = SentenceRushCog(bot)

        names = {command.name for command in cog.sentencerush_group.commands}
        assert names == {"start", "join", "leave", "end", "status", "stats", "leaderboard", "settings"}

    @pytest.mark.asyncio
    async def test_setup_adds_cog(self, service):
        bot = MagicMock()
        bot.wordrush_service = service
        bot.add_cog = AsyncMock()

        await setup(bot)

        assert isinstance(bot.add_cog.call_args.args[0], WordRushCog)
