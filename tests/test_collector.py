"""
Tests for src/services/minigames/collector.py

Covers bounded message capture from the bot's on_message stream.
"""

import asyncio

import pytest

from src.services.minigames.collector import MessageCollector
from src.services.minigames.state import CancelToken
from tests.conftest import CHANNEL_ID, HOST_ID, PLAYER_ID, make_message, make_user


async def drain(collector):
    return [message async for message in collector]


async def settle():
    """Let scheduled on_message listeners run."""
    for _ in range(3):
        await asyncio.sleep(0)


class TestMessageCollector:
    """Tests for MessageCollector."""

    @pytest.mark.asyncio
    async def test_filters_other_users_channels_and_bots(self, fake_bot):
        host = make_user(HOST_ID)
        collector = MessageCollector(fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=0.1)
        fake_bot.post(make_message(make_user(PLAYER_ID), "not me"))
        fake_bot.post(make_message(host, "wrong channel", channel_id=CHANNEL_ID + 1))
        fake_bot.post(make_message(make_user(HOST_ID, bot=True), "bot"))
        fake_bot.post(make_message(host, "mine"))

        messages = await drain(collector)

        assert [m.content for m in messages] == ["mine"]
        assert collector.end_reason == "time"

    @pytest.mark.asyncio
    async def test_message_before_collector_is_dropped(self, fake_bot):
        host = make_user(HOST_ID)
        fake_bot.post(make_message(host, "too early"))
        await settle()

        collector = MessageCollector(fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=0.05)
        messages = await drain(collector)

        assert messages == []

    @pytest.mark.asyncio
    async def test_buffers_before_iteration(self, fake_bot):
        host = make_user(HOST_ID)
        collector = MessageCollector(fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=0.1)
        fake_bot.post(make_message(host, "instant"))
        await asyncio.sleep(0.05)

        messages = await drain(collector)

        assert [m.content for m in messages] == ["instant"]

    @pytest.mark.asyncio
    async def test_buffers_while_consumer_is_busy(self, fake_bot):
        host = make_user(HOST_ID)
        collector = MessageCollector(fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=1, limit=2)
        fake_bot.post(make_message(host, "first"))

        seen = []
        async for message in collector:
            seen.append(message.content)
            if len(seen) == 1:
                fake_bot.post(make_message(host, "second"))
                await asyncio.sleep(0.05)

        assert seen == ["first", "second"]
        assert collector.end_reason == "limit"

    @pytest.mark.asyncio
    async def test_limit(self, fake_bot):
        host = make_user(HOST_ID)
        collector = MessageCollector(fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=5, limit=2)
        for text in ("a", "b", "c"):
            fake_bot.post(make_message(host, text))

        messages = await drain(collector)

        assert [m.content for m in messages] == ["a", "b"]
        assert collector.end_reason == "limit"
        assert collector.ended.is_set()

    @pytest.mark.asyncio
    async def test_stop_inside_loop(self, fake_bot):
        host = make_user(HOST_ID)
        collector = MessageCollector(fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=5)
        for text in ("a", "b"):
            fake_bot.post(make_message(host, text))

        seen = []
        async for message in collector:
            seen.append(message.content)
            collector.stop("answered")

        assert seen == ["a"]
        assert collector.end_reason == "answered"

    @pytest.mark.asyncio
    async def test_listener_removed_when_ended(self, fake_bot):
        collector = MessageCollector(fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=0.01)
        assert len(fake_bot.listeners["on_message"]) == 1

        await drain(collector)

        assert fake_bot.listeners["on_message"] == []

    @pytest.mark.asyncio
    async def test_close_after_abandoned_loop(self, fake_bot):
        host = make_user(HOST_ID)
        ended = []
        collector = MessageCollector(
            fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=5, on_end=ended.append,
        )
        fake_bot.post(make_message(host, "boom"))

        with pytest.raises(ValueError):
            async for _message in collector:
                raise ValueError("consumer failed")
        collector.close()

        assert not collector.is_live
        assert ended == [collector]
        assert fake_bot.listeners["on_message"] == []

    @pytest.mark.asyncio
    async def test_token_cancel_ends_collector(self, fake_bot):
        token = CancelToken()
        collector = MessageCollector(
            fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=5, token=token,
        )
        asyncio.get_running_loop().call_later(0.02, token.cancel, "stopped")

        messages = await asyncio.wait_for(drain(collector), 1)

        assert messages == []
        assert collector.end_reason == "game-stopped"

    @pytest.mark.asyncio
    async def test_stop_before_iteration_finishes(self, fake_bot):
        ended = []
        collector = MessageCollector(
            fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=5, on_end=ended.append,
        )
        collector.stop("player-left")
        assert not collector.is_live
        assert ended == [collector]
        assert fake_bot.listeners["on_message"] == []

    @pytest.mark.asyncio
    async def test_iterate_once(self, fake_bot):
        collector = MessageCollector(fake_bot, channel_id=CHANNEL_ID, user_id=HOST_ID, seconds=0.01)
        await drain(collector)
        with pytest.raises(RuntimeError):
            await drain(collector)
