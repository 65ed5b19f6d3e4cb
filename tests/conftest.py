"""
Rush Bot - Test Fixtures
========================

Shared fixtures for all tests.
"""

import asyncio
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules
os.environ["TESTING"] = "1"
os.environ.setdefault("DISCORD_TOKEN", "test-token")
os.environ.setdefault("RUSH_LOG_DIR", tempfile.mkdtemp(prefix="rush-logs-"))

from src.core import config as config_module  # noqa: E402


GUILD_ID = 987654321
CHANNEL_ID = 555666777
HOST_ID = 111111111
PLAYER_ID = 222222222
OTHER_ID = 333333333


# =============================================================================
# Fake Discord Objects
# =============================================================================

def make_user(user_id: int, name: str = "player", bot: bool = False) -> MagicMock:
    """Create a mock Discord member."""
    user = MagicMock()
    user.id = user_id
    user.name = name
    user.display_name = name.title()
    user.global_name = None
    user.bot = bot
    user.mention = f"<@{user_id}>"
    user.guild_permissions = MagicMock(
        manage_guild=False,
        manage_channels=False,
        moderate_members=False,
    )
    user.__str__ = lambda self: name
    return user


def make_message(user: Any, content: str, channel_id: int = CHANNEL_ID) -> MagicMock:
    """Create a mock chat message from a user."""
    message = MagicMock()
    message.content = content
    message.author = user
    message.channel = MagicMock()
    message.channel.id = channel_id
    message.add_reaction = AsyncMock()
    return message


class FakeBot:
    """
    Bot stand-in that routes posted messages to on_message listeners.

    Like discord.py's dispatch, a posted message only reaches the
    listeners registered at that moment. A message nobody listens for
    is gone.
    """

    def __init__(self) -> None:
        self.listeners: Dict[str, List[Callable[..., Awaitable[Any]]]] = {}
        self.user = make_user(999888777, "rush", bot=True)
        self.fetch_user = AsyncMock(side_effect=lambda uid: make_user(uid, f"user{uid}"))
        self._tasks: List[asyncio.Task] = []

    def add_listener(self, func: Callable[..., Awaitable[Any]], name: Optional[str] = None) -> None:
        self.listeners.setdefault(name or func.__name__, []).append(func)

    def remove_listener(self, func: Callable[..., Awaitable[Any]], name: Optional[str] = None) -> None:
        listeners = self.listeners.get(name or func.__name__, [])
        if func in listeners:
            listeners.remove(func)

    def post(self, message: Any) -> None:
        for listener in list(self.listeners.get("on_message", [])):
            self._tasks.append(asyncio.ensure_future(listener(message)))

    def play_turns(
        self,
        game: Any,
        *turns: Tuple[Any, Sequence[Any]],
        delay: float = 0.0,
    ) -> asyncio.Task:
        """
        Post each turn's messages once that player's next turn opens.

        A turn is (user, messages); plain strings become messages from
        that user. Turns of other players in between are left silent.
        """

        async def script():
            seen: List[Any] = []
            for user, messages in turns:
                await self._next_turn(game, user.id, seen)
                for message in messages:
                    if delay:
                        await asyncio.sleep(delay)
                    if isinstance(message, str):
                        message = make_message(user, message)
                    self.post(message)

        task = asyncio.ensure_future(script())
        self._tasks.append(task)
        return task

    @staticmethod
    async def _next_turn(game: Any, user_id: int, seen: List[Any]) -> None:
        while True:
            collector = game.current_collector
            if (
                collector is not None
                and collector.is_live
                and not any(collector is old for old in seen)
            ):
                seen.append(collector)
                if collector.user_id == user_id:
                    return
            await asyncio.sleep(0.005)

    def cancel_scripts(self) -> None:
        for task in self._tasks:
            if not task.done():
                task.cancel()


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Fresh config per test with no developer or moderators."""
    monkeypatch.setenv("DISCORD_TOKEN", "test-token")
    monkeypatch.delenv("DEVELOPER_ID", raising=False)
    monkeypatch.delenv("MODERATOR_IDS", raising=False)
    config_module._config = None
    yield
    config_module._config = None


@pytest.fixture
def fake_bot():
    return FakeBot()


@pytest.fixture
def host():
    return make_user(HOST_ID, "host")


@pytest.fixture
def player():
    return make_user(PLAYER_ID, "player")


@pytest.fixture
def other():
    return make_user(OTHER_ID, "other")


@pytest.fixture
def status_message():
    """The lobby / status message returned by channel.send."""
    message = MagicMock()
    message.id = 444555666
    message.edit = AsyncMock()
    return message


@pytest.fixture
def channel(status_message):
    """Create a mock Discord text channel."""
    channel = MagicMock()
    channel.id = CHANNEL_ID
    channel.send = AsyncMock(return_value=status_message)
    return channel


@pytest.fixture
def guild():
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.name = "Test Server"
    guild.get_member = MagicMock(return_value=None)
    guild.fetch_member = AsyncMock(side_effect=lambda uid: make_user(uid, f"member{uid}"))
    return guild


@pytest.fixture
def make_interaction(channel, guild):
    """Factory for mock slash-command / button interactions."""

    def factory(user: Any) -> MagicMock:
        interaction = MagicMock()
        interaction.user = user
        interaction.guild = guild
        interaction.guild_id = GUILD_ID
        interaction.channel = channel
        interaction.channel_id = CHANNEL_ID
        interaction.response = MagicMock()
        interaction.response.is_done = MagicMock(return_value=False)
        interaction.response.send_message = AsyncMock()
        interaction.response.defer = AsyncMock()
        interaction.followup = MagicMock()
        interaction.followup.send = AsyncMock()
        return interaction

    return factory


def replies(interaction: MagicMock) -> List[str]:
    """Every text reply sent through response or followup."""
    texts = []
    for mock in (interaction.response.send_message, interaction.followup.send):
        for call in mock.call_args_list:
            content = call.kwargs.get("content")
            if content is None and call.args:
                content = call.args[0]
            if content is not None:
                texts.append(content)
    return texts


def reply_embeds(interaction: MagicMock) -> List[Any]:
    embeds = []
    for mock in (interaction.response.send_message, interaction.followup.send):
        for call in mock.call_args_list:
            if call.kwargs.get("embed") is not None:
                embeds.append(call.kwargs["embed"])
    return embeds


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"
