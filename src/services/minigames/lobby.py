"""
Rush Bot - Lobby Controller
===========================

Timed join window in front of every game.

Flow:
    open()  -> send the lobby embed with the Join button (fatal on failure)
    wait()  -> re-render the countdown every tick until the window closes
               or the game is cancelled; returns whether enough joined

Only the initial send is fatal. Every later edit is best-effort: a
failed countdown refresh never aborts the game.
"""

import asyncio
import math
from typing import Callable, Optional

import discord

from src.core.constants import LOBBY_TICK_SECONDS, LOBBY_WINDOW_SECONDS
from src.core.logger import logger
from src.services.minigames.game import BaseGame
from src.services.minigames.views import JoinView
from src.utils.async_utils import safe_async_operation


LobbyRenderer = Callable[[BaseGame, int], discord.Embed]


class LobbyError(Exception):
    """Raised when the lobby message cannot be sent."""

    pass


class LobbyController:
    """
    Collects players for a fixed window and renders the countdown.

    Attributes:
        game: The game whose roster is being filled.
        seconds: Length of the join window.
        tick_seconds: Countdown re-render interval.
        closed: True once the window has closed.
        message: The lobby message once sent.
        view: The JoinView attached to the message.
    """

    def __init__(
        self,
        game: BaseGame,
        render: LobbyRenderer,
        *,
        seconds: float = LOBBY_WINDOW_SECONDS,
        tick_seconds: float = LOBBY_TICK_SECONDS,
    ) -> None:
        self.game = game
        self.render = render
        self.seconds = seconds
        self.tick_seconds = tick_seconds
        self.closed = False
        self.message: Optional[discord.Message] = None
        self.view: Optional[JoinView] = None
        self._deadline: Optional[float] = None

    # =========================================================================
    # Countdown
    # =========================================================================

    def seconds_left(self) -> int:
        if self._deadline is None:
            return int(self.seconds)
        remaining = self._deadline - asyncio.get_running_loop().time()
        return max(0, math.ceil(remaining))

    def embed(self) -> discord.Embed:
        return self.render(self.game, self.seconds_left())

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def open(self) -> discord.Message:
        """
        Send the lobby message and start the window.

        Raises:
            LobbyError: If the message could not be sent.
        """
        self._deadline = asyncio.get_running_loop().time() + self.seconds
        self.view = JoinView(self, timeout=self.seconds + self.tick_seconds)

        try:
            self.message = await self.game.channel.send(
                embed=self.embed(),
                view=self.view,
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except discord.HTTPException as e:
            self.closed = True
            self.view.stop()
            logger.error(f"{self.game.title} Lobby Send Failed", [
                ("Game", self.game.id),
                ("Channel", str(self.game.channel_id)),
                ("Error", str(e)[:100]),
            ])
            raise LobbyError(
                f"Could not open the {self.game.title} lobby here. "
                "Check that I can send messages and embeds in this channel."
            ) from e

        self.game.lobby_message = self.message
        logger.tree(f"{self.game.title} Lobby Opened", [
            ("Game", self.game.id),
            ("Host", str(self.game.host_id)),
            ("Window", f"{self.seconds}s"),
        ], emoji="🚪")
        return self.message

    async def wait(self) -> bool:
        """
        Run the join window.

        Returns:
            True if at least min_players joined and the game was not stopped.
        """
        loop = asyncio.get_running_loop()
        deadline = self._deadline or loop.time() + self.seconds
        token = self.game.token

        while not token.cancelled:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            if await token.sleep(min(self.tick_seconds, remaining)):
                break
            if loop.time() < deadline and not self.game.is_stopped:
                await self.refresh()

        self.close()

        enough = len(self.game.players) >= self.game.min_players
        logger.tree(f"{self.game.title} Lobby Closed", [
            ("Game", self.game.id),
            ("Players", str(len(self.game.players))),
            ("Cancelled", "Yes" if token.cancelled else "No"),
            ("Enough Players", "Yes" if enough else "No"),
        ], emoji="🔒")
        return enough and not self.game.is_stopped

    def close(self) -> None:
        """Close the window; later joins are rejected."""
        self.closed = True
        if self.view is not None:
            self.view.sync()
            self.view.stop()

    async def refresh(self, embed: Optional[discord.Embed] = None) -> None:
        """Best-effort re-render of the lobby message."""
        if self.message is None:
            return
        if self.view is not None:
            self.view.sync()
        await safe_async_operation(
            f"{self.game.title} Lobby Refresh",
            self.message.edit(embed=embed or self.embed(), view=self.view),
        )


__all__ = ["LobbyController", "LobbyError", "LobbyRenderer"]
