"""
Rush Bot - Message Collector
============================

Bounded, predicate-filtered capture of one player's chat messages.

A collector subscribes to on_message as soon as it is created and
buffers every accepted message in its own queue, so nothing sent while
the game is busy (sending the prompt, reacting to an earlier answer) is
lost. It ends on the first of:
    - "time"          the turn window ran out
    - "limit"         the message cap was reached
    - stop(reason)    an explicit stop ("answered", "player-left", ...)
    - "game-stopped"  the game's CancelToken was cancelled

Usage:
    collector = game.open_collector(bot, user_id, seconds=10, limit=6)
    await channel.send(prompt)
    async for message in collector:
        ...
        collector.stop("answered")   # never break out of the loop

Open the collector before the prompt goes out. The turn window starts
when iteration starts.

Consumers stop the collector instead of breaking so the generator
always runs its cleanup (listener removal, token unlink, ended event,
game slot release).
"""

import asyncio
from typing import Any, Callable, List, Optional, TYPE_CHECKING

import discord

from src.services.minigames.state import CancelToken

if TYPE_CHECKING:
    from discord.ext import commands


class MessageCollector:
    """
    Collects messages from one user in one channel for a bounded time.

    Attributes:
        channel_id: Channel to listen in.
        user_id: The only author whose messages are accepted.
        seconds: Length of the collection window.
        limit: Maximum number of messages to collect (None for no cap).
        collected: Messages handed to the consumer so far.
        end_reason: Why the collector ended (None while live).
        ended: Event set once the collector has fully ended.
    """

    def __init__(
        self,
        bot: "commands.Bot",
        *,
        channel_id: int,
        user_id: int,
        seconds: float,
        limit: Optional[int] = None,
        token: Optional[CancelToken] = None,
        on_end: Optional[Callable[["MessageCollector"], None]] = None,
    ) -> None:
        self.bot = bot
        self.channel_id = channel_id
        self.user_id = user_id
        self.seconds = seconds
        self.limit = limit
        self.collected: List[discord.Message] = []
        self.end_reason: Optional[str] = None
        self.ended = asyncio.Event()

        self._queue: "asyncio.Queue[discord.Message]" = asyncio.Queue()
        self._accepted = 0
        self._stop_event = asyncio.Event()
        self._on_end = on_end
        self._started = False

        self._listener = self._on_message
        bot.add_listener(self._listener, "on_message")

        self._unlink: Callable[[], None] = lambda: None
        if token is not None:
            self._unlink = token.link(lambda _reason: self.stop("game-stopped"))

    # =========================================================================
    # Subscription
    # =========================================================================

    async def _on_message(self, message: discord.Message) -> None:
        if self.end_reason is not None or not self.check(message):
            return
        if self.limit is not None and self._accepted >= self.limit:
            return
        self._accepted += 1
        self._queue.put_nowait(message)

    def check(self, message: Any) -> bool:
        """Accept only messages from the turn user in this channel."""
        author = getattr(message, "author", None)
        channel = getattr(message, "channel", None)
        if author is None or channel is None:
            return False
        return (
            channel.id == self.channel_id
            and author.id == self.user_id
            and not author.bot
        )

    # =========================================================================
    # Control
    # =========================================================================

    @property
    def is_live(self) -> bool:
        return not self.ended.is_set()

    def stop(self, reason: str = "user") -> None:
        """End the collector. The first reason given wins."""
        if self.end_reason is None:
            self.end_reason = reason
        self._stop_event.set()
        # Never iterated: nothing else will finish the cleanup
        if not self._started:
            self._finish()

    def close(self) -> None:
        """Release the subscription now, even if iteration was abandoned."""
        self._stop_event.set()
        self._finish()

    def _finish(self) -> None:
        if self.ended.is_set():
            return
        if self.end_reason is None:
            self.end_reason = "closed"
        self.bot.remove_listener(self._listener, "on_message")
        self._unlink()
        self.ended.set()
        if self._on_end is not None:
            self._on_end(self)

    # =========================================================================
    # Iteration
    # =========================================================================

    def __aiter__(self):
        return self._iterate()

    async def _next_message(self, timeout: float) -> Optional[discord.Message]:
        """Next buffered message, or None on timeout or stop."""
        if not self._queue.empty():
            return self._queue.get_nowait()

        get_task = asyncio.ensure_future(self._queue.get())
        stop_task = asyncio.ensure_future(self._stop_event.wait())
        try:
            await asyncio.wait(
                {get_task, stop_task},
                timeout=timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in (get_task, stop_task):
                if not task.done():
                    task.cancel()

        if get_task.done() and not get_task.cancelled():
            return get_task.result()
        return None

    async def _iterate(self):
        if self._started:
            raise RuntimeError("A collector can only be iterated once")
        self._started = True

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.seconds

        try:
            while self.end_reason is None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    self.end_reason = "time"
                    break

                message = await self._next_message(remaining)
                if self.end_reason is not None:
                    break
                if message is None:
                    continue

                self.collected.append(message)
                yield message

                if (
                    self.end_reason is None
                    and self.limit is not None
                    and len(self.collected) >= self.limit
                ):
                    self.end_reason = "limit"
        finally:
            self._finish()


__all__ = ["MessageCollector"]
