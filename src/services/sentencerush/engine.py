"""
Rush Bot - SentenceRush Engine
==============================

Turn rules for SentenceRush.

Per turn:
    1. Mention the player with the current board
    2. Accept one message per word of the sentence; each message fills
       the next word slot
    3. Count down the final SENTENCERUSH_COUNTDOWN_SECONDS out loud
    4. A guess that spells the whole sentence wins; otherwise its correct
       letters are revealed and the turn passes

After every full round one random hidden letter is revealed.
"""

import asyncio
from typing import List, Optional

import discord

from src.core.constants import SENTENCERUSH_COUNTDOWN_SECONDS
from src.core.logger import logger
from src.services.minigames.collector import MessageCollector
from src.services.minigames.engine import TurnEngine, TurnResult
from src.services.minigames.game import BaseGame
from src.services.minigames.state import GameState
from src.services.minigames.stats import PlayerStats
from src.services.sentencerush.embeds import (
    build_board_embed,
    build_sentencerush_lobby_embed,
    build_winner_embed,
)
from src.services.sentencerush.game import SentenceRushGame
from src.services.sentencerush.sentences import extract_word
from src.services.sentencerush.views import HintView
from src.utils.async_utils import safe_async_operation


class SentenceRushEngine(TurnEngine):
    """Runs a SentenceRushGame."""

    game: SentenceRushGame

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.hint_view: Optional[HintView] = None

    # =========================================================================
    # Rendering
    # =========================================================================

    def render_lobby(self, game: BaseGame, seconds_left: int) -> discord.Embed:
        return build_sentencerush_lobby_embed(game, seconds_left)

    async def on_game_started(self) -> None:
        self.hint_view = HintView(self.game, self.render_status)
        self.game.token.link(lambda reason: self._disable_hints())
        await self.render_status()

    async def render_status(self) -> None:
        kwargs = {"embed": build_board_embed(self.game)}
        if self.hint_view is not None and not self.hint_view.is_finished():
            kwargs["view"] = self.hint_view
        await self.edit_lobby_message(**kwargs)

    def _disable_hints(self) -> None:
        if self.hint_view is not None:
            self.hint_view.disable()

    async def announce_outcome(self, winner_stats: Optional[PlayerStats]) -> None:
        self._disable_hints()
        game = self.game
        if game.outcome is not GameState.WON:
            await super().announce_outcome(winner_stats)
            return

        await self.edit_lobby_message(embed=build_winner_embed(game, winner_stats), view=None)

        wins = f" (total wins: **{winner_stats.wins}**)" if winner_stats else ""
        await self.send(
            content=f"SentenceRush winner: <@{game.winner_id}>{wins}",
            allowed_mentions=discord.AllowedMentions(users=[discord.Object(id=game.winner_id)]),
        )

    # =========================================================================
    # Turns
    # =========================================================================

    async def play_turn(self, user_id: int) -> TurnResult:
        game = self.game

        # Listening starts before the prompt so an instant guess is kept
        collector = game.open_collector(
            self.bot,
            user_id,
            seconds=game.turn_seconds,
            limit=game.word_count,
        )

        words: List[str] = []
        countdown: Optional[asyncio.Task] = None
        try:
            await self.send(
                content=f"<@{user_id}> it is your turn. You have {game.turn_seconds}s to guess the sentence.",
                embed=build_board_embed(game),
                allowed_mentions=discord.AllowedMentions(users=[discord.Object(id=user_id)]),
            )
            countdown = asyncio.create_task(self._countdown(collector, game.turn_seconds))

            async for message in collector:
                words.append(extract_word(message.content))
        finally:
            collector.close()
            if countdown is not None:
                countdown.cancel()
                await asyncio.gather(countdown, return_exceptions=True)

        reason = collector.end_reason or "time"
        submitted = bool(collector.collected)

        if game.is_stopped:
            return TurnResult(submitted=submitted, reason=reason)

        if game.is_solved_by(words):
            return TurnResult(submitted=True, won=True, reason=reason)

        if reason == "player-left" and not words:
            game.last_guess = f"<@{user_id}> left the game."
        elif words:
            game.last_guess = f"<@{user_id}>: {game.apply_guess(words)}"
        else:
            game.last_guess = "_No guess submitted._"

        logger.debug("SentenceRush Guess", [
            ("Game", game.id),
            ("User", str(user_id)),
            ("Words", str(len(words))),
            ("Reason", reason),
        ])
        return TurnResult(submitted=submitted, reason=reason)

    async def _countdown(self, collector: MessageCollector, seconds: float) -> None:
        """Send the last seconds of a turn, one message per second."""
        if seconds < SENTENCERUSH_COUNTDOWN_SECONDS:
            return
        lead = seconds - SENTENCERUSH_COUNTDOWN_SECONDS
        if lead > 0 and await self._turn_ended(collector, lead):
            return
        for remaining in range(SENTENCERUSH_COUNTDOWN_SECONDS, 0, -1):
            if collector.ended.is_set():
                return
            await safe_async_operation(
                "SentenceRush Countdown",
                self.game.channel.send(str(remaining)),
            )
            if await self._turn_ended(collector, 1):
                return

    async def _turn_ended(self, collector: MessageCollector, delay: float) -> bool:
        try:
            await asyncio.wait_for(collector.ended.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def on_round_complete(self) -> None:
        letter = self.game.reveal_hint()
        if letter is None:
            self.game.last_hint = "All letters are already revealed."
        else:
            self.game.last_hint = f"Revealed letter: **{letter}**"


__all__ = ["SentenceRushEngine"]
