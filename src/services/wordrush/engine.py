"""
Rush Bot - WordRush Engine
==========================

Turn rules for WordRush.

Per turn:
    1. Send a prompt with three playable letters, mentioning the player
    2. Accept up to WORDRUSH_ATTEMPTS_PER_TURN messages from that player,
       reacting ✅ / ❌ to each
    3. The first valid word ends the turn and scores a point
    4. Reaching target_wins wins the game; a timeout just passes the turn
"""

from typing import Optional

import discord

from src.core.constants import EMOJI_INVALID, EMOJI_VALID, WORDRUSH_ATTEMPTS_PER_TURN
from src.services.minigames.engine import TurnEngine, TurnResult
from src.services.minigames.game import BaseGame
from src.services.minigames.state import GameState
from src.services.minigames.stats import PlayerStats
from src.services.wordrush.embeds import (
    build_prompt_embed,
    build_scoreboard_embed,
    build_started_embed,
    build_turn_embed,
    build_winner_embed,
    build_wordrush_lobby_embed,
)
from src.services.wordrush.game import WordRushGame
from src.services.wordrush.logic import is_valid_answer, pick_playable_letters
from src.utils.async_utils import safe_async_operation


class WordRushEngine(TurnEngine):
    """Runs a WordRushGame."""

    game: WordRushGame

    # =========================================================================
    # Rendering
    # =========================================================================

    def render_lobby(self, game: BaseGame, seconds_left: int) -> discord.Embed:
        return build_wordrush_lobby_embed(game, seconds_left)

    async def on_game_started(self) -> None:
        await self.edit_lobby_message(embed=build_started_embed(self.game), view=None)

    async def render_status(self) -> None:
        await self.edit_lobby_message(embed=build_scoreboard_embed(self.game))

    async def announce_outcome(self, winner_stats: Optional[PlayerStats]) -> None:
        game = self.game
        if game.outcome is not GameState.WON:
            await super().announce_outcome(winner_stats)
            return

        await self.edit_lobby_message(embed=build_winner_embed(game, winner_stats), view=None)

        wins = f" (total wins: **{winner_stats.wins}**)" if winner_stats else ""
        await self.send(
            content=f"WordRush winner: <@{game.winner_id}>{wins}",
            allowed_mentions=discord.AllowedMentions(users=[discord.Object(id=game.winner_id)]),
        )

    # =========================================================================
    # Turns
    # =========================================================================

    async def play_turn(self, user_id: int) -> TurnResult:
        game = self.game
        letters = pick_playable_letters()
        game.letters = letters

        # Listening starts before the prompt so an instant answer is kept
        collector = game.open_collector(
            self.bot,
            user_id,
            seconds=game.turn_seconds,
            limit=WORDRUSH_ATTEMPTS_PER_TURN,
        )

        accepted: Optional[str] = None
        try:
            await self.send(
                content=f"<@{user_id}>",
                embed=build_prompt_embed(letters),
                allowed_mentions=discord.AllowedMentions(users=[discord.Object(id=user_id)]),
            )
            await self.edit_lobby_message(embed=build_turn_embed(game, user_id))

            async for message in collector:
                word = is_valid_answer(message.content, letters)
                await safe_async_operation(
                    "WordRush Reaction",
                    message.add_reaction(EMOJI_VALID if word else EMOJI_INVALID),
                )
                if word:
                    accepted = word
                    collector.stop("answered")
        finally:
            collector.close()

        game.letters = None
        reason = collector.end_reason or "time"
        submitted = bool(collector.collected)

        if game.is_stopped:
            return TurnResult(submitted=submitted, reason=reason)

        if accepted is not None and user_id in game.player_set:
            score = game.award_point(user_id)
            game.last_result = (
                f"<@{user_id}> {EMOJI_VALID} **{discord.utils.escape_markdown(accepted)}** "
                f"({score}/{game.target_wins})"
            )
            return TurnResult(
                submitted=True,
                won=game.has_reached_target(user_id),
                reason=reason,
            )

        if reason == "player-left":
            game.last_result = f"<@{user_id}> left the game."
        else:
            game.last_result = f"<@{user_id}> {EMOJI_INVALID} no valid word."
        return TurnResult(submitted=submitted, reason=reason)


__all__ = ["WordRushEngine"]
