"""
Rush Bot - SentenceRush Views
=============================

One-shot hint button shown under the puzzle board.
"""

from typing import Awaitable, Callable

import discord

from src.core.constants import SENTENCERUSH_HINT_VIEW_SECONDS
from src.core.logger import logger
from src.services.minigames.state import GameState
from src.services.sentencerush.game import SentenceRushGame
from src.utils.interaction import safe_respond


class HintView(discord.ui.View):
    """
    "Use Hint (1x)" button.

    Players only, once per player per game. Each press reveals a random
    hidden letter and re-renders the board through on_hint.
    """

    def __init__(
        self,
        game: SentenceRushGame,
        on_hint: Callable[[], Awaitable[None]],
        timeout: float = SENTENCERUSH_HINT_VIEW_SECONDS,
    ) -> None:
        super().__init__(timeout=timeout)
        self.game = game
        self.on_hint = on_hint

    def disable(self) -> None:
        self.hint_button.disabled = True
        self.stop()

    @discord.ui.button(label="Use Hint (1x)", style=discord.ButtonStyle.primary, emoji="💡")
    async def hint_button(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        game = self.game
        user_id = interaction.user.id

        if game.is_stopped or game.state is not GameState.PLAYING:
            await safe_respond(interaction, "The game is not active right now.")
            return
        if user_id not in game.player_set:
            await safe_respond(interaction, "Only active players can use a hint.")
            return
        if user_id in game.hint_used:
            await safe_respond(interaction, "You already used your hint this game.")
            return

        letter = game.use_player_hint(user_id)
        if letter is None:
            await safe_respond(interaction, "All letters are already revealed.")
            return

        logger.tree("SentenceRush Hint Used", [
            ("User", f"{interaction.user} ({user_id})"),
            ("Game", game.id),
            ("Letter", letter),
            ("Hints Given", str(game.hints_given)),
        ], emoji="💡")

        await safe_respond(interaction, f"Hint unlocked: **{letter}**")
        await self.on_hint()


__all__ = ["HintView"]
