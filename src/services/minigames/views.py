"""
Rush Bot - Minigame Views
=========================

Join button attached to a game's lobby message for the join window.
"""

from typing import TYPE_CHECKING

import discord

from src.core.logger import logger
from src.services.minigames.game import JoinResult
from src.utils.interaction import safe_respond

if TYPE_CHECKING:
    from src.services.minigames.lobby import LobbyController


class JoinView(discord.ui.View):
    """
    Single "Join <Game>" button routed into game.join().

    Replies are ephemeral: joined, already in, full or closed. The
    button is disabled once the roster is full or the window closes.
    """

    def __init__(self, lobby: "LobbyController", timeout: float) -> None:
        super().__init__(timeout=timeout)
        self.lobby = lobby
        self.join_button.label = f"Join {lobby.game.title}"
        self.sync()

    def sync(self) -> None:
        """Enable the button only while joins can succeed."""
        game = self.lobby.game
        self.join_button.disabled = self.lobby.closed or game.is_stopped or game.is_full

    @discord.ui.button(label="Join", style=discord.ButtonStyle.success, emoji="🎮")
    async def join_button(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        game = self.lobby.game
        title = game.title

        if self.lobby.closed or game.is_stopped:
            result = JoinResult(ok=False, error="The join window is closed.")
        else:
            result = game.join(interaction.user)

        if not result.ok:
            await safe_respond(interaction, result.error or "Unable to join right now.")
            return
        if not result.joined:
            await safe_respond(interaction, f"You are already in this {title} game.")
            return

        logger.tree(f"{title} Player Joined", [
            ("User", f"{interaction.user} ({interaction.user.id})"),
            ("Game", game.id),
            ("Players", f"{len(game.players)}/{game.max_players}"),
        ], emoji="➕")

        await safe_respond(interaction, f"Joined {title}!")
        await self.lobby.refresh()


__all__ = ["JoinView"]
