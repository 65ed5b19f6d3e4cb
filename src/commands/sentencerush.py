"""
Rush Bot - SentenceRush Command Cog
===================================

/sentencerush slash command group.

Features:
    - /sentencerush start: Open a lobby with a random sentence
    - /sentencerush join | leave: Roster changes
    - /sentencerush end: End the game (host or moderator)
    - /sentencerush status | stats [user] | leaderboard
    - /sentencerush settings [min_words] [max_words] [turn_seconds] (Manage Server)
"""

from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.commands.minigame_helpers import (
    handle_join,
    handle_leaderboard,
    handle_leave,
    handle_settings,
    handle_start,
    handle_stats,
    handle_status,
    handle_stop,
)
from src.core.constants import (
    SENTENCERUSH_MAX_TURN_SECONDS,
    SENTENCERUSH_MAX_WORDS,
    SENTENCERUSH_MIN_TURN_SECONDS,
    SENTENCERUSH_MIN_WORDS,
)
from src.core.logger import logger
from src.services.sentencerush.embeds import build_game_status_embed

if TYPE_CHECKING:
    from src.bot import RushBot


WordCount = app_commands.Range[int, SENTENCERUSH_MIN_WORDS, SENTENCERUSH_MAX_WORDS]
TurnSeconds = app_commands.Range[int, SENTENCERUSH_MIN_TURN_SECONDS, SENTENCERUSH_MAX_TURN_SECONDS]


def settings_rows(config: Dict[str, Any]) -> List[Tuple[str, str]]:
    return [
        ("Words", f"{config['minWords']}-{config['maxWords']}"),
        ("Turn Timer", f"{config['turnSeconds']}s"),
    ]


# =============================================================================
# SentenceRush Cog
# =============================================================================

class SentenceRushCog(commands.Cog):
    """Cog for the SentenceRush minigame."""

    def __init__(self, bot: "RushBot") -> None:
        self.bot = bot
        self.service = bot.sentencerush_service

        logger.tree("SentenceRush Cog Loaded", [
            ("Commands", "/sentencerush start, join, leave, end, status, stats, leaderboard, settings"),
        ], emoji="📝")

    # =========================================================================
    # Command Group
    # =========================================================================

    sentencerush_group = app_commands.Group(
        name="sentencerush",
        description="Guess the hidden sentence one word at a time",
        guild_only=True,
    )

    @sentencerush_group.command(name="start", description="Open a SentenceRush lobby in this channel")
    async def start(self, interaction: discord.Interaction) -> None:
        await handle_start(interaction, self.service)

    @sentencerush_group.command(name="join", description="Join the SentenceRush lobby")
    async def join(self, interaction: discord.Interaction) -> None:
        await handle_join(interaction, self.service)

    @sentencerush_group.command(name="leave", description="Leave the current SentenceRush game")
    async def leave(self, interaction: discord.Interaction) -> None:
        await handle_leave(interaction, self.service)

    @sentencerush_group.command(name="end", description="End the SentenceRush game in this channel")
    async def end(self, interaction: discord.Interaction) -> None:
        await handle_stop(interaction, self.service)

    @sentencerush_group.command(name="status", description="Show the current SentenceRush game")
    async def status(self, interaction: discord.Interaction) -> None:
        await handle_status(interaction, self.service, build_game_status_embed)

    @sentencerush_group.command(name="stats", description="Show SentenceRush stats")
    @app_commands.describe(user="Player to look up (defaults to you)")
    async def stats(self, interaction: discord.Interaction, user: Optional[discord.User] = None) -> None:
        await handle_stats(interaction, self.service, user)

    @sentencerush_group.command(name="leaderboard", description="Show the SentenceRush leaderboard")
    async def leaderboard(self, interaction: discord.Interaction) -> None:
        await handle_leaderboard(interaction, self.service, self.bot)

    @sentencerush_group.command(name="settings", description="Show or change SentenceRush settings")
    @app_commands.describe(
        min_words=f"Shortest sentence ({SENTENCERUSH_MIN_WORDS}-{SENTENCERUSH_MAX_WORDS} words)",
        max_words=f"Longest sentence ({SENTENCERUSH_MIN_WORDS}-{SENTENCERUSH_MAX_WORDS} words)",
        turn_seconds=f"Seconds per turn ({SENTENCERUSH_MIN_TURN_SECONDS}-{SENTENCERUSH_MAX_TURN_SECONDS})",
    )
    async def settings(
        self,
        interaction: discord.Interaction,
        min_words: Optional[WordCount] = None,
        max_words: Optional[WordCount] = None,
        turn_seconds: Optional[TurnSeconds] = None,
    ) -> None:
        await handle_settings(
            interaction,
            self.service,
            {"minWords": min_words, "maxWords": max_words, "turnSeconds": turn_seconds},
            settings_rows,
        )


# =============================================================================
# Setup
# =============================================================================

async def setup(bot: "RushBot") -> None:
    """Load the SentenceRush cog."""
    await bot.add_cog(SentenceRushCog(bot))
