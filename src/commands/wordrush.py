"""
Rush Bot - WordRush Command Cog
===============================

/wordrush slash command group.

Features:
    - /wordrush start [turn_seconds] [target_wins]: Open a lobby
    - /wordrush join | leave: Roster changes
    - /wordrush stop: End the game (host or moderator)
    - /wordrush status | stats [user] | leaderboard
    - /wordrush settings [turn_seconds] [target_wins]: Guild defaults (Manage Server)
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
    WORDRUSH_MAX_TARGET_WINS,
    WORDRUSH_MAX_TURN_SECONDS,
    WORDRUSH_MIN_TARGET_WINS,
    WORDRUSH_MIN_TURN_SECONDS,
)
from src.core.logger import logger
from src.services.wordrush.embeds import build_game_status_embed

if TYPE_CHECKING:
    from src.bot import RushBot


TurnSeconds = app_commands.Range[int, WORDRUSH_MIN_TURN_SECONDS, WORDRUSH_MAX_TURN_SECONDS]
TargetWins = app_commands.Range[int, WORDRUSH_MIN_TARGET_WINS, WORDRUSH_MAX_TARGET_WINS]


def settings_rows(config: Dict[str, Any]) -> List[Tuple[str, str]]:
    return [
        ("Turn Timer", f"{config['turnSeconds']}s"),
        ("Target Wins", str(config["targetWins"])),
    ]


# =============================================================================
# WordRush Cog
# =============================================================================

class WordRushCog(commands.Cog):
    """Cog for the WordRush minigame."""

    def __init__(self, bot: "RushBot") -> None:
        self.bot = bot
        self.service = bot.wordrush_service

        logger.tree("WordRush Cog Loaded", [
            ("Commands", "/wordrush start, join, leave, stop, status, stats, leaderboard, settings"),
        ], emoji="🔤")

    # =========================================================================
    # Command Group
    # =========================================================================

    wordrush_group = app_commands.Group(
        name="wordrush",
        description="Race to find words containing three letters in order",
        guild_only=True,
    )

    @wordrush_group.command(name="start", description="Open a WordRush lobby in this channel")
    @app_commands.describe(
        turn_seconds=f"Seconds per turn ({WORDRUSH_MIN_TURN_SECONDS}-{WORDRUSH_MAX_TURN_SECONDS})",
        target_wins=f"Points needed to win ({WORDRUSH_MIN_TARGET_WINS}-{WORDRUSH_MAX_TARGET_WINS})",
    )
    async def start(
        self,
        interaction: discord.Interaction,
        turn_seconds: Optional[TurnSeconds] = None,
        target_wins: Optional[TargetWins] = None,
    ) -> None:
        await handle_start(
            interaction,
            self.service,
            turn_seconds=turn_seconds,
            target_wins=target_wins,
        )

    @wordrush_group.command(name="join", description="Join the WordRush lobby")
    async def join(self, interaction: discord.Interaction) -> None:
        await handle_join(interaction, self.service)

    @wordrush_group.command(name="leave", description="Leave the current WordRush game")
    async def leave(self, interaction: discord.Interaction) -> None:
        await handle_leave(interaction, self.service)

    @wordrush_group.command(name="stop", description="Stop the WordRush game in this channel")
    async def stop(self, interaction: discord.Interaction) -> None:
        await handle_stop(interaction, self.service)

    @wordrush_group.command(name="status", description="Show the current WordRush game")
    async def status(self, interaction: discord.Interaction) -> None:
        await handle_status(interaction, self.service, build_game_status_embed)

    @wordrush_group.command(name="stats", description="Show WordRush stats")
    @app_commands.describe(user="Player to look up (defaults to you)")
    async def stats(self, interaction: discord.Interaction, user: Optional[discord.User] = None) -> None:
        await handle_stats(interaction, self.service, user)

    @wordrush_group.command(name="leaderboard", description="Show the WordRush leaderboard")
    async def leaderboard(self, interaction: discord.Interaction) -> None:
        await handle_leaderboard(interaction, self.service, self.bot)

    @wordrush_group.command(name="settings", description="Show or change WordRush settings")
    @app_commands.describe(
        turn_seconds=f"Default seconds per turn ({WORDRUSH_MIN_TURN_SECONDS}-{WORDRUSH_MAX_TURN_SECONDS})",
        target_wins=f"Default points to win ({WORDRUSH_MIN_TARGET_WINS}-{WORDRUSH_MAX_TARGET_WINS})",
    )
    async def settings(
        self,
        interaction: discord.Interaction,
        turn_seconds: Optional[TurnSeconds] = None,
        target_wins: Optional[TargetWins] = None,
    ) -> None:
        await handle_settings(
            interaction,
            self.service,
            {"turnSeconds": turn_seconds, "targetWins": target_wins},
            settings_rows,
        )


# =============================================================================
# Setup
# =============================================================================

async def setup(bot: "RushBot") -> None:
    """Load the WordRush cog."""
    await bot.add_cog(WordRushCog(bot))
