"""
Rush Bot - Commands Package
===========================

Slash command groups for the minigames.

DESIGN:
    Each command file contains a Cog with one app_commands.Group.
    Cogs are loaded by the bot using load_extension().

    To add a new command group:
    1. Create new_game.py in this directory
    2. Create a Cog class with an app_commands.Group
    3. Add async def setup(bot) function at the end
    4. Add the cog to COMMAND_COGS list below

Available Commands:
    /wordrush: start, join, leave, stop, status, stats, leaderboard, settings
    /sentencerush: start, join, leave, end, status, stats, leaderboard, settings
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "src.commands.wordrush",
    "src.commands.sentencerush",
]
"""Command cog module paths, loaded in order by setup_hook()."""


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "COMMAND_COGS",
]
