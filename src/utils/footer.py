"""
Rush Bot - Embed Footer Utility
===============================

Centralized footer for game embeds. The bot avatar is cached once
the bot is ready so embeds never trigger an extra API call.
"""

from typing import Optional

import discord

from src.core.logger import logger


# =============================================================================
# Module State
# =============================================================================

_footer_text: str = "Rush Minigames"
"""Footer text displayed on all game embeds."""

_cached_avatar_url: Optional[str] = None
"""Cached bot avatar URL."""


# =============================================================================
# Initialization
# =============================================================================

def init_footer(bot: discord.Client, text: Optional[str] = None) -> None:
    """
    Cache footer text and bot avatar. Call once after the bot is ready.

    Args:
        bot: The Discord bot client.
        text: Optional footer text override.
    """
    global _footer_text, _cached_avatar_url

    if text:
        _footer_text = text
    _cached_avatar_url = bot.user.display_avatar.url if bot.user else None

    logger.tree("Footer Initialized", [
        ("Text", _footer_text),
        ("Avatar Cached", "Yes" if _cached_avatar_url else "No"),
    ], emoji="📝")


# =============================================================================
# Footer Setter
# =============================================================================

def set_footer(embed: discord.Embed, text: Optional[str] = None) -> discord.Embed:
    """
    Set the standard footer on an embed.

    Args:
        embed: The embed to add footer to.
        text: Optional text appended after the standard footer text.

    Returns:
        The embed with footer set.
    """
    footer = f"{_footer_text} • {text}" if text else _footer_text
    embed.set_footer(text=footer, icon_url=_cached_avatar_url)
    return embed


__all__ = ["init_footer", "set_footer"]
