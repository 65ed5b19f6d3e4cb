"""
Rush Bot - Interaction Utilities
================================

Shared helpers for replying to slash commands and button presses.

safe_respond() picks response.send_message() or followup.send()
depending on whether the interaction was already answered, and never
raises for an expired interaction.
"""

from typing import Any, Optional

import discord

from src.core.logger import logger


async def safe_respond(
    interaction: discord.Interaction,
    content: Optional[str] = None,
    *,
    embed: Optional[discord.Embed] = None,
    ephemeral: bool = True,
    allowed_mentions: Optional[discord.AllowedMentions] = None,
) -> bool:
    """
    Safely respond to an interaction, handling is_done() checks.

    Args:
        interaction: The Discord interaction to respond to.
        content: The message content.
        embed: A single embed to send.
        ephemeral: Whether the response is ephemeral (default True).
        allowed_mentions: Allowed mentions configuration.

    Returns:
        True if the reply was delivered, False otherwise.
    """
    kwargs: dict[str, Any] = {"ephemeral": ephemeral}

    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed
    if allowed_mentions is not None:
        kwargs["allowed_mentions"] = allowed_mentions

    try:
        response_done = interaction.response.is_done()
    except discord.HTTPException:
        response_done = True

    try:
        if not response_done:
            await interaction.response.send_message(**kwargs)
        else:
            await interaction.followup.send(**kwargs)
        return True

    except discord.HTTPException as e:
        # Expected for expired interactions
        logger.debug(f"safe_respond failed: {e.status} - {str(e)[:50]}")
        return False


async def safe_defer(
    interaction: discord.Interaction,
    *,
    ephemeral: bool = False,
    thinking: bool = False,
) -> bool:
    """
    Safely defer an interaction response.

    Returns:
        True if deferred successfully, False if already responded or failed.
    """
    try:
        if interaction.response.is_done():
            return False
        await interaction.response.defer(ephemeral=ephemeral, thinking=thinking)
        return True
    except discord.HTTPException:
        return False


__all__ = ["safe_respond", "safe_defer"]
