"""
Rush Bot - Shared Minigame Command Helpers
==========================================

Subcommand bodies shared by /wordrush and /sentencerush. Each cog only
declares its group and options and forwards here with its service.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence, Tuple

import discord

from src.core.config import can_manage_game
from src.core.constants import LEADERBOARD_SIZE
from src.core.logger import logger
from src.core.storage import StoreError
from src.services.minigames import GameService
from src.services.minigames.embeds import (
    build_leaderboard_embed,
    build_settings_embed,
    build_stats_embed,
)
from src.services.minigames.game import BaseGame
from src.utils.error_handler import ErrorHandler
from src.utils.interaction import safe_defer, safe_respond
from src.utils.members import resolve_display_name

if TYPE_CHECKING:
    from src.bot import RushBot


SettingsRows = Callable[[Dict[str, Any]], Sequence[Tuple[str, str]]]


def _no_game(service: GameService) -> str:
    return f"No active {service.title} game in this channel."


def _active_game(interaction: discord.Interaction, service: GameService) -> Optional[BaseGame]:
    return service.get_active_game(interaction.guild_id, interaction.channel_id)


# =============================================================================
# Game Flow
# =============================================================================

async def handle_start(
    interaction: discord.Interaction,
    service: GameService,
    **options: Any,
) -> None:
    """Open a lobby in the interaction's channel."""
    await safe_defer(interaction, ephemeral=True)

    result = await service.start(interaction, **options)
    if not result.ok:
        await safe_respond(interaction, result.error or f"Could not start {service.title}.")
        return

    await safe_respond(
        interaction,
        f"{service.title} lobby opened. Players have {int(service.lobby_seconds)}s to join.",
    )


async def handle_join(interaction: discord.Interaction, service: GameService) -> None:
    game = _active_game(interaction, service)
    if game is None:
        await safe_respond(interaction, _no_game(service))
        return

    result = await service.join(game, interaction.user)
    if not result.ok:
        await safe_respond(interaction, result.error)
    elif not result.joined:
        await safe_respond(interaction, f"You are already in this {service.title} game.")
    else:
        await safe_respond(interaction, f"Joined {service.title}!")


async def handle_leave(interaction: discord.Interaction, service: GameService) -> None:
    game = _active_game(interaction, service)
    if game is None:
        await safe_respond(interaction, _no_game(service))
        return

    result = await service.leave(game, interaction.user.id)
    if not result.ok:
        await safe_respond(interaction, result.error)
    elif not result.left:
        await safe_respond(interaction, f"You are not in this {service.title} game.")
    else:
        await safe_respond(interaction, f"You left {service.title}.")


async def handle_stop(interaction: discord.Interaction, service: GameService) -> None:
    """Stop the channel's game. Host, moderators and channel managers only."""
    game = _active_game(interaction, service)
    if game is None:
        await safe_respond(interaction, _no_game(service))
        return

    if not can_manage_game(interaction.user, game.host_id):
        await safe_respond(interaction, f"Only the host or a moderator can stop this {service.title} game.")
        return

    result = service.stop(interaction.guild_id, interaction.channel_id, "stopped")
    if not result.ok:
        await safe_respond(interaction, result.error)
        return

    logger.tree(f"{service.title} Stopped", [
        ("By", f"{interaction.user} ({interaction.user.id})"),
        ("Game", game.id),
        ("Channel", str(interaction.channel_id)),
    ], emoji="⏹️")
    await safe_respond(
        interaction,
        f"{service.title} stopped by {interaction.user.mention}.",
        ephemeral=False,
        allowed_mentions=discord.AllowedMentions.none(),
    )


async def handle_status(
    interaction: discord.Interaction,
    service: GameService,
    build_embed: Callable[[Any], discord.Embed],
) -> None:
    game = _active_game(interaction, service)
    if game is None:
        await safe_respond(interaction, _no_game(service))
        return
    await safe_respond(interaction, embed=build_embed(game))


# =============================================================================
# Stats
# =============================================================================

async def handle_stats(
    interaction: discord.Interaction,
    service: GameService,
    user: Optional[discord.abc.User],
) -> None:
    target = user or interaction.user
    stats = service.stats.get_stats(interaction.guild_id, target.id)
    await safe_respond(interaction, embed=build_stats_embed(service.title, target, stats))


async def handle_leaderboard(
    interaction: discord.Interaction,
    service: GameService,
    bot: "RushBot",
) -> None:
    await safe_defer(interaction)

    top = service.stats.get_leaderboard(interaction.guild_id, LEADERBOARD_SIZE)
    entries = []
    for stats in top:
        name = await resolve_display_name(interaction.guild, stats.user_id, bot)
        entries.append((name, stats))

    await safe_respond(
        interaction,
        embed=build_leaderboard_embed(service.title, entries),
        ephemeral=False,
    )


# =============================================================================
# Settings
# =============================================================================

async def handle_settings(
    interaction: discord.Interaction,
    service: GameService,
    updates: Dict[str, Any],
    rows: SettingsRows,
) -> None:
    """
    Show or change the guild's settings for a game.

    With no options the current settings are shown. Changing them needs
    Manage Server.
    """
    guild_id = interaction.guild_id
    changes = {key: value for key, value in updates.items() if value is not None}

    if not changes:
        config = service.settings.get_config(guild_id)
        await safe_respond(interaction, embed=build_settings_embed(service.title, rows(config)))
        return

    permissions = getattr(interaction.user, "guild_permissions", None)
    if permissions is None or not permissions.manage_guild:
        await safe_respond(interaction, f"You need Manage Server to change {service.title} settings.")
        return

    try:
        config = await asyncio.to_thread(service.settings.set_config, guild_id, changes)
    except StoreError as e:
        ErrorHandler.handle(e, location=f"{service.title}.settings", guild_id=guild_id)
        await safe_respond(interaction, f"Could not save {service.title} settings. Try again later.")
        return

    await safe_respond(interaction, embed=build_settings_embed(service.title, rows(config)))


__all__ = [
    "handle_start",
    "handle_join",
    "handle_leave",
    "handle_stop",
    "handle_status",
    "handle_stats",
    "handle_leaderboard",
    "handle_settings",
]
