"""
Rush Bot - Shared Game Embeds
=============================

Embed builders used by both games: lobby, status, cancellation and the
stats / leaderboard replies.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

import discord

from src.core.config import EmbedColors
from src.services.minigames.game import BaseGame
from src.services.minigames.stats import PlayerStats
from src.utils.footer import set_footer


Field = Tuple[str, str]


def format_roster(game: BaseGame) -> str:
    if not game.players:
        return "_No players yet._"
    return ", ".join(f"<@{user_id}>" for user_id in game.players)


def players_field(game: BaseGame, with_cap: bool = True) -> Field:
    count = len(game.players)
    name = f"Players ({count}/{game.max_players})" if with_cap else f"Players ({count})"
    return name, format_roster(game)


def build_status_embed(
    game: BaseGame,
    *,
    title: Optional[str] = None,
    description: str = "",
    fields: Iterable[Field] = (),
    color: int = EmbedColors.GAME,
    footer: Optional[str] = None,
) -> discord.Embed:
    embed = discord.Embed(title=title or game.title, description=description, color=color)
    for name, value in fields:
        embed.add_field(name=name, value=value or "\u200b", inline=False)
    return set_footer(embed, footer)


def build_lobby_embed(
    game: BaseGame,
    seconds_left: int,
    *,
    rules: str,
    settings: str,
) -> discord.Embed:
    """Lobby embed with the live countdown and roster."""
    return build_status_embed(
        game,
        title=f"{game.title} Lobby",
        description=(
            f"Click **Join {game.title}** below to enter.\n"
            f"Starting in **{max(0, seconds_left)}s**."
        ),
        fields=[players_field(game), ("Rules", rules), ("Settings", settings)],
        color=EmbedColors.LOBBY,
    )


def build_not_enough_players_embed(game: BaseGame) -> discord.Embed:
    return build_status_embed(
        game,
        title=f"{game.title} Cancelled",
        description=f"Not enough players joined (need {game.min_players}).",
        fields=[players_field(game, with_cap=False)],
        color=EmbedColors.ENDED,
    )


def build_ended_embed(game: BaseGame, description: str, fields: Sequence[Field] = ()) -> discord.Embed:
    return build_status_embed(
        game,
        title=f"{game.title} Ended",
        description=description,
        fields=fields,
        color=EmbedColors.ENDED,
    )


# =============================================================================
# Stats Replies
# =============================================================================

def build_stats_embed(game_title: str, user: discord.abc.User, stats: PlayerStats) -> discord.Embed:
    embed = discord.Embed(
        title=f"{game_title} Stats",
        description=f"Stats for {user.mention}",
        color=EmbedColors.INFO,
    )
    embed.add_field(name="Wins", value=str(stats.wins), inline=True)
    embed.add_field(name="Games Played", value=str(stats.games_played), inline=True)
    last_played = (
        f"<t:{stats.last_played_at // 1000}:R>" if stats.last_played_at else "Never"
    )
    embed.add_field(name="Last Played", value=last_played, inline=True)
    return set_footer(embed)


def build_leaderboard_embed(
    game_title: str,
    entries: List[Tuple[str, PlayerStats]],
) -> discord.Embed:
    """
    Args:
        entries: (display name, stats) pairs already in leaderboard order.
    """
    if not entries:
        description = f"No {game_title} games have been completed here yet."
    else:
        medals = {1: "🥇", 2: "🥈", 3: "🥉"}
        lines = []
        for rank, (name, stats) in enumerate(entries, start=1):
            prefix = medals.get(rank, f"**{rank}.**")
            lines.append(
                f"{prefix} {name} · **{stats.wins}** win{'s' if stats.wins != 1 else ''} "
                f"({stats.games_played} played)"
            )
        description = "\n".join(lines)

    embed = discord.Embed(
        title=f"{game_title} Leaderboard",
        description=description,
        color=EmbedColors.WINNER,
    )
    return set_footer(embed)


def build_settings_embed(game_title: str, rows: Sequence[Field]) -> discord.Embed:
    embed = discord.Embed(title=f"{game_title} Settings", color=EmbedColors.INFO)
    for name, value in rows:
        embed.add_field(name=name, value=value, inline=True)
    return set_footer(embed, "Applies to new games")


__all__ = [
    "format_roster",
    "players_field",
    "build_status_embed",
    "build_lobby_embed",
    "build_not_enough_players_embed",
    "build_ended_embed",
    "build_stats_embed",
    "build_leaderboard_embed",
    "build_settings_embed",
]
