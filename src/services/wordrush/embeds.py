"""
Rush Bot - WordRush Embeds
==========================

Lobby, turn prompt, scoreboard and result embeds.
"""

from typing import Optional, Sequence

import discord

from src.core.config import EmbedColors
from src.services.minigames.embeds import (
    build_lobby_embed,
    build_status_embed,
    players_field,
)
from src.services.minigames.stats import PlayerStats
from src.services.wordrush.game import WordRushGame
from src.services.wordrush.logic import format_letters
from src.utils.footer import set_footer


RULES = (
    "On your turn you get 3 letters and a short time limit to reply with a "
    "single word that contains those letters **in order**.\n"
    "Each valid word scores a point. Missing a turn costs nothing, the turn "
    "just passes on.\n"
    "Names and swear words are allowed."
)


def settings_text(game: WordRushGame) -> str:
    return (
        f"First to **{game.target_wins}** point{'s' if game.target_wins != 1 else ''} wins\n"
        f"Turn timer: **{game.turn_seconds}s**"
    )


def format_scoreboard(game: WordRushGame) -> str:
    lines = []
    for user_id in game.standings():
        score = game.scores.get(user_id, 0)
        lines.append(
            f"- {game.display_name(user_id)}: {score} point{'s' if score != 1 else ''}"
        )
    return "\n".join(lines) if lines else "_No scores yet._"


def build_wordrush_lobby_embed(game: WordRushGame, seconds_left: int) -> discord.Embed:
    return build_lobby_embed(game, seconds_left, rules=RULES, settings=settings_text(game))


def build_started_embed(game: WordRushGame) -> discord.Embed:
    return build_status_embed(
        game,
        title="WordRush Started",
        description="Game is live. Wait for your turn!",
        fields=[players_field(game, with_cap=False), ("Settings", settings_text(game))],
    )


def build_prompt_embed(letters: Sequence[str]) -> discord.Embed:
    compact = discord.utils.escape_markdown(format_letters(letters, ""))
    return discord.Embed(
        description=f"↳ _Your word must contain:_ **{compact}**",
        color=EmbedColors.PROMPT,
    )


def build_turn_embed(game: WordRushGame, user_id: int) -> discord.Embed:
    fields = [("Scores", format_scoreboard(game))]
    if game.last_result:
        fields.append(("Last Result", game.last_result))
    return build_status_embed(
        game,
        description=f"Turn: <@{user_id}>",
        fields=fields,
        footer=f"First to {game.target_wins}",
    )


def build_scoreboard_embed(game: WordRushGame) -> discord.Embed:
    fields = []
    if game.last_result:
        fields.append(("Last Result", game.last_result))
    fields.append(("Scores", format_scoreboard(game)))
    return build_status_embed(
        game,
        description="Turn complete.",
        fields=fields,
        footer=f"First to {game.target_wins}",
    )


def build_winner_embed(game: WordRushGame, winner_stats: Optional[PlayerStats]) -> discord.Embed:
    lines = [f"Winner: <@{game.winner_id}>"]
    if winner_stats is not None:
        lines.append(f"Total wins: **{winner_stats.wins}**")
    embed = build_status_embed(
        game,
        title="WordRush Complete",
        description="\n".join(lines),
        fields=[("Final Scores", format_scoreboard(game))],
        color=EmbedColors.WINNER,
    )
    return embed


def build_game_status_embed(game: WordRushGame) -> discord.Embed:
    """Reply for /wordrush status."""
    if game.stage == "waiting":
        description = "Lobby is open. Use `/wordrush join` or the Join button."
    elif game.current_turn_user_id:
        description = f"Turn: <@{game.current_turn_user_id}>"
    else:
        description = "Between turns."

    embed = discord.Embed(title="WordRush Status", description=description, color=EmbedColors.INFO)
    embed.add_field(name="Host", value=f"<@{game.host_id}>" if game.host_id else "None", inline=True)
    embed.add_field(name="Stage", value=game.stage.title(), inline=True)
    embed.add_field(name="Settings", value=settings_text(game), inline=False)
    name, value = players_field(game)
    embed.add_field(name=name, value=value, inline=False)
    if game.stage == "playing":
        embed.add_field(name="Scores", value=format_scoreboard(game), inline=False)
    return set_footer(embed)


__all__ = [
    "RULES",
    "format_scoreboard",
    "build_wordrush_lobby_embed",
    "build_started_embed",
    "build_prompt_embed",
    "build_turn_embed",
    "build_scoreboard_embed",
    "build_winner_embed",
    "build_game_status_embed",
]
