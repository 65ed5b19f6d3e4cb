"""
Rush Bot - SentenceRush Embeds
==============================

Lobby, puzzle board and result embeds.
"""

from typing import Optional

import discord

from src.core.config import EmbedColors
from src.services.minigames.embeds import build_lobby_embed, build_status_embed, players_field
from src.services.minigames.stats import PlayerStats
from src.services.sentencerush.game import SentenceRushGame
from src.utils.footer import set_footer


RULES = (
    "Take turns guessing the hidden sentence. Send one word per message; "
    "each message advances to the next word. Correct letters in the right "
    "position reveal for everyone. Correct letters in the wrong position "
    "appear in **bold** in the last guess."
)

BOARD_FOOTER = "Bold letters are in the sentence but in a different position."


def settings_text(game: SentenceRushGame) -> str:
    return f"Turn timer: **{game.turn_seconds}s**"


def build_sentencerush_lobby_embed(game: SentenceRushGame, seconds_left: int) -> discord.Embed:
    return build_lobby_embed(game, seconds_left, rules=RULES, settings=settings_text(game))


def build_board_embed(game: SentenceRushGame) -> discord.Embed:
    """The live puzzle board."""
    turn = (
        f"<@{game.current_turn_user_id}> ({game.turn_seconds}s)"
        if game.current_turn_user_id
        else "Starting..."
    )
    embed = discord.Embed(
        title="SentenceRush",
        description=f"The sentence is:\n`{game.puzzle()}`",
        color=EmbedColors.GAME,
    )
    name, value = players_field(game)
    embed.add_field(name=name, value=value, inline=False)
    embed.add_field(name="Turn", value=turn, inline=True)
    embed.add_field(name="Hints", value=str(game.hints_given), inline=True)
    embed.add_field(
        name="Hint Button",
        value="Each player can press **Use Hint** once per game.",
        inline=False,
    )
    embed.add_field(name="Last Guess", value=game.last_guess or "_None yet._", inline=False)
    if game.last_hint:
        embed.add_field(name="Hint", value=game.last_hint, inline=False)
    return set_footer(embed, BOARD_FOOTER)


def build_winner_embed(game: SentenceRushGame, winner_stats: Optional[PlayerStats]) -> discord.Embed:
    lines = [f"Winner: <@{game.winner_id}>"]
    if winner_stats is not None:
        lines.append(f"Total wins: **{winner_stats.wins}**")
    lines.append(f"Sentence: **{discord.utils.escape_markdown(game.sentence.original)}**")
    return build_status_embed(
        game,
        title="SentenceRush Complete",
        description="\n".join(lines),
        color=EmbedColors.WINNER,
    )


def build_game_status_embed(game: SentenceRushGame) -> discord.Embed:
    """Reply for /sentencerush status."""
    embed = discord.Embed(title="SentenceRush Status", color=EmbedColors.INFO)
    if game.stage == "waiting":
        embed.description = "Lobby is open. Use `/sentencerush join` or the Join button."
    else:
        embed.description = f"`{game.puzzle()}`"
    embed.add_field(name="Host", value=f"<@{game.host_id}>" if game.host_id else "None", inline=True)
    embed.add_field(name="Stage", value=game.stage.title(), inline=True)
    embed.add_field(name="Words", value=str(game.word_count), inline=True)
    embed.add_field(name="Settings", value=settings_text(game), inline=False)
    name, value = players_field(game)
    embed.add_field(name=name, value=value, inline=False)
    return set_footer(embed)


__all__ = [
    "RULES",
    "build_sentencerush_lobby_embed",
    "build_board_embed",
    "build_winner_embed",
    "build_game_status_embed",
]
