"""
Rush Bot - WordRush Service
===========================

Creates WordRush games from /wordrush start.

Settings come from the guild's WordRushConfigStore; options passed to
start override them for that one game and are clamped to the same
bounds.
"""

from typing import Any, Dict

import discord

from src.core.constants import (
    WORDRUSH_DEFAULT_TARGET_WINS,
    WORDRUSH_DEFAULT_TURN_SECONDS,
    WORDRUSH_MAX_TARGET_WINS,
    WORDRUSH_MAX_TURN_SECONDS,
    WORDRUSH_MIN_TARGET_WINS,
    WORDRUSH_MIN_TURN_SECONDS,
)
from src.services.minigames.service import GameService
from src.services.minigames.settings import clamp_int
from src.services.wordrush.engine import WordRushEngine
from src.services.wordrush.game import WordRushGame


class WordRushService(GameService):
    """Command-facing WordRush entry point."""

    game_cls = WordRushGame
    engine_cls = WordRushEngine

    def build_game(self, interaction: discord.Interaction, options: Dict[str, Any]) -> WordRushGame:
        config = self.settings.get_config(interaction.guild_id)

        turn_seconds = options.get("turn_seconds")
        if turn_seconds is None:
            turn_seconds = config["turnSeconds"]
        target_wins = options.get("target_wins")
        if target_wins is None:
            target_wins = config["targetWins"]

        game = WordRushGame(
            guild_id=interaction.guild_id,
            channel_id=interaction.channel_id,
            channel=interaction.channel,
            host=interaction.user,
            turn_seconds=clamp_int(
                turn_seconds,
                WORDRUSH_MIN_TURN_SECONDS,
                WORDRUSH_MAX_TURN_SECONDS,
                WORDRUSH_DEFAULT_TURN_SECONDS,
            ),
            target_wins=clamp_int(
                target_wins,
                WORDRUSH_MIN_TARGET_WINS,
                WORDRUSH_MAX_TARGET_WINS,
                WORDRUSH_DEFAULT_TARGET_WINS,
            ),
        )
        game.join(interaction.user)
        return game


__all__ = ["WordRushService"]
