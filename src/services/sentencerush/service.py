"""
Rush Bot - SentenceRush Service
===============================

Creates SentenceRush games from /sentencerush start.
"""

from typing import Any, Dict

import discord

from src.core.constants import (
    SENTENCERUSH_DEFAULT_TURN_SECONDS,
    SENTENCERUSH_MAX_TURN_SECONDS,
    SENTENCERUSH_MIN_TURN_SECONDS,
)
from src.services.minigames.service import GameService, GameSetupError
from src.services.minigames.settings import clamp_int
from src.services.sentencerush.engine import SentenceRushEngine
from src.services.sentencerush.game import SentenceRushGame
from src.services.sentencerush.sentences import pick_sentence


class SentenceRushService(GameService):
    """Command-facing SentenceRush entry point."""

    game_cls = SentenceRushGame
    engine_cls = SentenceRushEngine

    def build_game(self, interaction: discord.Interaction, options: Dict[str, Any]) -> SentenceRushGame:
        config = self.settings.get_config(interaction.guild_id)
        sentence = pick_sentence(config["minWords"], config["maxWords"])
        if sentence is None:
            raise GameSetupError("No sentences are available for SentenceRush with the current settings.")

        game = SentenceRushGame(
            guild_id=interaction.guild_id,
            channel_id=interaction.channel_id,
            channel=interaction.channel,
            host=interaction.user,
            turn_seconds=clamp_int(
                config["turnSeconds"],
                SENTENCERUSH_MIN_TURN_SECONDS,
                SENTENCERUSH_MAX_TURN_SECONDS,
                SENTENCERUSH_DEFAULT_TURN_SECONDS,
            ),
            sentence=sentence,
            min_words=config["minWords"],
            max_words=config["maxWords"],
        )
        game.join(interaction.user)
        return game


__all__ = ["SentenceRushService"]
