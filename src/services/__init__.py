"""
Rush Bot - Services Package
===========================

Game services used by the command cogs.

DESIGN:
    Each game lives in its own package with the same layout:
    constants/logic, game state, engine, embeds, settings and service.
    The shared lobby/turn/outcome machinery lives in minigames/.

    To add a new game:
    1. Subclass BaseGame, TurnEngine and GameService
    2. Create its stats and settings stores in bot.py
    3. Add a command cog and list it in COMMAND_COGS

Available Services:
    WordRushService: Three-letter word race, first to the win target
    SentenceRushService: Guess the hidden sentence one word at a time
"""

from .wordrush import WordRushService
from .sentencerush import SentenceRushService


__all__ = [
    "WordRushService",
    "SentenceRushService",
]
