"""
Rush Bot - SentenceRush Package
===============================

Guess a hidden sentence one word per message, Wordle-style scoring.
"""

from .game import SentenceRushGame
from .engine import SentenceRushEngine
from .settings import SentenceRushConfigStore
from .service import SentenceRushService

__all__ = ["SentenceRushGame", "SentenceRushEngine", "SentenceRushConfigStore", "SentenceRushService"]
