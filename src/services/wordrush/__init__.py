"""
Rush Bot - WordRush Package
===========================

Three letters per turn, reply with a word containing them in order.
"""

from .game import WordRushGame
from .engine import WordRushEngine
from .settings import WordRushConfigStore
from .service import WordRushService

__all__ = ["WordRushGame", "WordRushEngine", "WordRushConfigStore", "WordRushService"]
