"""
Rush Bot - Source Package
=========================

Discord bot hosting the WordRush and SentenceRush channel minigames.

Package Structure:
- bot.py: RushBot client, stores and game services
- commands/: /wordrush and /sentencerush command groups
- core/: Config, logging, JSON storage, health endpoint
- services/: Shared minigame machinery and the two games
- utils/: Error handling, interaction and embed helpers

Version: v1.0.0
"""
