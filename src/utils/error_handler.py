"""
Rush Bot - Error Handler
========================

Detailed error context and categorized logging.

Features:
- Error categorization (Discord, persistence, API, general)
- Recovery suggestions in the log line
- Critical error dumps under logs/errors/
"""

import json
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import discord

from src.core.logger import logger, LOGS_DIR
from src.core.storage import StoreError


class ErrorContext:
    """Captures and formats detailed error context"""

    @staticmethod
    def get_full_context(e: Exception, location: str, **kwargs) -> Dict[str, Any]:
        """
        Get comprehensive error context.

        Args:
            e: The exception
            location: Where the error occurred
            **kwargs: Additional context (guild_id, channel_id, game_id, ...)

        Returns:
            Dictionary with full error context
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'location': location,
            'error_type': type(e).__name__,
            'error_message': str(e),
            'traceback': ''.join(traceback.format_exception(type(e), e, e.__traceback__)),
            'python_version': sys.version,
            'additional_context': kwargs,
        }

        if 'message' in kwargs and isinstance(kwargs['message'], discord.Message):
            msg = kwargs['message']
            context['discord_context'] = {
                'guild': msg.guild.name if msg.guild else 'DM',
                'channel': getattr(msg.channel, 'name', str(msg.channel)),
                'author': str(msg.author),
                'author_id': msg.author.id,
                'content': msg.content[:100] if msg.content else None,
            }

        return context


class ErrorHandler:
    """Error handling with context and recovery hints"""

    ERROR_CATEGORIES = {
        'discord': (
            discord.Forbidden,
            discord.NotFound,
            discord.HTTPException,
        ),
        'persistence': (
            StoreError,
            json.JSONDecodeError,
        ),
        'api': (
            ConnectionError,
            TimeoutError,
            OSError,
        ),
    }

    SUGGESTIONS = {
        discord.Forbidden: "Check bot permissions in the channel",
        discord.NotFound: "Message or channel was deleted - check IDs",
        discord.HTTPException: "Discord API issue - retry later",
        StoreError: "Check that DATA_DIR exists and is writable",
        json.JSONDecodeError: "Store file is corrupt - restore or delete it",
        ConnectionError: "Network connection issue - check internet connection",
        TimeoutError: "Request timed out - retry later",
        OSError: "System resource issue - check disk space and permissions",
    }

    @classmethod
    def categorize_error(cls, e: Exception) -> str:
        """Return the category name for an exception ('general' if unknown)."""
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return 'general'

    @classmethod
    def get_recovery_suggestion(cls, e: Exception) -> str:
        """Return the first suggestion whose exception type matches."""
        for error_type, suggestion in cls.SUGGESTIONS.items():
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: Exception, location: str, critical: bool = False, **context) -> None:
        """
        Handle an error with full context.

        Args:
            e: The exception
            location: Where the error occurred
            critical: Whether this error should be dumped to disk
            **context: Additional context
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Category", category.upper()),
            ("Location", location),
            ("Type", full_context['error_type']),
            ("Error", str(e)[:200]),
            ("Recovery", suggestion),
        ]
        for key, value in context.items():
            details.append((key.replace("_", " ").title(), str(value)[:100]))

        if critical:
            logger.error("💥 CRITICAL ERROR", details)
            logger.info(f"Traceback:\n{full_context['traceback']}")
            cls._store_critical_error(full_context)
        else:
            logger.warning("Handled Error", details)

    @staticmethod
    def _store_critical_error(context: Dict[str, Any]) -> None:
        """Dump a critical error context as JSON for later analysis."""
        try:
            error_dir = Path(LOGS_DIR) / 'errors'
            error_dir.mkdir(exist_ok=True, parents=True)

            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            error_file = error_dir / f"error_{timestamp}.json"

            with open(error_file, 'w', encoding='utf-8') as f:
                json.dump(context, f, indent=2, default=str)

            logger.info(f"Critical error saved to {error_file}")
        except OSError as save_error:
            logger.info(f"Failed to save error details: {save_error}")


__all__ = ["ErrorContext", "ErrorHandler"]
