#!/usr/bin/env python3
"""
Rush Bot - Entry Point
======================

Loads .env, validates configuration and runs the bot until interrupted.
"""

import asyncio
import sys

from dotenv import load_dotenv

from src.core.logger import logger
from src.utils.error_handler import ErrorHandler


async def main() -> None:
    """
    Start the bot.

    Handles the bot lifecycle:
    1. Loads environment configuration
    2. Validates required settings
    3. Creates the bot and connects to Discord
    4. Closes cleanly on exit so running games are stopped

    Raises:
        SystemExit: If configuration is invalid or the bot fails to start
    """
    load_dotenv()

    from src.core.config import ConfigValidationError, validate_and_log_config

    try:
        config = validate_and_log_config()
    except ConfigValidationError as e:
        logger.error("Invalid Configuration", [("Error", str(e))])
        sys.exit(1)

    from src.bot import RushBot

    logger.tree("RUSH STARTING", [
        ("Bot", config.bot_name),
        ("Games", "WordRush, SentenceRush"),
    ], emoji="🔥")

    bot = RushBot()
    try:
        async with bot:
            await bot.start(config.discord_token)
    except Exception as e:
        ErrorHandler.handle(
            e,
            location="main.main",
            critical=True,
        )
        sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user (Ctrl+C)")
    except Exception as e:
        ErrorHandler.handle(
            e,
            location="main.__main__",
            critical=True
        )
        sys.exit(1)
