"""
Rush Bot - Configuration Module
===============================

Centralized configuration management with environment variable validation.

DESIGN:
    Single source of truth for process-wide settings, loaded from the
    environment at startup. Per-guild game settings do NOT live here;
    they are kept in the JSON config stores and edited by admin commands.

    Key patterns:
    - Singleton pattern via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
    - Permission helpers centralize authorization logic
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Set
from zoneinfo import ZoneInfo

from src.core.constants import HEALTH_CHECK_PORT, LOBBY_WINDOW_SECONDS


# =============================================================================
# Timezone Configuration
# =============================================================================

NY_TZ = ZoneInfo("America/New_York")
"""Eastern timezone for consistent timestamps across all bot operations."""


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        developer_id: User ID of the bot developer (may stop any game).
        moderator_ids: User IDs allowed to stop any game.
        data_dir: Directory holding the JSON stores.
        sync_guild_id: Guild to sync slash commands to instantly.
        health_port: Port for the /health endpoint (0 disables it).
        lobby_seconds: Length of the join window for every game.
        error_webhook_url: Webhook receiving error alerts.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    discord_token: str

    # -------------------------------------------------------------------------
    # Optional: Permissions
    # -------------------------------------------------------------------------

    developer_id: Optional[int] = None
    moderator_ids: Set[int] = field(default_factory=set)

    # -------------------------------------------------------------------------
    # Optional: Storage & Sync
    # -------------------------------------------------------------------------

    data_dir: Path = Path("data")
    sync_guild_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Runtime
    # -------------------------------------------------------------------------

    health_port: int = HEALTH_CHECK_PORT
    lobby_seconds: int = LOBBY_WINDOW_SECONDS

    # -------------------------------------------------------------------------
    # Optional: Display & Webhooks
    # -------------------------------------------------------------------------

    bot_name: str = "Rush"
    error_webhook_url: Optional[str] = None


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Standardized color palette for game embeds."""

    GREEN = 0x1F5E2E
    GOLD = 0xE6B84A
    RED = 0xED4245
    BLURPLE = 0x5865F2

    # Semantic aliases
    LOBBY = BLURPLE
    GAME = BLURPLE
    PROMPT = RED
    WINNER = GOLD
    ENDED = GOLD
    INFO = GREEN


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int_optional(value: Optional[str]) -> Optional[int]:
    """Parse optional string to integer, returning None on failure."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_int_set(value: Optional[str]) -> Set[int]:
    """
    Parse comma-separated string to set of integers.

    Args:
        value: Comma-separated string of integers (e.g., "123,456,789").

    Returns:
        Set of parsed integers, empty set if input is None or empty.
    """
    if not value:
        return set()
    result = set()
    for part in value.split(","):
        part = part.strip()
        if part:
            try:
                result.add(int(part))
            except ValueError:
                pass  # Skip invalid entries silently
    return result


def _parse_int_with_default(value: Optional[str], default: int, name: str, min_val: int = None, max_val: int = None) -> int:
    """
    Parse optional integer with default and range validation.

    Args:
        value: String value from environment variable.
        default: Default value if not set or invalid.
        name: Variable name for warning messages.
        min_val: Minimum allowed value (inclusive).
        max_val: Maximum allowed value (inclusive).

    Returns:
        Parsed integer within valid range, or default.
    """
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        from src.core.logger import logger
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default
    if min_val is not None and parsed < min_val:
        from src.core.logger import logger
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        from src.core.logger import logger
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Return the URL if it looks like http(s), None otherwise."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object with all settings.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        raise ConfigValidationError("Missing required environment variables: DISCORD_TOKEN")

    developer_id_str = os.getenv("DEVELOPER_ID")
    developer_id = _parse_int_optional(developer_id_str)
    if developer_id_str and developer_id is None:
        raise ConfigValidationError(f"Invalid integer for DEVELOPER_ID: {developer_id_str}")

    return Config(
        discord_token=discord_token,
        developer_id=developer_id,
        moderator_ids=_parse_int_set(os.getenv("MODERATOR_IDS")),
        data_dir=Path(os.getenv("DATA_DIR", "data")),
        sync_guild_id=_parse_int_optional(os.getenv("SYNC_GUILD_ID")),
        health_port=_parse_int_with_default(
            os.getenv("HEALTH_PORT"), HEALTH_CHECK_PORT, "HEALTH_PORT", min_val=0, max_val=65535
        ),
        lobby_seconds=_parse_int_with_default(
            os.getenv("LOBBY_SECONDS"), LOBBY_WINDOW_SECONDS, "LOBBY_SECONDS", min_val=10, max_val=120
        ),
        bot_name=os.getenv("BOT_NAME", "Rush"),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> Config:
    """
    Validate configuration and log a summary at startup.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from src.core.logger import logger

    config = get_config()

    logger.tree("Configuration Validated", [
        ("Required", "✅ All required variables set"),
        ("Data Dir", str(config.data_dir)),
        ("Command Sync", f"Guild {config.sync_guild_id}" if config.sync_guild_id else "Global"),
        ("Lobby Window", f"{config.lobby_seconds}s"),
        ("Health Port", str(config.health_port) if config.health_port else "Disabled"),
        ("Error Webhook", "Enabled" if config.error_webhook_url else "Disabled"),
    ], emoji="⚙️")
    return config


# =============================================================================
# Permission Helpers
# =============================================================================

def is_developer(user_id: int) -> bool:
    """Check if user is the bot developer."""
    developer_id = get_config().developer_id
    return developer_id is not None and user_id == developer_id


def is_moderator(user_id: int) -> bool:
    """Check if user is in the configured moderator list."""
    return user_id in get_config().moderator_ids


def can_manage_game(member, host_id: int) -> bool:
    """
    Check if a member may stop a running game.

    Args:
        member: Discord member (or user) issuing the stop.
        host_id: User ID of the game host.

    Returns:
        True for the host, the developer, configured moderators, and members
        with Manage Server, Manage Channels or Moderate Members.
    """
    if member is None:
        return False

    if member.id == host_id:
        return True

    if is_developer(member.id) or is_moderator(member.id):
        return True

    perms = getattr(member, "guild_permissions", None)
    if perms is None:
        return False
    return bool(perms.manage_guild or perms.manage_channels or perms.moderate_members)


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "load_config",
    "validate_and_log_config",
    "is_developer",
    "is_moderator",
    "can_manage_game",
]
