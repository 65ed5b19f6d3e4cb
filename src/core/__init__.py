"""
Rush Bot - Core Package
=======================

Core components shared by every game: configuration, logging,
JSON file storage and the health endpoint.

DESIGN:
    - get_config() returns the same Config instance
    - logger is a global TreeLogger instance
    - JsonFileStore is the only thing that touches the disk
"""

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    NY_TZ,
    get_config,
    is_developer,
    is_moderator,
    can_manage_game,
)

from .logger import logger, TreeLogger

from .storage import JsonFileStore, StoreError

from .health import HealthCheckServer


__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "is_developer",
    "is_moderator",
    "can_manage_game",
    # Logger
    "logger",
    "TreeLogger",
    # Storage
    "JsonFileStore",
    "StoreError",
    # Health
    "HealthCheckServer",
]
