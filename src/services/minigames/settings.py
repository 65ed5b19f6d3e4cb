"""
Rush Bot - Guild Settings Store
===============================

Per-guild game settings persisted as one JSON object keyed by guild id.

Settings are pure data: admin commands mutate them, games read them once
at creation, and a running game never sees later changes.
"""

import copy
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from src.core.logger import logger
from src.core.storage import JsonFileStore


def clamp_int(value: Any, min_val: int, max_val: int, fallback: int) -> int:
    """
    Round and clamp a value into [min_val, max_val].

    Non-numeric input (None, "abc", NaN) returns the fallback.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if number != number or number in (float("inf"), float("-inf")):
        return fallback
    return max(min_val, min(max_val, int(round(number))))


class GuildSettingsStore:
    """
    Base JSON store of normalised per-guild settings.

    Subclasses define DEFAULTS and normalize().
    """

    DEFAULTS: Dict[str, Any] = {}
    game_name: str = "Minigame"

    def __init__(self, path: Path) -> None:
        self._file = JsonFileStore(path, {})
        self._cache: Optional[Dict[str, Any]] = None
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._file.path

    def normalize(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def _load(self) -> Dict[str, Any]:
        if self._cache is None:
            data = self._file.read()
            self._cache = data if isinstance(data, dict) else {}
        return self._cache

    def get_config(self, guild_id: Optional[int]) -> Dict[str, Any]:
        """Normalised settings for a guild, defaults filled in."""
        if guild_id is None:
            return dict(self.DEFAULTS)
        entry = self._load().get(str(guild_id))
        if not isinstance(entry, dict):
            entry = {}
        return self.normalize({**self.DEFAULTS, **entry})

    def set_config(self, guild_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge updates into a guild's settings, normalise, and persist.

        None values in updates are ignored.

        Raises:
            StoreError: If the file could not be written.
        """
        with self._write_lock:
            data = copy.deepcopy(self._load())
            current = data.get(str(guild_id))
            if not isinstance(current, dict):
                current = {}

            merged = {**self.DEFAULTS, **current}
            merged.update({k: v for k, v in updates.items() if v is not None})
            normalized = self.normalize(merged)

            data[str(guild_id)] = normalized
            self._file.write(data)
            self._cache = data

        logger.tree(f"{self.game_name} Settings Updated", [
            ("Guild", str(guild_id)),
            *[(key, str(value)) for key, value in normalized.items()],
        ], emoji="⚙️")
        return normalized

    def clear_config(self, guild_id: int) -> None:
        """Reset a guild to defaults."""
        with self._write_lock:
            data = copy.deepcopy(self._load())
            if data.pop(str(guild_id), None) is None:
                return
            self._file.write(data)
            self._cache = data

    def reset_cache(self) -> None:
        self._cache = None


__all__ = ["GuildSettingsStore", "clamp_int"]
