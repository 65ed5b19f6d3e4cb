"""
Rush Bot - Game Stats Store
===========================

Per-guild win / games-played counters and recent game history,
persisted as one JSON file per game kind.

File layout:
    {
      "guilds": {
        "<guild_id>": {
          "players": {"<user_id>": {"wins": 0, "gamesPlayed": 0, "lastPlayedAt": 0}},
          "history": [{"winnerId": ..., "playerIds": [...], "finishedAt": ..., ...}]
        }
      }
    }

Entries are created on a user's first completed game and only ever
incremented; nothing expires.
"""

import copy
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.core.constants import HISTORY_LIMIT, MS_PER_SECOND
from src.core.logger import logger
from src.core.storage import JsonFileStore


DEFAULT_STORE: Dict[str, Any] = {"guilds": {}}


# =============================================================================
# Records
# =============================================================================

@dataclass
class PlayerStats:
    wins: int = 0
    games_played: int = 0
    last_played_at: int = 0
    user_id: Optional[int] = None


@dataclass
class GameSummary:
    """
    One completed game handed to record_game().

    Attributes:
        winner_id: The winner (None records a game without a winner).
        player_ids: Everyone who took part; duplicates count once.
        finished_at: Epoch milliseconds (defaults to now).
        settings: Config snapshot stored in the history entry.
    """

    winner_id: Optional[int]
    player_ids: List[int]
    finished_at: Optional[int] = None
    settings: Dict[str, Any] = field(default_factory=dict)


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _now_ms() -> int:
    return int(time.time() * MS_PER_SECOND)


# =============================================================================
# Stats Store
# =============================================================================

class GameStatsStore:
    """
    JSON-backed stats for one game kind.

    The whole file is cached after the first read. record_game() works on
    a copy and only swaps it in once the write succeeded, so a failed
    write leaves both the file and the cache untouched.
    """

    def __init__(self, path: Path, game_name: str) -> None:
        self.game_name = game_name
        self._file = JsonFileStore(path, DEFAULT_STORE)
        self._cache: Optional[Dict[str, Any]] = None
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._file.path

    def _load(self) -> Dict[str, Any]:
        if self._cache is None:
            data = self._file.read()
            if not isinstance(data, dict):
                data = copy.deepcopy(DEFAULT_STORE)
            if not isinstance(data.get("guilds"), dict):
                data["guilds"] = {}
            self._cache = data
        return self._cache

    @staticmethod
    def _guild_entry(data: Dict[str, Any], guild_id: int) -> Dict[str, Any]:
        guilds = data["guilds"]
        entry = guilds.get(str(guild_id))
        if not isinstance(entry, dict):
            entry = {"players": {}, "history": []}
            guilds[str(guild_id)] = entry
        if not isinstance(entry.get("players"), dict):
            entry["players"] = {}
        if not isinstance(entry.get("history"), list):
            entry["history"] = []
        return entry

    @staticmethod
    def _parse(raw: Any, user_id: Optional[int] = None) -> PlayerStats:
        if not isinstance(raw, dict):
            return PlayerStats(user_id=user_id)
        return PlayerStats(
            wins=_to_int(raw.get("wins")),
            games_played=_to_int(raw.get("gamesPlayed")),
            last_played_at=_to_int(raw.get("lastPlayedAt")),
            user_id=user_id,
        )

    # =========================================================================
    # Reads
    # =========================================================================

    def get_stats(self, guild_id: int, user_id: int) -> PlayerStats:
        """Stats for one user; zeros if they never finished a game."""
        guild = self._load()["guilds"].get(str(guild_id))
        if not isinstance(guild, dict) or not isinstance(guild.get("players"), dict):
            return PlayerStats(user_id=user_id)
        return self._parse(guild["players"].get(str(user_id)), user_id)

    def get_leaderboard(self, guild_id: int, limit: Optional[int] = None) -> List[PlayerStats]:
        """Players sorted by wins, then games played, then most recent play."""
        guild = self._load()["guilds"].get(str(guild_id))
        if not isinstance(guild, dict) or not isinstance(guild.get("players"), dict):
            return []

        entries = [
            self._parse(raw, _to_int(user_id))
            for user_id, raw in guild["players"].items()
        ]
        entries.sort(key=lambda s: (s.wins, s.games_played, s.last_played_at), reverse=True)
        return entries[:limit] if limit is not None else entries

    def get_history(self, guild_id: int) -> List[Dict[str, Any]]:
        guild = self._load()["guilds"].get(str(guild_id))
        if not isinstance(guild, dict) or not isinstance(guild.get("history"), list):
            return []
        return copy.deepcopy(guild["history"])

    # =========================================================================
    # Writes
    # =========================================================================

    def record_game(self, guild_id: int, summary: GameSummary) -> Dict[str, Any]:
        """
        Record one completed game.

        Every listed participant gets gamesPlayed + 1 and a fresh
        lastPlayedAt; only the winner gets wins + 1. Users not listed are
        untouched. The last HISTORY_LIMIT games are kept.

        Returns:
            The history entry that was written.

        Raises:
            StoreError: If the file could not be written.
        """
        now = _now_ms()
        player_ids = list(dict.fromkeys(pid for pid in summary.player_ids if pid))

        history_entry = {
            "winnerId": str(summary.winner_id) if summary.winner_id else None,
            "playerIds": [str(pid) for pid in player_ids],
            **summary.settings,
            "finishedAt": summary.finished_at or now,
        }

        with self._write_lock:
            data = copy.deepcopy(self._load())
            entry = self._guild_entry(data, guild_id)

            entry["history"].append(history_entry)
            if len(entry["history"]) > HISTORY_LIMIT:
                del entry["history"][:-HISTORY_LIMIT]

            for user_id in player_ids:
                current = self._parse(entry["players"].get(str(user_id)))
                entry["players"][str(user_id)] = {
                    "wins": current.wins + (1 if user_id == summary.winner_id else 0),
                    "gamesPlayed": current.games_played + 1,
                    "lastPlayedAt": now,
                }

            self._file.write(data)
            self._cache = data

        logger.tree(f"{self.game_name} Stats Recorded", [
            ("Guild", str(guild_id)),
            ("Winner", str(summary.winner_id)),
            ("Players", str(len(player_ids))),
            ("History", str(len(entry["history"]))),
        ], emoji="📊")
        return history_entry

    def reset_cache(self) -> None:
        self._cache = None


__all__ = ["GameStatsStore", "GameSummary", "PlayerStats"]
