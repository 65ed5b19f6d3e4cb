"""
Rush Bot - WordRush Config Store
================================

Per-guild WordRush settings in wordrush_config.json:
    turnSeconds  5-60, default 10
    targetWins   1-20, default 5
"""

from typing import Any, Dict

from src.core.constants import (
    WORDRUSH_DEFAULT_TARGET_WINS,
    WORDRUSH_DEFAULT_TURN_SECONDS,
    WORDRUSH_MAX_TARGET_WINS,
    WORDRUSH_MAX_TURN_SECONDS,
    WORDRUSH_MIN_TARGET_WINS,
    WORDRUSH_MIN_TURN_SECONDS,
)
from src.services.minigames.settings import GuildSettingsStore, clamp_int


STORE_FILE = "wordrush_config.json"


class WordRushConfigStore(GuildSettingsStore):
    DEFAULTS = {
        "turnSeconds": WORDRUSH_DEFAULT_TURN_SECONDS,
        "targetWins": WORDRUSH_DEFAULT_TARGET_WINS,
    }
    game_name = "WordRush"

    def normalize(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "turnSeconds": clamp_int(
                raw.get("turnSeconds"),
                WORDRUSH_MIN_TURN_SECONDS,
                WORDRUSH_MAX_TURN_SECONDS,
                WORDRUSH_DEFAULT_TURN_SECONDS,
            ),
            "targetWins": clamp_int(
                raw.get("targetWins"),
                WORDRUSH_MIN_TARGET_WINS,
                WORDRUSH_MAX_TARGET_WINS,
                WORDRUSH_DEFAULT_TARGET_WINS,
            ),
        }


__all__ = ["WordRushConfigStore", "STORE_FILE"]
