"""
Rush Bot - SentenceRush Config Store
====================================

Per-guild SentenceRush settings in sentencerush_config.json:
    minWords / maxWords  3-8, swapped when inverted, default 3 / 8
    turnSeconds          30-60, default 30
"""

from typing import Any, Dict

from src.core.constants import (
    SENTENCERUSH_DEFAULT_TURN_SECONDS,
    SENTENCERUSH_MAX_TURN_SECONDS,
    SENTENCERUSH_MAX_WORDS,
    SENTENCERUSH_MIN_TURN_SECONDS,
    SENTENCERUSH_MIN_WORDS,
)
from src.services.minigames.settings import GuildSettingsStore, clamp_int


STORE_FILE = "sentencerush_config.json"


class SentenceRushConfigStore(GuildSettingsStore):
    DEFAULTS = {
        "minWords": SENTENCERUSH_MIN_WORDS,
        "maxWords": SENTENCERUSH_MAX_WORDS,
        "turnSeconds": SENTENCERUSH_DEFAULT_TURN_SECONDS,
    }
    game_name = "SentenceRush"

    def normalize(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        low = clamp_int(raw.get("minWords"), SENTENCERUSH_MIN_WORDS, SENTENCERUSH_MAX_WORDS, SENTENCERUSH_MIN_WORDS)
        high = clamp_int(raw.get("maxWords"), SENTENCERUSH_MIN_WORDS, SENTENCERUSH_MAX_WORDS, SENTENCERUSH_MAX_WORDS)
        return {
            "minWords": min(low, high),
            "maxWords": max(low, high),
            "turnSeconds": clamp_int(
                raw.get("turnSeconds"),
                SENTENCERUSH_MIN_TURN_SECONDS,
                SENTENCERUSH_MAX_TURN_SECONDS,
                SENTENCERUSH_DEFAULT_TURN_SECONDS,
            ),
        }


__all__ = ["SentenceRushConfigStore", "STORE_FILE"]
