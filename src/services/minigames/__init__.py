"""
Rush Bot - Minigame Core Package
================================

Pieces shared by every turn-based channel game.

DESIGN:
    GameRegistry      one game per channel, check-and-insert on start
    LobbyController   timed join window with a Join button
    TurnEngine        lobby -> turns -> outcome -> registry removal
    OutcomeReporter   won games -> stats store
    GameService       command-facing start/join/leave/stop
"""

from .state import CancelToken, GameState, InvalidTransition, transition
from .collector import MessageCollector
from .game import BaseGame, JoinResult, LeaveResult, StopResult
from .registry import GameRegistry, StartResult
from .stats import GameStatsStore, GameSummary, PlayerStats
from .settings import GuildSettingsStore, clamp_int
from .lobby import LobbyController, LobbyError
from .outcome import OutcomeReporter
from .engine import TurnEngine, TurnResult
from .service import GameService, GameSetupError


__all__ = [
    "CancelToken",
    "GameState",
    "InvalidTransition",
    "transition",
    "MessageCollector",
    "BaseGame",
    "JoinResult",
    "LeaveResult",
    "StopResult",
    "GameRegistry",
    "StartResult",
    "GameStatsStore",
    "GameSummary",
    "PlayerStats",
    "GuildSettingsStore",
    "clamp_int",
    "LobbyController",
    "LobbyError",
    "OutcomeReporter",
    "TurnEngine",
    "TurnResult",
    "GameService",
    "GameSetupError",
]
