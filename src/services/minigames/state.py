"""
Rush Bot - Game State Machine
=============================

Explicit game states, the single transition function, and the
cancellation token every game owns.

DESIGN:
    A game moves waiting -> playing -> <outcome> -> ended. Every outcome
    is terminal: once a game has one, no transition leads back to
    waiting or playing, so "is the game stopped" is monotonic.

    Cancellation is a token rather than a flag plus ad hoc collector
    stops. Cancelling it marks the logical stop AND runs the teardown
    callbacks (live collector, hint view), so anything awaiting input
    wakes up immediately.
"""

import asyncio
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional

from src.core.logger import logger


# =============================================================================
# States
# =============================================================================

class GameState(str, Enum):
    """Lifecycle state of a minigame."""

    WAITING = "waiting"
    PLAYING = "playing"

    # Terminal outcomes
    WON = "won"
    TIMEOUT_EXHAUSTED = "timeout_exhausted"
    STOPPED = "stopped"
    NO_PLAYERS = "no_players"
    NOT_ENOUGH_PLAYERS = "not_enough_players"
    ERROR = "error"

    ENDED = "ended"

    @property
    def is_outcome(self) -> bool:
        return self in OUTCOMES

    @property
    def stage(self) -> str:
        """Coarse stage: waiting, playing or ended."""
        if self in (GameState.WAITING, GameState.PLAYING):
            return self.value
        return "ended"


OUTCOMES: FrozenSet[GameState] = frozenset({
    GameState.WON,
    GameState.TIMEOUT_EXHAUSTED,
    GameState.STOPPED,
    GameState.NO_PLAYERS,
    GameState.NOT_ENOUGH_PLAYERS,
    GameState.ERROR,
})

TRANSITIONS: Dict[GameState, FrozenSet[GameState]] = {
    GameState.WAITING: frozenset({
        GameState.PLAYING,
        GameState.STOPPED,
        GameState.NO_PLAYERS,
        GameState.NOT_ENOUGH_PLAYERS,
        GameState.ERROR,
    }),
    GameState.PLAYING: frozenset({
        GameState.WON,
        GameState.TIMEOUT_EXHAUSTED,
        GameState.STOPPED,
        GameState.NO_PLAYERS,
        GameState.ERROR,
    }),
    **{outcome: frozenset({GameState.ENDED}) for outcome in OUTCOMES},
    GameState.ENDED: frozenset(),
}


class InvalidTransition(Exception):
    """Raised when a game is asked to move to a state it cannot reach."""

    def __init__(self, current: GameState, target: GameState) -> None:
        super().__init__(f"Cannot transition from {current.value} to {target.value}")
        self.current = current
        self.target = target


def can_transition(current: GameState, target: GameState) -> bool:
    return target in TRANSITIONS[current]


def transition(current: GameState, target: GameState) -> GameState:
    """
    Validate a state change.

    Args:
        current: State the game is in.
        target: State requested.

    Returns:
        The target state.

    Raises:
        InvalidTransition: If the move is not allowed.
    """
    if not can_transition(current, target):
        raise InvalidTransition(current, target)
    return target


# =============================================================================
# Cancellation Token
# =============================================================================

class CancelToken:
    """
    One-shot cancellation signal with teardown callbacks.

    Attributes:
        reason: Why the token was cancelled (None while live).
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._callbacks: List[Callable[[str], None]] = []
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "stopped") -> bool:
        """
        Cancel the token and run teardown callbacks.

        Returns:
            True on the first call, False if already cancelled.
        """
        if self._event.is_set():
            return False
        self.reason = reason
        self._event.set()

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(reason)
            except Exception as e:
                logger.warning("Cancel Callback Failed", [
                    ("Callback", getattr(callback, "__qualname__", repr(callback))),
                    ("Error", str(e)[:100]),
                ])
        return True

    def link(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """
        Register a teardown callback.

        Runs immediately if the token is already cancelled.

        Returns:
            A function that unregisters the callback.
        """
        if self._event.is_set():
            callback(self.reason or "stopped")
            return lambda: None

        self._callbacks.append(callback)

        def unlink() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unlink

    async def wait(self) -> str:
        """Block until cancelled; returns the reason."""
        await self._event.wait()
        return self.reason or "stopped"

    async def sleep(self, seconds: float) -> bool:
        """
        Sleep for up to `seconds`, waking early on cancellation.

        Returns:
            True if the token was cancelled during (or before) the sleep.
        """
        if self._event.is_set():
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=max(0.0, seconds))
        except asyncio.TimeoutError:
            return False
        return True


__all__ = [
    "GameState",
    "OUTCOMES",
    "TRANSITIONS",
    "InvalidTransition",
    "can_transition",
    "transition",
    "CancelToken",
]
