"""
Tests for src/services/minigames/state.py

Covers the game state machine and the cancellation token.
"""

import asyncio

import pytest

from src.services.minigames.state import (
    OUTCOMES,
    CancelToken,
    GameState,
    InvalidTransition,
    can_transition,
    transition,
)


# =============================================================================
# State Machine Tests
# =============================================================================

class TestTransitions:
    """Tests for transition()."""

    def test_waiting_to_playing(self):
        assert transition(GameState.WAITING, GameState.PLAYING) is GameState.PLAYING

    def test_waiting_can_reach_lobby_outcomes(self):
        for target in (
            GameState.STOPPED,
            GameState.NO_PLAYERS,
            GameState.NOT_ENOUGH_PLAYERS,
            GameState.ERROR,
        ):
            assert can_transition(GameState.WAITING, target)

    def test_waiting_cannot_be_won(self):
        with pytest.raises(InvalidTransition):
            transition(GameState.WAITING, GameState.WON)

    def test_playing_outcomes(self):
        for target in (
            GameState.WON,
            GameState.TIMEOUT_EXHAUSTED,
            GameState.STOPPED,
            GameState.NO_PLAYERS,
            GameState.ERROR,
        ):
            assert can_transition(GameState.PLAYING, target)

    def test_playing_cannot_go_back_to_waiting(self):
        assert not can_transition(GameState.PLAYING, GameState.WAITING)

    def test_every_outcome_only_reaches_ended(self):
        for outcome in OUTCOMES:
            assert can_transition(outcome, GameState.ENDED)
            assert not can_transition(outcome, GameState.PLAYING)

    def test_ended_to_playing_rejected(self):
        with pytest.raises(InvalidTransition) as exc:
            transition(GameState.ENDED, GameState.PLAYING)
        assert exc.value.current is GameState.ENDED
        assert exc.value.target is GameState.PLAYING

    def test_won_to_stopped_rejected(self):
        with pytest.raises(InvalidTransition):
            transition(GameState.WON, GameState.STOPPED)


class TestStages:
    """Tests for GameState.stage."""

    def test_stage_values(self):
        assert GameState.WAITING.stage == "waiting"
        assert GameState.PLAYING.stage == "playing"
        assert GameState.WON.stage == "ended"
        assert GameState.ENDED.stage == "ended"

    def test_is_outcome(self):
        assert GameState.TIMEOUT_EXHAUSTED.is_outcome
        assert not GameState.ENDED.is_outcome
        assert not GameState.PLAYING.is_outcome


# =============================================================================
# CancelToken Tests
# =============================================================================

class TestCancelToken:
    """Tests for CancelToken."""

    def test_cancel_is_idempotent(self):
        token = CancelToken()
        assert token.cancel("first") is True
        assert token.cancel("second") is False
        assert token.reason == "first"

    def test_linked_callbacks_run_once(self):
        token = CancelToken()
        calls = []
        token.link(calls.append)
        token.cancel("stopped")
        token.cancel("again")
        assert calls == ["stopped"]

    def test_unlink(self):
        token = CancelToken()
        calls = []
        unlink = token.link(calls.append)
        unlink()
        token.cancel()
        assert calls == []

    def test_link_after_cancel_runs_immediately(self):
        token = CancelToken()
        token.cancel("done")
        calls = []
        token.link(calls.append)
        assert calls == ["done"]

    def test_failing_callback_does_not_block_others(self):
        token = CancelToken()
        calls = []

        def broken(_reason):
            raise ValueError("boom")

        token.link(broken)
        token.link(calls.append)
        token.cancel("x")
        assert calls == ["x"]

    @pytest.mark.asyncio
    async def test_sleep_wakes_on_cancel(self):
        token = CancelToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel, "stop")
        assert await token.sleep(5) is True

    @pytest.mark.asyncio
    async def test_sleep_times_out(self):
        token = CancelToken()
        assert await token.sleep(0.01) is False
