"""
Rush Bot - SentenceRush Game State
==================================

Hidden sentence, revealed letters and hint bookkeeping.
"""

import random
from typing import Any, Dict, List, Optional, Sequence, Set

from src.core.constants import SENTENCERUSH_MAX_PLAYERS, SENTENCERUSH_MIN_PLAYERS
from src.services.minigames.game import BaseGame
from src.services.sentencerush.logic import (
    build_guess_string,
    correct_positions,
    format_guess,
    pick_hint_index,
    render_puzzle,
    score_guess,
)
from src.services.sentencerush.sentences import Sentence


class SentenceRushGame(BaseGame):
    """
    SentenceRush game.

    Attributes:
        sentence: The hidden sentence.
        revealed: One flag per character of the target; spaces start revealed.
        hint_used: Players who already pressed the hint button.
        hints_given: Letters revealed by hints so far (manual and per round).
        last_guess: Rendered result of the last turn.
        last_hint: Text of the last hint.
    """

    kind = "sentencerush"
    title = "SentenceRush"
    min_players = SENTENCERUSH_MIN_PLAYERS
    max_players = SENTENCERUSH_MAX_PLAYERS

    def __init__(
        self,
        *,
        sentence: Sentence,
        min_words: int,
        max_words: int,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.sentence = sentence
        self.min_words = min_words
        self.max_words = max_words
        self.revealed: List[bool] = [char == " " for char in sentence.normalized]
        self.hint_used: Set[int] = set()
        self.hints_given = 0
        self.last_guess: Optional[str] = None
        self.last_hint: Optional[str] = None

    @property
    def target(self) -> str:
        return self.sentence.normalized

    @property
    def target_words(self) -> List[str]:
        return self.sentence.words

    @property
    def word_count(self) -> int:
        return self.sentence.word_count

    def config_snapshot(self) -> Dict[str, Any]:
        return {
            "turnSeconds": self.turn_seconds,
            "minWords": self.min_words,
            "maxWords": self.max_words,
            "sentence": self.sentence.original,
        }

    # =========================================================================
    # Guesses
    # =========================================================================

    def guess_string(self, guess_words: Sequence[str]) -> str:
        return build_guess_string(self.target_words, guess_words)

    def is_solved_by(self, guess_words: Sequence[str]) -> bool:
        """True when the full guess equals the hidden sentence."""
        if not guess_words:
            return False
        return self.guess_string(guess_words).strip() == self.target

    def apply_guess(self, guess_words: Sequence[str]) -> str:
        """
        Score a guess and reveal its correct letters for everyone.

        Returns:
            The guess rendered with present letters in bold.
        """
        guess = self.guess_string(guess_words)
        statuses = score_guess(self.target, guess)
        for index in correct_positions(statuses):
            self.revealed[index] = True
        return format_guess(guess, statuses)

    def puzzle(self) -> str:
        return render_puzzle(self.target, self.revealed)

    # =========================================================================
    # Hints
    # =========================================================================

    def reveal_hint(self, rng: Optional[random.Random] = None) -> Optional[str]:
        """
        Reveal one random hidden letter.

        Returns:
            The revealed letter (uppercase), or None if all are revealed.
        """
        index = pick_hint_index(self.target, self.revealed, rng)
        if index is None:
            return None
        self.revealed[index] = True
        self.hints_given += 1
        return self.target[index].upper()

    def use_player_hint(self, user_id: int) -> Optional[str]:
        """
        Spend a player's one manual hint.

        Returns:
            The revealed letter, or None if every letter is already shown
            (the hint is not spent in that case).
        """
        letter = self.reveal_hint()
        if letter is None:
            return None
        self.hint_used.add(user_id)
        self.last_hint = f"<@{user_id}> used a hint: **{letter}**"
        return letter


__all__ = ["SentenceRushGame"]
