"""
Rush Bot - SentenceRush Scoring
===============================

Wordle-style letter scoring for sentence guesses.

Statuses per character of the guess string:
    correct  right letter in the right position
    present  letter occurs elsewhere among the target's unmatched letters
    absent   letter is not available (any more)
    space    word separator or padding

Duplicate letters are handled with a counted second pass: a letter is
marked present at most as many times as it is still unmatched in the
target after the correct positions are taken out.
"""

import random
from collections import Counter
from typing import List, Optional, Sequence

from src.services.sentencerush.sentences import extract_word


CORRECT = "correct"
PRESENT = "present"
ABSENT = "absent"
SPACE = "space"


def build_guess_string(target_words: Sequence[str], guess_words: Sequence[str]) -> str:
    """
    Line up guessed words with the target's words.

    Each guessed word is cut or space-padded to its target word's length,
    so every character of the result sits at the matching position of
    the target string.
    """
    parts = []
    for index, target_word in enumerate(target_words):
        raw = guess_words[index] if index < len(guess_words) else ""
        cleaned = extract_word(raw)[:len(target_word)]
        parts.append(cleaned.ljust(len(target_word)))
    return " ".join(parts)


def score_guess(target: str, guess: str) -> List[str]:
    """Status for each character of guess against target."""
    correct = [
        index < len(target) and target[index] != " " and char == target[index]
        for index, char in enumerate(guess)
    ]

    remaining = Counter(
        char
        for index, char in enumerate(target)
        if char != " " and not (index < len(guess) and correct[index])
    )

    statuses = []
    for index, char in enumerate(guess):
        if char == " ":
            statuses.append(SPACE)
        elif correct[index]:
            statuses.append(CORRECT)
        elif remaining[char] > 0:
            remaining[char] -= 1
            statuses.append(PRESENT)
        else:
            statuses.append(ABSENT)
    return statuses


def correct_positions(statuses: Sequence[str]) -> List[int]:
    return [index for index, status in enumerate(statuses) if status == CORRECT]


# =============================================================================
# Rendering
# =============================================================================

def render_puzzle(target: str, revealed: Sequence[bool]) -> str:
    """Letters shown as capitals once revealed, '_' otherwise."""
    words = []
    for word_start, word in _iter_words(target):
        shown = [
            word[offset].upper() if revealed[word_start + offset] else "_"
            for offset in range(len(word))
        ]
        words.append(" ".join(shown))
    return "   ".join(words)


def format_guess(guess: str, statuses: Sequence[str]) -> str:
    """Guess letters separated by '|', words by ' / ', present letters bold."""
    words = []
    current: List[str] = []
    for char, status in zip(guess, statuses):
        if char == " ":
            if current:
                words.append("|".join(current))
                current = []
            continue
        display = char.upper()
        if status == PRESENT:
            display = f"**{display}**"
        current.append(display)
    if current:
        words.append("|".join(current))
    return " / ".join(words) or "_No guess._"


def pick_hint_index(
    target: str,
    revealed: Sequence[bool],
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """Random position of a letter that is not revealed yet."""
    candidates = [
        index for index, char in enumerate(target)
        if char != " " and not revealed[index]
    ]
    if not candidates:
        return None
    return (rng or random).choice(candidates)


def _iter_words(text: str):
    start = 0
    for word in text.split(" "):
        if word:
            yield start, word
        start += len(word) + 1


__all__ = [
    "CORRECT",
    "PRESENT",
    "ABSENT",
    "SPACE",
    "build_guess_string",
    "score_guess",
    "correct_positions",
    "render_puzzle",
    "format_guess",
    "pick_hint_index",
]
