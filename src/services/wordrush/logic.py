"""
Rush Bot - WordRush Letter Logic
================================

Prompt generation and answer validation.

A prompt is three letters. An answer is one word (names allowed) that
contains those letters in order, not necessarily next to each other:
"alphabet" fits A-B-T, "table" does not because T comes before A.

Words are not dictionary-checked. Prompts are sampled from real seed
words so every prompt has at least one known answer.
"""

import random
import re
from typing import List, Optional, Sequence, Union


# =============================================================================
# Letter Sources
# =============================================================================

LETTER_POOL = (
    "EEEEEEEEEEEEAAAAAAAAAIIIIIIIIOOOOOOOONNNNNNRRRRRRTTTTTTLLLLSSSSUUUUDDDDGGGG"
    "BBCCMMPPFFHHVVWWYYKJXQZ"
)
"""Letter frequencies roughly matching English text."""

SEED_WORDS = (
    "alphabet", "adventure", "afterparty", "amsterdam", "anthology",
    "apartment", "astronaut", "attention", "beautiful", "beginning",
    "birmingham", "blackbird", "butterfly", "california", "celebration",
    "chocolate", "christopher", "community", "computer", "connection",
    "construction", "conversation", "dangerous", "direction", "elephant",
    "entertainment", "experience", "fantastic", "fireworks", "foundation",
    "friendship", "generation", "happiness", "important", "information",
    "instrument", "international", "jennifer", "jeremiah", "jonathan",
    "katherine", "louisiana", "management", "marvellous", "melancholy",
    "microphone", "mountains", "newcastle", "notorious", "october",
    "orchestra", "parliament", "pineapple", "president", "progress",
    "revolution", "sandwich", "september", "signature", "something",
    "sometimes", "strawberry", "submarine", "technology", "television",
    "tournament", "university", "wonderful", "yesterday",
)

PLAYABLE_TRIPLETS = tuple(
    triplet for triplet in (
        "THE", "AND", "ING", "ION", "ENT", "TIO", "ATI", "ERE", "HER", "HIS",
        "THA", "THI", "NTH", "YOU", "ARE", "FOR", "NOT", "ONE", "OUR", "OUT",
        "ALL", "EAS", "EST", "RES", "TER", "VER", "CON", "PRO", "STA", "MEN",
        "EVE", "OVE", "EAL", "EAR", "EER", "ERS", "NES", "NCE", "SIO", "SIN",
        "TED", "TES", "PRE", "PER", "SUP", "SUB", "TRA", "STR", "GRA", "GRO",
        "GLO", "WOR", "ORD", "RUS", "USH", "ASH", "SHE", "HEA", "ART", "HOU",
        "USE", "HOM", "OME", "FAM", "MIL", "ILI", "LIA", "IAL", "BLE", "ABL",
        "FUL", "OUS", "IVE", "IZE", "ISE", "CAT", "DOG", "MAN", "KID", "CAR",
        "BUS", "AIR", "SEA", "SKY", "SUN", "ANA", "ANN", "SAM", "BEN", "MAX",
        "MIA", "EVA", "AVA", "NOA", "LEO", "KAI", "ZOE", "JAN", "KIM", "ALI",
    )
    if re.fullmatch(r"[A-Z]{3}", triplet)
)
"""Fallback prompts used if SEED_WORDS is ever emptied."""

REQUIRED_LETTERS = 3

_WORD_RE = re.compile(r"^[A-Za-z][A-Za-z'\-]{2,31}$")
_LEADING_JUNK_RE = re.compile(r"^[^A-Za-z]+")
_TRAILING_JUNK_RE = re.compile(r"[^A-Za-z'\-]+$")
_NON_LETTERS_RE = re.compile(r"[^A-Z]")


# =============================================================================
# Prompts
# =============================================================================

def pick_letters(count: int = REQUIRED_LETTERS, rng: Optional[random.Random] = None) -> List[str]:
    """Draw letters from the frequency-weighted pool."""
    rng = rng or random
    return [rng.choice(LETTER_POOL) for _ in range(count)]


def pick_playable_letters(
    rng: Optional[random.Random] = None,
    seed_words: Sequence[str] = SEED_WORDS,
) -> List[str]:
    """
    Pick three ordered letters that some real word satisfies.

    Samples three increasing positions from a random seed word. Falls
    back to PLAYABLE_TRIPLETS, then to random pool letters.
    """
    rng = rng or random

    if seed_words:
        for _ in range(10):
            clean = _NON_LETTERS_RE.sub("", rng.choice(seed_words).upper())
            if len(clean) < REQUIRED_LETTERS:
                continue
            positions = sorted(rng.sample(range(len(clean)), REQUIRED_LETTERS))
            return [clean[i] for i in positions]

    if PLAYABLE_TRIPLETS:
        return list(rng.choice(PLAYABLE_TRIPLETS))

    return pick_letters(REQUIRED_LETTERS, rng)


def format_letters(letters: Sequence[str], separator: str = " ") -> str:
    return separator.join(str(letter or "").upper() for letter in letters)


# =============================================================================
# Validation
# =============================================================================

def normalise_candidate_word(text: Optional[str]) -> Optional[str]:
    """
    Clean a chat message into a candidate word.

    Unifies curly apostrophes and long dashes, strips wrapping
    punctuation, then accepts 3-32 characters of letters, apostrophes
    and hyphens starting with a letter.

    Returns:
        The cleaned word, or None when the message is not one word.
    """
    if not text or not isinstance(text, str):
        return None

    candidate = text.strip()
    if not candidate:
        return None

    candidate = candidate.replace("\u2019", "'").replace("\u2013", "-").replace("\u2014", "-")
    candidate = _LEADING_JUNK_RE.sub("", candidate)
    candidate = _TRAILING_JUNK_RE.sub("", candidate)
    if not candidate:
        return None

    return candidate if _WORD_RE.match(candidate) else None


def contains_letters_in_order(word: Optional[str], letters: Union[str, Sequence[str]]) -> bool:
    """
    True if the word's letters contain the three required letters as a
    subsequence, case-insensitively.
    """
    if not word or not isinstance(word, str):
        return False

    required = [str(letter or "").upper() for letter in letters if letter]
    if len(required) != REQUIRED_LETTERS:
        return False

    haystack = _NON_LETTERS_RE.sub("", word.upper())
    index = -1
    for letter in required:
        index = haystack.find(letter, index + 1)
        if index == -1:
            return False
    return True


def is_valid_answer(text: Optional[str], letters: Sequence[str]) -> Optional[str]:
    """
    Validate a chat message against a prompt.

    Returns:
        The accepted word, or None if the message does not answer the prompt.
    """
    candidate = normalise_candidate_word(text)
    if candidate and contains_letters_in_order(candidate, letters):
        return candidate
    return None


__all__ = [
    "LETTER_POOL",
    "SEED_WORDS",
    "PLAYABLE_TRIPLETS",
    "pick_letters",
    "pick_playable_letters",
    "format_letters",
    "normalise_candidate_word",
    "contains_letters_in_order",
    "is_valid_answer",
]
