"""
Rush Bot - SentenceRush Sentence Pool
=====================================

Hidden sentences and the text normalisation used for both the pool and
players' guesses.

Every entry is normalised (lowercase, letters and single spaces only)
and kept only if it has between SENTENCERUSH_MIN_WORDS and
SENTENCERUSH_MAX_WORDS words.
"""

import random
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from src.core.constants import SENTENCERUSH_MAX_WORDS, SENTENCERUSH_MIN_WORDS
from src.services.minigames.settings import clamp_int


SENTENCE_POOL = (
    "The early bird catches the worm.",
    "Actions speak louder than words.",
    "Better late than never.",
    "Every cloud has a silver lining.",
    "Practice makes perfect.",
    "Time flies when you are having fun.",
    "Curiosity killed the cat.",
    "Honesty is the best policy.",
    "Laughter is the best medicine.",
    "Rome was not built in a day.",
    "Do not judge a book by its cover.",
    "When in Rome, do as the Romans do.",
    "The pen is mightier than the sword.",
    "Knowledge is power.",
    "Two heads are better than one.",
    "All good things must come to an end.",
    "A picture is worth a thousand words.",
    "Fortune favors the bold.",
    "Slow and steady wins the race.",
    "Where there is smoke there is fire.",
    "Beauty is in the eye of the beholder.",
    "Home is where the heart is.",
    "Look before you leap.",
    "Great minds think alike.",
    "Old habits die hard.",
    "Every dog has its day.",
    "Lightning never strikes twice.",
    "Keep your friends close.",
    "The best things in life are free.",
    "Money does not grow on trees.",
    "Strike while the iron is hot.",
    "You can not have it both ways.",
    "The grass is always greener.",
    "Birds of a feather flock together.",
    "Patience is a virtue.",
    "No news is good news.",
    "Good things come to those who wait.",
    "It is raining cats and dogs.",
    "Break a leg tonight.",
    "The coffee is too hot to drink.",
    "My cat sleeps on the warm laptop.",
    "We watched the sunset from the roof.",
    "Pizza tastes better after midnight.",
    "The library closes at nine tonight.",
    "She found a coin under the couch.",
    "Our train was delayed again today.",
    "The moon looks huge tonight.",
    "Never trust a sleeping dragon.",
    "Bring snacks to the movie night.",
    "He forgot his umbrella at home.",
    "The garden needs more water.",
    "Winter is coming very soon.",
    "Dance like nobody is watching.",
    "Reading books makes you wiser.",
    "The dog chased its own tail.",
    "Please pass the salt and pepper.",
    "The stars are bright this evening.",
    "Fresh bread smells amazing.",
    "My phone battery died again.",
    "We need a bigger boat.",
    "The wifi password is on the fridge.",
    "Tomorrow is another day.",
    "Music makes everything better.",
    "The ocean waves crashed loudly.",
    "Someone ate the last cookie.",
    "The meeting could have been an email.",
    "Do not feed the seagulls.",
    "Keep calm and carry on.",
    "Life is better with friends.",
    "The kettle is already boiling.",
)


# =============================================================================
# Normalisation
# =============================================================================

_NON_LETTERS_RE = re.compile(r"[^a-z\s]")
_SPACES_RE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, turn anything but letters into spaces, collapse spaces."""
    lowered = str(text or "").lower()
    return _SPACES_RE.sub(" ", _NON_LETTERS_RE.sub(" ", lowered)).strip()


def extract_word(text: Optional[str]) -> str:
    """First normalised word of a message ('' if there is none)."""
    normalized = normalize_text(text)
    return normalized.split(" ")[0] if normalized else ""


# =============================================================================
# Sentences
# =============================================================================

@dataclass(frozen=True)
class Sentence:
    original: str
    normalized: str
    word_count: int

    @property
    def words(self) -> List[str]:
        return self.normalized.split(" ")


def build_sentences(pool: Sequence[str]) -> List[Sentence]:
    """Normalise a pool and keep sentences within the word bounds."""
    sentences = []
    for raw in pool:
        original = str(raw or "").strip()
        normalized = normalize_text(original)
        if not normalized:
            continue
        count = len(normalized.split(" "))
        if SENTENCERUSH_MIN_WORDS <= count <= SENTENCERUSH_MAX_WORDS:
            sentences.append(Sentence(original or normalized, normalized, count))
    return sentences


SENTENCES: List[Sentence] = build_sentences(SENTENCE_POOL)


def pick_sentence(
    min_words: object,
    max_words: object,
    rng: Optional[random.Random] = None,
    sentences: Optional[Sequence[Sentence]] = None,
) -> Optional[Sentence]:
    """
    Pick a random sentence whose word count is within the bounds.

    Bounds are clamped to the allowed range first. Returns None when no
    sentence fits.
    """
    pool = SENTENCES if sentences is None else sentences
    if not pool:
        return None

    low = clamp_int(min_words, SENTENCERUSH_MIN_WORDS, SENTENCERUSH_MAX_WORDS, SENTENCERUSH_MIN_WORDS)
    high = clamp_int(max_words, low, SENTENCERUSH_MAX_WORDS, SENTENCERUSH_MAX_WORDS)

    candidates = [s for s in pool if low <= s.word_count <= high]
    if not candidates:
        return None
    return (rng or random).choice(candidates)


__all__ = [
    "SENTENCE_POOL",
    "SENTENCES",
    "Sentence",
    "normalize_text",
    "extract_word",
    "build_sentences",
    "pick_sentence",
]
