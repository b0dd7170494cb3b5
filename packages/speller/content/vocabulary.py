"""
Vocabulary records and the spaced-repetition proficiency model.

Each word carries a proficiency level 0-5. A success moves it up one level
and schedules the next review further out (5h, 1d, 3d, 7d, 14d). A failure
does not demote immediately: the word is flagged as a retest and is due
again at once. Only a second failure in a row, while the retest flag is set,
drops proficiency by one level.

Records are immutable; ``update_proficiency`` returns a new record.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Optional

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

# Review interval per proficiency level (index capped at 4)
INTERVALS_MS = [
    5 * HOUR_MS,
    1 * DAY_MS,
    3 * DAY_MS,
    7 * DAY_MS,
    14 * DAY_MS,
]

MAX_PROFICIENCY = 5

DIFFICULTIES = ("easy", "medium", "hard", "long")


def now_ms() -> int:
    """Current wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Vocabulary:
    """A word in the run's vocabulary list."""
    id: str
    word: str
    phonetic: str = ""
    meaning: str = ""
    difficulty: str = "medium"
    proficiency: int = 0
    fail_streak: int = 0
    is_retest: bool = False
    next_review: int = 0
    mastery_streak: int = 0
    last_review: Optional[int] = None

    @classmethod
    def create(cls, word: str, phonetic: str = "", meaning: str = "",
               difficulty: Optional[str] = None) -> "Vocabulary":
        """New word at proficiency 0. Difficulty defaults to a length bucket."""
        word = word.strip()
        if difficulty is None:
            difficulty = "long" if len(word) > 7 else "medium"
        return cls(id=word.lower(), word=word, phonetic=phonetic, meaning=meaning,
                   difficulty=difficulty)

    @property
    def is_mastered(self) -> bool:
        return self.proficiency >= MAX_PROFICIENCY

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "word": self.word,
            "phonetic": self.phonetic,
            "meaning": self.meaning,
            "difficulty": self.difficulty,
            "proficiency": self.proficiency,
            "failStreak": self.fail_streak,
            "isRetest": self.is_retest,
            "nextReview": self.next_review,
            "masteryStreak": self.mastery_streak,
            "lastReview": self.last_review,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Vocabulary":
        word = data["word"]
        return cls(
            id=data.get("id", word.lower()),
            word=word,
            phonetic=data.get("phonetic", ""),
            meaning=data.get("meaning", ""),
            difficulty=data.get("difficulty", "medium"),
            proficiency=data.get("proficiency", 0),
            fail_streak=data.get("failStreak", 0),
            is_retest=data.get("isRetest", False),
            next_review=data.get("nextReview", 0),
            mastery_streak=data.get("masteryStreak", 0),
            last_review=data.get("lastReview"),
        )


def update_proficiency(vocab: Vocabulary, success: bool,
                       now: Optional[int] = None) -> Vocabulary:
    """
    Apply one review result.

    Success: +1 level (cap 5), next review scheduled by the new level,
    fail streak and retest flag cleared.
    Failure: fail streak +1. A failure during a retest demotes one level
    (floor 0) and clears the retest state; a first failure sets the retest
    flag. Either way the word is due immediately and the mastery streak
    drops to the resulting level.
    """
    if now is None:
        now = now_ms()

    if success:
        proficiency = min(MAX_PROFICIENCY, vocab.proficiency + 1)
        interval = INTERVALS_MS[min(proficiency, len(INTERVALS_MS) - 1)]
        return replace(
            vocab,
            proficiency=proficiency,
            next_review=now + interval,
            fail_streak=0,
            is_retest=False,
            mastery_streak=proficiency,
            last_review=now,
        )

    if vocab.is_retest:
        proficiency = max(0, vocab.proficiency - 1)
        return replace(
            vocab,
            proficiency=proficiency,
            is_retest=False,
            fail_streak=0,
            mastery_streak=proficiency,
            next_review=now,
            last_review=now,
        )
    return replace(
        vocab,
        fail_streak=vocab.fail_streak + 1,
        is_retest=True,
        next_review=now,
        mastery_streak=vocab.proficiency,
        last_review=now,
    )


def is_due(vocab: Vocabulary, now: Optional[int] = None) -> bool:
    """Whether a word is due for review (a bounty word)."""
    if vocab.is_retest:
        return True
    if now is None:
        now = now_ms()
    return vocab.proficiency < MAX_PROFICIENCY and vocab.next_review > 0 and now >= vocab.next_review


def merge_progress(base: Vocabulary, saved: Vocabulary) -> Vocabulary:
    """Carry saved review progress onto a pack word, keeping the pack text."""
    return replace(
        base,
        proficiency=saved.proficiency,
        fail_streak=saved.fail_streak,
        is_retest=saved.is_retest,
        next_review=saved.next_review,
        mastery_streak=saved.mastery_streak,
        last_review=saved.last_review,
    )
