"""
Deck assembly from a vocabulary list.

Session decks are 12 cards. Words are picked in three pools:

- bounty: words due for review (or flagged for a retest), retests first,
  then by due time; these become review cards (2x effect)
- new: proficiency 0 words, at least 3 slots kept for them when present
- filler: everything else, shuffled together with bounty overflow

Short lists are padded by repeating already picked words. The picked words
are shuffled and dealt the fixed type multiset ATTACK x5, DEFENSE x4,
UTILITY x2, HEAL x1, then the deck order is shuffled once more.

None of this uses the map seed; callers may pass a ``random.Random``.
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from ..content.cards import Card, CardType, PLAYABLE_TYPES, create_card
from ..content.vocabulary import Vocabulary, is_due, now_ms

DECK_SIZE = 12
NEW_WORD_RESERVE = 3
REWARD_OPTION_COUNT = 3

TYPE_DISTRIBUTION = (
    [CardType.ATTACK] * 5
    + [CardType.DEFENSE] * 4
    + [CardType.UTILITY] * 2
    + [CardType.HEAL] * 1
)


def generate_session_deck(
    vocab_list: List[Vocabulary],
    now: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[Card]:
    """Build a fresh 12-card deck. Returns [] for an empty list."""
    if not vocab_list:
        return []
    rng = rng or random
    if now is None:
        now = now_ms()

    bounty = [v for v in vocab_list if is_due(v, now)]
    bounty_ids = {id(v) for v in bounty}
    new = [v for v in vocab_list if v.proficiency == 0 and id(v) not in bounty_ids]
    new_ids = {id(v) for v in new}
    filler = [v for v in vocab_list if id(v) not in bounty_ids and id(v) not in new_ids]

    selected: List[Tuple[Vocabulary, bool]] = []

    bounty.sort(key=lambda v: (not v.is_retest, v.next_review))
    max_bounty = max(0, DECK_SIZE - (NEW_WORD_RESERVE if new else 0))
    while len(selected) < max_bounty and bounty:
        selected.append((bounty.pop(0), True))

    rng.shuffle(new)
    while len(selected) < DECK_SIZE and new:
        selected.append((new.pop(0), False))

    leftovers = bounty + filler
    rng.shuffle(leftovers)
    while len(selected) < DECK_SIZE and leftovers:
        vocab = leftovers.pop(0)
        selected.append((vocab, is_due(vocab, now)))

    while len(selected) < DECK_SIZE:
        selected.append(rng.choice(selected))

    rng.shuffle(selected)
    deck = [
        create_card(TYPE_DISTRIBUTION[i % len(TYPE_DISTRIBUTION)], vocab, is_review)
        for i, (vocab, is_review) in enumerate(selected)
    ]
    rng.shuffle(deck)
    return deck


def get_random_reward_options(
    vocab_list: List[Vocabulary],
    rng: Optional[random.Random] = None,
    count: int = REWARD_OPTION_COUNT,
) -> List[Card]:
    """Independent (random type, random word) draws for a card reward."""
    if not vocab_list:
        return []
    rng = rng or random
    return [
        create_card(rng.choice(PLAYABLE_TYPES), rng.choice(vocab_list))
        for _ in range(count)
    ]


def build_tutorial_deck() -> List[Card]:
    """Five easy cards used by the training fight."""
    words = [
        (CardType.DEFENSE, "Safe", "Safe"),
        (CardType.DEFENSE, "Hold", "Hold"),
        (CardType.ATTACK, "Zap", "Strike"),
        (CardType.DEFENSE, "Stay", "Stay"),
        (CardType.DEFENSE, "Calm", "Calm"),
    ]
    return [
        create_card(card_type, Vocabulary.create(word, phonetic=f"/{word.lower()}/", meaning=meaning,
                                                 difficulty="easy"))
        for card_type, word, meaning in words
    ]
