"""
Shared pytest fixtures for the Spire Speller test suite.

This module provides reusable fixtures for:
- Word lists (short, long, mixed proficiency)
- Seeded ``random.Random`` instances
- A ready-to-play combat engine
- A memory-backed profile store
"""

import os
import random
import sys

import pytest

# Ensure project root is in path
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.speller.combat_engine import CombatEngine
from packages.speller.content.cards import CardType, create_card
from packages.speller.content.enemies import EnemyIntent, IntentType
from packages.speller.content.packs import get_pack
from packages.speller.content.vocabulary import Vocabulary
from packages.speller.persistence.profiles import ProfileStore
from packages.speller.persistence.store import MemoryStore
from packages.speller.state.combat import CombatState, Enemy, Player


# =============================================================================
# Words
# =============================================================================


WORDS = [
    ("cat", "a small feline"),
    ("apple", "a round fruit"),
    ("bridge", "a structure over water"),
    ("harmony", "agreement"),
    ("hypothesis", "a proposed explanation"),
    ("serendipity", "a happy accident"),
    ("extraordinary", "very unusual"),
    ("ocean", "a large body of salt water"),
]


@pytest.fixture
def vocab_list():
    """Eight fresh words of mixed length, all at proficiency 0."""
    return [Vocabulary.create(word, phonetic=f"/{word}/", meaning=meaning) for word, meaning in WORDS]


@pytest.fixture
def scholar_words():
    return get_pack("scholar").vocab_list()


# =============================================================================
# RNG
# =============================================================================


@pytest.fixture
def rng():
    """random.Random with seed 42 for deterministic tests."""
    return random.Random(42)


# =============================================================================
# Combat
# =============================================================================


def make_card(word, card_type=CardType.ATTACK, proficiency=0, is_review=False):
    vocab = Vocabulary(id=word.lower(), word=word, meaning=word, proficiency=proficiency)
    return create_card(card_type, vocab, is_review=is_review)


def make_enemy(hp=50, intent=None, enemy_id="looter", **kwargs):
    enemy = Enemy(id=enemy_id, name=enemy_id.title(), hp=hp, max_hp=hp, **kwargs)
    enemy.intent = intent or EnemyIntent(IntentType.ATTACK, 5)
    return enemy


@pytest.fixture
def combat_engine(vocab_list, rng):
    """Started combat: 70 HP player vs a 50 HP looter, four attacks and a defense in hand."""
    deck = [create_card(CardType.ATTACK, v) for v in vocab_list[:4]]
    deck += [create_card(CardType.DEFENSE, v) for v in vocab_list[4:]]
    state = CombatState(player=Player(), enemy=make_enemy(), draw_pile=deck)
    engine = CombatEngine(state, vocab_list=vocab_list, rng=rng, now_ms=1_000_000)
    engine.start_combat()
    return engine


# =============================================================================
# Persistence
# =============================================================================


@pytest.fixture
def profile_store():
    """ProfileStore over a MemoryStore."""
    return ProfileStore(MemoryStore())


@pytest.fixture
def profile(profile_store):
    return profile_store.create_profile("Ada")
