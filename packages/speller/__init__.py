"""
Spire Speller

A roguelike deck-builder where every card is a word: casting a card means
spelling it. Correct answers resolve the card's effect and feed a spaced
repetition schedule that follows the player across runs.

Core subsystems:
- state: seeded map RNG, combat state, run state
- content: words and packs, cards, enemies, relics, events, sanctum upgrades
- generation: map, decks, enemies and deck balancing, rewards, shops
- handlers: room-phase logic (events, shops, rest sites, treasure)
- calc: damage, block and heal formulas
- persistence: key-value stores, profiles and save slots, word list import

Usage:
    from packages.speller import GameRunner, get_pack

    runner = GameRunner(get_pack("scholar").vocab_list(), pack_id="scholar", seed=42)
    while not runner.game_over:
        actions = runner.get_available_actions()
        runner.take_action(actions[0])
"""

__version__ = "0.1.0"

# Errors and settings
from .errors import (
    SpellerError, VocabularyImportError, ProfileLimitError,
    ProfileNotFoundError, InvalidSlotError,
)
from .settings import Settings, load_settings, configure_logging

# RNG
from .state.rng import SeededRandom

# Words
from .content.vocabulary import Vocabulary, update_proficiency, is_due, merge_progress
from .content.packs import VocabPack, PRESET_PACKS, DEFAULT_PACK_ID, get_pack

# Cards, enemies, relics
from .content.cards import Card, CardType, CardDebuff, create_card, derive_stats
from .content.enemies import EnemyIntent, IntentType, EnemyType, EnemyTier, get_enemy_next_intent
from .content.relics import Relic, ALL_RELICS, get_relic

# Map
from .generation.map import MapNode, NodeType, NodeStatus, generate_map, map_to_string

# Combat
from .state.combat import Player, Enemy, CombatState
from .combat_engine import CombatEngine, CombatPhase, CombatResult

# Run
from .state.run import RunState, GamePhase
from .game import GameRunner

# Persistence
from .persistence.store import KeyValueStore, MemoryStore, JsonFileStore
from .persistence.profiles import ProfileStore, UserProfile
from .persistence.ingest import parse_vocabulary

# Audio
from .audio import AudioSink, NullAudio, Sfx, Bgm

__all__ = [
    "SpellerError", "VocabularyImportError", "ProfileLimitError",
    "ProfileNotFoundError", "InvalidSlotError",
    "Settings", "load_settings", "configure_logging",
    "SeededRandom",
    "Vocabulary", "update_proficiency", "is_due", "merge_progress",
    "VocabPack", "PRESET_PACKS", "DEFAULT_PACK_ID", "get_pack",
    "Card", "CardType", "CardDebuff", "create_card", "derive_stats",
    "EnemyIntent", "IntentType", "EnemyType", "EnemyTier", "get_enemy_next_intent",
    "Relic", "ALL_RELICS", "get_relic",
    "MapNode", "NodeType", "NodeStatus", "generate_map", "map_to_string",
    "Player", "Enemy", "CombatState",
    "CombatEngine", "CombatPhase", "CombatResult",
    "RunState", "GamePhase", "GameRunner",
    "KeyValueStore", "MemoryStore", "JsonFileStore",
    "ProfileStore", "UserProfile", "parse_vocabulary",
    "AudioSink", "NullAudio", "Sfx", "Bgm",
]
