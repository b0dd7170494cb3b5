"""
Content module - words, packs, cards, enemies, relics and events.

Sanctum upgrades live in ``content.sanctum``; they build a Player and are
imported from there directly.
"""

from .vocabulary import Vocabulary, update_proficiency, is_due, merge_progress, MAX_PROFICIENCY
from .packs import VocabPack, PRESET_PACKS, DEFAULT_PACK_ID, get_pack
from .cards import Card, CardType, CardDebuff, PLAYABLE_TYPES, create_card, derive_stats
from .enemies import (
    EnemyIntent, IntentType, EnemyType, EnemyTier, EnemyTemplate,
    TRAINING_DUMMY, get_enemy_next_intent,
)
from .acts import ActConfig, get_act_config, MAX_ACT
from .relics import Relic, RelicRarity, ALL_RELICS, get_relic, unowned_relics
from .events import (
    ChoiceType, EventOutcome, EventChoice, GameEvent, EventResult,
    EVENTS, get_event, resolve_event_choice,
)
