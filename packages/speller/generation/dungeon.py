"""
Dungeon Manager - enemy spawning and per-encounter deck tuning.

Enemy selection by map node:
- BOSS: ``BOSS_POOL[(act - 1) % 3]``, fixed per act
- ELITE: uniform over ELITE_POOL
- MONSTER: rows 0-3 WEAK; rows 4-8 STRONG with 30% chance, else WEAK;
  rows 9+ STRONG

HP is an integer roll in [hp_min, hp_max] scaled by the act HP multiplier
and floored. Strength is ``floor(base * act damage multiplier) + (act - 1)``.
Strong monsters may pick up one extra affix (act affix chance).

Before each fight the deck's words are swapped to suit the enemy tier
("cognitive balance"): bosses and elites get words the player knows well or
short ones, weak monsters get shaky or long words. Card types, review flags
and instance ids survive the swap.
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from ..content.acts import get_act_config
from ..content.cards import Card, CardDebuff, create_card
from ..content.enemies import (
    BOSS_POOL, ELITE_POOL, STRONG_POOL, TRAINING_DUMMY, WEAK_POOL,
    EnemyTemplate, EnemyTier, EnemyType, get_enemy_next_intent,
)
from ..content.vocabulary import Vocabulary
from ..generation.map import NodeType
from ..state.combat import Enemy, EntityStatus

WEAK_ONLY_MAX_ROW = 3
MIXED_MAX_ROW = 8
STRONG_CHANCE_MIXED = 0.3

MIN_BALANCE_POOL = 5
HARD_ENEMY_PROFICIENCY = 3
HARD_ENEMY_MAX_LENGTH = 7
WEAK_ENEMY_MIN_LENGTH = 6

AFFIXES = (CardDebuff.BLIND, CardDebuff.RUSH, CardDebuff.SILENCE)


def _pick_template(act: int, floor_row: int, node_type: NodeType,
                   rng) -> Tuple[EnemyTemplate, EnemyTier]:
    if node_type == NodeType.BOSS:
        return BOSS_POOL[(act - 1) % len(BOSS_POOL)], EnemyTier.BOSS
    if node_type == NodeType.ELITE:
        return rng.choice(ELITE_POOL), EnemyTier.ELITE
    if floor_row <= WEAK_ONLY_MAX_ROW:
        return rng.choice(WEAK_POOL), EnemyTier.WEAK
    if floor_row <= MIXED_MAX_ROW:
        if rng.random() < STRONG_CHANCE_MIXED:
            return rng.choice(STRONG_POOL), EnemyTier.STRONG
        return rng.choice(WEAK_POOL), EnemyTier.WEAK
    return rng.choice(STRONG_POOL), EnemyTier.STRONG


def generate_enemy_for_floor(
    act: int,
    floor_row: int,
    node_type: NodeType,
    rng: Optional[random.Random] = None,
) -> Enemy:
    """Spawn a scaled enemy for a combat node."""
    rng = rng or random
    config = get_act_config(act)
    template, tier = _pick_template(act, floor_row, node_type, rng)

    hp_roll = rng.randint(template.hp_min, template.hp_max)
    hp = int(hp_roll * config.enemy_hp_multiplier)
    strength = int(template.base_strength * config.enemy_dmg_multiplier) + (act - 1)

    if node_type in (NodeType.ELITE, NodeType.BOSS):
        enemy_type = EnemyType(node_type.value)
    else:
        enemy_type = EnemyType.NORMAL

    enemy = Enemy(
        id=template.id,
        name=template.name,
        hp=hp,
        max_hp=hp,
        status=EntityStatus(strength=strength),
        type=enemy_type,
        tier=tier,
        innate_affixes=list(template.innate_affixes),
    )

    if tier == EnemyTier.STRONG and rng.random() < config.affix_chance_bonus:
        affix = rng.choice(AFFIXES)
        if affix not in enemy.innate_affixes:
            enemy.innate_affixes.append(affix)

    enemy.intent = get_enemy_next_intent(enemy.id, 1)
    return enemy


def create_training_dummy() -> Enemy:
    """The fixed opponent of the tutorial fight."""
    enemy = Enemy(
        id=TRAINING_DUMMY.id,
        name=TRAINING_DUMMY.name,
        hp=TRAINING_DUMMY.hp_max,
        max_hp=TRAINING_DUMMY.hp_max,
    )
    enemy.intent = get_enemy_next_intent(enemy.id, 1)
    return enemy


def balance_pool(vocab_list: List[Vocabulary], enemy_tier: EnemyTier) -> List[Vocabulary]:
    """Word pool matching an enemy tier (full list if the filter is too small)."""
    if enemy_tier in (EnemyTier.BOSS, EnemyTier.ELITE):
        pool = [v for v in vocab_list
                if v.proficiency >= HARD_ENEMY_PROFICIENCY or len(v.word) <= HARD_ENEMY_MAX_LENGTH]
    elif enemy_tier == EnemyTier.WEAK:
        pool = [v for v in vocab_list
                if v.proficiency < HARD_ENEMY_PROFICIENCY or len(v.word) > WEAK_ENEMY_MIN_LENGTH]
    else:
        pool = list(vocab_list)

    if len(pool) < MIN_BALANCE_POOL:
        pool = list(vocab_list)
    return pool


def cognitive_balance_deck(
    deck: List[Card],
    vocab_list: List[Vocabulary],
    enemy_tier: EnemyTier,
    rng: Optional[random.Random] = None,
) -> List[Card]:
    """Re-deal words onto the deck for this encounter, keeping card types."""
    if not vocab_list:
        return deck
    rng = rng or random

    pool = balance_pool(vocab_list, enemy_tier)
    rng.shuffle(pool)

    return [
        create_card(card.type, pool[i % len(pool)], card.is_review, instance_id=card.instance_id)
        for i, card in enumerate(deck)
    ]
