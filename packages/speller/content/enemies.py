"""
Enemy catalog - templates per tier and intent patterns.

Templates carry the HP range, base strength and innate affixes of each
enemy. Scaling per act happens in generation/dungeon.py.

Intents are pure functions of (enemy id, turn number). Turns are 1-based
and the cyclic patterns key on ``turn % 3``:

    cultist   turn 1: BUFF Ritual 3, then ATTACK 6 forever
    slime     1: ATTACK 8, 2: DEBUFF Poison 3, 0: DEFEND 8
    guardian  1: BUFF Charge Up 2, 2: ATTACK 15, 0: DEFEND 20

Any enemy without a pattern attacks for 5 every turn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .cards import CardDebuff


class IntentType(Enum):
    ATTACK = "ATTACK"
    DEFEND = "DEFEND"
    BUFF = "BUFF"
    DEBUFF = "DEBUFF"
    UNKNOWN = "UNKNOWN"


class EnemyType(Enum):
    NORMAL = "NORMAL"
    ELITE = "ELITE"
    BOSS = "BOSS"


class EnemyTier(Enum):
    """Difficulty tier; drives deck rebalancing and affix behaviour."""
    WEAK = "WEAK"
    STRONG = "STRONG"
    ELITE = "ELITE"
    BOSS = "BOSS"


@dataclass(frozen=True)
class EnemyIntent:
    """What the enemy will do on its next turn."""
    type: IntentType
    value: int = 0
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {"type": self.type.value, "value": self.value, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict) -> "EnemyIntent":
        return cls(
            type=IntentType(data.get("type", IntentType.UNKNOWN.value)),
            value=data.get("value", 0),
            description=data.get("description"),
        )

    def __str__(self) -> str:
        label = f"{self.type.value} {self.value}"
        if self.description:
            label += f" ({self.description})"
        return label


UNKNOWN_INTENT = EnemyIntent(IntentType.UNKNOWN, 0)

RITUAL = "Ritual"


# =============================================================================
# Templates
# =============================================================================


@dataclass(frozen=True)
class EnemyTemplate:
    id: str
    name: str
    hp_min: int
    hp_max: int
    base_strength: int
    innate_affixes: Tuple[CardDebuff, ...] = field(default_factory=tuple)


WEAK_POOL: List[EnemyTemplate] = [
    EnemyTemplate("cultist", "Cultist", 30, 45, 0),
    EnemyTemplate("slime", "Acid Slime", 25, 40, 0),
    EnemyTemplate("louse", "Spire Louse", 20, 35, 1),
]

STRONG_POOL: List[EnemyTemplate] = [
    EnemyTemplate("looter", "Looter", 45, 60, 2, (CardDebuff.RUSH,)),
    EnemyTemplate("fungi", "Fungi Beast", 50, 65, 3),
    EnemyTemplate("knight", "Centurion", 60, 75, 1),
]

ELITE_POOL: List[EnemyTemplate] = [
    EnemyTemplate("gremlin_nob", "Gremlin Nob", 80, 100, 4, (CardDebuff.RUSH,)),
    EnemyTemplate("sentry", "Sentry", 70, 80, 2, (CardDebuff.BLIND,)),
    EnemyTemplate("lagavulin", "Lagavulin", 90, 110, 5, (CardDebuff.SILENCE,)),
]

BOSS_POOL: List[EnemyTemplate] = [
    EnemyTemplate("guardian", "The Guardian", 200, 200, 2, (CardDebuff.BLIND, CardDebuff.SILENCE)),
    EnemyTemplate("hexaghost", "Hexaghost", 180, 180, 3, (CardDebuff.RUSH, CardDebuff.BLIND)),
    EnemyTemplate("automaton", "Bronze Automaton", 240, 240, 4, (CardDebuff.SILENCE, CardDebuff.RUSH)),
]

POOLS: Dict[EnemyTier, List[EnemyTemplate]] = {
    EnemyTier.WEAK: WEAK_POOL,
    EnemyTier.STRONG: STRONG_POOL,
    EnemyTier.ELITE: ELITE_POOL,
    EnemyTier.BOSS: BOSS_POOL,
}

# Fixed opponent for the training fight
TRAINING_DUMMY = EnemyTemplate("dummy", "Training Dummy", 20, 20, 0)


def get_template(enemy_id: str) -> Optional[EnemyTemplate]:
    if enemy_id == TRAINING_DUMMY.id:
        return TRAINING_DUMMY
    for pool in POOLS.values():
        for template in pool:
            if template.id == enemy_id:
                return template
    return None


# =============================================================================
# Intent patterns
# =============================================================================


def cultist_intent(turn: int) -> EnemyIntent:
    """Incantation on turn 1, Dark Strike afterwards."""
    if turn == 1:
        return EnemyIntent(IntentType.BUFF, 3, RITUAL)
    return EnemyIntent(IntentType.ATTACK, 6)


def slime_intent(turn: int) -> EnemyIntent:
    move = turn % 3
    if move == 1:
        return EnemyIntent(IntentType.ATTACK, 8)
    if move == 2:
        return EnemyIntent(IntentType.DEBUFF, 3, "Poison")
    return EnemyIntent(IntentType.DEFEND, 8)


def guardian_intent(turn: int) -> EnemyIntent:
    move = turn % 3
    if move == 1:
        return EnemyIntent(IntentType.BUFF, 2, "Charge Up")
    if move == 2:
        return EnemyIntent(IntentType.ATTACK, 15, "Hyper Beam")
    return EnemyIntent(IntentType.DEFEND, 20, "Defensive Mode")


def default_intent(turn: int) -> EnemyIntent:
    return EnemyIntent(IntentType.ATTACK, 5)


INTENT_PATTERNS: Dict[str, Callable[[int], EnemyIntent]] = {
    "cultist": cultist_intent,
    "cultist_leader": cultist_intent,
    "slime": slime_intent,
    "guardian": guardian_intent,
}


def get_enemy_next_intent(enemy_id: str, turn: int) -> EnemyIntent:
    """Intent of ``enemy_id`` for 1-based ``turn``."""
    return INTENT_PATTERNS.get(enemy_id, default_intent)(turn)


def intent_cycle(enemy_id: str, turns: int) -> List[EnemyIntent]:
    """Intents for turns 1..turns (for display and testing)."""
    return [get_enemy_next_intent(enemy_id, t) for t in range(1, turns + 1)]
