"""
Combat state for Spire Speller.

Plain dataclasses for the player, the enemy and the card piles. Statuses
are non-negative ints that default to 0; "absent" and "zero" mean the same
thing. Everything here serializes with ``to_dict``/``from_dict`` using the
camelCase keys of the save format, and ``copy()`` gives an independent
snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Optional

from ..content.cards import Card, CardDebuff
from ..content.enemies import EnemyIntent, EnemyTier, EnemyType, UNKNOWN_INTENT
from ..content.vocabulary import Vocabulary


# =============================================================================
# Entities
# =============================================================================


@dataclass
class EntityStatus:
    strength: int = 0
    weak: int = 0
    vulnerable: int = 0
    poison: int = 0
    ritual: int = 0
    memory_shield: int = 0

    def copy(self) -> "EntityStatus":
        return EntityStatus(**{f.name: getattr(self, f.name) for f in fields(self)})

    def clear_debuffs(self) -> None:
        self.weak = 0
        self.vulnerable = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "strength": self.strength,
            "weak": self.weak,
            "vulnerable": self.vulnerable,
            "poison": self.poison,
            "ritual": self.ritual,
            "memoryShield": self.memory_shield,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "EntityStatus":
        data = data or {}
        return cls(
            strength=data.get("strength") or 0,
            weak=data.get("weak") or 0,
            vulnerable=data.get("vulnerable") or 0,
            poison=data.get("poison") or 0,
            ritual=data.get("ritual") or 0,
            memory_shield=data.get("memoryShield") or 0,
        )


STARTING_MAX_HP = 70
STARTING_MAX_ENERGY = 3


@dataclass
class Player:
    hp: int = STARTING_MAX_HP
    max_hp: int = STARTING_MAX_HP
    block: int = 0
    gold: int = 0
    energy: int = STARTING_MAX_ENERGY
    max_energy: int = STARTING_MAX_ENERGY
    next_turn_energy: int = 0
    status: EntityStatus = field(default_factory=EntityStatus)
    relics: List[str] = field(default_factory=list)
    revivals: int = 0
    combo: int = 0
    shop_discount: float = 0.0

    def has_relic(self, relic_id: str) -> bool:
        return relic_id in self.relics

    def add_relic(self, relic_id: str) -> bool:
        """Add a relic unless already owned."""
        if relic_id in self.relics:
            return False
        self.relics.append(relic_id)
        return True

    def heal(self, amount: int) -> int:
        """Heal up to max HP. Returns HP actually restored."""
        before = self.hp
        self.hp = min(self.max_hp, self.hp + max(0, amount))
        return self.hp - before

    def copy(self) -> "Player":
        return Player(
            hp=self.hp,
            max_hp=self.max_hp,
            block=self.block,
            gold=self.gold,
            energy=self.energy,
            max_energy=self.max_energy,
            next_turn_energy=self.next_turn_energy,
            status=self.status.copy(),
            relics=list(self.relics),
            revivals=self.revivals,
            combo=self.combo,
            shop_discount=self.shop_discount,
        )

    def to_dict(self) -> dict:
        return {
            "hp": self.hp,
            "maxHp": self.max_hp,
            "block": self.block,
            "gold": self.gold,
            "energy": self.energy,
            "maxEnergy": self.max_energy,
            "nextTurnEnergy": self.next_turn_energy,
            "status": self.status.to_dict(),
            "relics": list(self.relics),
            "revivals": self.revivals,
            "combo": self.combo,
            "shopDiscount": self.shop_discount,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        relics = [r["id"] if isinstance(r, dict) else r for r in data.get("relics", [])]
        return cls(
            hp=data["hp"],
            max_hp=data["maxHp"],
            block=data.get("block", 0),
            gold=data.get("gold", 0),
            energy=data.get("energy", STARTING_MAX_ENERGY),
            max_energy=data.get("maxEnergy", STARTING_MAX_ENERGY),
            next_turn_energy=data.get("nextTurnEnergy", 0),
            status=EntityStatus.from_dict(data.get("status")),
            relics=relics,
            revivals=data.get("revivals", 0),
            combo=data.get("combo", 0),
            shop_discount=data.get("shopDiscount", 0.0),
        )


@dataclass
class Enemy:
    id: str
    name: str
    hp: int
    max_hp: int
    block: int = 0
    status: EntityStatus = field(default_factory=EntityStatus)
    intent: EnemyIntent = UNKNOWN_INTENT
    type: EnemyType = EnemyType.NORMAL
    tier: EnemyTier = EnemyTier.WEAK
    innate_affixes: List[CardDebuff] = field(default_factory=list)

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    def copy(self) -> "Enemy":
        return Enemy(
            id=self.id,
            name=self.name,
            hp=self.hp,
            max_hp=self.max_hp,
            block=self.block,
            status=self.status.copy(),
            intent=self.intent,
            type=self.type,
            tier=self.tier,
            innate_affixes=list(self.innate_affixes),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "hp": self.hp,
            "maxHp": self.max_hp,
            "block": self.block,
            "status": self.status.to_dict(),
            "intent": self.intent.to_dict(),
            "type": self.type.value,
            "tier": self.tier.value,
            "innateAffixes": [a.value for a in self.innate_affixes],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Enemy":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            hp=data["hp"],
            max_hp=data["maxHp"],
            block=data.get("block", 0),
            status=EntityStatus.from_dict(data.get("status")),
            intent=EnemyIntent.from_dict(data.get("intent") or {}),
            type=EnemyType(data.get("type", EnemyType.NORMAL.value)),
            tier=EnemyTier(data.get("tier", EnemyTier.WEAK.value)),
            innate_affixes=[CardDebuff(a) for a in data.get("innateAffixes") or []],
        )


# =============================================================================
# Combat bookkeeping
# =============================================================================


@dataclass
class CombatStats:
    """Per-fight tallies used by the gold reward."""
    damage_taken: int = 0
    mistakes: int = 0
    hints: int = 0
    bounty_played: int = 0

    @property
    def is_perfect(self) -> bool:
        return self.damage_taken == 0 and self.mistakes == 0 and self.hints == 0

    def to_dict(self) -> dict:
        return {
            "damageTaken": self.damage_taken,
            "mistakes": self.mistakes,
            "hints": self.hints,
            "bountyPlayed": self.bounty_played,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "CombatStats":
        data = data or {}
        return cls(
            damage_taken=data.get("damageTaken", 0),
            mistakes=data.get("mistakes", 0),
            hints=data.get("hints", 0),
            bounty_played=data.get("bountyPlayed", 0),
        )


class PendingActionType(Enum):
    DISCARD = "DISCARD"


@dataclass
class PendingAction:
    """A hand-selection sub-mode (discard N cards) opened by a card effect."""
    type: PendingActionType
    count: int

    def to_dict(self) -> dict:
        return {"type": self.type.value, "count": self.count}


@dataclass
class CombatState:
    """Everything a fight needs: entities, piles and tallies."""
    player: Player
    enemy: Enemy
    hand: List[Card] = field(default_factory=list)
    draw_pile: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)
    exhaust_pile: List[Card] = field(default_factory=list)
    turn: int = 1
    stats: CombatStats = field(default_factory=CombatStats)
    pending_action: Optional[PendingAction] = None
    wrong_answers: List[Vocabulary] = field(default_factory=list)

    def all_cards(self) -> List[Card]:
        """Cards currently in hand, draw, discard and exhaust piles."""
        return self.hand + self.draw_pile + self.discard_pile + self.exhaust_pile

    def find_in_hand(self, instance_id: str) -> Optional[int]:
        for i, card in enumerate(self.hand):
            if card.instance_id == instance_id:
                return i
        return None

    def copy(self) -> "CombatState":
        return CombatState(
            player=self.player.copy(),
            enemy=self.enemy.copy(),
            hand=list(self.hand),
            draw_pile=list(self.draw_pile),
            discard_pile=list(self.discard_pile),
            exhaust_pile=list(self.exhaust_pile),
            turn=self.turn,
            stats=CombatStats(**self.stats.__dict__),
            pending_action=(
                PendingAction(self.pending_action.type, self.pending_action.count)
                if self.pending_action else None
            ),
            wrong_answers=list(self.wrong_answers),
        )
