"""
Combat reward computation.

Gold after a won fight:
    base    = randint(0, 5) + 15 + act
    bounty  = 15 per review card played
    perfect = 30 when no damage was taken, no word missed and no hint used
    total   = (base + bounty + perfect), doubled for the first three wins of act 1

Elites and bosses drop one relic the player does not own, preferring RARE.
Bosses also grant shards (profile currency): 30, plus 200 on the first clear
of that act.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..content.relics import Relic, RelicRarity, unowned_relics
from ..state.combat import CombatStats

BASE_GOLD = 15
BASE_GOLD_SPREAD = 6
BOUNTY_GOLD = 15
PERFECT_GOLD = 30
EARLY_BIRD_MULTIPLIER = 2
EARLY_BIRD_BATTLES = 3

BOSS_SHARDS = 30
FIRST_CLEAR_SHARDS = 200

TREASURE_GOLD = 50


@dataclass(frozen=True)
class GoldReward:
    """Breakdown of the gold awarded for one fight."""
    base: int
    bounty: int
    bounty_count: int
    perfect: int
    is_perfect: bool
    multiplier: int
    total: int

    def to_dict(self) -> dict:
        return {
            "base": self.base,
            "bounty": self.bounty,
            "bountyCount": self.bounty_count,
            "perfect": self.perfect,
            "isPerfect": self.is_perfect,
            "multiplier": self.multiplier,
            "total": self.total,
        }


def compute_gold_reward(
    act: int,
    battles_won: int,
    stats: CombatStats,
    rng: Optional[random.Random] = None,
) -> GoldReward:
    rng = rng or random
    base = rng.randrange(BASE_GOLD_SPREAD) + BASE_GOLD + act
    bounty = stats.bounty_played * BOUNTY_GOLD
    perfect = PERFECT_GOLD if stats.is_perfect else 0

    total = base + bounty + perfect
    multiplier = 1
    if act == 1 and battles_won < EARLY_BIRD_BATTLES:
        multiplier = EARLY_BIRD_MULTIPLIER
        total *= multiplier

    return GoldReward(
        base=base,
        bounty=bounty,
        bounty_count=stats.bounty_played,
        perfect=perfect,
        is_perfect=stats.is_perfect,
        multiplier=multiplier,
        total=total,
    )


def roll_relic_drop(owned: List[str], rng: Optional[random.Random] = None) -> Optional[Relic]:
    """Relic dropped by an elite or boss, or None once the catalog is exhausted."""
    rng = rng or random
    candidates = unowned_relics(owned)
    if not candidates:
        return None
    rares = [r for r in candidates if r.rarity == RelicRarity.RARE]
    return rng.choice(rares or candidates)


def boss_shard_reward(act: int, acts_cleared: Sequence[int]) -> int:
    """Shards for a boss kill; the first clear of an act adds a bonus."""
    shards = BOSS_SHARDS
    if act not in acts_cleared:
        shards += FIRST_CLEAR_SHARDS
    return shards
