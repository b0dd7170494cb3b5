"""
Sanctum upgrades - permanent unlocks bought with shards.

Unlocks live on the profile as a list of ids and shape the player of every
new run (see ``starting_player``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..state.combat import STARTING_MAX_ENERGY, STARTING_MAX_HP, EntityStatus, Player


@dataclass(frozen=True)
class SanctumUpgrade:
    id: str
    name: str
    description: str
    cost: int

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "desc": self.description, "cost": self.cost}


SANCTUM_UPGRADES: List[SanctumUpgrade] = [
    SanctumUpgrade("bonus_hp", "Vitality", "+15 Max HP", 100),
    SanctumUpgrade("bonus_gold", "Inheritance", "+100 Starting Gold", 100),
    SanctumUpgrade("bonus_energy", "Inner Fire", "+1 Max Energy", 300),
    SanctumUpgrade("bonus_str", "Warrior Training", "+1 Starting Strength", 200),
    SanctumUpgrade("bonus_revive", "Phoenix Feather", "Revive once with 50% HP", 500),
    SanctumUpgrade("shop_discount", "Merchant Guild", "20% Shop Discount", 150),
]

UPGRADES_BY_ID: Dict[str, SanctumUpgrade] = {u.id: u for u in SANCTUM_UPGRADES}

BONUS_HP = 15
BONUS_GOLD = 100
SHOP_DISCOUNT = 0.2


def get_upgrade(upgrade_id: str) -> Optional[SanctumUpgrade]:
    return UPGRADES_BY_ID.get(upgrade_id)


def starting_player(unlocks: Sequence[str] = ()) -> Player:
    """Fresh player for a new run with the profile's unlocks applied."""
    max_hp = STARTING_MAX_HP + (BONUS_HP if "bonus_hp" in unlocks else 0)
    max_energy = STARTING_MAX_ENERGY + (1 if "bonus_energy" in unlocks else 0)
    return Player(
        hp=max_hp,
        max_hp=max_hp,
        gold=BONUS_GOLD if "bonus_gold" in unlocks else 0,
        energy=max_energy,
        max_energy=max_energy,
        status=EntityStatus(strength=1 if "bonus_str" in unlocks else 0),
        revivals=1 if "bonus_revive" in unlocks else 0,
        shop_discount=SHOP_DISCOUNT if "shop_discount" in unlocks else 0.0,
    )
