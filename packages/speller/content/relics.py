"""
Relic definitions.

Relics are owned by id (a player never holds two copies). Effects trigger
at two points: combat start and combat victory.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class RelicRarity(Enum):
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    BOSS = "BOSS"
    SHOP = "SHOP"


class RelicTrigger(Enum):
    ON_COMBAT_START = "ON_COMBAT_START"
    ON_VICTORY = "ON_VICTORY"


@dataclass(frozen=True)
class Relic:
    id: str
    name: str
    description: str
    rarity: RelicRarity
    trigger: RelicTrigger
    value: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "rarity": self.rarity.value,
            "effectType": self.trigger.value,
            "value": self.value,
        }


BURNING_BLOOD = Relic(
    id="burning_blood",
    name="Burning Blood",
    description="Heal 6 HP at the end of combat.",
    rarity=RelicRarity.COMMON,
    trigger=RelicTrigger.ON_VICTORY,
    value=6,
)

VAJRA = Relic(
    id="vajra",
    name="Vajra",
    description="Start each combat with 1 Strength.",
    rarity=RelicRarity.COMMON,
    trigger=RelicTrigger.ON_COMBAT_START,
    value=1,
)

ANCHOR = Relic(
    id="anchor",
    name="Anchor",
    description="Start each combat with 10 Block.",
    rarity=RelicRarity.COMMON,
    trigger=RelicTrigger.ON_COMBAT_START,
    value=10,
)

BAG_OF_PREP = Relic(
    id="bag_of_prep",
    name="Bag of Prep",
    description="Draw 2 extra cards on turn 1.",
    rarity=RelicRarity.RARE,
    trigger=RelicTrigger.ON_COMBAT_START,
    value=2,
)

ALL_RELICS: List[Relic] = [BURNING_BLOOD, VAJRA, ANCHOR, BAG_OF_PREP]

RELICS_BY_ID: Dict[str, Relic] = {r.id: r for r in ALL_RELICS}


def get_relic(relic_id: str) -> Optional[Relic]:
    return RELICS_BY_ID.get(relic_id)


def unowned_relics(owned: List[str]) -> List[Relic]:
    """Catalog relics not in ``owned``, in catalog order."""
    return [r for r in ALL_RELICS if r.id not in owned]
