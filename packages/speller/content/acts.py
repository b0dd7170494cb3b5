"""
Act configuration.

Each act scales shop prices, enemy HP and enemy damage, and raises the
chance that strong monsters carry an extra affix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

MAX_ACT = 3


@dataclass(frozen=True)
class ActConfig:
    index: int
    name: str
    description: str
    price_multiplier: float
    enemy_hp_multiplier: float
    enemy_dmg_multiplier: float
    affix_chance_bonus: float

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "name": self.name,
            "description": self.description,
            "priceMultiplier": self.price_multiplier,
            "enemyHpMultiplier": self.enemy_hp_multiplier,
            "enemyDmgMultiplier": self.enemy_dmg_multiplier,
            "affixChanceBonus": self.affix_chance_bonus,
        }


ACTS: List[ActConfig] = [
    ActConfig(
        index=1,
        name="The Exiled Spire",
        description="The base of the tower, where the weak and forgotten dwell.",
        price_multiplier=1.0,
        enemy_hp_multiplier=1.0,
        enemy_dmg_multiplier=1.0,
        affix_chance_bonus=0.0,
    ),
    ActConfig(
        index=2,
        name="The City of Tears",
        description="A rain-swept metropolis within the Spire's mid-levels.",
        price_multiplier=1.2,
        enemy_hp_multiplier=1.4,
        enemy_dmg_multiplier=1.2,
        affix_chance_bonus=0.3,
    ),
    ActConfig(
        index=3,
        name="The Cosmic Summit",
        description="Reality bends near the top. The Source is close.",
        price_multiplier=1.5,
        enemy_hp_multiplier=1.8,
        enemy_dmg_multiplier=1.5,
        affix_chance_bonus=0.6,
    ),
]


def get_act_config(act: int) -> ActConfig:
    """Config for an act index; unknown indices fall back to act 1."""
    for config in ACTS:
        if config.index == act:
            return config
    return ACTS[0]
