"""
Room handlers for non-combat map nodes.

- RestHandler: campfire sleep (heal 30% max HP) or smith (remove a card)
- TreasureHandler: a flat 50 gold chest

Each handler modifies the RunState in place and returns a result record.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from ..generation.rewards import TREASURE_GOLD
from ..state.run import RunState

REST_HEAL_PERCENT = 0.30


@dataclass
class RestResult:
    """Result of a rest site action."""
    action: str  # "sleep" or "smith"
    hp_healed: int = 0
    requires_card_selection: bool = False

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "hpHealed": self.hp_healed,
            "requiresCardSelection": self.requires_card_selection,
        }


@dataclass
class TreasureResult:
    gold: int

    def to_dict(self) -> dict:
        return {"gold": self.gold}


class RestHandler:
    """
    Campfire options.

    Sleep is blocked by any relic whose id contains "coffee".
    """

    @staticmethod
    def can_sleep(run_state: RunState) -> bool:
        return not any("coffee" in relic_id for relic_id in run_state.player.relics)

    @staticmethod
    def get_options(run_state: RunState) -> List[str]:
        options = []
        if RestHandler.can_sleep(run_state):
            options.append("sleep")
        if run_state.deck:
            options.append("smith")
        return options

    @staticmethod
    def sleep(run_state: RunState) -> Optional[RestResult]:
        if not RestHandler.can_sleep(run_state):
            return None
        player = run_state.player
        healed = player.heal(math.floor(player.max_hp * REST_HEAL_PERCENT))
        return RestResult(action="sleep", hp_healed=healed)

    @staticmethod
    def smith(run_state: RunState) -> Optional[RestResult]:
        if not run_state.deck:
            return None
        return RestResult(action="smith", requires_card_selection=True)


class TreasureHandler:

    @staticmethod
    def open_chest(run_state: RunState) -> TreasureResult:
        run_state.player.gold += TREASURE_GOLD
        return TreasureResult(gold=TREASURE_GOLD)
