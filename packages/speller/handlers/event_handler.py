"""
Event Handler - applies event outcomes to the run.

``content.events.resolve_event_choice`` decides what a choice does; this
handler rolls the d20 for ROLL choices, checks gold requirements and
mutates the RunState:

- gold never drops below 0
- event damage never kills (HP floors at 1)
- heals are capped at max HP
- card removals take a random deck card
- the mirror's duplicate copies a random deck card under a new instance id
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from ..content.cards import Card
from ..content.events import (
    ChoiceType, EventResult, GameEvent, get_event, pick_random_event,
    resolve_event_choice, roll_d20,
)
from ..content.vocabulary import Vocabulary
from ..state.run import RunState

logger = logging.getLogger(__name__)


@dataclass
class EventApplication:
    """What actually changed after an event choice."""
    result: EventResult
    gold_delta: int = 0
    hp_delta: int = 0
    cards_removed: List[Card] = field(default_factory=list)
    cards_added: List[Card] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = self.result.to_dict()
        data.update({
            "goldDelta": self.gold_delta,
            "hpDelta": self.hp_delta,
            "removed": [c.word for c in self.cards_removed],
            "added": [c.word for c in self.cards_added],
        })
        return data


class EventHandler:
    """
    Event room flow.

    Usage:
        event = EventHandler.enter_event(run_state, rng)
        applied = EventHandler.choose(run_state, "drink", vocab_list, rng)
    """

    @staticmethod
    def enter_event(run_state: RunState, rng: Optional[random.Random] = None) -> GameEvent:
        event = pick_random_event(rng)
        run_state.active_event_id = event.id
        logger.debug("Entered event %s", event.id)
        return event

    @staticmethod
    def available_choices(run_state: RunState) -> List[str]:
        event = get_event(run_state.active_event_id) if run_state.active_event_id else None
        if event is None:
            return []
        return [c.id for c in event.choices if c.is_available(run_state.player.gold)]

    @staticmethod
    def choose(
        run_state: RunState,
        choice_id: str,
        vocab_list: List[Vocabulary],
        rng: Optional[random.Random] = None,
    ) -> Optional[EventApplication]:
        """Resolve and apply a choice. None if no event is active or the choice is locked."""
        rng = rng or random
        event = get_event(run_state.active_event_id) if run_state.active_event_id else None
        if event is None:
            return None
        choice = event.get_choice(choice_id)
        if choice is not None and not choice.is_available(run_state.player.gold):
            logger.debug("Choice %s requires %d gold", choice_id, choice.requires_gold)
            return None

        roll = roll_d20(rng) if choice is not None and choice.type == ChoiceType.ROLL else 0
        result = resolve_event_choice(event.id, choice_id, vocab_list, roll=roll, rng=rng)
        applied = EventHandler.apply_result(run_state, result, rng)
        run_state.active_event_id = None
        return applied

    @staticmethod
    def apply_result(
        run_state: RunState,
        result: EventResult,
        rng: Optional[random.Random] = None,
    ) -> EventApplication:
        rng = rng or random
        player = run_state.player
        applied = EventApplication(result=result)

        if result.gold_change:
            before = player.gold
            player.gold = max(0, player.gold + result.gold_change)
            applied.gold_delta = player.gold - before

        hp_before = player.hp
        if result.damage_taken:
            player.hp = max(1, player.hp - result.damage_taken)
        if result.healed:
            player.heal(result.healed)
        applied.hp_delta = player.hp - hp_before

        for _ in range(result.cards_removed):
            if not run_state.deck:
                break
            applied.cards_removed.append(run_state.deck.pop(rng.randrange(len(run_state.deck))))

        for card in result.cards_added:
            run_state.deck.append(card)
            applied.cards_added.append(card)

        if result.duplicate_card and run_state.deck:
            copy = rng.choice(run_state.deck).with_new_instance()
            run_state.deck.append(copy)
            applied.cards_added.append(copy)

        return applied
