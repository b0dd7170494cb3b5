"""
Event definitions and choice resolution.

Events are "?" rooms on the map: a short scene with two or three choices.
``resolve_event_choice`` is stateless. It only reports what happens
(gold, damage, heal, card changes); ``handlers.event_handler`` applies the
outcome to the run.

ROLL choices are decided by a d20 rolled by the caller and passed in.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .cards import Card, CardType, create_card
from .vocabulary import Vocabulary


# ============================================================================
# TYPES
# ============================================================================

class ChoiceType(Enum):
    SAFE = "SAFE"
    RISKY = "RISKY"
    TRADE = "TRADE"
    ROLL = "ROLL"


class EventOutcome(Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class EventChoice:
    """A single choice inside an event."""
    id: str
    text: str
    type: ChoiceType
    description: str = ""
    requires_gold: int = 0
    roll_dc: int = 0

    def is_available(self, gold: int) -> bool:
        return gold >= self.requires_gold

    def to_dict(self) -> dict:
        data = {"id": self.id, "text": self.text, "type": self.type.value,
                "description": self.description}
        if self.requires_gold:
            data["requirement"] = f"{self.requires_gold} Gold"
        if self.roll_dc:
            data["rollDC"] = self.roll_dc
        return data


@dataclass(frozen=True)
class GameEvent:
    id: str
    title: str
    description: str
    choices: Sequence[EventChoice]

    def get_choice(self, choice_id: str) -> Optional[EventChoice]:
        for choice in self.choices:
            if choice.id == choice_id:
                return choice
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "choices": [c.to_dict() for c in self.choices],
        }


@dataclass
class EventResult:
    """What a choice does to the run. Zero fields mean no change."""
    message: str
    outcome: EventOutcome = EventOutcome.NEUTRAL
    gold_change: int = 0
    damage_taken: int = 0
    healed: int = 0
    cards_removed: int = 0
    cards_added: List[Card] = field(default_factory=list)
    duplicate_card: bool = False
    roll: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "outcome": self.outcome.value,
            "goldChange": self.gold_change,
            "damageTaken": self.damage_taken,
            "healed": self.healed,
            "cardsRemoved": self.cards_removed,
            "cardsAdded": [c.to_dict() for c in self.cards_added],
            "duplicateCard": self.duplicate_card,
            "roll": self.roll,
        }


# ============================================================================
# EVENT DEFINITIONS
# ============================================================================

_LEAVE = EventChoice("leave", "Leave", ChoiceType.SAFE)

EVENTS: List[GameEvent] = [
    GameEvent(
        id="fountain",
        title="The Mysterious Fountain",
        description=("You stumble upon a fountain of clear water in the middle of a dark "
                     "chamber. It shimmers with a faint blue light. The water looks "
                     "refreshing, but you notice coins glittering at the bottom."),
        choices=(
            EventChoice("drink", "Drink", ChoiceType.SAFE, "Heal 20 HP."),
            EventChoice("coin", "Toss a Coin", ChoiceType.TRADE,
                        "Lose 10 Gold. Remove a Card.", requires_gold=10),
            _LEAVE,
        ),
    ),
    GameEvent(
        id="dice_goblin",
        title="The Dice Goblin",
        description=("A small, manic goblin blocks your path. He holds a giant 20-sided "
                     "die. \"Roll for it!\" he screeches. \"High you win shiny! Low... "
                     "I take shiny!\""),
        choices=(
            EventChoice("roll", "Roll the Die", ChoiceType.ROLL,
                        "DC 10. Success: Gain 50 Gold. Fail: Lose 20 Gold.", roll_dc=10),
            EventChoice("attack", "Attack", ChoiceType.RISKY, "Lose 5 HP. Gain 20 Gold."),
            EventChoice("leave", "Ignore", ChoiceType.SAFE),
        ),
    ),
    GameEvent(
        id="cursed_book",
        title="The Cursed Tome",
        description=("An ancient book floats on a pedestal. It whispers to you in a "
                     "language you shouldn't know but somehow understand. It offers "
                     "power, but the pages are stained with blood."),
        choices=(
            EventChoice("read", "Read", ChoiceType.RISKY,
                        "Lose 10 HP. Obtain a random Utility card."),
            EventChoice("take", "Take the Book", ChoiceType.SAFE, "Gain 50 Gold."),
            _LEAVE,
        ),
    ),
    GameEvent(
        id="beggar",
        title="The Old Beggar",
        description=("A ragged figure sits in the shadows. \"Alms for the poor?\" he "
                     "rasps. \"Or perhaps you seek to lighten your burden?\""),
        choices=(
            EventChoice("give", "Give Gold", ChoiceType.TRADE,
                        "Lose 25 Gold. Heal 30 HP.", requires_gold=25),
            EventChoice("purge", "Purge", ChoiceType.SAFE, "Remove a card from your deck."),
            EventChoice("rob", "Rob", ChoiceType.RISKY, "Gain 20 Gold. Lose 5 HP."),
        ),
    ),
    GameEvent(
        id="mirror",
        title="The Mirror of Truth",
        description=("A pristine mirror stands before you. When you look into it, you "
                     "see not your reflection, but a stronger version of yourself... "
                     "or is it?"),
        choices=(
            EventChoice("duplicate", "Duplicate", ChoiceType.SAFE,
                        "Duplicate a random card in your deck."),
            EventChoice("smash", "Smash", ChoiceType.ROLL,
                        "Search for loot. DC 12 check.", roll_dc=12),
            _LEAVE,
        ),
    ),
]

EVENTS_BY_ID: Dict[str, GameEvent] = {e.id: e for e in EVENTS}


def get_event(event_id: str) -> Optional[GameEvent]:
    return EVENTS_BY_ID.get(event_id)


def pick_random_event(rng: Optional[random.Random] = None) -> GameEvent:
    rng = rng or random
    return rng.choice(EVENTS)


def roll_d20(rng: Optional[random.Random] = None) -> int:
    rng = rng or random
    return rng.randint(1, 20)


# ============================================================================
# RESOLUTION
# ============================================================================

def resolve_event_choice(
    event_id: str,
    choice_id: str,
    vocab_list: List[Vocabulary],
    roll: int = 0,
    rng: Optional[random.Random] = None,
) -> EventResult:
    """Outcome of picking ``choice_id`` in ``event_id``."""
    rng = rng or random
    event = get_event(event_id)
    choice = event.get_choice(choice_id) if event else None
    if event is None or choice is None:
        return EventResult("Error")

    if event_id == "dice_goblin":
        if choice_id == "roll":
            if roll >= choice.roll_dc:
                return EventResult(f"You rolled a {roll}! The goblin cheers and throws coins at you.",
                                   EventOutcome.SUCCESS, gold_change=50, roll=roll)
            return EventResult(f"You rolled a {roll}... The goblin cackles and swipes your purse!",
                               EventOutcome.FAILURE, gold_change=-20, roll=roll)
        if choice_id == "attack":
            return EventResult("You smack the goblin and take his lunch money, but he bites you.",
                               damage_taken=5, gold_change=20)

    elif event_id == "fountain":
        if choice_id == "drink":
            return EventResult("The water is cool and refreshing.", EventOutcome.SUCCESS, healed=20)
        if choice_id == "coin":
            return EventResult("You toss a coin. You feel lighter.", EventOutcome.SUCCESS,
                               gold_change=-10, cards_removed=1)

    elif event_id == "cursed_book":
        if choice_id == "read":
            if vocab_list:
                card = create_card(CardType.UTILITY, rng.choice(vocab_list))
                return EventResult("The words burn your eyes, but knowledge flows into you.",
                                   EventOutcome.SUCCESS, damage_taken=10, cards_added=[card])
            return EventResult("The pages are blank.", damage_taken=5)
        if choice_id == "take":
            return EventResult("You take the book to sell later.", EventOutcome.SUCCESS, gold_change=50)

    elif event_id == "beggar":
        if choice_id == "give":
            return EventResult("The beggar blesses you.", EventOutcome.SUCCESS, gold_change=-25, healed=30)
        if choice_id == "purge":
            return EventResult("The beggar teaches you to let go.", EventOutcome.SUCCESS, cards_removed=1)
        if choice_id == "rob":
            return EventResult("You steal his coins. You feel ashamed.", EventOutcome.FAILURE,
                               gold_change=20, damage_taken=5)

    elif event_id == "mirror":
        if choice_id == "duplicate":
            return EventResult("The reflection steps out and joins you.", EventOutcome.SUCCESS,
                               duplicate_card=True)
        if choice_id == "smash":
            if roll >= choice.roll_dc:
                return EventResult(f"Rolled {roll}! You find a hidden stash behind the glass.",
                                   EventOutcome.SUCCESS, gold_change=75, roll=roll)
            return EventResult(f"Rolled {roll}... You cut your hand on the shards.",
                               EventOutcome.FAILURE, damage_taken=10, roll=roll)

    return EventResult("You leave the area.")
