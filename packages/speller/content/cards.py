"""
Card definitions and word -> card stat derivation.

A card is a vocabulary word cast as one of the card types. Its stats are a
pure function of (type, word length, proficiency):

Tier by word length: >=12 letters tier 3, >=9 tier 2, >=5 tier 1, else 0.
Energy cost is the tier, minus 1 at proficiency 4+.

    ATTACK   Dagger / Sword / Hammer / Nuke               4 / 9 / 18 / 30 damage
    DEFENSE  Parry / Shield / Fortress / Invincible       3 / 8 / 16 / 20 block
    UTILITY  Cantrip (draw 1, discard 1) / Wisdom (draw 2) /
             Energize (+2 energy next turn) / Omniscience (draw 3)
    HEAL     Bandage (cleanse) / Nap (heal 3) /
             Vampiric Touch (deal 10, heal 10) / Rebirth (heal 50%, exhaust)

Proficiency 1+ multiplies value and heal by 1.3 (Rebirth excepted).
Keywords inside the word add flavour: fire/burn/hot/sun attacks get the FIRE
tag, ice/cold/snow/freeze defenses the ICE tag, fast/speed/quick draws one
more card, blood/life/heal attacks gain lifesteal.
Evolution perks: retain at proficiency 2, vulnerable-on-hit (attacks) and
+3 block (defenses) at 3, double cast at 5.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .vocabulary import Vocabulary


class CardType(Enum):
    ATTACK = "ATTACK"
    DEFENSE = "DEFENSE"
    UTILITY = "UTILITY"
    HEAL = "HEAL"
    CURSE = "CURSE"


class CardDebuff(Enum):
    """Temporary affixes an elite or boss can stamp on a card in hand."""
    BLIND = "BLIND"      # phonetic and meaning hidden
    RUSH = "RUSH"        # spelling is timed
    SILENCE = "SILENCE"  # cost 3+ cards cannot be cast


class VisualTag(Enum):
    DEFAULT = "DEFAULT"
    FIRE = "FIRE"
    ICE = "ICE"


PLAYABLE_TYPES = (CardType.ATTACK, CardType.DEFENSE, CardType.UTILITY, CardType.HEAL)

# Tier thresholds (word length)
TIER_3_LENGTH = 12
TIER_2_LENGTH = 9
TIER_1_LENGTH = 5

PROFICIENCY_VALUE_MULT = 1.3
SILENCE_MIN_COST = 3

ATTACK_DAMAGE = [4, 9, 18, 30]
ATTACK_NAMES = ["Dagger", "Sword", "Hammer", "Nuke"]
DEFENSE_BLOCK = [3, 8, 16, 20]
DEFENSE_NAMES = ["Parry", "Shield", "Fortress", "Invincible"]

FIRE_KEYWORDS = ("fire", "burn", "hot", "sun")
ICE_KEYWORDS = ("ice", "cold", "snow", "freeze")
SPEED_KEYWORDS = ("fast", "speed", "quick")
LIFE_KEYWORDS = ("blood", "life", "heal")

REBIRTH_HEAL_PERCENT = 50


def word_tier(word: str) -> int:
    length = len(word)
    if length >= TIER_3_LENGTH:
        return 3
    if length >= TIER_2_LENGTH:
        return 2
    if length >= TIER_1_LENGTH:
        return 1
    return 0


@dataclass(frozen=True)
class CardStats:
    """
    Derived numbers for a (type, word) pair.

    Every optional effect defaults to "absent": 0 for counts, False for
    flags, DEFAULT for the visual tag.
    """
    name: str
    energy: int
    value: int = 0
    desc_suffix: str = ""
    retain: bool = False
    apply_debuff: bool = False
    double_cast: bool = False
    draw_effect: int = 0
    discard_effect: int = 0
    energy_next_turn: int = 0
    heal_value: int = 0
    lifesteal: bool = False
    cleanse_debuff: bool = False
    is_exhaust: bool = False
    is_unplayable: bool = False
    visual_tag: VisualTag = VisualTag.DEFAULT


def derive_stats(card_type: CardType, vocab: Vocabulary) -> CardStats:
    """Pure stat derivation for a word cast as ``card_type``."""
    tier = word_tier(vocab.word)
    p = vocab.proficiency

    energy = tier
    if p >= 4:
        energy = max(0, energy - 1)

    value = 0
    name = "Spell"
    suffix = ""
    draw = 0
    discard = 0
    energy_next = 0
    heal = 0
    lifesteal = False
    cleanse = False
    exhaust = False

    if card_type == CardType.ATTACK:
        value = ATTACK_DAMAGE[tier]
        name = ATTACK_NAMES[tier]
    elif card_type == CardType.DEFENSE:
        value = DEFENSE_BLOCK[tier]
        name = DEFENSE_NAMES[tier]
        if tier == 3:
            suffix += " +1 Turn Invuln (Simulated by massive block)"
    elif card_type == CardType.UTILITY:
        if tier == 0:
            name = "Cantrip"
            draw, discard = 1, 1
            suffix += " Draw 1, Discard 1."
        elif tier == 1:
            name = "Wisdom"
            draw = 2
            suffix += " Draw 2."
        elif tier == 2:
            name = "Energize"
            energy_next = 2
            suffix += " Next Turn Energy +2."
        else:
            name = "Omniscience"
            draw = 3
            suffix += " Draw 3."
    elif card_type == CardType.HEAL:
        if tier == 0:
            name = "Bandage"
            cleanse = True
        elif tier == 1:
            name = "Nap"
            heal = 3
        elif tier == 2:
            name = "Vampiric Touch"
            value = 10
            heal = 10
        else:
            name = "Rebirth"
            heal = REBIRTH_HEAL_PERCENT
            exhaust = True
    elif card_type == CardType.CURSE:
        return CardStats(name="Curse", energy=0, desc_suffix="Unplayable.", is_unplayable=True)

    if p >= 1:
        value = int(value * PROFICIENCY_VALUE_MULT)
        if heal > 0 and tier != 3:
            heal = int(heal * PROFICIENCY_VALUE_MULT)

    # Heal text is written after scaling so it shows what the card does
    if card_type == CardType.HEAL:
        if tier == 0:
            suffix += " Remove 1 Debuff."
        elif tier == 1:
            suffix += f" Heal {heal} HP."
        elif tier == 2:
            suffix += f" Deal {value}, Heal {heal}."
        else:
            suffix += " Heal 50% HP. Exhaust."

    word = vocab.word.lower()
    visual_tag = VisualTag.DEFAULT

    if card_type == CardType.ATTACK and any(k in word for k in FIRE_KEYWORDS):
        visual_tag = VisualTag.FIRE
        suffix += " (Fire FX)"
    if card_type == CardType.DEFENSE and any(k in word for k in ICE_KEYWORDS):
        visual_tag = VisualTag.ICE
        suffix += " (Ice FX)"
    if any(k in word for k in SPEED_KEYWORDS):
        draw += 1
        suffix += " Draw +1."
    if card_type == CardType.ATTACK and any(k in word for k in LIFE_KEYWORDS):
        lifesteal = True
        suffix += " Lifesteal."

    # Evolution perks
    retain = p >= 2
    apply_debuff = p >= 3 and card_type == CardType.ATTACK
    if p >= 3 and card_type == CardType.DEFENSE:
        value += 3
    double_cast = p >= 5

    return CardStats(
        name=name,
        energy=energy,
        value=value,
        desc_suffix=suffix,
        retain=retain,
        apply_debuff=apply_debuff,
        double_cast=double_cast,
        draw_effect=draw,
        discard_effect=discard,
        energy_next_turn=energy_next,
        heal_value=heal,
        lifesteal=lifesteal,
        cleanse_debuff=cleanse,
        is_exhaust=exhaust,
        visual_tag=visual_tag,
    )


@dataclass(frozen=True)
class Card:
    """
    A card instance.

    ``id`` names the word (``card_<word id>``); ``instance_id`` identifies
    this particular copy. Cards never change after creation except for the
    transient ``debuff``, swapped via ``with_debuff``.
    """
    id: str
    instance_id: str
    type: CardType
    vocab: Vocabulary
    name: str
    description: str
    energy_cost: int
    value: int = 0
    retain: bool = False
    apply_debuff: bool = False
    double_cast: bool = False
    draw_effect: int = 0
    discard_effect: int = 0
    energy_next_turn: int = 0
    heal_value: int = 0
    lifesteal: bool = False
    cleanse_debuff: bool = False
    is_exhaust: bool = False
    is_unplayable: bool = False
    proc_chance: float = 0.0
    visual_tag: VisualTag = VisualTag.DEFAULT
    is_review: bool = False
    debuff: Optional[CardDebuff] = None

    @property
    def word(self) -> str:
        return self.vocab.word

    @property
    def is_rebirth(self) -> bool:
        return self.type == CardType.HEAL and self.is_exhaust

    @property
    def is_silenced(self) -> bool:
        return self.debuff == CardDebuff.SILENCE and self.energy_cost >= SILENCE_MIN_COST

    @property
    def can_cast(self) -> bool:
        """False for curses and silenced high-cost cards."""
        return not self.is_unplayable and not self.is_silenced

    def with_debuff(self, debuff: Optional[CardDebuff]) -> "Card":
        return replace(self, debuff=debuff)

    def with_new_instance(self) -> "Card":
        return replace(self, instance_id=new_instance_id(), debuff=None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "uniqueId": self.instance_id,
            "type": self.type.value,
            "vocab": self.vocab.to_dict(),
            "name": self.name,
            "description": self.description,
            "energyCost": self.energy_cost,
            "value": self.value,
            "retain": self.retain,
            "applyDebuff": self.apply_debuff,
            "doubleCast": self.double_cast,
            "drawEffect": self.draw_effect,
            "discardEffect": self.discard_effect,
            "energyNextTurn": self.energy_next_turn,
            "healValue": self.heal_value,
            "lifesteal": self.lifesteal,
            "cleanseDebuff": self.cleanse_debuff,
            "isExhaust": self.is_exhaust,
            "isUnplayable": self.is_unplayable,
            "procChance": self.proc_chance,
            "visualTag": self.visual_tag.value,
            "isReview": self.is_review,
            "debuff": self.debuff.value if self.debuff else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        debuff = data.get("debuff")
        return cls(
            id=data["id"],
            instance_id=data.get("uniqueId") or new_instance_id(),
            type=CardType(data["type"]),
            vocab=Vocabulary.from_dict(data["vocab"]),
            name=data.get("name", "Spell"),
            description=data.get("description", ""),
            energy_cost=data.get("energyCost", 0),
            value=data.get("value", 0),
            retain=data.get("retain", False),
            apply_debuff=data.get("applyDebuff", False),
            double_cast=data.get("doubleCast", False),
            draw_effect=data.get("drawEffect", 0),
            discard_effect=data.get("discardEffect", 0),
            energy_next_turn=data.get("energyNextTurn", 0),
            heal_value=data.get("healValue", 0),
            lifesteal=data.get("lifesteal", False),
            cleanse_debuff=data.get("cleanseDebuff", False),
            is_exhaust=data.get("isExhaust", False),
            is_unplayable=data.get("isUnplayable", False),
            proc_chance=data.get("procChance", 0.0),
            visual_tag=VisualTag(data.get("visualTag", VisualTag.DEFAULT.value)),
            is_review=data.get("isReview", False),
            debuff=CardDebuff(debuff) if debuff else None,
        )


def new_instance_id() -> str:
    return uuid.uuid4().hex[:12]


def create_card(card_type: CardType, vocab: Vocabulary, is_review: bool = False,
                instance_id: Optional[str] = None) -> Card:
    """Build a card for a word with freshly derived stats."""
    stats = derive_stats(card_type, vocab)

    description = stats.desc_suffix
    if card_type == CardType.ATTACK:
        description = f"Deal {stats.value} Damage. {description}"
    elif card_type == CardType.DEFENSE:
        description = f"Gain {stats.value} Block. {description}"
    description = description.strip()

    if stats.retain:
        description = "Retain. " + description
    if stats.double_cast:
        description += " Double Cast."

    return Card(
        id=f"card_{vocab.id}",
        instance_id=instance_id or new_instance_id(),
        type=card_type,
        vocab=vocab,
        name=stats.name,
        description=description,
        energy_cost=stats.energy,
        value=stats.value,
        retain=stats.retain,
        apply_debuff=stats.apply_debuff,
        double_cast=stats.double_cast,
        draw_effect=stats.draw_effect,
        discard_effect=stats.discard_effect,
        energy_next_turn=stats.energy_next_turn,
        heal_value=stats.heal_value,
        lifesteal=stats.lifesteal,
        cleanse_debuff=stats.cleanse_debuff,
        is_exhaust=stats.is_exhaust,
        is_unplayable=stats.is_unplayable,
        visual_tag=stats.visual_tag,
        is_review=is_review,
    )
