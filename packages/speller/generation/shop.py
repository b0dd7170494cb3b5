"""
Shop inventory generation.

A shop offers:
- 3 cards from ``get_random_reward_options``, each priced
  ``floor(randint(50, 99) * price_multiplier)``
- the first 2 catalog relics the player does not own, ``floor(150 * pm)``
- a card removal service, ``floor(remove_cost * pm)``

The player's shop discount then takes ``floor(price * (1 - discount))``.
"""

from __future__ import annotations

import math
import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from ..content.acts import get_act_config
from ..content.cards import Card
from ..content.relics import Relic, get_relic, unowned_relics
from ..content.vocabulary import Vocabulary
from .deck import get_random_reward_options

CARD_PRICE_MIN = 50
CARD_PRICE_SPREAD = 50
RELIC_PRICE = 150
RELIC_SLOTS = 2
DEFAULT_REMOVE_COST = 50
REMOVE_ITEM_ID = "remove"


class ShopItemType(Enum):
    CARD = "CARD"
    RELIC = "RELIC"
    REMOVE = "REMOVE"


@dataclass
class ShopItem:
    id: str
    type: ShopItemType
    price: int
    data: Union[Card, Relic, None] = None
    is_sold: bool = False

    @property
    def name(self) -> str:
        if self.type == ShopItemType.REMOVE:
            return "Purge Card"
        return self.data.name

    def to_dict(self) -> dict:
        data = self.data.to_dict() if self.data is not None else None
        return {
            "id": self.id,
            "type": self.type.value,
            "data": data,
            "price": self.price,
            "isSold": self.is_sold,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShopItem":
        item_type = ShopItemType(data["type"])
        payload = data.get("data")
        item_data: Union[Card, Relic, None] = None
        if item_type == ShopItemType.CARD and payload:
            item_data = Card.from_dict(payload)
        elif item_type == ShopItemType.RELIC and payload:
            item_data = get_relic(payload["id"])
        return cls(
            id=data["id"],
            type=item_type,
            price=data["price"],
            data=item_data,
            is_sold=data.get("isSold", False),
        )


@dataclass
class ShopState:
    items: List[ShopItem] = field(default_factory=list)
    remove_cost: int = DEFAULT_REMOVE_COST

    def get_item(self, item_id: str) -> Optional[ShopItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def available_items(self) -> List[ShopItem]:
        return [i for i in self.items if not i.is_sold]

    def to_dict(self) -> dict:
        return {
            "items": [i.to_dict() for i in self.items],
            "removeCost": self.remove_cost,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShopState":
        return cls(
            items=[ShopItem.from_dict(i) for i in data.get("items", [])],
            remove_cost=data.get("removeCost", DEFAULT_REMOVE_COST),
        )


def apply_discount(price: int, discount: float) -> int:
    if discount <= 0:
        return price
    return math.floor(price * (1 - discount))


def _item_id() -> str:
    return uuid.uuid4().hex[:8]


def generate_shop(
    act: int,
    vocab_list: List[Vocabulary],
    owned_relics: List[str],
    discount: float = 0.0,
    remove_cost: int = DEFAULT_REMOVE_COST,
    rng: Optional[random.Random] = None,
) -> ShopState:
    """Stock a shop for the current act."""
    rng = rng or random
    price_mult = get_act_config(act).price_multiplier
    items: List[ShopItem] = []

    for card in get_random_reward_options(vocab_list, rng=rng):
        base = rng.randrange(CARD_PRICE_SPREAD) + CARD_PRICE_MIN
        price = math.floor(base * price_mult)
        items.append(ShopItem(_item_id(), ShopItemType.CARD, apply_discount(price, discount), card))

    for relic in unowned_relics(owned_relics)[:RELIC_SLOTS]:
        price = math.floor(RELIC_PRICE * price_mult)
        items.append(ShopItem(_item_id(), ShopItemType.RELIC, apply_discount(price, discount), relic))

    price = math.floor(remove_cost * price_mult)
    items.append(ShopItem(REMOVE_ITEM_ID, ShopItemType.REMOVE, apply_discount(price, discount)))

    return ShopState(items=items, remove_cost=remove_cost)
