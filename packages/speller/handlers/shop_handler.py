"""
Shop Handler - purchases against a generated ShopState.

Usage with GameRunner:
    1. When entering the shop: ShopHandler.create_shop(run_state, vocab_list, rng)
    2. Buy: result = ShopHandler.buy(run_state, item_id)
    3. A bought removal leaves ``result.requires_card_selection`` set; the
       runner then asks which card to remove.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional

from ..content.vocabulary import Vocabulary
from ..generation.shop import ShopItemType, ShopState, generate_shop
from ..state.run import RunState


@dataclass
class ShopResult:
    """Result of a shop transaction."""
    success: bool
    item_id: str = ""
    item_name: str = ""
    gold_spent: int = 0
    message: str = ""
    requires_card_selection: bool = False

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "itemId": self.item_id,
            "itemName": self.item_name,
            "goldSpent": self.gold_spent,
            "message": self.message,
            "requiresCardSelection": self.requires_card_selection,
        }


class ShopHandler:
    """Handles all shop interactions."""

    @staticmethod
    def create_shop(
        run_state: RunState,
        vocab_list: List[Vocabulary],
        rng: Optional[random.Random] = None,
    ) -> ShopState:
        previous = run_state.shop_state
        shop = generate_shop(
            act=run_state.act,
            vocab_list=vocab_list,
            owned_relics=run_state.player.relics,
            discount=run_state.player.shop_discount,
            remove_cost=previous.remove_cost if previous else ShopState().remove_cost,
            rng=rng,
        )
        run_state.shop_state = shop
        return shop

    @staticmethod
    def buy(run_state: RunState, item_id: str) -> ShopResult:
        shop = run_state.shop_state
        if shop is None:
            return ShopResult(success=False, item_id=item_id, message="No shop open")

        item = shop.get_item(item_id)
        if item is None or item.is_sold:
            return ShopResult(success=False, item_id=item_id, message="Item not found or already sold")

        player = run_state.player
        if player.gold < item.price:
            return ShopResult(
                success=False,
                item_id=item.id,
                item_name=item.name,
                message="Not enough gold",
            )

        player.gold -= item.price
        item.is_sold = True

        result = ShopResult(
            success=True,
            item_id=item.id,
            item_name=item.name,
            gold_spent=item.price,
            message=f"Purchased {item.name} for {item.price} gold",
        )
        if item.type == ShopItemType.CARD:
            run_state.deck.append(item.data)
        elif item.type == ShopItemType.RELIC:
            player.add_relic(item.data.id)
        else:
            result.requires_card_selection = True
        return result

    @staticmethod
    def get_shop_summary(shop: ShopState) -> str:
        lines = ["=== SHOP ==="]
        for item in shop.items:
            status = "[SOLD]" if item.is_sold else f"{item.price}g"
            lines.append(f"  {item.id:<10} {item.type.value:<6} {item.name:<20} {status}")
        return "\n".join(lines)
