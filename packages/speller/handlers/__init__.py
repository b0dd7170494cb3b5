"""
Handlers for non-combat rooms.

- EventHandler: event choices and their effects on the run
- ShopHandler: shop creation and purchases
- RestHandler: campfire sleep or smith
- TreasureHandler: chest gold
"""

from .event_handler import EventHandler, EventApplication
from .shop_handler import ShopHandler, ShopResult
from .rooms import RestHandler, RestResult, TreasureHandler, TreasureResult
