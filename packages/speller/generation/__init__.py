"""
Generation module - maps, decks, enemies, rewards and shops.
"""

from .map import MapNode, NodeType, NodeStatus, generate_map, select_node, complete_node
from .deck import generate_session_deck, get_random_reward_options, build_tutorial_deck
from .dungeon import generate_enemy_for_floor, create_training_dummy, cognitive_balance_deck
from .rewards import GoldReward, compute_gold_reward, roll_relic_drop, boss_shard_reward
from .shop import ShopItem, ShopItemType, ShopState, generate_shop
