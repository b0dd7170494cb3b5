"""
Run State - complete snapshot of a run in progress.

The RunState is the unit of persistence: everything needed to resume a run
(player, deck and piles, map position, current enemy, shop) in one object.
Serialization uses the camelCase save format:

    {player, deck, hand, drawPile, discardPile, currentEnemy, gameMap,
     mapSeed, currentMapNodeId, visitedNodeIds, phase, turnCount,
     battlesWon, act, vocabPackId, shopState, customVocabList, saveName,
     savedAt, activeEventId}

On load the map topology is regenerated from ``mapSeed`` and statuses are
rebuilt from the visit history, so a stored ``gameMap`` is only used for
records without a seed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..content.cards import Card
from ..content.vocabulary import Vocabulary
from ..generation.map import MapNode, NodeStatus, generate_map, rehydrate_map
from ..generation.shop import ShopState
from .combat import Enemy, Player


class GamePhase(Enum):
    """Top-level phase of a run."""
    MAP = "MAP"
    COMBAT = "COMBAT"
    LAST_STAND = "LAST_STAND"
    REWARD = "REWARD"
    SHOP = "SHOP"
    EVENT = "EVENT"
    REST = "CAMPFIRE"
    ACT_TRANSITION = "ACT_TRANSITION"
    GAME_OVER = "GAME_OVER"
    VICTORY = "VICTORY"


@dataclass
class RunState:
    """
    Complete state of a run.

    Piles hold the cards of an in-progress fight; outside combat they are
    empty and ``deck`` is the master list.
    """

    # ==================== IDENTITY ====================
    player: Player
    map_seed: int
    save_name: str = ""
    saved_at: int = 0

    # ==================== PROGRESS ====================
    act: int = 1
    phase: GamePhase = GamePhase.MAP
    turn_count: int = 1
    battles_won: int = 0
    is_player_turn: bool = True

    # ==================== CARDS ====================
    deck: List[Card] = field(default_factory=list)
    hand: List[Card] = field(default_factory=list)
    draw_pile: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)

    # ==================== MAP ====================
    game_map: List[MapNode] = field(default_factory=list)
    current_map_node_id: Optional[str] = None
    visited_node_ids: List[str] = field(default_factory=list)

    # ==================== ROOMS ====================
    current_enemy: Optional[Enemy] = None
    shop_state: Optional[ShopState] = None
    active_event_id: Optional[str] = None

    # ==================== VOCABULARY ====================
    vocab_pack_id: Optional[str] = None
    custom_vocab_list: Optional[List[Vocabulary]] = None

    # ----- MAP -----

    def available_node_ids(self) -> List[str]:
        return [n.id for n in self.game_map if n.status == NodeStatus.AVAILABLE]

    def visit(self, node_id: str) -> None:
        if node_id not in self.visited_node_ids:
            self.visited_node_ids.append(node_id)
        self.current_map_node_id = node_id

    # ----- DECK -----

    def find_card(self, instance_id: str) -> Optional[int]:
        for i, card in enumerate(self.deck):
            if card.instance_id == instance_id:
                return i
        return None

    def remove_card(self, instance_id: str) -> Optional[Card]:
        idx = self.find_card(instance_id)
        if idx is None:
            return None
        return self.deck.pop(idx)

    # ----- SERIALIZATION -----

    def to_dict(self) -> dict:
        return {
            "saveName": self.save_name,
            "savedAt": self.saved_at,
            "player": self.player.to_dict(),
            "deck": [c.to_dict() for c in self.deck],
            "hand": [c.to_dict() for c in self.hand],
            "drawPile": [c.to_dict() for c in self.draw_pile],
            "discardPile": [c.to_dict() for c in self.discard_pile],
            "currentEnemy": self.current_enemy.to_dict() if self.current_enemy else None,
            "gameMap": [n.to_dict() for n in self.game_map],
            "mapSeed": self.map_seed,
            "currentMapNodeId": self.current_map_node_id,
            "visitedNodeIds": list(self.visited_node_ids),
            "phase": self.phase.value,
            "turnCount": self.turn_count,
            "battlesWon": self.battles_won,
            "act": self.act,
            "isPlayerTurn": self.is_player_turn,
            "vocabPackId": self.vocab_pack_id,
            "customVocabList": (
                [v.to_dict() for v in self.custom_vocab_list]
                if self.custom_vocab_list is not None else None
            ),
            "activeEventId": self.active_event_id,
            "shopState": self.shop_state.to_dict() if self.shop_state else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RunState":
        map_seed = data.get("mapSeed")
        if map_seed is not None:
            topology = generate_map(map_seed)
        else:
            topology = [MapNode.from_dict(n) for n in data.get("gameMap") or []]
            map_seed = 0

        visited = list(data.get("visitedNodeIds") or [])
        current_node_id = data.get("currentMapNodeId")

        enemy_data = data.get("currentEnemy")
        shop_data = data.get("shopState")
        custom = data.get("customVocabList")

        return cls(
            player=Player.from_dict(data["player"]),
            map_seed=map_seed,
            save_name=data.get("saveName", ""),
            saved_at=data.get("savedAt", 0),
            act=data.get("act", 1),
            phase=GamePhase(data.get("phase", GamePhase.MAP.value)),
            turn_count=data.get("turnCount", 1),
            battles_won=data.get("battlesWon", 0),
            is_player_turn=data.get("isPlayerTurn", True),
            deck=[Card.from_dict(c) for c in data.get("deck", [])],
            hand=[Card.from_dict(c) for c in data.get("hand", [])],
            draw_pile=[Card.from_dict(c) for c in data.get("drawPile", [])],
            discard_pile=[Card.from_dict(c) for c in data.get("discardPile", [])],
            game_map=rehydrate_map(topology, visited, current_node_id),
            current_map_node_id=current_node_id,
            visited_node_ids=visited,
            current_enemy=Enemy.from_dict(enemy_data) if enemy_data else None,
            shop_state=ShopState.from_dict(shop_data) if shop_data else None,
            active_event_id=data.get("activeEventId"),
            vocab_pack_id=data.get("vocabPackId"),
            custom_vocab_list=[Vocabulary.from_dict(v) for v in custom] if custom is not None else None,
        )
