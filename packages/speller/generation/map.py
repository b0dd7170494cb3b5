"""
Map Generation - seeded floor graph for one act.

Builds a directed acyclic graph of 15 rows (0-14) plus a single boss node on
row 15. Every random decision is drawn from a SeededRandom, in a fixed
order, so the same seed always produces the same graph:

1. 3 or 4 distinct starting lanes on row 0 (grid width 7)
2. Each node on rows 0-13 branches to 1-3 lanes among x-1, x, x+1
   (branch roll: >0.7 two branches, >0.95 three), children created lazily
3. Cleanup pass guaranteeing every node has an outgoing edge
4. Boss node at row 15, parent of nothing, child of every row-14 node
5. Room types: row 0 MONSTER, row 8 TREASURE, row 14 CAMPFIRE, others
   rolled once with first-match priority ELITE > SHOP > CAMPFIRE > EVENT

Node creation also consumes one value for the horizontal jitter of the node,
so the order in which nodes are materialized is part of the format.

Statuses are not part of the topology. After a load the graph is rebuilt from
the seed and ``rehydrate_map`` recomputes statuses from the visit history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from ..state.rng import SeededRandom


class NodeType(Enum):
    """Room types on the map."""
    START = "START"
    MONSTER = "MONSTER"
    ELITE = "ELITE"
    BOSS = "BOSS"
    TREASURE = "TREASURE"
    SHOP = "SHOP"
    CAMPFIRE = "CAMPFIRE"
    EVENT = "EVENT"


class NodeStatus(Enum):
    LOCKED = "LOCKED"
    AVAILABLE = "AVAILABLE"
    COMPLETED = "COMPLETED"
    UNREACHABLE = "UNREACHABLE"


NODE_SYMBOLS = {
    NodeType.START: "S",
    NodeType.MONSTER: "M",
    NodeType.ELITE: "E",
    NodeType.BOSS: "B",
    NodeType.TREASURE: "T",
    NodeType.SHOP: "$",
    NodeType.CAMPFIRE: "R",
    NodeType.EVENT: "?",
}

COMBAT_NODE_TYPES = (NodeType.START, NodeType.MONSTER, NodeType.ELITE, NodeType.BOSS)


# Grid dimensions
MAP_HEIGHT = 15
MAP_WIDTH = 7

BOSS_ROW = MAP_HEIGHT
BOSS_NODE_ID = "BOSS_NODE"

# Fixed rows
TREASURE_ROW = 8
CAMPFIRE_ROW = MAP_HEIGHT - 1

# Branching
TWO_BRANCH_THRESHOLD = 0.7
THREE_BRANCH_THRESHOLD = 0.95

# Room type bands (cumulative, evaluated in order)
ELITE_CHANCE = 0.15
SHOP_CHANCE = 0.20
CAMPFIRE_CHANCE = 0.28
EVENT_CHANCE = 0.50
ELITE_MIN_ROW = 6
SHOP_MIN_ROW = 2
CAMPFIRE_MIN_ROW = 6
CAMPFIRE_EXCLUDED_ROWS = (TREASURE_ROW, CAMPFIRE_ROW - 1)


@dataclass
class MapNode:
    """A node on the act map. ``x`` is a horizontal percentage, ``y`` the row."""
    id: str
    x: float
    y: int
    lane: int = -1
    type: NodeType = NodeType.MONSTER
    status: NodeStatus = NodeStatus.LOCKED
    next: List[str] = field(default_factory=list)
    parents: List[str] = field(default_factory=list)

    @property
    def is_boss(self) -> bool:
        return self.id == BOSS_NODE_ID

    @property
    def symbol(self) -> str:
        return NODE_SYMBOLS[self.type]

    def link_to(self, child: "MapNode") -> None:
        """Link self -> child in both directions, ignoring duplicates."""
        if child.id not in self.next:
            self.next.append(child.id)
            child.parents.append(self.id)

    def copy(self) -> "MapNode":
        return MapNode(
            id=self.id,
            x=self.x,
            y=self.y,
            lane=self.lane,
            type=self.type,
            status=self.status,
            next=list(self.next),
            parents=list(self.parents),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "lane": self.lane,
            "type": self.type.value,
            "status": self.status.value,
            "next": list(self.next),
            "parents": list(self.parents),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MapNode":
        return cls(
            id=data["id"],
            x=data["x"],
            y=data["y"],
            lane=data.get("lane", -1),
            type=NodeType(data.get("type", NodeType.MONSTER.value)),
            status=NodeStatus(data.get("status", NodeStatus.LOCKED.value)),
            next=list(data.get("next", [])),
            parents=list(data.get("parents", [])),
        )


def lane_position(lane: int) -> float:
    """Horizontal percentage of a lane centre, before jitter."""
    step = 80 / (MAP_WIDTH - 1)
    return 10 + lane * step


class MapGenerator:
    """
    Generates the node graph for one act.

    Usage:
        nodes = MapGenerator(seed).generate()
    """

    def __init__(self, seed: int):
        self.seed = seed
        self.rng = SeededRandom(seed)
        self.nodes: List[MapNode] = []
        self.grid: Dict[Tuple[int, int], MapNode] = {}

    def generate(self) -> List[MapNode]:
        """Build the graph. Returns nodes in creation order, boss last."""
        self.rng = SeededRandom(self.seed)
        self.nodes = []
        self.grid = {}

        self._create_start_nodes()
        for y in range(MAP_HEIGHT - 1):
            row = self._row(y)
            for parent in row:
                self._branch(parent)
            self._connect_dead_ends(row)

        boss = MapNode(id=BOSS_NODE_ID, x=50, y=BOSS_ROW, type=NodeType.BOSS)
        self.nodes.append(boss)
        for node in self._row(MAP_HEIGHT - 1):
            node.link_to(boss)

        self._assign_node_types()
        return self.nodes

    # -------------------------------------------------------------------------
    # Skeleton
    # -------------------------------------------------------------------------

    def _create_node(self, y: int, lane: int) -> MapNode:
        jitter = self.rng.next() * 4 - 2
        node = MapNode(id=f"node_{y}_{lane}", x=lane_position(lane) + jitter, y=y, lane=lane)
        self.grid[(y, lane)] = node
        self.nodes.append(node)
        return node

    def _row(self, y: int) -> List[MapNode]:
        """Existing nodes of a row, by ascending lane."""
        return [self.grid[(y, lane)] for lane in range(MAP_WIDTH) if (y, lane) in self.grid]

    def _create_start_nodes(self) -> None:
        start_count = 3 if self.rng.next() > 0.5 else 4
        lanes: List[int] = []
        while len(lanes) < start_count:
            lane = self.rng.randint_below(MAP_WIDTH)
            if lane not in lanes:
                lanes.append(lane)
        for lane in lanes:
            self._create_node(0, lane)

    def _branch(self, parent: MapNode) -> None:
        px = parent.lane
        moves = [px]
        if px > 0:
            moves.append(px - 1)
        if px < MAP_WIDTH - 1:
            moves.append(px + 1)

        roll = self.rng.next()
        branch_count = 1
        if roll > TWO_BRANCH_THRESHOLD:
            branch_count = 2
        if roll > THREE_BRANCH_THRESHOLD:
            branch_count = 3

        # Fisher-Yates on the seeded stream
        for i in range(len(moves) - 1, 0, -1):
            j = self.rng.randint_below(i + 1)
            moves[i], moves[j] = moves[j], moves[i]

        child_y = parent.y + 1
        for lane in moves[:branch_count]:
            child = self.grid.get((child_y, lane))
            if child is None:
                child = self._create_node(child_y, lane)
            parent.link_to(child)

    def _connect_dead_ends(self, row: Iterable[MapNode]) -> None:
        for node in row:
            if node.next:
                continue
            child_y = node.y + 1
            lane = node.lane
            child = self.grid.get((child_y, lane))
            if child is None and lane > 0:
                child = self.grid.get((child_y, lane - 1))
            if child is None and lane < MAP_WIDTH - 1:
                child = self.grid.get((child_y, lane + 1))
            if child is None:
                child = self._create_node(child_y, lane)
            node.link_to(child)

    # -------------------------------------------------------------------------
    # Room types
    # -------------------------------------------------------------------------

    def _assign_node_types(self) -> None:
        for node in self.nodes:
            if node.type == NodeType.BOSS:
                continue
            y = node.y

            if y == 0:
                node.type = NodeType.MONSTER
                node.status = NodeStatus.AVAILABLE
                continue
            if y == TREASURE_ROW:
                node.type = NodeType.TREASURE
                continue
            if y == CAMPFIRE_ROW:
                node.type = NodeType.CAMPFIRE
                continue

            node.type = self._roll_node_type(y, self.rng.next())

    @staticmethod
    def _roll_node_type(y: int, roll: float) -> NodeType:
        can_elite = y >= ELITE_MIN_ROW
        can_shop = y >= SHOP_MIN_ROW
        can_rest = y >= CAMPFIRE_MIN_ROW and y not in CAMPFIRE_EXCLUDED_ROWS

        if can_elite and roll < ELITE_CHANCE:
            return NodeType.ELITE
        elif can_shop and roll < SHOP_CHANCE:
            return NodeType.SHOP
        elif can_rest and roll < CAMPFIRE_CHANCE:
            return NodeType.CAMPFIRE
        elif roll < EVENT_CHANCE:
            return NodeType.EVENT
        return NodeType.MONSTER


def generate_map(seed: int) -> List[MapNode]:
    """Generate an act map for a seed."""
    return MapGenerator(seed).generate()


# =============================================================================
# Navigation
# =============================================================================


def get_node(nodes: List[MapNode], node_id: Optional[str]) -> Optional[MapNode]:
    if node_id is None:
        return None
    for node in nodes:
        if node.id == node_id:
            return node
    return None


def rehydrate_map(
    nodes: List[MapNode],
    visited_ids: Iterable[str],
    current_node_id: Optional[str],
) -> List[MapNode]:
    """
    Recompute node statuses from visit history.

    Visited nodes are COMPLETED. With a current node its children become
    AVAILABLE (and the node itself COMPLETED); without one, row 0 is
    AVAILABLE. Everything else is LOCKED. Returns new nodes; the input is
    left untouched.
    """
    visited = set(visited_ids)
    current = get_node(nodes, current_node_id) if current_node_id else None

    result = []
    for node in nodes:
        new_node = node.copy()
        if node.id in visited:
            new_node.status = NodeStatus.COMPLETED
        elif current_node_id:
            if current is not None and node.id in current.next:
                new_node.status = NodeStatus.AVAILABLE
            elif node.id == current_node_id:
                new_node.status = NodeStatus.COMPLETED
            else:
                new_node.status = NodeStatus.LOCKED
        elif node.y == 0:
            new_node.status = NodeStatus.AVAILABLE
        else:
            new_node.status = NodeStatus.LOCKED
        result.append(new_node)
    return result


def available_nodes(nodes: List[MapNode]) -> List[MapNode]:
    return [n for n in nodes if n.status == NodeStatus.AVAILABLE]


def select_node(nodes: List[MapNode], node_id: str) -> Optional[List[MapNode]]:
    """
    Travel to a node.

    Returns the updated node list, or None if the node is not AVAILABLE.
    Other available nodes on the same row become UNREACHABLE, the chosen
    node COMPLETED and its children AVAILABLE.
    """
    target = get_node(nodes, node_id)
    if target is None or target.status != NodeStatus.AVAILABLE:
        return None

    result = []
    for node in nodes:
        new_node = node.copy()
        if node.id == target.id:
            new_node.status = NodeStatus.COMPLETED
        elif node.id in target.next:
            new_node.status = NodeStatus.AVAILABLE
        elif node.y == target.y and node.status == NodeStatus.AVAILABLE:
            new_node.status = NodeStatus.UNREACHABLE
        result.append(new_node)
    return result


def complete_node(nodes: List[MapNode], node_id: str) -> List[MapNode]:
    """Mark a node COMPLETED and unlock its children (used after a victory)."""
    target = get_node(nodes, node_id)
    if target is None:
        return nodes
    result = []
    for node in nodes:
        new_node = node.copy()
        if node.id == node_id:
            new_node.status = NodeStatus.COMPLETED
        elif node.id in target.next:
            new_node.status = NodeStatus.AVAILABLE
        result.append(new_node)
    return result


def map_to_string(nodes: List[MapNode]) -> str:
    """
    ASCII rendering, boss row on top.

    Each lane takes three columns; edges to the row above are drawn as
    ``\\``, ``|`` and ``/`` above the node.
    """
    by_id = {n.id: n for n in nodes}
    grid: Dict[Tuple[int, int], MapNode] = {
        (n.y, n.lane): n for n in nodes if not n.is_boss
    }
    lines = []
    left_padding = "   "

    boss = by_id.get(BOSS_NODE_ID)
    if boss is not None:
        centre = (MAP_WIDTH * 3) // 2
        lines.append(f"{BOSS_ROW:>2} {left_padding}" + " " * centre + boss.symbol)

    for y in range(MAP_HEIGHT - 1, -1, -1):
        edge_line = f"   {left_padding}"
        node_line = f"{y:>2} {left_padding}"
        for lane in range(MAP_WIDTH):
            node = grid.get((y, lane))
            if node is None:
                edge_line += "   "
                node_line += "   "
                continue
            left = mid = right = " "
            for child_id in node.next:
                child = by_id.get(child_id)
                if child is None or child.is_boss:
                    mid = "|" if child is not None else mid
                    continue
                if child.lane < lane:
                    left = "\\"
                elif child.lane == lane:
                    mid = "|"
                else:
                    right = "/"
            edge_line += f"{left}{mid}{right}"
            node_line += f" {node.symbol} "
        lines.append(edge_line.rstrip())
        lines.append(node_line.rstrip())

    return "\n".join(lines)
