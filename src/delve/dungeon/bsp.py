from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..config import MIN_ROOM_SIZE
from ..rng import SeededRandom
from .geometry import Region, Room
from .grid import Grid

logger = logging.getLogger(__name__)

LEFT = 0
RIGHT = 1

NodePath = Tuple[int, ...]


def path_label(path: NodePath) -> str:
    """Human-readable label for a node path: "root", "L", "LR", ..."""
    if not path:
        return "root"
    return "".join("L" if step == LEFT else "R" for step in path)


@dataclass
class BspNode:
    region: Region
    path: NodePath = ()
    left: Optional["BspNode"] = None
    right: Optional["BspNode"] = None
    room: Optional[Room] = None

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def label(self) -> str:
        return path_label(self.path)

    def to_dict(self) -> Dict[str, Any]:
        r = self.region
        out: Dict[str, Any] = {
            "label": self.label,
            "region": [r.x, r.y, r.width, r.height],
        }
        if self.room is not None:
            out["room"] = [self.room.x, self.room.y, self.room.width, self.room.height]
        if not self.is_leaf():
            out["children"] = [self.left.to_dict(), self.right.to_dict()]  # type: ignore[union-attr]
        return out


class BspTree:
    """
    Binary space partition of the map plus the rooms and corridors carved from it.

    Phases must run in order (split, place_rooms, connect_rooms) against the
    same SeededRandom: each one consumes draws in a fixed left-then-right
    traversal, which is what makes a seed reproducible.
    """

    def __init__(self, width: int, height: int, min_partition_size: int) -> None:
        self.min_partition_size = min_partition_size
        self.root = BspNode(Region(0, 0, width, height))

    # ---- Split -----------------------------------------------------------
    def split(self, rng: SeededRandom) -> int:
        self._split(self.root, rng)
        leaves = sum(1 for _ in self.leaves())
        logger.debug("BSP split produced %d leaves (min_partition_size=%d)", leaves, self.min_partition_size)
        return leaves

    def _split(self, node: BspNode, rng: SeededRandom) -> None:
        m = self.min_partition_size
        r = node.region
        if r.width <= m * 2 and r.height <= m * 2:
            return

        split_horizontal = rng.coin()
        # An exhausted x axis forces a horizontal cut so the recursion always progresses.
        if (split_horizontal and r.height > m * 2) or r.width <= m * 2:
            cut = rng.range_int(m, r.height - m)
            left = Region(r.x, r.y, r.width, cut)
            right = Region(r.x, r.y + cut, r.width, r.height - cut)
        else:
            cut = rng.range_int(m, r.width - m)
            left = Region(r.x, r.y, cut, r.height)
            right = Region(r.x + cut, r.y, r.width - cut, r.height)

        node.left = BspNode(left, node.path + (LEFT,))
        node.right = BspNode(right, node.path + (RIGHT,))
        self._split(node.left, rng)
        self._split(node.right, rng)

    # ---- Rooms -----------------------------------------------------------
    def place_rooms(self, grid: Grid, rng: SeededRandom, max_room_size: int) -> List[Room]:
        rooms: List[Room] = []
        self._create_rooms(self.root, grid, rng, max_room_size, rooms)
        logger.debug("Carved %d rooms", len(rooms))
        return rooms

    def _create_rooms(
        self,
        node: BspNode,
        grid: Grid,
        rng: SeededRandom,
        max_room_size: int,
        out_rooms: List[Room],
    ) -> None:
        if not node.is_leaf():
            self._create_rooms(node.left, grid, rng, max_room_size, out_rooms)  # type: ignore[arg-type]
            self._create_rooms(node.right, grid, rng, max_room_size, out_rooms)  # type: ignore[arg-type]
            return

        r = node.region
        if r.width < MIN_ROOM_SIZE or r.height < MIN_ROOM_SIZE:
            logger.warning("Leaf %s (%dx%d) is too small for a room; skipping", node.label, r.width, r.height)
            return

        # Upper bound is exclusive: a room edge never reaches max_room_size or the leaf edge.
        w = rng.range_int(MIN_ROOM_SIZE, min(max_room_size, r.width))
        h = rng.range_int(MIN_ROOM_SIZE, min(max_room_size, r.height))
        x = r.x + rng.range_int(0, r.width - w + 1)
        y = r.y + rng.range_int(0, r.height - h + 1)

        node.room = Room(x, y, w, h)
        grid.carve_room(node.room)
        out_rooms.append(node.room)

    # ---- Corridors -------------------------------------------------------
    def connect_rooms(self, grid: Grid, rng: SeededRandom) -> int:
        """Join sibling subtrees with L-shaped corridors; returns cells carved."""
        carved = self._connect_children(self.root, grid, rng)
        logger.debug("Carved %d corridor cells", carved)
        return carved

    def _connect_children(self, node: BspNode, grid: Grid, rng: SeededRandom) -> int:
        if node.left is None or node.right is None:
            return 0
        carved = self._connect_children(node.left, grid, rng)
        carved += self._connect_children(node.right, grid, rng)
        a = representative_room(node.left)
        b = representative_room(node.right)
        if a is None or b is None:
            logger.debug("Node %s has a roomless subtree; no corridor", node.label)
            return carved
        return carved + _carve_l_corridor(a, b, grid, rng)

    # ---- Traversal -------------------------------------------------------
    def iter_nodes(self) -> Iterator[BspNode]:
        """Pre-order (node, left, right)."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def leaves(self) -> Iterator[BspNode]:
        return (n for n in self.iter_nodes() if n.is_leaf())

    def room_nodes(self) -> List[BspNode]:
        return [n for n in self.iter_nodes() if n.is_leaf() and n.room is not None]

    def rooms(self) -> List[Room]:
        return [n.room for n in self.room_nodes()]  # type: ignore[misc]


def representative_room(node: BspNode) -> Optional[Room]:
    """First room found depth-first (left before right) in the subtree."""
    if node.room is not None:
        return node.room
    if node.left is not None:
        found = representative_room(node.left)
        if found is not None:
            return found
    if node.right is not None:
        return representative_room(node.right)
    return None


def _carve_l_corridor(a: Room, b: Room, grid: Grid, rng: SeededRandom) -> int:
    x1, y1 = a.center
    x2, y2 = b.center
    if rng.coin():
        # horizontal then vertical
        carved = grid.carve_corridor_run(x1, x2, y1, horizontal=True)
        carved += grid.carve_corridor_run(y1, y2, x2, horizontal=False)
    else:
        # vertical then horizontal
        carved = grid.carve_corridor_run(y1, y2, x1, horizontal=False)
        carved += grid.carve_corridor_run(x1, x2, y2, horizontal=True)
    return carved
