from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional

from .bsp import BspNode, BspTree, NodePath
from .geometry import Point
from .grid import Cell, Grid

logger = logging.getLogger(__name__)


class TileKind(Enum):
    ROOM = "room"
    CORRIDOR = "corridor"


@dataclass(frozen=True)
class Tile:
    """A carved cell handed to the renderer.

    ``node_path`` is the BSP node the tile is grouped under: the owning leaf
    for room tiles, the shallowest node whose region covers the cell for
    corridor tiles.
    """

    x: int
    y: int
    kind: TileKind
    node_path: NodePath = ()

    @property
    def position(self) -> Point:
        return (self.x, self.y)


class TileIndex:
    """Position -> Tile lookup over every carved cell, built once after carving."""

    def __init__(self, tiles: List[Tile]) -> None:
        self._tiles: List[Tile] = list(tiles)
        self._by_pos: Dict[Point, Tile] = {}
        for t in self._tiles:
            if t.position in self._by_pos:
                raise ValueError(f"Duplicate tile at {t.position}")
            self._by_pos[t.position] = t

    @classmethod
    def build(cls, tree: BspTree, grid: Grid) -> "TileIndex":
        """Record tiles walking the tree pre-order.

        At each node the leaf's room cells come first, then any corridor cells
        inside the node's region that no earlier node has recorded.
        """
        tiles: List[Tile] = []
        seen: set[Point] = set()
        for node in tree.iter_nodes():
            _collect_node_tiles(node, grid, tiles, seen)
        index = cls(tiles)
        logger.debug(
            "Tile index built: %d tiles (%d room, %d corridor)",
            len(index),
            index.count(TileKind.ROOM),
            index.count(TileKind.CORRIDOR),
        )
        return index

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __contains__(self, pos: object) -> bool:
        return pos in self._by_pos

    @property
    def tiles(self) -> List[Tile]:
        return list(self._tiles)

    def get(self, pos: Point) -> Optional[Tile]:
        return self._by_pos.get(pos)

    def kind_at(self, x: int, y: int) -> Optional[TileKind]:
        t = self._by_pos.get((x, y))
        return t.kind if t is not None else None

    def is_room_at(self, x: int, y: int) -> bool:
        return self.kind_at(x, y) is TileKind.ROOM

    def is_corridor_at(self, x: int, y: int) -> bool:
        return self.kind_at(x, y) is TileKind.CORRIDOR

    def count(self, kind: TileKind) -> int:
        return sum(1 for t in self._tiles if t.kind is kind)


def _collect_node_tiles(node: BspNode, grid: Grid, out: List[Tile], seen: set[Point]) -> None:
    if node.is_leaf() and node.room is not None:
        for pos in node.room.cells():
            if pos in seen:
                continue
            seen.add(pos)
            out.append(Tile(pos[0], pos[1], TileKind.ROOM, node.path))

    for pos in node.region.cells():
        if pos in seen or grid.get(*pos) is not Cell.CORRIDOR:
            continue
        seen.add(pos)
        out.append(Tile(pos[0], pos[1], TileKind.CORRIDOR, node.path))
