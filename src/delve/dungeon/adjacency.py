"""
Wall removal between carved tiles, plus door and hidden-wall placement.

Every tile starts enclosed by four walls. Each tile edge is classified by the
kinds of the two tiles it separates:

- same kind (room/room, corridor/corridor): the wall is opened
- room/corridor where the corridor tile is a corridor endpoint (exactly one
  corridor neighbour and at least one room neighbour): opened with a door
- room/corridor where the corridor tile is a lone connector (no corridor
  neighbours, exactly two room neighbours on opposite sides): opened behind a
  hidden wall on those two sides
- anything else, including the map edge: the wall stays

A boundary is seen from both of its tiles, so door and hidden-wall events are
deduplicated on the canonical edge key.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from .geometry import Point
from .tiles import Tile, TileIndex, TileKind

logger = logging.getLogger(__name__)

EdgeKey = Tuple[Point, Point]


class Side(Enum):
    NORTH = (0, 1)
    SOUTH = (0, -1)
    EAST = (1, 0)
    WEST = (-1, 0)

    @property
    def delta(self) -> Point:
        return self.value


# Order edges are examined for each tile
SIDES = (Side.NORTH, Side.SOUTH, Side.EAST, Side.WEST)


class EdgeKind(Enum):
    WALL = "wall"
    OPEN = "open"
    DOOR = "door"
    HIDDEN_WALL = "hidden_wall"


class Orientation(Enum):
    """Alignment of a door or hidden wall with the wall plane it fills."""

    NORTH_SOUTH = 0  # connection runs along y
    EAST_WEST = 90  # connection runs along x

    @property
    def yaw(self) -> int:
        return self.value


def edge_key(a: Point, b: Point) -> EdgeKey:
    return (a, b) if a <= b else (b, a)


@dataclass(frozen=True)
class Placement:
    """A door or hidden wall sitting on the boundary between two tiles."""

    position: Tuple[float, float]
    orientation: Orientation
    room: Point
    corridor: Point

    @property
    def edge(self) -> EdgeKey:
        return edge_key(self.room, self.corridor)

    @classmethod
    def between(cls, room: Point, corridor: Point) -> "Placement":
        dx, dy = room[0] - corridor[0], room[1] - corridor[1]
        pos = (corridor[0] + dx * 0.5, corridor[1] + dy * 0.5)
        orientation = Orientation.EAST_WEST if dx != 0 else Orientation.NORTH_SOUTH
        return cls(pos, orientation, room, corridor)


@dataclass
class AdjacencyResult:
    walls: Dict[Point, Dict[Side, EdgeKind]] = field(default_factory=dict)
    doors: List[Placement] = field(default_factory=list)
    hidden_walls: List[Placement] = field(default_factory=list)

    def sides(self, pos: Point, kind: EdgeKind) -> List[Side]:
        return [s for s, k in self.walls.get(pos, {}).items() if k is kind]


class AdjacencyResolver:
    def __init__(self, index: TileIndex) -> None:
        self.index = index
        self._door_edges: Set[EdgeKey] = set()
        self._hidden_edges: Set[EdgeKey] = set()

    def resolve(self) -> AdjacencyResult:
        self._door_edges.clear()
        self._hidden_edges.clear()
        result = AdjacencyResult()
        for tile in self.index:
            result.walls[tile.position] = {side: EdgeKind.WALL for side in SIDES}
        for tile in self.index:
            for side in SIDES:
                self._handle_edge(tile, side, result)
        logger.debug(
            "Adjacency resolved: %d doors, %d hidden walls over %d tiles",
            len(result.doors),
            len(result.hidden_walls),
            len(self.index),
        )
        return result

    def _handle_edge(self, tile: Tile, side: Side, result: AdjacencyResult) -> None:
        dx, dy = side.delta
        other = self.index.get((tile.x + dx, tile.y + dy))
        # No neighbour tile -> keep outer wall
        if other is None:
            return
        walls = result.walls[tile.position]

        if tile.kind is other.kind:
            walls[side] = EdgeKind.OPEN
            return

        corridor, room = (tile, other) if tile.kind is TileKind.CORRIDOR else (other, tile)

        if self.is_corridor_endpoint(corridor):
            walls[side] = EdgeKind.DOOR
            key = edge_key(room.position, corridor.position)
            if key not in self._door_edges:
                self._door_edges.add(key)
                result.doors.append(Placement.between(room.position, corridor.position))
            return

        room_dirs = self.single_tile_connector_dirs(corridor)
        if room_dirs is not None:
            to_room = (room.x - corridor.x, room.y - corridor.y)
            if to_room in room_dirs:
                walls[side] = EdgeKind.HIDDEN_WALL
                key = edge_key(room.position, corridor.position)
                if key not in self._hidden_edges:
                    self._hidden_edges.add(key)
                    result.hidden_walls.append(Placement.between(room.position, corridor.position))

    # ---- Corridor topology ----------------------------------------------
    def corridor_neighbors(self, tile: Tile) -> int:
        return sum(1 for s in SIDES if self.index.is_corridor_at(tile.x + s.delta[0], tile.y + s.delta[1]))

    def room_dirs(self, tile: Tile) -> List[Point]:
        # east, west, north, south
        order = (Side.EAST, Side.WEST, Side.NORTH, Side.SOUTH)
        return [s.delta for s in order if self.index.is_room_at(tile.x + s.delta[0], tile.y + s.delta[1])]

    def is_corridor_endpoint(self, tile: Tile) -> bool:
        if tile.kind is not TileKind.CORRIDOR:
            return False
        if self.corridor_neighbors(tile) != 1:
            return False
        return bool(self.room_dirs(tile))

    def single_tile_connector_dirs(self, tile: Tile) -> Optional[List[Point]]:
        """Room directions of a lone straight-through connector, or None."""
        if tile.kind is not TileKind.CORRIDOR:
            return None
        if self.corridor_neighbors(tile) != 0:
            return None
        dirs = self.room_dirs(tile)
        if len(dirs) != 2:
            return None
        (ax, ay), (bx, by) = dirs
        if (ax + bx, ay + by) != (0, 0):
            return None
        return dirs
