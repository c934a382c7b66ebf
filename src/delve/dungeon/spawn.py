from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..rng import SeededRandom
from .bsp import BspNode, NodePath
from .geometry import Point, center_distance_sq
from .grid import Grid
from .sampling import SPAWN_GOAL_ATTEMPTS, Occupancy, sample_room_tile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marker:
    """Spawn or goal position and the room node it was placed in."""

    position: Point
    node_path: NodePath


def farthest_room_node(origin: BspNode, candidates: List[BspNode]) -> BspNode:
    """Candidate whose room center is farthest (squared distance) from ``origin``'s.

    Ties keep the first candidate encountered. Returns ``origin`` when there is
    no other candidate.
    """
    best = origin
    best_d = -1
    for c in candidates:
        if c is origin:
            continue
        d = center_distance_sq(origin.room, c.room)  # type: ignore[arg-type]
        if d > best_d:
            best_d = d
            best = c
    return best


class SpawnGoalPlacer:
    def __init__(
        self,
        grid: Grid,
        rng: SeededRandom,
        occupancy: Occupancy,
        *,
        edge_padding: int,
        goal_far_from_spawn: bool,
        avoid_loot: bool,
    ) -> None:
        self.grid = grid
        self.rng = rng
        self.occupancy = occupancy
        self.edge_padding = edge_padding
        self.goal_far_from_spawn = goal_far_from_spawn
        self.avoid_loot = avoid_loot

    def choose_rooms(self, room_nodes: List[BspNode]) -> Tuple[BspNode, BspNode]:
        spawn_node: BspNode = self.rng.choice(room_nodes)
        goal_node = spawn_node
        if len(room_nodes) > 1:
            if self.goal_far_from_spawn:
                goal_node = farthest_room_node(spawn_node, room_nodes)
            else:
                while goal_node is spawn_node:
                    goal_node = self.rng.choice(room_nodes)
        return spawn_node, goal_node

    def place(self, room_nodes: List[BspNode]) -> Tuple[Optional[Marker], Optional[Marker]]:
        if not room_nodes:
            logger.debug("No rooms; skipping spawn and goal")
            return None, None

        spawn_node, goal_node = self.choose_rooms(room_nodes)

        spawn = self._try_node(spawn_node)
        if spawn is None:
            logger.info("Could not place spawn in room %s", spawn_node.label)

        goal = self._try_node(goal_node)
        if goal is None:
            logger.debug("Goal room %s has no free tile; scanning other rooms", goal_node.label)
            for node in room_nodes:
                if node is goal_node:
                    continue
                goal = self._try_node(node)
                if goal is not None:
                    break
        if goal is None:
            logger.info("Could not place goal in any room")

        return spawn, goal

    def _try_node(self, node: BspNode) -> Optional[Marker]:
        excluded = [self.occupancy.reserved]
        if self.avoid_loot:
            excluded.append(self.occupancy.loot)
        spot = sample_room_tile(
            node.room,  # type: ignore[arg-type]
            self.edge_padding,
            self.grid,
            self.rng,
            SPAWN_GOAL_ATTEMPTS,
            *excluded,
        )
        if spot is None:
            return None
        self.occupancy.reserved.add(spot)
        return Marker(spot, node.path)
