from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List

from ..rng import SeededRandom
from .bsp import BspNode, NodePath
from .geometry import Point
from .grid import Grid
from .sampling import LOOT_ATTEMPTS, Occupancy, sample_room_tile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LootPlacement:
    position: Point
    node_path: NodePath


@dataclass
class LootResult:
    placements: List[LootPlacement] = field(default_factory=list)
    # node path -> (requested, placed)
    per_room: Dict[NodePath, tuple[int, int]] = field(default_factory=dict)

    @property
    def positions(self) -> List[Point]:
        return [p.position for p in self.placements]


def smallness(area: int, min_area: int, max_area: int) -> float:
    """1.0 for the smallest room, 0.0 for the largest (0.0 for all if sizes are equal)."""
    if max_area == min_area:
        return 0.0
    t = (area - min_area) / (max_area - min_area)
    return 1.0 - max(0.0, min(1.0, t))


def expected_loot(base: float, small_room_multiplier: float, s: float) -> float:
    return base * (1.0 + (small_room_multiplier - 1.0) * s)


def draw_count(expected: float, rng: SeededRandom, max_per_room: int) -> int:
    """Floor of ``expected`` plus one more with probability of its fraction, clamped."""
    count = math.floor(expected)
    frac = expected - count
    if rng.value() < frac:
        count += 1
    return max(0, min(count, max_per_room))


class LootPlacer:
    """Scatter loot across rooms, favouring small rooms.

    Each room's expected count is the base rate scaled up towards
    ``small_room_multiplier`` as the room gets smaller. Spots that cannot be
    found within the retry budget are skipped.
    """

    def __init__(
        self,
        grid: Grid,
        rng: SeededRandom,
        occupancy: Occupancy,
        *,
        base_per_room: float,
        small_room_multiplier: float,
        max_per_room: int,
        edge_padding: int,
        prevent_overlap: bool,
    ) -> None:
        self.grid = grid
        self.rng = rng
        self.occupancy = occupancy
        self.base_per_room = base_per_room
        self.small_room_multiplier = small_room_multiplier
        self.max_per_room = max_per_room
        self.edge_padding = edge_padding
        self.prevent_overlap = prevent_overlap

    def place(self, room_nodes: List[BspNode]) -> LootResult:
        result = LootResult()
        if not room_nodes:
            logger.debug("No rooms; skipping loot")
            return result

        areas = [n.room.area for n in room_nodes]  # type: ignore[union-attr]
        min_area, max_area = min(areas), max(areas)

        for node in room_nodes:
            room = node.room
            assert room is not None
            s = smallness(room.area, min_area, max_area)
            count = draw_count(expected_loot(self.base_per_room, self.small_room_multiplier, s), self.rng, self.max_per_room)
            placed = 0
            for _ in range(count):
                excluded = [self.occupancy.reserved]
                if self.prevent_overlap:
                    excluded.append(self.occupancy.loot)
                spot = sample_room_tile(room, self.edge_padding, self.grid, self.rng, LOOT_ATTEMPTS, *excluded)
                if spot is None:
                    logger.debug("No free loot spot in room %s after %d attempts", node.label, LOOT_ATTEMPTS)
                    continue
                result.placements.append(LootPlacement(spot, node.path))
                if self.prevent_overlap:
                    self.occupancy.loot.add(spot)
                placed += 1
            result.per_room[node.path] = (count, placed)

        logger.debug("Placed %d loot items across %d rooms", len(result.placements), len(room_nodes))
        return result
