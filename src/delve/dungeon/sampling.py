from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Set

from ..rng import SeededRandom
from .geometry import Point, Room
from .grid import Grid

LOOT_ATTEMPTS = 20
SPAWN_GOAL_ATTEMPTS = 30


@dataclass
class Occupancy:
    """Positions already claimed by spawn/goal (reserved) or by loot."""

    reserved: Set[Point] = field(default_factory=set)
    loot: Set[Point] = field(default_factory=set)


def sample_room_tile(
    room: Room,
    padding: int,
    grid: Grid,
    rng: SeededRandom,
    attempts: int,
    *excluded: Set[Point],
) -> Optional[Point]:
    """Uniformly sample a free room cell inside ``room`` shrunk by ``padding``.

    Gives up after ``attempts`` draws and returns None; callers treat that as
    a soft shortfall.
    """
    area = room.shrunk(padding)
    for _ in range(attempts):
        tx = rng.range_int(area.x, area.right)
        ty = rng.range_int(area.y, area.bottom)
        if not grid.is_room(tx, ty):
            continue
        p = (tx, ty)
        if any(p in s for s in excluded):
            continue
        return p
    return None
