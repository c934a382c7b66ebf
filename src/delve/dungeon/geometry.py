from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

Point = Tuple[int, int]


@dataclass(frozen=True)
class Region:
    """Integer rectangle; BSP nodes and rooms are both regions."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, p: Point) -> bool:
        return (self.x <= p[0] < self.right) and (self.y <= p[1] < self.bottom)

    def contains_region(self, other: "Region") -> bool:
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def cells(self) -> Iterator[Point]:
        # x-major, matching the order tiles are recorded in
        for x in range(self.x, self.right):
            for y in range(self.y, self.bottom):
                yield (x, y)


@dataclass(frozen=True)
class Room(Region):
    @property
    def center(self) -> Point:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def shrunk(self, padding: int) -> Region:
        """Interior region after padding; falls back to the full room if nothing is left."""
        min_x = self.x + padding
        max_x = self.right - 1 - padding
        min_y = self.y + padding
        max_y = self.bottom - 1 - padding
        if min_x > max_x or min_y > max_y:
            return Region(self.x, self.y, self.width, self.height)
        return Region(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)


def center_distance_sq(a: Room, b: Room) -> int:
    ax, ay = a.center
    bx, by = b.center
    return (ax - bx) ** 2 + (ay - by) ** 2
