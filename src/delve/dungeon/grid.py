from __future__ import annotations

import logging
from enum import IntEnum
from typing import Iterator, List, Tuple

from .geometry import Point, Region

logger = logging.getLogger(__name__)


class Cell(IntEnum):
    EMPTY = 0
    ROOM = 1
    CORRIDOR = 2

    @property
    def glyph(self) -> str:
        return {Cell.EMPTY: "#", Cell.ROOM: ".", Cell.CORRIDOR: ","}[self]


class Grid:
    """
    Authoritative width x height cell-state array.

    Only room and corridor carving write to it; every later phase reads. All
    access is bounds-checked: reads outside the map raise IndexError, writes
    are refused and logged so a carving bug cannot corrupt neighbouring rows.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._cells: List[List[Cell]] = [[Cell.EMPTY for _ in range(height)] for _ in range(width)]

    # ---- Safety / Bounds -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell out of bounds: ({x},{y}) not in [0,{self.width})x[0,{self.height})")
        return self._cells[x][y]

    def is_room(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._cells[x][y] is Cell.ROOM

    # ---- Carving ---------------------------------------------------------
    def carve_room(self, region: Region) -> int:
        carved = 0
        for x, y in region.cells():
            if not self.in_bounds(x, y):
                logger.error("Attempt to carve room cell out of bounds at (%d,%d)", x, y)
                continue
            self._cells[x][y] = Cell.ROOM
            carved += 1
        return carved

    def carve_corridor_run(self, start: int, end: int, fixed: int, horizontal: bool) -> int:
        """Write CORRIDOR into every EMPTY cell of a straight inclusive run.

        Room and existing corridor cells are left untouched. Returns the number
        of cells that changed.
        """
        lo, hi = min(start, end), max(start, end)
        carved = 0
        for i in range(lo, hi + 1):
            x, y = (i, fixed) if horizontal else (fixed, i)
            if not self.in_bounds(x, y):
                logger.error("Attempt to carve corridor out of bounds at (%d,%d)", x, y)
                continue
            if self._cells[x][y] is Cell.EMPTY:
                self._cells[x][y] = Cell.CORRIDOR
                carved += 1
        return carved

    # ---- Query -----------------------------------------------------------
    def iter_cells(self) -> Iterator[Tuple[Point, Cell]]:
        for x in range(self.width):
            for y in range(self.height):
                yield (x, y), self._cells[x][y]

    def count(self, cell: Cell) -> int:
        return sum(1 for _, c in self.iter_cells() if c is cell)

    # ---- Export / Compare -----------------------------------------------
    def to_str_lines(self) -> List[str]:
        """Rows top (y=0) to bottom, one glyph per cell."""
        return ["".join(self._cells[x][y].glyph for x in range(self.width)) for y in range(self.height)]

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        """Deterministic, hashable snapshot of the cells for equality tests."""
        return tuple(tuple(int(self._cells[x][y]) for x in range(self.width)) for y in range(self.height))
