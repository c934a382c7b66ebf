"""
Dungeon layout systems for delve.

Contains the BSP partition, room/corridor carving, the tile index, wall and
door resolution, and loot/spawn/goal placement used by the generator.
"""
from .adjacency import AdjacencyResolver, EdgeKind, Orientation, Placement, Side
from .bsp import BspNode, BspTree
from .geometry import Region, Room
from .grid import Cell, Grid
from .tiles import Tile, TileIndex, TileKind

__all__ = [
    "AdjacencyResolver",
    "BspNode",
    "BspTree",
    "Cell",
    "EdgeKind",
    "Grid",
    "Orientation",
    "Placement",
    "Region",
    "Room",
    "Side",
    "Tile",
    "TileIndex",
    "TileKind",
]
