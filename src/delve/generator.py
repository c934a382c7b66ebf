from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .config import GenerationSettings
from .dungeon.adjacency import AdjacencyResolver, EdgeKind, Placement, Side
from .dungeon.bsp import BspNode, BspTree, NodePath, path_label
from .dungeon.geometry import Point, Room
from .dungeon.grid import Grid
from .dungeon.loot import LootPlacement, LootPlacer
from .dungeon.sampling import Occupancy
from .dungeon.spawn import Marker, SpawnGoalPlacer
from .dungeon.tiles import Tile, TileIndex
from .rng import SeededRandom

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DungeonLayout:
    """Everything one generation run produced, ready for scene construction.

    Layouts compare by identity; use ``signature()`` to compare two runs.
    """

    seed: int
    settings: GenerationSettings
    grid: Grid
    tree: BspTree
    rooms: Tuple[Room, ...]
    tiles: Tuple[Tile, ...]
    walls: Dict[Point, Dict[Side, EdgeKind]]
    doors: Tuple[Placement, ...]
    hidden_walls: Tuple[Placement, ...]
    loot: Tuple[LootPlacement, ...]
    loot_per_room: Dict[NodePath, Tuple[int, int]]
    spawn: Optional[Marker]
    goal: Optional[Marker]

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def render(self) -> List[str]:
        """ASCII view: '#' empty, '.' room, ',' corridor, '$' loot, '@' spawn, '>' goal."""
        rows = [list(line) for line in self.grid.to_str_lines()]
        for item in self.loot:
            x, y = item.position
            rows[y][x] = "$"
        if self.goal is not None:
            gx, gy = self.goal.position
            rows[gy][gx] = ">"
        if self.spawn is not None:
            sx, sy = self.spawn.position
            rows[sy][sx] = "@"
        return ["".join(r) for r in rows]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable summary of the layout."""

        def placement(p: Placement) -> Dict[str, Any]:
            return {"position": list(p.position), "yaw": p.orientation.yaw}

        def marker(m: Optional[Marker]) -> Optional[Dict[str, Any]]:
            if m is None:
                return None
            return {"position": list(m.position), "room": path_label(m.node_path)}

        return {
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "grid": self.grid.to_str_lines(),
            "rooms": [[r.x, r.y, r.width, r.height] for r in self.rooms],
            "tiles": [[t.x, t.y, t.kind.value] for t in self.tiles],
            "doors": [placement(p) for p in self.doors],
            "hidden_walls": [placement(p) for p in self.hidden_walls],
            "loot": [{"position": list(item.position), "room": path_label(item.node_path)} for item in self.loot],
            "spawn": marker(self.spawn),
            "goal": marker(self.goal),
            "tree": self.tree.root.to_dict(),
        }

    def signature(self) -> str:
        """Deterministic digest of grid, doors, hidden walls, loot, spawn and goal."""
        d = self.to_dict()
        payload = {k: d[k] for k in ("width", "height", "grid", "doors", "hidden_walls", "loot", "spawn", "goal")}
        raw = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()


class DungeonGenerator:
    """
    BSP room + corridor generator with door, hidden-wall, loot and spawn/goal placement.

    Guarantees:
    - Deterministic output for a given settings object and seed
    - Every room is reachable through the corridor tree
    - Spawn, goal and loot never share a tile (when the overlap toggles are on)

    Settings are validated on construction so a bad configuration fails before
    any random draw. Phases run strictly in order and share one random stream:
    split, rooms, corridors, tile index, spawn/goal, loot, adjacency.
    """

    def __init__(self, settings: Optional[GenerationSettings] = None) -> None:
        self.settings = settings or GenerationSettings()
        self.settings.validate()

    def generate(self, seed: Optional[int] = None) -> DungeonLayout:
        s = self.settings
        rng = SeededRandom.from_settings(s.seed if seed is None else seed, s.use_random_seed and seed is None)
        logger.debug("Generating BSP dungeon: seed=%d size=%dx%d", rng.seed, s.width, s.height)

        grid = Grid(s.width, s.height)
        tree = BspTree(s.width, s.height, s.min_partition_size)
        tree.split(rng)
        tree.place_rooms(grid, rng, s.max_room_size)
        tree.connect_rooms(grid, rng)
        index = TileIndex.build(tree, grid)

        room_nodes: List[BspNode] = tree.room_nodes()
        if not room_nodes:
            logger.warning("Generation produced no rooms (seed=%d); loot, spawn and goal skipped", rng.seed)

        occupancy = Occupancy()
        spawn, goal = SpawnGoalPlacer(
            grid,
            rng,
            occupancy,
            edge_padding=s.spawn_goal_edge_padding,
            goal_far_from_spawn=s.place_goal_far_from_spawn,
            avoid_loot=s.prevent_spawn_goal_on_loot,
        ).place(room_nodes)

        loot = LootPlacer(
            grid,
            rng,
            occupancy,
            base_per_room=s.loot_base_per_room,
            small_room_multiplier=s.loot_small_room_multiplier,
            max_per_room=s.loot_max_per_room,
            edge_padding=s.loot_edge_padding,
            prevent_overlap=s.prevent_loot_overlap,
        ).place(room_nodes)

        adjacency = AdjacencyResolver(index).resolve()

        layout = DungeonLayout(
            seed=rng.seed,
            settings=s,
            grid=grid,
            tree=tree,
            rooms=tuple(n.room for n in room_nodes),  # type: ignore[misc]
            tiles=tuple(index),
            walls=adjacency.walls,
            doors=tuple(adjacency.doors),
            hidden_walls=tuple(adjacency.hidden_walls),
            loot=tuple(loot.placements),
            loot_per_room=dict(loot.per_room),
            spawn=spawn,
            goal=goal,
        )
        logger.info(
            "Generated dungeon seed=%d: %d rooms, %d tiles, %d doors, %d hidden walls, %d loot",
            layout.seed,
            len(layout.rooms),
            len(layout.tiles),
            len(layout.doors),
            len(layout.hidden_walls),
            len(layout.loot),
        )
        return layout


def generate_dungeon(settings: Optional[GenerationSettings] = None, seed: Optional[int] = None) -> DungeonLayout:
    """High-level API: validate settings and run one generation pass."""
    return DungeonGenerator(settings).generate(seed)
