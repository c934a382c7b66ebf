import pytest

from delve.config import GenerationSettings
from delve.dungeon.adjacency import (
    SIDES,
    AdjacencyResolver,
    EdgeKind,
    Orientation,
    Placement,
    Side,
)
from delve.dungeon.tiles import Tile, TileIndex, TileKind
from delve.generator import generate_dungeon

OPPOSITE = {Side.NORTH: Side.SOUTH, Side.SOUTH: Side.NORTH, Side.EAST: Side.WEST, Side.WEST: Side.EAST}


def index_of(rooms, corridors):
    tiles = [Tile(x, y, TileKind.ROOM) for x, y in rooms]
    tiles += [Tile(x, y, TileKind.CORRIDOR) for x, y in corridors]
    return TileIndex(tiles)


def test_corridor_endpoint_gets_one_door():
    result = AdjacencyResolver(index_of([(0, 0), (1, 0)], [(2, 0), (3, 0)])).resolve()
    assert len(result.doors) == 1
    door = result.doors[0]
    assert door.position == (1.5, 0)
    assert door.orientation is Orientation.EAST_WEST
    assert door.room == (1, 0) and door.corridor == (2, 0)
    assert result.walls[(1, 0)][Side.EAST] is EdgeKind.DOOR
    assert result.walls[(2, 0)][Side.WEST] is EdgeKind.DOOR
    assert result.walls[(0, 0)][Side.EAST] is EdgeKind.OPEN
    assert result.walls[(2, 0)][Side.EAST] is EdgeKind.OPEN
    assert result.walls[(3, 0)][Side.EAST] is EdgeKind.WALL
    assert result.hidden_walls == []


def test_vertical_door_is_north_south():
    result = AdjacencyResolver(index_of([(0, 0)], [(0, 1), (0, 2)])).resolve()
    assert [d.position for d in result.doors] == [(0, 0.5)]
    assert result.doors[0].orientation is Orientation.NORTH_SOUTH
    assert result.doors[0].orientation.yaw == 0


def test_single_tile_connector_between_rooms_gets_hidden_walls():
    index = TileIndex([
        Tile(0, 0, TileKind.ROOM),
        Tile(1, 0, TileKind.CORRIDOR),
        Tile(2, 0, TileKind.ROOM),
    ])
    result = AdjacencyResolver(index).resolve()
    assert result.doors == []
    assert [p.position for p in result.hidden_walls] == [(0.5, 0), (1.5, 0)]
    assert all(p.orientation is Orientation.EAST_WEST for p in result.hidden_walls)
    assert result.sides((1, 0), EdgeKind.HIDDEN_WALL) == [Side.EAST, Side.WEST]


def test_vertical_connector_hidden_walls():
    result = AdjacencyResolver(index_of([(4, 4), (4, 6)], [(4, 5)])).resolve()
    assert sorted(p.position for p in result.hidden_walls) == [(4, 4.5), (4, 5.5)]
    assert all(p.orientation is Orientation.NORTH_SOUTH for p in result.hidden_walls)


def test_corridor_passing_a_room_keeps_its_wall():
    result = AdjacencyResolver(index_of([(1, 1)], [(0, 0), (1, 0), (2, 0)])).resolve()
    assert result.doors == [] and result.hidden_walls == []
    assert result.walls[(1, 0)][Side.NORTH] is EdgeKind.WALL
    assert result.walls[(1, 1)][Side.SOUTH] is EdgeKind.WALL


def test_bent_connector_keeps_its_walls():
    # rooms on two adjacent sides are not a straight-through connection
    result = AdjacencyResolver(index_of([(0, 0), (1, 1)], [(1, 0)])).resolve()
    assert result.doors == [] and result.hidden_walls == []
    assert result.walls[(1, 0)][Side.WEST] is EdgeKind.WALL
    assert result.walls[(1, 0)][Side.NORTH] is EdgeKind.WALL


def test_map_edge_and_isolated_tiles_stay_walled():
    result = AdjacencyResolver(index_of([(0, 0)], [])).resolve()
    assert result.walls == {(0, 0): {side: EdgeKind.WALL for side in SIDES}}


def test_placement_between_is_halfway():
    p = Placement.between((3, 5), (3, 4))
    assert p.position == (3, 4.5)
    assert p.edge == ((3, 4), (3, 5))


@pytest.mark.parametrize("seed", [1, 7, 1234, 2024])
def test_generated_edges_are_consistent_from_both_sides(seed):
    layout = generate_dungeon(GenerationSettings(seed=seed))
    positions = {t.position for t in layout.tiles}
    for pos, sides in layout.walls.items():
        for side, kind in sides.items():
            nbr = (pos[0] + side.delta[0], pos[1] + side.delta[1])
            if nbr in positions:
                assert layout.walls[nbr][OPPOSITE[side]] is kind
            else:
                assert kind is EdgeKind.WALL

    door_sides = sum(1 for s in layout.walls.values() for k in s.values() if k is EdgeKind.DOOR)
    hidden_sides = sum(1 for s in layout.walls.values() for k in s.values() if k is EdgeKind.HIDDEN_WALL)
    assert door_sides == 2 * len(layout.doors)
    assert hidden_sides == 2 * len(layout.hidden_walls)

    door_edges = [p.edge for p in layout.doors]
    hidden_edges = [p.edge for p in layout.hidden_walls]
    assert len(door_edges) == len(set(door_edges))
    assert len(hidden_edges) == len(set(hidden_edges))
    assert not set(door_edges) & set(hidden_edges)
