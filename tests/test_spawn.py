import pytest

from delve.config import GenerationSettings
from delve.dungeon.bsp import BspNode
from delve.dungeon.geometry import Region, Room, center_distance_sq
from delve.dungeon.grid import Grid
from delve.dungeon.sampling import Occupancy
from delve.dungeon.spawn import SpawnGoalPlacer, farthest_room_node
from delve.generator import generate_dungeon
from delve.rng import SeededRandom

from dungeon_checks import node_by_path


def node(path, room):
    return BspNode(Region(room.x, room.y, room.width, room.height), path, room=room)


def carved(*rooms):
    grid = Grid(30, 30)
    for r in rooms:
        grid.carve_room(r)
    return grid


def placer(grid, occupancy=None, seed=1, **kw):
    opts = dict(edge_padding=1, goal_far_from_spawn=True, avoid_loot=True)
    opts.update(kw)
    return SpawnGoalPlacer(grid, SeededRandom(seed), occupancy or Occupancy(), **opts)


def test_farthest_room_first_wins_ties():
    origin = node((0,), Room(0, 0, 1, 1))
    a = node((1, 0), Room(3, 4, 1, 1))
    b = node((1, 1), Room(5, 0, 1, 1))
    c = node((1, 2), Room(1, 1, 1, 1))
    assert farthest_room_node(origin, [origin, c, a, b]) is a
    assert farthest_room_node(origin, [b, a]) is b
    assert farthest_room_node(origin, [origin]) is origin


def test_single_room_gets_distinct_spawn_and_goal():
    room = Room(2, 2, 3, 3)
    n = node((), room)
    spawn, goal = placer(carved(room), edge_padding=0).place([n])
    assert spawn is not None and goal is not None
    assert spawn.position != goal.position
    assert room.contains(spawn.position) and room.contains(goal.position)


def test_goal_falls_back_to_another_room(monkeypatch):
    a_room, b_room = Room(1, 1, 5, 5), Room(20, 20, 3, 3)
    a, b = node((0,), a_room), node((1,), b_room)
    occupancy = Occupancy(reserved={b_room.center})
    p = placer(carved(a_room, b_room), occupancy)
    monkeypatch.setattr(p, "choose_rooms", lambda nodes: (a, b))
    spawn, goal = p.place([a, b])
    assert spawn.node_path == (0,)
    assert goal is not None and goal.node_path == (0,)
    assert goal.position != spawn.position
    assert {spawn.position, goal.position} <= occupancy.reserved


def test_goal_is_none_when_every_room_is_full(monkeypatch):
    a_room, b_room = Room(1, 1, 3, 3), Room(20, 20, 3, 3)
    a, b = node((0,), a_room), node((1,), b_room)
    occupancy = Occupancy(reserved={a_room.center, b_room.center})
    p = placer(carved(a_room, b_room), occupancy)
    monkeypatch.setattr(p, "choose_rooms", lambda nodes: (a, b))
    assert p.place([a, b]) == (None, None)


def test_no_rooms():
    assert placer(Grid(5, 5)).place([]) == (None, None)


def test_loot_is_avoided_only_when_asked():
    room = Room(1, 1, 3, 3)
    n = node((), room)
    occupancy = Occupancy(loot={room.center})
    spawn, _goal = placer(carved(room), occupancy).place([n])
    assert spawn is None
    spawn, _goal = placer(carved(room), Occupancy(loot={room.center}), avoid_loot=False).place([n])
    assert spawn.position == room.center


@pytest.mark.parametrize("seed", range(8))
def test_random_goal_mode_picks_another_room(seed):
    rooms = [Room(1, 1, 4, 4), Room(10, 10, 4, 4), Room(20, 1, 4, 4)]
    nodes = [node((i,), r) for i, r in enumerate(rooms)]
    spawn, goal = placer(carved(*rooms), seed=seed, goal_far_from_spawn=False).place(nodes)
    assert spawn.node_path != goal.node_path


@pytest.mark.parametrize("seed", [1, 99, 1234, 31337])
def test_generated_goal_is_in_farthest_room(seed):
    layout = generate_dungeon(GenerationSettings(seed=seed))
    assert layout.spawn is not None and layout.goal is not None
    spawn_room = node_by_path(layout.tree, layout.spawn.node_path).room
    goal_room = node_by_path(layout.tree, layout.goal.node_path).room
    best = max(center_distance_sq(spawn_room, r) for r in layout.rooms)
    assert center_distance_sq(spawn_room, goal_room) == best
    assert layout.goal.position not in {item.position for item in layout.loot}
