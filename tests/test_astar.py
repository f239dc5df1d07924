import random
from collections import deque

import pytest

from pathviz.core.astar import construct_grid, neighbors4, reconstruct_path, run, set_wall
from pathviz.core.errors import BrokenParentChain, InvalidEndpoints
from pathviz.core.heuristics import get_heuristic, manhattan, zero
from pathviz.core.types import Found, NotFound


def _bfs_distance(grid, start, goal):
    dist = {start: 0}
    queue = deque([start])
    while queue:
        cur = queue.popleft()
        if cur == goal:
            return dist[cur]
        for n in neighbors4(grid, cur):
            if n not in dist and not grid.is_wall(n):
                dist[n] = dist[cur] + 1
                queue.append(n)
    return None


def _assert_valid_path(grid, path, start, goal):
    assert path[0] == start and path[-1] == goal
    assert all(not grid.is_wall(c) for c in path)
    assert all(manhattan(a, b) == 1 for a, b in zip(path, path[1:]))


def test_construct_grid_is_empty():
    grid = construct_grid(10)
    assert len(grid.cells) == 100
    assert grid.walls() == []
    assert all(c.g == 0 and c.h == 0 and c.f == 0 and c.parent is None for c in grid.cells)
    assert grid.cell((3, 7)).coord == (3, 7)
    assert grid.number((3, 7)) == 73


def test_set_wall_out_of_bounds():
    grid = construct_grid(4)
    with pytest.raises(IndexError):
        set_wall(grid, 4, 0, True)


def test_neighbors_order_and_edges():
    grid = construct_grid(3)
    assert neighbors4(grid, (1, 1)) == [(0, 1), (1, 0), (2, 1), (1, 2)]
    assert neighbors4(grid, (0, 0)) == [(1, 0), (0, 1)]
    assert neighbors4(grid, (2, 2)) == [(1, 2), (2, 1)]


def test_adjacent_cells_give_two_cell_path():
    grid = construct_grid(10)
    for start, goal in [((0, 0), (1, 0)), ((4, 4), (4, 5)), ((9, 9), (8, 9))]:
        result = run(grid, start, goal, manhattan)
        assert isinstance(result, Found)
        assert result.path == (start, goal)


def test_open_3x3_corner_to_corner():
    grid = construct_grid(3)
    result = run(grid, (0, 0), (2, 2), manhattan)
    assert result.found
    assert len(result.path) == 5
    # first-encountered-wins among equal f
    assert result.path == ((0, 0), (1, 0), (2, 0), (2, 1), (2, 2))
    expanded = [rec.current for rec in result.trace]
    assert expanded == [(0, 0), (1, 0), (0, 1), (2, 0), (1, 1), (0, 2), (2, 1), (1, 2), (2, 2)]


def test_trace_records_costs_and_snapshots():
    grid = construct_grid(3)
    result = run(grid, (0, 0), (2, 2), manhattan)

    first = result.trace[0]
    assert (first.g, first.h, first.f) == (0, 0, 0)
    assert first.frontier == ((1, 0), (0, 1))
    assert first.visited == ((0, 0),)

    last = result.trace[-1]
    assert last.current == (2, 2)
    assert (last.g, last.h, last.f) == (4, 0, 4)
    assert last.frontier == ((2, 2),)
    assert len(last.visited) == 8
    for rec in result.trace:
        assert rec.f == rec.g + rec.h


def test_wall_forces_detour():
    grid = construct_grid(3)
    set_wall(grid, 0, 1, True)
    set_wall(grid, 1, 1, True)
    result = run(grid, (0, 0), (0, 2), manhattan)
    assert result.found
    _assert_valid_path(grid, result.path, (0, 0), (0, 2))
    assert len(result.path) - 1 == 6


def test_full_wall_row_blocks_search():
    grid = construct_grid(3)
    for x in range(3):
        set_wall(grid, x, 1, True)
    result = run(grid, (0, 0), (2, 2), manhattan)
    assert isinstance(result, NotFound)
    assert not result.found
    assert [rec.current for rec in result.trace] == [(0, 0), (1, 0), (2, 0)]


def test_walled_in_start_is_not_found():
    grid = construct_grid(10)
    for x, y in [(4, 5), (5, 4), (6, 5), (5, 6)]:
        set_wall(grid, x, y, True)
    result = run(grid, (5, 5), (0, 0), manhattan)
    assert isinstance(result, NotFound)
    assert len(result.trace) == 1
    assert result.trace[0].frontier == ()


@pytest.mark.parametrize("seed", range(20))
def test_path_length_matches_bfs(seed):
    rng = random.Random(seed)
    grid = construct_grid(10)
    for cell in grid.cells:
        cell.is_wall = rng.random() < 0.3
    free = [c.coord for c in grid.cells if not c.is_wall]
    start, goal = rng.sample(free, 2)

    expected = _bfs_distance(grid, start, goal)
    result = run(grid, start, goal, manhattan)
    if expected is None:
        assert not result.found
    else:
        assert result.found
        _assert_valid_path(grid, result.path, start, goal)
        assert len(result.path) - 1 == expected


def test_zero_heuristic_is_also_optimal():
    grid = construct_grid(10)
    for y in range(1, 9):
        set_wall(grid, 5, y, True)
    result = run(grid, (0, 5), (9, 5), zero)
    assert result.found
    assert len(result.path) - 1 == _bfs_distance(grid, (0, 5), (9, 5))


def test_g_values_never_increase_and_never_undercut_bfs():
    grid = construct_grid(10)
    for x, y in [(3, 2), (3, 3), (3, 4), (3, 5), (6, 5), (6, 6), (6, 7), (2, 7)]:
        set_wall(grid, x, y, True)
    start, goal = (0, 4), (9, 6)
    seen = {}

    def spy(c, target):
        g = grid.cell(c).g
        if c in seen:
            assert g < seen[c]
        assert g >= _bfs_distance(grid, start, c)
        seen[c] = g
        return manhattan(c, target)

    result = run(grid, start, goal, spy)
    assert result.found
    assert seen
    for i, c in enumerate(result.path):
        assert grid.cell(c).g == i


def test_rerun_is_deterministic():
    grid = construct_grid(10)
    walls = [(2, 2), (2, 3), (2, 4), (7, 1), (7, 2), (5, 8)]
    for x, y in walls:
        set_wall(grid, x, y, True)
    first = run(grid, (0, 0), (9, 9), manhattan)
    again = run(grid, (0, 0), (9, 9), manhattan)
    assert first == again

    grid.reset()
    assert grid.walls() == []
    for x, y in walls:
        set_wall(grid, x, y, True)
    assert run(grid, (0, 0), (9, 9), manhattan) == first


@pytest.mark.parametrize(
    "start, goal",
    [(None, (1, 1)), ((1, 1), None), ((1, 1), (1, 1)), ((0, 0), (5, 5)), ((2, 2), (0, 0))],
)
def test_invalid_endpoints(start, goal):
    grid = construct_grid(4)
    set_wall(grid, 2, 2, True)
    with pytest.raises(InvalidEndpoints):
        run(grid, start, goal, manhattan)


def test_invalid_endpoints_is_a_value_error():
    grid = construct_grid(4)
    with pytest.raises(ValueError):
        run(grid, (1, 1), (1, 1), manhattan)


def test_reconstruct_missing_parent():
    grid = construct_grid(3)
    grid.cell((2, 0)).parent = (1, 0)
    with pytest.raises(BrokenParentChain) as info:
        reconstruct_path(grid, (0, 0), (2, 0))
    assert info.value.chain == [(2, 0), (1, 0)]


def test_reconstruct_cycle():
    grid = construct_grid(3)
    grid.cell((2, 0)).parent = (1, 0)
    grid.cell((1, 0)).parent = (2, 0)
    with pytest.raises(BrokenParentChain):
        reconstruct_path(grid, (0, 0), (2, 0))


def test_get_heuristic():
    assert get_heuristic("Manhattan") is manhattan
    assert get_heuristic("zero") is zero
    with pytest.raises(ValueError):
        get_heuristic("euclid")
