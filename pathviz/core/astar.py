# pathviz/core/astar.py
#!/usr/bin/env python3
"""
A* over a square grid with walls — eager, UI-independent.

run(grid, start, goal, heuristic) searches to completion and returns
Found(path, trace) or NotFound(trace). Every expansion appends one StepRecord
(current cell's g/h/f plus open and closed snapshots) so a viewer can replay
the search at any pace.

Frontier selection is a linear scan with a strict '<': among equal f the
cell that entered the frontier first wins. Edge cost is 1, moves are
4-connected (left, up, right, down).
"""

import logging
from typing import List, Optional

from pathviz.core.errors import BrokenParentChain, InvalidEndpoints
from pathviz.core.heuristics import Heuristic, manhattan
from pathviz.core.types import Coord, Found, Grid, NotFound, SearchResult, StepRecord

logger = logging.getLogger(__name__)

GRID_SIZE = 10


# -------------------- grid construction --------------------

def construct_grid(size: int = GRID_SIZE) -> Grid:
    """Return a size x size grid with no walls and zeroed costs."""
    return Grid(size)


def set_wall(grid: Grid, x: int, y: int, is_wall: bool = True) -> None:
    grid.cell((x, y)).is_wall = bool(is_wall)


def neighbors4(grid: Grid, c: Coord) -> List[Coord]:
    """In-bounds orthogonal neighbours of c: left, up, right, down."""
    x, y = c
    out: List[Coord] = []
    if x > 0:
        out.append((x - 1, y))
    if y > 0:
        out.append((x, y - 1))
    if x < grid.size - 1:
        out.append((x + 1, y))
    if y < grid.size - 1:
        out.append((x, y + 1))
    return out


# -------------------- search --------------------

def _check_endpoints(grid: Grid, start: Optional[Coord], goal: Optional[Coord]) -> None:
    if start is None or goal is None:
        raise InvalidEndpoints("start and goal must both be set")
    for label, c in (("start", start), ("goal", goal)):
        if not grid.in_bounds(c):
            raise InvalidEndpoints(f"{label} {c} is outside the grid")
        if grid.is_wall(c):
            raise InvalidEndpoints(f"{label} {c} is a wall")
    if start == goal:
        raise InvalidEndpoints(f"start and goal are the same cell {start}")


def _min_f(grid: Grid, frontier: List[Coord]) -> Coord:
    best = frontier[0]
    best_f = grid.cell(best).f
    for c in frontier[1:]:
        f = grid.cell(c).f
        if f < best_f:
            best, best_f = c, f
    return best


def _record(grid: Grid, current: Coord, frontier: List[Coord], visited: List[Coord]) -> StepRecord:
    cell = grid.cell(current)
    return StepRecord(
        current=current,
        g=cell.g,
        h=cell.h,
        f=cell.f,
        frontier=tuple(frontier),
        visited=tuple(visited),
    )


def run(grid: Grid, start: Coord, goal: Coord, heuristic: Heuristic = manhattan) -> SearchResult:
    """Run A* from start to goal and return Found or NotFound with the full trace.

    Costs and parents on the grid are cleared first, walls are kept, so
    running twice on the same layout yields the same trace.

    Raises InvalidEndpoints before searching when start/goal are unusable.
    """
    start, goal = (tuple(start) if start is not None else None,
                   tuple(goal) if goal is not None else None)
    _check_endpoints(grid, start, goal)
    grid.clear_costs()
    logger.debug("A* %s -> %s on %dx%d grid (%d walls)",
                 start, goal, grid.size, grid.size, len(grid.walls()))

    frontier: List[Coord] = [start]
    in_frontier = {start}
    visited: List[Coord] = []
    closed = set()
    trace: List[StepRecord] = []

    while frontier:
        current = _min_f(grid, frontier)

        if current == goal:
            trace.append(_record(grid, current, frontier, visited))
            path = reconstruct_path(grid, start, goal)
            logger.info("Path found: %d cells, %d expansions", len(path), len(visited))
            return Found(path=tuple(path), trace=tuple(trace))

        frontier.remove(current)
        in_frontier.discard(current)
        visited.append(current)
        closed.add(current)

        cur = grid.cell(current)
        for n in neighbors4(grid, current):
            nb = grid.cell(n)
            if n in closed or nb.is_wall:
                continue

            tentative_g = cur.g + 1
            if n not in in_frontier:
                frontier.append(n)
                in_frontier.add(n)
            elif tentative_g >= nb.g:
                continue

            nb.parent = current
            nb.g = tentative_g
            nb.h = heuristic(n, goal)
            nb.f = nb.g + nb.h

        trace.append(_record(grid, current, frontier, visited))

    logger.info("No path from %s to %s after %d expansions", start, goal, len(visited))
    return NotFound(trace=tuple(trace))


# -------------------- reconstruction --------------------

def reconstruct_path(grid: Grid, start: Coord, goal: Coord) -> List[Coord]:
    """Walk parents from goal back to start and return the start->goal path.

    Raises BrokenParentChain if the walk stops before start or loops.
    """
    path: List[Coord] = [goal]
    cur = goal
    limit = len(grid.cells)
    while cur != start:
        parent = grid.cell(cur).parent
        if parent is None:
            raise BrokenParentChain(f"{cur} has no parent before reaching start {start}", path)
        if len(path) >= limit:
            raise BrokenParentChain(f"parent chain from {goal} does not terminate", path)
        cur = parent
        path.append(cur)
    path.reverse()
    return path
