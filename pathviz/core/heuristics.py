# pathviz/core/heuristics.py
#!/usr/bin/env python3
"""
Heuristics for the 4-connected, unit-cost grid.

- manhattan: admissible and consistent for 4-neighbour moves (default).
- zero: h == 0 everywhere, which turns A* into Dijkstra's algorithm.
"""

from typing import Callable, Dict, Tuple

Coord = Tuple[int, int]
Heuristic = Callable[[Coord, Coord], float]


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def zero(a: Coord, b: Coord) -> int:
    return 0


HEURISTICS: Dict[str, Heuristic] = {
    "manhattan": manhattan,
    "zero": zero,
}


def get_heuristic(name: str) -> Heuristic:
    try:
        return HEURISTICS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(HEURISTICS))
        raise ValueError(f"unknown heuristic {name!r} (known: {known})") from None
