# pathviz/core/maps.py
#!/usr/bin/env python3
"""JSON map files: {"size": 10, "start": [x, y], "goal": [x, y], "walls": [[x, y], ...]}."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from pathviz.core.astar import construct_grid, set_wall
from pathviz.core.types import Coord, Grid

logger = logging.getLogger(__name__)


@dataclass
class MapSpec:
    size: int
    start: Optional[Coord] = None
    goal: Optional[Coord] = None
    walls: List[Coord] = field(default_factory=list)

    def build_grid(self) -> Grid:
        grid = construct_grid(self.size)
        for x, y in self.walls:
            set_wall(grid, x, y, True)
        return grid

    @classmethod
    def from_grid(cls, grid: Grid, start: Optional[Coord], goal: Optional[Coord]) -> "MapSpec":
        return cls(grid.size, start, goal, grid.walls())


def _is_int(v) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _coord(raw, label: str, size: int) -> Optional[Coord]:
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError(f"{label} must be an [x, y] pair, got {raw!r}")
    if not all(_is_int(v) for v in raw):
        raise ValueError(f"{label} must hold integers, got {raw!r}")
    x, y = raw
    if not (0 <= x < size and 0 <= y < size):
        raise ValueError(f"{label} {(x, y)} out of bounds")
    return (x, y)


def parse_map(data: dict) -> MapSpec:
    if not isinstance(data, dict):
        raise ValueError(f"map must be a JSON object, got {type(data).__name__}")
    size = data.get("size", 10)
    if not _is_int(size) or size < 1:
        raise ValueError(f"size must be a positive integer, got {size!r}")
    start = _coord(data.get("start"), "start", size)
    goal = _coord(data.get("goal"), "goal", size)

    raw_walls = data.get("walls", [])
    if not isinstance(raw_walls, list):
        raise ValueError(f"walls must be a list, got {raw_walls!r}")
    walls: List[Coord] = []
    for i, w in enumerate(raw_walls):
        label = f"walls[{i}]"
        if w is None:
            raise ValueError(f"{label} must be an [x, y] pair, got None")
        c = _coord(w, label, size)
        if c in (start, goal):
            raise ValueError(f"{label} {c} covers an endpoint")
        walls.append(c)
    return MapSpec(size, start, goal, walls)


def load_map(path: Union[str, Path]) -> MapSpec:
    with open(path, "r") as f:
        data = json.load(f)
    spec = parse_map(data)
    logger.info("Loaded map %s (%dx%d, %d walls)", path, spec.size, spec.size, len(spec.walls))
    return spec


def save_map(path: Union[str, Path], spec: MapSpec) -> None:
    data = {
        "size": spec.size,
        "start": list(spec.start) if spec.start else None,
        "goal": list(spec.goal) if spec.goal else None,
        "walls": [list(w) for w in spec.walls],
    }
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    logger.info("Saved map %s", path)
