# pathviz/app/editor.py
#!/usr/bin/env python3
"""
Placement of start, end and walls on the grid.

Left click:  'start' mode sets the start, 'end' mode sets the end,
             'obstacle' mode toggles a wall.
Right click: removes whatever is on the cell and rolls the mode back so the
             missing endpoint is placed next.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from pathviz.core.astar import set_wall
from pathviz.core.types import Coord, Grid

logger = logging.getLogger(__name__)

MODES = ("start", "end", "obstacle")


@dataclass
class Editor:
    grid: Grid
    start: Optional[Coord] = None
    goal: Optional[Coord] = None
    mode: str = "start"

    def ready(self) -> bool:
        return self.start is not None and self.goal is not None

    def _next_mode(self) -> str:
        if self.start is None:
            return "start"
        if self.goal is None:
            return "end"
        return "obstacle"

    def left_click(self, c: Coord) -> None:
        if not self.grid.in_bounds(c):
            return
        if self.mode == "start" and self.start is None:
            if self.grid.is_wall(c) or c == self.goal:
                return
            self.start = c
            self.mode = self._next_mode()
        elif self.mode == "end" and self.goal is None:
            if self.grid.is_wall(c) or c == self.start:
                return
            self.goal = c
            self.mode = "obstacle"
        elif self.mode == "obstacle":
            if c in (self.start, self.goal):
                return
            cell = self.grid.cell(c)
            set_wall(self.grid, c[0], c[1], not cell.is_wall)
            logger.debug("Wall %s -> %s", c, cell.is_wall)

    def right_click(self, c: Coord) -> None:
        if not self.grid.in_bounds(c):
            return
        if c == self.start:
            self.start = None
            self.mode = "start"
        elif c == self.goal:
            self.goal = None
            self.mode = "end" if self.start is not None else "start"
        elif self.grid.is_wall(c):
            set_wall(self.grid, c[0], c[1], False)
            if not self.ready():
                self.mode = self._next_mode()

    def reset(self) -> None:
        self.start = None
        self.goal = None
        self.mode = "start"
        self.grid.reset()

    def load(self, grid: Grid, start: Optional[Coord], goal: Optional[Coord]) -> None:
        self.grid = grid
        self.start = start
        self.goal = goal
        self.mode = self._next_mode()
