# pathviz/core/replay.py
#!/usr/bin/env python3
"""
Step-at-a-time playback of a finished A* search, for animation.

Implements the algorithm API the viewer drives:
- init(grid, start, goal) - reset() - step() -> StepResult

The search itself runs eagerly inside init(); step() only walks the stored
trace, then reveals the path one cell per call. Pausing is simply not
calling step().
"""

from dataclasses import dataclass, field
from typing import List, Optional

from pathviz.core.astar import run
from pathviz.core.heuristics import get_heuristic
from pathviz.core.types import Coord, Grid, SearchResult, StepRecord, StepResult


@dataclass
class TraceReplay:
    name: str = "A*"
    heuristic_name: str = "manhattan"

    # Internal state
    grid: Optional[Grid] = None
    result: Optional[SearchResult] = None
    index: int = 0          # next trace record to show
    path_shown: int = 0     # path cells revealed so far
    last: Optional[StepRecord] = None
    history: List[StepRecord] = field(default_factory=list)

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: Coord, goal: Coord) -> SearchResult:
        """Search from start to goal now; playback starts at the first expansion."""
        self.grid = grid
        self.result = run(grid, start, goal, get_heuristic(self.heuristic_name))
        self.reset()
        return self.result

    def reset(self) -> None:
        self.index = 0
        self.path_shown = 0
        self.last = None
        self.history.clear()

    @property
    def finished(self) -> bool:
        if self.result is None:
            return False
        if self.index < len(self.result.trace):
            return False
        return not self.result.found or self.path_shown >= len(self.result.path)

    # -------------------- stepping --------------------

    def step(self) -> StepResult:
        if self.result is None or self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        trace = self.result.trace
        if self.index < len(trace):
            rec = trace[self.index]
            self.index += 1
            self.last = rec
            self.history.append(rec)
            return StepResult(
                status="running",
                opened=list(rec.frontier),
                closed=list(rec.visited),
                current=rec.current,
                metrics=self._metrics(rec),
            )

        if not self.result.found:
            return StepResult(status="no_path", current=self.last.current if self.last else None,
                              metrics=self._metrics(self.last))

        path = list(self.result.path)
        if self.path_shown < len(path):
            self.path_shown += 1
            node = path[self.path_shown - 1]
            cell = self.grid.cell(node)
            rec = StepRecord(current=node, g=cell.g, h=cell.h, f=cell.f)
            self.history.append(rec)
            status = "done" if self.path_shown == len(path) else "path"
            return StepResult(
                status=status,
                current=node,
                path=path[:self.path_shown],
                metrics=self._metrics(rec, path_len=self.path_shown),
            )

        return StepResult(status="done", path=path, metrics=self._metrics(self.last, path_len=len(path)))

    # -------------------- metrics --------------------

    def _metrics(self, rec: Optional[StepRecord], path_len: int = 0) -> dict:
        m = {
            "algo": self.name,
            "heuristic": self.heuristic_name,
            "step": self.index,
            "open_size": len(rec.frontier) if rec else 0,
            "closed_count": len(rec.visited) if rec else 0,
            "path_len": path_len,
        }
        if rec is not None:
            m.update(node=self.grid.number(rec.current), g=rec.g, h=rec.h, f=rec.f)
        return m
