# pathviz/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any, Union

Coord = Tuple[int, int]  # (x, y) == (col, row)


@dataclass
class Cell:
    x: int
    y: int
    is_wall: bool = False
    g: float = 0
    h: float = 0
    f: float = 0
    parent: Optional[Coord] = None  # arena index, never an object back-edge

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    def clear_costs(self) -> None:
        self.parent = None
        self.g = 0
        self.h = 0
        self.f = 0

    def reset(self) -> None:
        self.is_wall = False
        self.clear_costs()


@dataclass
class Grid:
    size: int
    cells: List[Cell] = field(default_factory=list)  # row-major arena

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f"grid size must be positive, got {self.size}")
        if not self.cells:
            self.cells = [Cell(x, y) for y in range(self.size) for x in range(self.size)]
        if len(self.cells) != self.size * self.size:
            raise ValueError("cells size mismatch")

    def in_bounds(self, c: Coord) -> bool:
        x, y = c
        return 0 <= x < self.size and 0 <= y < self.size

    def cell(self, c: Coord) -> Cell:
        if not self.in_bounds(c):
            raise IndexError(f"{c} is outside a {self.size}x{self.size} grid")
        x, y = c
        return self.cells[y * self.size + x]

    def number(self, c: Coord) -> int:
        """Label shown on a cell: row-major index."""
        x, y = c
        return y * self.size + x

    def is_wall(self, c: Coord) -> bool:
        return self.cell(c).is_wall

    def walls(self) -> List[Coord]:
        return [c.coord for c in self.cells if c.is_wall]

    def clear_costs(self) -> None:
        """Zero g/h/f and parents, keep walls."""
        for c in self.cells:
            c.clear_costs()

    def reset(self) -> None:
        """Back to an empty grid: no walls, zeroed costs."""
        for c in self.cells:
            c.reset()


@dataclass(frozen=True)
class StepRecord:
    current: Coord
    g: float
    h: float
    f: float
    frontier: Tuple[Coord, ...] = ()
    visited: Tuple[Coord, ...] = ()


@dataclass(frozen=True)
class Found:
    path: Tuple[Coord, ...]
    trace: Tuple[StepRecord, ...]
    found = True


@dataclass(frozen=True)
class NotFound:
    trace: Tuple[StepRecord, ...] = ()
    found = False
    path = ()


SearchResult = Union[Found, NotFound]


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "path" | "done" | "no_path"
    opened: List[Coord] = field(default_factory=list)
    closed: List[Coord] = field(default_factory=list)
    current: Optional[Coord] = None
    path: Optional[List[Coord]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
