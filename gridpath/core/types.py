# gridpath/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from math import sqrt
from typing import List, Tuple, Optional, Dict, Any

Cell = Tuple[int, int]  # (col, row)
Matrix = List[List[int]]  # [row][col], 0 = walkable, 1 = blocked

SQRT2 = sqrt(2)

ORTHOGONAL: List[Cell] = [(0, -1), (1, 0), (0, 1), (-1, 0)]
DIAGONAL: List[Cell] = [(-1, -1), (1, -1), (1, 1), (-1, 1)]


class GridpathError(Exception):
    """Base class for every error raised by gridpath."""


class ConfigurationError(GridpathError, ValueError):
    """Malformed matrix, unknown algorithm or unreadable map. Fatal at session start."""


class InvalidEndpointError(GridpathError, AssertionError):
    """A blocked or out-of-bounds cell reached a search as start or end."""


@dataclass
class Grid:
    """Private per-search snapshot of the obstacle matrix."""

    width: int
    height: int
    cells: Matrix                      # [row][col]
    start: Cell
    goal: Cell
    move: int = 4                      # 4- or 8-connected

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def is_block(self, c: Cell) -> bool:
        x, y = c
        return self.cells[y][x] == 1

    def is_walkable(self, c: Cell) -> bool:
        return self.in_bounds(c) and not self.is_block(c)

    def neighbors(self, c: Cell) -> List[Cell]:
        """Walkable neighbours of c under the grid's adjacency rule.

        A diagonal step is allowed when at most one of the two orthogonal
        cells it cuts past is blocked.
        """
        x, y = c
        out: List[Cell] = []
        for dx, dy in ORTHOGONAL:
            n = (x + dx, y + dy)
            if self.is_walkable(n):
                out.append(n)
        if self.move != 8:
            return out
        for dx, dy in DIAGONAL:
            n = (x + dx, y + dy)
            if not self.is_walkable(n):
                continue
            side_a = self.is_walkable((x + dx, y))
            side_b = self.is_walkable((x, y + dy))
            if side_a or side_b:
                out.append(n)
        return out

    def step_cost(self, a: Cell, b: Cell) -> float:
        if a[0] != b[0] and a[1] != b[1]:
            return SQRT2
        return 1


@dataclass(frozen=True)
class Tile:
    x: int                       # column
    y: int                       # row
    index: int                   # x * size + y
    walkable: bool
    is_start: bool = False
    is_end: bool = False
    in_path: bool = False

    @property
    def cell(self) -> Cell:
        return (self.x, self.y)


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResult:
    """Outcome of a full search run, path inclusive of both endpoints."""

    path: List[Cell] = field(default_factory=list)
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return bool(self.path)
