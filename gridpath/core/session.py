# gridpath/core/session.py
#!/usr/bin/env python3
"""
Interaction state machine.

States over the Selection fields:
    Idle          start is None
    AwaitingEnd   start set, path_set False (end follows the pointer)
    PathCommitted path_set True

reduce(selection, event) is pure and returns a new Selection.
Session wraps it for the shell: one writer, full re-projection after
every event.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, Union

from gridpath.core.finders import DEFAULT_ALGORITHM, validate_algorithm
from gridpath.core.grid import index_of, validate_matrix
from gridpath.core.projection import project_with_search
from gridpath.core.types import Cell, Matrix, SearchResult, Tile

log = logging.getLogger("gridpath.session")


@dataclass(frozen=True)
class Selection:
    start: Optional[Cell] = None
    end: Optional[Cell] = None
    path_set: bool = False
    algorithm: str = DEFAULT_ALGORITHM
    allow_diagonal: bool = True
    edit_mode: bool = False  # reserved: only gates hover

    @property
    def state(self) -> str:
        if self.path_set:
            return "PathCommitted"
        if self.start is not None:
            return "AwaitingEnd"
        return "Idle"


# ---------- events ----------
@dataclass(frozen=True)
class TileClicked:
    tile: Tile


@dataclass(frozen=True)
class MouseEnteredTile:
    tile: Tile


@dataclass(frozen=True)
class AlgorithmChanged:
    algorithm: str


@dataclass(frozen=True)
class AllowDiagonalToggled:
    pass


Event = Union[TileClicked, MouseEnteredTile, AlgorithmChanged, AllowDiagonalToggled]


def on_tile_clicked(sel: Selection, tile: Tile) -> Selection:
    # order matters: restart > commit > first pick
    if sel.path_set and tile.walkable:
        return replace(sel, start=tile.cell, end=None, path_set=False)
    if sel.start is not None and tile.walkable:
        return replace(sel, path_set=True)
    if tile.walkable:
        return replace(sel, start=tile.cell)
    return sel


def on_mouse_entered(sel: Selection, tile: Tile) -> Selection:
    if (
        not sel.edit_mode
        and not sel.path_set
        and sel.start is not None
        and tile.walkable
        and tile.cell != sel.start
    ):
        return replace(sel, end=tile.cell)
    return sel


def reduce(sel: Selection, event: Event) -> Selection:
    """Apply one event. Unknown event types raise TypeError."""
    if isinstance(event, TileClicked):
        return on_tile_clicked(sel, event.tile)
    if isinstance(event, MouseEnteredTile):
        return on_mouse_entered(sel, event.tile)
    if isinstance(event, AlgorithmChanged):
        return replace(sel, algorithm=validate_algorithm(event.algorithm))
    if isinstance(event, AllowDiagonalToggled):
        return replace(sel, allow_diagonal=not sel.allow_diagonal)
    raise TypeError(f"Unsupported event: {event!r}")


class Session:
    """Holds the matrix, the current Selection and its projection."""

    def __init__(self, matrix: Matrix, algorithm: str = DEFAULT_ALGORITHM,
                 allow_diagonal: bool = True, edit_mode: bool = False):
        self.size = validate_matrix(matrix)
        self.matrix: Matrix = [list(row) for row in matrix]
        self._lock = threading.Lock()
        self._selection = Selection(
            algorithm=validate_algorithm(algorithm),
            allow_diagonal=bool(allow_diagonal),
            edit_mode=bool(edit_mode),
        )
        self._tiles: Tuple[Tile, ...] = ()
        self._result = SearchResult()
        self._reproject()
        log.info("session ready: %dx%d grid, %s, diagonal=%s",
                 self.size, self.size, algorithm, self._selection.allow_diagonal)

    @classmethod
    def from_config(cls, config) -> "Session":
        return cls(config.matrix, algorithm=config.algorithm,
                   allow_diagonal=config.allow_diagonal, edit_mode=config.edit_mode)

    # ---------- read side ----------
    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return self._tiles

    @property
    def path_set(self) -> bool:
        return self._selection.path_set

    @property
    def algorithm(self) -> str:
        return self._selection.algorithm

    @property
    def allow_diagonal(self) -> bool:
        return self._selection.allow_diagonal

    @property
    def path(self) -> List[Cell]:
        """Current path, start to end; [] when unset or unreachable."""
        return list(self._result.path)

    @property
    def last_search(self) -> SearchResult:
        """The search behind the current tiles (explored cells + metrics)."""
        return self._result

    def tile_at(self, x: int, y: int) -> Tile:
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(f"({x},{y}) is outside the {self.size}x{self.size} grid")
        return self._tiles[index_of(x, y, self.size)]

    # ---------- write side ----------
    def _reproject(self) -> Tuple[Tile, ...]:
        self._tiles, self._result = project_with_search(self.matrix, self._selection)
        return self._tiles

    def dispatch(self, event: Event) -> Tuple[Tile, ...]:
        with self._lock:
            before = self._selection
            after = reduce(before, event)
            if after != before:
                log.debug("%s: %s -> %s", type(event).__name__, before.state, after.state)
            self._selection = after
            return self._reproject()

    def click(self, x: int, y: int) -> Tuple[Tile, ...]:
        return self.dispatch(TileClicked(self.tile_at(x, y)))

    def hover(self, x: int, y: int) -> Tuple[Tile, ...]:
        return self.dispatch(MouseEnteredTile(self.tile_at(x, y)))

    def reset(self) -> Tuple[Tile, ...]:
        """Back to Idle, keeping the algorithm configuration."""
        with self._lock:
            self._selection = replace(self._selection, start=None, end=None, path_set=False)
            return self._reproject()
