# gridpath/core/finders.py
#!/usr/bin/env python3
"""
Pathfinder adapter: algorithm name -> path finder.

- ALGORITHMS maps a name to a factory taking ``allow_diagonal``.
- get_path_finder() memoizes one finder per (algorithm, allow_diagonal).
- Finders never see the caller's matrix: every call searches a private
  Grid snapshot built by grid_from_matrix().

Paths include both endpoints; an unreachable goal gives [].
"""

import logging
import threading
from typing import Callable, Dict, List, Protocol, Tuple, Type

from gridpath.core.astar import AStarAlgo
from gridpath.core.bfs import BreadthFirstAlgo
from gridpath.core.dijkstra import DijkstraAlgo
from gridpath.core.grid import grid_from_matrix, validate_matrix
from gridpath.core.types import (
    Cell, Matrix, SearchResult, ConfigurationError, InvalidEndpointError,
)

log = logging.getLogger("gridpath.finders")

DEFAULT_ALGORITHM = "AStarFinder"


class PathFinder(Protocol):
    def find_path(self, matrix: Matrix, start: Cell, end: Cell) -> List[Cell]:
        ...


class StepFinder:
    """Runs a stepping algo to completion on a fresh snapshot per call."""

    def __init__(self, algo_cls: Type, label: str, allow_diagonal: bool):
        self.algo_cls = algo_cls
        self.label = label
        self.allow_diagonal = bool(allow_diagonal)
        self.move = 8 if self.allow_diagonal else 4

    def __repr__(self) -> str:
        return f"StepFinder({self.label!r}, allow_diagonal={self.allow_diagonal})"

    def search(self, matrix: Matrix, start: Cell, end: Cell) -> SearchResult:
        grid = grid_from_matrix(matrix, start, end, self.move)
        for role, c in (("start", grid.start), ("end", grid.goal)):
            if not grid.in_bounds(c):
                raise InvalidEndpointError(f"{role} {c} is outside the {grid.width}x{grid.height} grid")
            if grid.is_block(c):
                raise InvalidEndpointError(f"{role} {c} is not walkable")

        algo = self.algo_cls(name=self.label)
        algo.init(grid)
        opened: List[Cell] = [grid.start]
        closed: List[Cell] = []
        while True:
            res = algo.step()
            opened.extend(res.opened)
            closed.extend(res.closed)
            if res.status == "done":
                path = list(res.path or [])
                log.debug("%s %s -> %s: %d cells", self.label, start, end, len(path))
                return SearchResult(path=path, opened=opened, closed=closed, metrics=res.metrics)
            if res.status == "no_path":
                log.debug("%s %s -> %s: unreachable", self.label, start, end)
                return SearchResult(opened=opened, closed=closed, metrics=res.metrics)

    def find_path(self, matrix: Matrix, start: Cell, end: Cell) -> List[Cell]:
        return self.search(matrix, start, end).path


def _step_factory(algo_cls: Type, label: str) -> Callable[[bool], PathFinder]:
    def factory(allow_diagonal: bool) -> PathFinder:
        return StepFinder(algo_cls, label, allow_diagonal)
    return factory


ALGORITHMS: Dict[str, Callable[[bool], PathFinder]] = {
    "AStarFinder": _step_factory(AStarAlgo, "A*"),
    "DijkstraFinder": _step_factory(DijkstraAlgo, "Dijkstra"),
    "BreadthFirstFinder": _step_factory(BreadthFirstAlgo, "BFS"),
}

_cache: Dict[Tuple[str, bool], PathFinder] = {}
_cache_lock = threading.Lock()


def available_algorithms() -> List[str]:
    return list(ALGORITHMS)


def validate_algorithm(algorithm: str) -> str:
    if algorithm not in ALGORITHMS:
        raise ConfigurationError(
            f"Unknown algorithm {algorithm!r}; expected one of {', '.join(ALGORITHMS)}"
        )
    return algorithm


def register_algorithm(name: str, factory: Callable[[bool], PathFinder]) -> None:
    """Add (or replace) a strategy. Cached finders for that name are dropped."""
    with _cache_lock:
        ALGORITHMS[name] = factory
        for key in [k for k in _cache if k[0] == name]:
            del _cache[key]
    log.debug("registered algorithm %s", name)


def clear_finder_cache() -> None:
    with _cache_lock:
        _cache.clear()


def get_path_finder(algorithm: str = DEFAULT_ALGORITHM, allow_diagonal: bool = True) -> PathFinder:
    """Memoized finder for the (algorithm, allow_diagonal) pair."""
    key = (algorithm, bool(allow_diagonal))
    with _cache_lock:
        finder = _cache.get(key)
        if finder is None:
            validate_algorithm(algorithm)
            finder = ALGORITHMS[algorithm](key[1])
            _cache[key] = finder
            log.debug("constructed finder %s", key)
        return finder


def find_path(matrix: Matrix, start: Cell, end: Cell, *,
              algorithm: str = DEFAULT_ALGORITHM, allow_diagonal: bool = True) -> List[Cell]:
    validate_matrix(matrix)
    finder = get_path_finder(algorithm, allow_diagonal)
    return list(finder.find_path(matrix, tuple(start), tuple(end)))


def search(matrix: Matrix, start: Cell, end: Cell, *,
           algorithm: str = DEFAULT_ALGORITHM, allow_diagonal: bool = True) -> SearchResult:
    """Like find_path, with the explored cells and metrics of the run.

    Falls back to a bare SearchResult for registered finders without search().
    """
    finder = get_path_finder(algorithm, allow_diagonal)
    if hasattr(finder, "search"):
        return finder.search(matrix, tuple(start), tuple(end))
    return SearchResult(path=list(finder.find_path(matrix, tuple(start), tuple(end))))
