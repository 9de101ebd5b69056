# gridpath/core/projection.py
#!/usr/bin/env python3
"""
Tile projection: grid + selection -> tiles the shell draws.

Recomputed from scratch after every event; the search dominates the
cost, not the tile walk.
"""

from dataclasses import replace
from typing import Iterable, List, Sequence, Tuple

from gridpath.core.finders import search
from gridpath.core.grid import build_tiles, index_of
from gridpath.core.types import Matrix, SearchResult, Tile

_SYMBOLS = {
    "blocked": "#",
    "start": "S",
    "end": "E",
    "path": "*",
    "open": ".",
}


def project_with_search(matrix: Matrix, selection) -> Tuple[Tuple[Tile, ...], SearchResult]:
    """Tiles for ``selection`` plus the one search run that marked them.

    ``selection`` is anything with start/end/algorithm/allow_diagonal.
    The SearchResult is empty until both endpoints are set; its path is
    ordered start to end.
    """
    tiles: List[Tile] = build_tiles(matrix)
    size = len(matrix)
    start, end = selection.start, selection.end
    result = SearchResult()

    if start is not None:
        i = index_of(start[0], start[1], size)
        tiles[i] = replace(tiles[i], is_start=True)
    if end is not None:
        i = index_of(end[0], end[1], size)
        tiles[i] = replace(tiles[i], is_end=True)
    if start is not None and end is not None:
        result = search(matrix, start, end, algorithm=selection.algorithm,
                        allow_diagonal=selection.allow_diagonal)
        for x, y in result.path:
            i = index_of(x, y, size)
            tiles[i] = replace(tiles[i], in_path=True)
    return tuple(tiles), result


def project(matrix: Matrix, selection) -> Tuple[Tile, ...]:
    """Tiles only; see project_with_search."""
    return project_with_search(matrix, selection)[0]


def _symbol(tile: Tile) -> str:
    if not tile.walkable:
        return _SYMBOLS["blocked"]
    if tile.is_start:
        return _SYMBOLS["start"]
    if tile.is_end:
        return _SYMBOLS["end"]
    if tile.in_path:
        return _SYMBOLS["path"]
    return _SYMBOLS["open"]


def render_ascii(tiles: Sequence[Tile], size: int) -> str:
    """Rows top to bottom, one character per tile."""
    lines: List[str] = []
    for y in range(size):
        lines.append("".join(_symbol(tiles[index_of(x, y, size)]) for x in range(size)))
    return "\n".join(lines)


def path_cells(tiles: Iterable[Tile]) -> List[Tuple[int, int]]:
    """Cells flagged in_path, in tile index order (not walk order)."""
    return [t.cell for t in tiles if t.in_path]
