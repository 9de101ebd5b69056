# gridpath/core/grid.py
#!/usr/bin/env python3
"""
Grid model: obstacle matrix -> flat, indexed tile list.

The matrix is authored row-major (matrix[y][x]) but tiles are walked
column-major, y within x, so that a tile's key is always

    index = x * size + y

Keep index_of / position_of as the only places that know this mapping.
"""

from typing import List, Sequence

from gridpath.core.types import Cell, Grid, Matrix, Tile, ConfigurationError


def index_of(x: int, y: int, size: int) -> int:
    """Flat index of column x, row y."""
    return x * size + y


def position_of(index: int, size: int) -> Cell:
    """Inverse of index_of."""
    return divmod(index, size)


def validate_matrix(matrix: Sequence[Sequence[int]]) -> int:
    """Check the matrix is a non-empty square of 0/1 values and return its size."""
    if not isinstance(matrix, (list, tuple)):
        raise ConfigurationError(f"Obstacle matrix must be a list of rows, got {type(matrix).__name__}")
    if not matrix:
        raise ConfigurationError("Obstacle matrix is empty")
    size = len(matrix)
    for y, row in enumerate(matrix):
        if not isinstance(row, (list, tuple)):
            raise ConfigurationError(f"Obstacle matrix row {y} must be a list, got {row!r}")
        if len(row) != size:
            raise ConfigurationError(
                f"Obstacle matrix must be {size}x{size}: row {y} has {len(row)} cells"
            )
        for x, v in enumerate(row):
            if v not in (0, 1) or isinstance(v, float):
                raise ConfigurationError(
                    f"Obstacle matrix values must be 0 or 1, got {v!r} at ({x},{y})"
                )
    return size


def build_tiles(matrix: Matrix) -> List[Tile]:
    """Base tiles for the matrix: no start, end or path flags set."""
    size = validate_matrix(matrix)
    tiles: List[Tile] = []
    for x in range(size):
        for y in range(size):
            tiles.append(Tile(
                x=x,
                y=y,
                index=index_of(x, y, size),
                walkable=not matrix[y][x],
            ))
    return tiles


def grid_from_matrix(matrix: Matrix, start: Cell, goal: Cell, move: int = 4) -> Grid:
    """Fresh search grid over a private copy of the matrix."""
    size = validate_matrix(matrix)
    cells = [list(row) for row in matrix]
    return Grid(size, size, cells, tuple(start), tuple(goal), move)
