"""Shared fixtures for the gridpath test suite."""

import pytest

from gridpath.core.config import DEFAULT_MATRIX
from gridpath.core.finders import clear_finder_cache


@pytest.fixture(autouse=True)
def _fresh_finder_cache():
    clear_finder_cache()
    yield
    clear_finder_cache()


@pytest.fixture
def default_matrix():
    return [list(row) for row in DEFAULT_MATRIX]


@pytest.fixture
def pocket_matrix():
    # cells (2..3, 2..3) are sealed off by a ring of walls
    return [
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 1, 1, 1, 1, 0, 0, 0],
        [0, 1, 0, 0, 1, 0, 0, 0],
        [0, 1, 0, 0, 1, 0, 0, 0],
        [0, 1, 1, 1, 1, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
    ]


def assert_contiguous(path, diagonal):
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        dx, dy = abs(ax - bx), abs(ay - by)
        if diagonal:
            assert max(dx, dy) == 1, f"{(ax, ay)} -> {(bx, by)} is not a single step"
        else:
            assert dx + dy == 1, f"{(ax, ay)} -> {(bx, by)} is not an orthogonal step"
