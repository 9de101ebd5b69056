"""Tests for the selection state machine and the Session wrapper."""

import pytest

from conftest import assert_contiguous
from gridpath.core import projection
from gridpath.core.grid import build_tiles, index_of
from gridpath.core.session import (
    AlgorithmChanged,
    AllowDiagonalToggled,
    MouseEnteredTile,
    Selection,
    Session,
    TileClicked,
    reduce,
)
from gridpath.core.types import ConfigurationError, Tile


@pytest.fixture
def tiles(default_matrix):
    return build_tiles(default_matrix)


def at(tiles, x, y) -> Tile:
    return tiles[index_of(x, y, 8)]


def test_initial_selection_is_idle():
    sel = Selection()
    assert (sel.start, sel.end, sel.path_set) == (None, None, False)
    assert sel.state == "Idle"


def test_click_walkable_picks_start(tiles):
    sel = reduce(Selection(), TileClicked(at(tiles, 7, 0)))
    assert sel.start == (7, 0)
    assert sel.end is None
    assert sel.state == "AwaitingEnd"


def test_hover_previews_end_until_commit(tiles):
    sel = reduce(Selection(), TileClicked(at(tiles, 7, 0)))
    sel = reduce(sel, MouseEnteredTile(at(tiles, 4, 4)))
    assert sel.end == (4, 4)
    sel = reduce(sel, MouseEnteredTile(at(tiles, 0, 7)))
    assert sel.end == (0, 7)

    # clicking anywhere walkable commits the previewed end
    sel = reduce(sel, TileClicked(at(tiles, 3, 3)))
    assert sel.path_set is True
    assert sel.end == (0, 7)
    assert sel.state == "PathCommitted"

    # committed: hover no longer moves the end
    assert reduce(sel, MouseEnteredTile(at(tiles, 5, 5))) == sel


def test_click_after_commit_starts_over(tiles):
    sel = Selection(start=(7, 0), end=(0, 7), path_set=True)
    sel = reduce(sel, TileClicked(at(tiles, 1, 1)))
    assert sel.start == (1, 1)
    assert sel.end is None
    assert sel.path_set is False


def test_restart_takes_precedence_over_commit(tiles):
    # start is set and path_set is True: restart wins
    sel = Selection(start=(7, 0), end=(0, 7), path_set=True)
    assert reduce(sel, TileClicked(at(tiles, 7, 0))).path_set is False


@pytest.mark.parametrize("sel", [
    Selection(),
    Selection(start=(7, 0)),
    Selection(start=(7, 0), end=(0, 7)),
    Selection(start=(7, 0), end=(0, 7), path_set=True),
])
def test_click_on_wall_is_a_no_op(tiles, sel):
    wall = at(tiles, 0, 0)
    assert not wall.walkable
    assert reduce(sel, TileClicked(wall)) == sel


def test_hover_guards(tiles):
    start = at(tiles, 7, 0)
    awaiting = Selection(start=start.cell)

    # no start yet
    assert reduce(Selection(), MouseEnteredTile(at(tiles, 3, 3))) == Selection()
    # wall
    assert reduce(awaiting, MouseEnteredTile(at(tiles, 0, 0))) == awaiting
    # the start tile itself
    assert reduce(awaiting, MouseEnteredTile(start)) == awaiting
    # edit mode gates hover entirely
    editing = Selection(start=start.cell, edit_mode=True)
    assert reduce(editing, MouseEnteredTile(at(tiles, 3, 3))) == editing


def test_commit_without_hover_keeps_end_empty(tiles):
    sel = reduce(Selection(), TileClicked(at(tiles, 7, 0)))
    sel = reduce(sel, TileClicked(at(tiles, 7, 0)))
    assert sel.path_set is True
    assert sel.end is None


def test_configuration_events_leave_selection_alone(tiles):
    sel = Selection(start=(7, 0), end=(0, 7), path_set=True)
    changed = reduce(sel, AlgorithmChanged("DijkstraFinder"))
    assert changed.algorithm == "DijkstraFinder"
    assert (changed.start, changed.end, changed.path_set) == (sel.start, sel.end, sel.path_set)

    toggled = reduce(sel, AllowDiagonalToggled())
    assert toggled.allow_diagonal is not sel.allow_diagonal
    assert (toggled.start, toggled.end, toggled.path_set) == (sel.start, sel.end, sel.path_set)


def test_unknown_algorithm_event_rejected():
    with pytest.raises(ConfigurationError):
        reduce(Selection(), AlgorithmChanged("Teleport"))


def test_unsupported_event_type():
    with pytest.raises(TypeError):
        reduce(Selection(), "tile clicked")


# ---------- Session ----------
def count_flags(tiles):
    return (sum(t.is_start for t in tiles), sum(t.is_end for t in tiles))


def test_session_rejects_bad_configuration(default_matrix):
    with pytest.raises(ConfigurationError):
        Session([[0, 0], [0]])
    with pytest.raises(ConfigurationError):
        Session(default_matrix, algorithm="Nope")


def test_session_full_interaction(default_matrix):
    session = Session(default_matrix)
    assert session.path == []

    session.click(7, 0)
    session.hover(0, 7)
    assert session.tile_at(7, 0).is_start
    assert session.tile_at(0, 7).is_end
    preview = session.path
    assert preview[0] == (7, 0) and preview[-1] == (0, 7)

    session.click(4, 4)
    assert session.path_set
    assert session.path == preview

    session.click(2, 1)
    assert not session.path_set
    assert session.selection.start == (2, 1)
    assert session.path == []


def test_flags_stay_unique_through_events(default_matrix):
    session = Session(default_matrix)
    moves = [
        ("click", 7, 0), ("hover", 6, 1), ("hover", 0, 0), ("hover", 0, 7),
        ("click", 0, 0), ("click", 3, 3), ("hover", 5, 5), ("click", 1, 1),
        ("hover", 1, 1), ("hover", 6, 6), ("click", 6, 6),
    ]
    for kind, x, y in moves:
        getattr(session, kind)(x, y)
        starts, ends = count_flags(session.tiles)
        assert starts <= 1 and ends <= 1
        for t in session.tiles:
            if not t.walkable:
                assert not (t.is_start or t.is_end or t.in_path)


def test_toggling_diagonal_recomputes_path(default_matrix):
    session = Session(default_matrix, allow_diagonal=True)
    session.click(7, 0)
    session.hover(0, 7)
    session.click(0, 7)
    diagonal = session.path

    session.dispatch(AllowDiagonalToggled())
    assert session.allow_diagonal is False
    assert session.path_set is True
    straight = session.path

    assert len(straight) == 15
    assert len(diagonal) < len(straight)
    assert set(diagonal) != set(straight)


def test_unreachable_commit_marks_nothing(pocket_matrix):
    session = Session(pocket_matrix)
    session.click(6, 6)
    session.hover(2, 2)
    session.click(5, 5)
    assert session.path_set
    assert session.path == []
    assert session.tile_at(2, 2).is_end
    assert not any(t.in_path for t in session.tiles)


def test_reset_returns_to_idle(default_matrix):
    session = Session(default_matrix, algorithm="BreadthFirstFinder")
    session.click(7, 0)
    session.hover(0, 7)
    session.reset()
    assert session.selection.state == "Idle"
    assert session.algorithm == "BreadthFirstFinder"
    assert not any(t.is_start or t.is_end or t.in_path for t in session.tiles)


def test_session_copies_matrix(default_matrix):
    session = Session(default_matrix)
    default_matrix[3][0] = 1
    assert session.tile_at(0, 3).walkable


def test_tile_at_bounds(default_matrix):
    session = Session(default_matrix)
    with pytest.raises(IndexError):
        session.tile_at(8, 0)


def test_session_path_runs_start_to_end(default_matrix):
    session = Session(default_matrix, allow_diagonal=False)
    session.click(7, 0)
    session.hover(0, 7)
    path = session.path
    assert len(path) == 15
    assert path[0] == (7, 0) and path[-1] == (0, 7)
    assert_contiguous(path, diagonal=False)


def test_one_search_per_event_feeds_tiles_and_metrics(default_matrix, monkeypatch):
    calls = []
    real_search = projection.search

    def counting_search(matrix, start, end, **kw):
        calls.append((start, end))
        return real_search(matrix, start, end, **kw)

    monkeypatch.setattr(projection, "search", counting_search)
    session = Session(default_matrix)
    session.click(7, 0)
    assert calls == []
    session.hover(0, 7)
    assert calls == [((7, 0), (0, 7))]

    result = session.last_search
    assert result.path == session.path
    assert result.closed
    assert {t.cell for t in session.tiles if t.in_path} == set(result.path)


def test_last_search_is_empty_without_both_endpoints(default_matrix):
    session = Session(default_matrix)
    session.click(7, 0)
    assert not session.last_search.found
    assert session.last_search.metrics == {}
