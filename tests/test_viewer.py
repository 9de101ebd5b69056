"""Tests for the viewer entry point that do not open a window."""

import logging

import pytest

pytest.importorskip("pygame")

from gridpath.app import viewer  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("GRIDPATH_MAP", "GRIDPATH_ALGORITHM", "GRIDPATH_DIAGONAL", "GRIDPATH_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    yield
    # main() installs a console handler on "gridpath"
    logger = logging.getLogger("gridpath")
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


def test_ascii_mode_prints_initial_grid(capsys):
    assert viewer.main(["--ascii"]) == 0
    rows = capsys.readouterr().out.strip().splitlines()
    assert rows[0] == "##......"
    assert rows[7] == "......##"


def test_ascii_mode_with_bundled_map(capsys):
    assert viewer.main(["--ascii", "--map=walled_pocket_8x8"]) == 0
    rows = capsys.readouterr().out.strip().splitlines()
    assert rows[2] == ".#..#..."


def test_bad_configuration_exits_with_status_1(capsys):
    assert viewer.main(["--ascii", "--algo=Teleport"]) == 1
    assert "Failed to start session" in capsys.readouterr().out


def test_algo_labels_cover_registry():
    from gridpath.core.finders import available_algorithms

    assert set(viewer.ALGO_LABELS) <= set(available_algorithms())


def test_bad_map_file_exits_with_status_1(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text('{"cells": [5, 6]}')
    assert viewer.main(["--ascii", f"--map={path}"]) == 1
    assert "must be a list" in capsys.readouterr().out


def test_map_loading_is_logged_at_debug(caplog):
    assert viewer.main(["--ascii", "--map=walled_pocket_8x8", "--log-level=DEBUG"]) == 0
    assert any(r.name == "gridpath.config" and "loaded map" in r.getMessage()
               for r in caplog.records)
