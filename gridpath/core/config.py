# gridpath/core/config.py
#!/usr/bin/env python3
"""
Session configuration.

- Maps: JSON files under maps/ ({"size", "cells", "algorithm", "allow_diagonal", "edit_mode"})
- ENV:  GRIDPATH_MAP, GRIDPATH_ALGORITHM, GRIDPATH_DIAGONAL, GRIDPATH_LOG_LEVEL
- CLI:  --map=, --algo=, --diagonal=, --log-level=  (override ENV)
"""

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from gridpath.core.finders import DEFAULT_ALGORITHM, validate_algorithm
from gridpath.core.grid import validate_matrix
from gridpath.core.types import Matrix, ConfigurationError

log = logging.getLogger("gridpath.config")

MAP_DIR = Path(__file__).resolve().parents[2] / "maps"

DEFAULT_MATRIX: Matrix = [
    [1, 1, 0, 0, 0, 0, 0, 0],
    [1, 0, 0, 0, 0, 0, 0, 0],
    [1, 0, 0, 0, 1, 1, 0, 0],
    [0, 0, 0, 0, 0, 1, 0, 0],
    [0, 0, 1, 0, 0, 0, 0, 0],
    [0, 0, 1, 1, 0, 0, 0, 1],
    [0, 0, 0, 0, 0, 0, 0, 1],
    [0, 0, 0, 0, 0, 0, 1, 1],
]

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass
class SessionConfig:
    matrix: Matrix = field(default_factory=lambda: [list(r) for r in DEFAULT_MATRIX])
    algorithm: str = DEFAULT_ALGORITHM
    allow_diagonal: bool = True
    edit_mode: bool = False
    log_level: str = "WARNING"
    source: str = "default"

    @property
    def size(self) -> int:
        return len(self.matrix)

    def validate(self) -> "SessionConfig":
        validate_matrix(self.matrix)
        validate_algorithm(self.algorithm)
        return self


def parse_bool(value, name: str = "value") -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(f"{name}: expected a boolean, got {value!r}")


def available_maps() -> Dict[str, Path]:
    if not MAP_DIR.is_dir():
        return {}
    return {p.stem: p for p in sorted(MAP_DIR.glob("*.json"))}


def resolve_map_path(name_or_path: str) -> Path:
    """Bundled map key (e.g. 'default_8x8') or a path to a JSON file."""
    maps = available_maps()
    if name_or_path in maps:
        return maps[name_or_path]
    p = Path(name_or_path).expanduser()
    if p.is_file():
        return p
    raise ConfigurationError(
        f"Map {name_or_path!r} not found (bundled: {', '.join(maps) or 'none'})"
    )


def load_config(path) -> SessionConfig:
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        raise ConfigurationError(f"Cannot read map {path}: {ex}") from ex
    if not isinstance(data, dict) or "cells" not in data:
        raise ConfigurationError(f"Map {path} has no 'cells' matrix")

    cells = data["cells"]
    size = validate_matrix(cells)
    if "size" in data:
        try:
            declared = int(data["size"])
        except (TypeError, ValueError) as ex:
            raise ConfigurationError(f"Map {path}: size must be an integer, got {data['size']!r}") from ex
        if declared != size:
            raise ConfigurationError(f"Map {path}: size {declared} but cells are {size}x{size}")

    cfg = SessionConfig(
        matrix=[list(row) for row in cells],
        algorithm=data.get("algorithm", DEFAULT_ALGORITHM),
        allow_diagonal=parse_bool(data.get("allow_diagonal", True), "allow_diagonal"),
        edit_mode=parse_bool(data.get("edit_mode", False), "edit_mode"),
        source=str(path),
    )
    log.debug("loaded map %s (%dx%d)", path, size, size)
    return cfg.validate()


def _cli_flags(argv: Sequence[str]) -> Dict[str, str]:
    flags: Dict[str, str] = {}
    for arg in argv:
        if arg.startswith("--") and "=" in arg:
            key, value = arg[2:].split("=", 1)
            flags[key.lower()] = value
    return flags


def resolve_log_level(argv: Optional[Sequence[str]] = None,
                      environ: Optional[Mapping[str, str]] = None) -> str:
    """Log level alone, so logging can be set up before the map loads."""
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    level = _cli_flags(argv).get("log-level", environ.get("GRIDPATH_LOG_LEVEL"))
    return (level or SessionConfig.log_level).upper()


def resolve_config(argv: Optional[Sequence[str]] = None,
                   environ: Optional[Mapping[str, str]] = None) -> SessionConfig:
    """ENV first, then --key=value flags on top."""
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    flags = _cli_flags(argv)

    map_name = flags.get("map", environ.get("GRIDPATH_MAP"))
    cfg = load_config(resolve_map_path(map_name)) if map_name else SessionConfig()

    algorithm = flags.get("algo", environ.get("GRIDPATH_ALGORITHM"))
    if algorithm:
        cfg.algorithm = algorithm
    diagonal = flags.get("diagonal", environ.get("GRIDPATH_DIAGONAL"))
    if diagonal is not None:
        cfg.allow_diagonal = parse_bool(diagonal, "diagonal")
    cfg.log_level = resolve_log_level(argv, environ)
    return cfg.validate()
