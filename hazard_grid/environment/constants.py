"""Constants for the hazard grid navigation game."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Tuple


class CellType(IntEnum):
    WALL = 0
    SAFE = 1
    HAZARD_VISIBLE = 2    # obvious on sight
    HAZARD_SILENT = 3     # looks safe, found by proximity scan
    HAZARD_CONCEALED = 4  # looks safe, found only by probing
    EXIT = 5


HAZARD_TYPES = frozenset({
    CellType.HAZARD_VISIBLE,
    CellType.HAZARD_SILENT,
    CellType.HAZARD_CONCEALED,
})

# Cells a safe route may use
SAFE_ROUTE_TYPES = frozenset({CellType.SAFE, CellType.EXIT})

# Actions
UP: int = 0
DOWN: int = 1
LEFT: int = 2
RIGHT: int = 3
PROBE_UP: int = 4
PROBE_DOWN: int = 5
PROBE_LEFT: int = 6
PROBE_RIGHT: int = 7

ACTION_DELTAS: Dict[int, Tuple[int, int]] = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

PROBE_ACTIONS: Dict[int, int] = {
    PROBE_UP: UP,
    PROBE_DOWN: DOWN,
    PROBE_LEFT: LEFT,
    PROBE_RIGHT: RIGHT,
}

DIRECTION_NAMES: Dict[int, str] = {
    UP: "up",
    DOWN: "down",
    LEFT: "left",
    RIGHT: "right",
}

DIRECTION_DELTAS: Dict[str, Tuple[int, int]] = {
    DIRECTION_NAMES[a]: d for a, d in ACTION_DELTAS.items()
}

# Smallest arena: one-cell border around at least one interior cell
MIN_SIZE: int = 3

START_POS: Tuple[int, int] = (1, 1)

METADATA = {
    "render_modes": [],
}
