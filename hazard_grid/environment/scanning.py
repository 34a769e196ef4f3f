"""Proximity queries around the agent.

``scan`` walks the four cardinal rays for silent hazards, ``near_hazard``
checks the square neighbourhood, and ``probe`` looks at a single adjacent
cell for a concealed hazard. All three are read-only and cheap enough to
call every tick; deciding how often to alert the player is up to the caller.
"""

from __future__ import annotations

import builtins
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .constants import CellType, DIRECTION_DELTAS
from .errors import InvalidConfigError
from .grid import HazardGrid

# Ray order, matches how matches are reported
SCAN_ORDER = ("left", "right", "up", "down")

# Observation order for flag arrays
FLAG_ORDER = ("up", "down", "left", "right")


@dataclass(frozen=True)
class ScanMatch:
    x: int
    y: int
    dx: int
    dy: int


@dataclass(frozen=True)
class ScanResult:
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    matches: Tuple[ScanMatch, ...] = ()

    @property
    def any(self) -> bool:
        return self.up or self.down or self.left or self.right

    def directions(self) -> Tuple[str, ...]:
        return tuple(d for d in FLAG_ORDER if getattr(self, d))

    def as_array(self) -> np.ndarray:
        return np.array([getattr(self, d) for d in FLAG_ORDER], dtype=np.int8)


def scan(
    grid: HazardGrid,
    x: int,
    y: int,
    range: int = 1,
    tier: CellType = CellType.HAZARD_SILENT,
) -> ScanResult:
    """Report which cardinal directions hold a ``tier`` cell within ``range``.

    Every hit is listed with its signed offset from (x, y); cells outside
    the grid are skipped.
    """
    if range < 0:
        raise InvalidConfigError(f"scan range must be >= 0, got {range}")

    flags = dict.fromkeys(SCAN_ORDER, False)
    matches = []
    for name in SCAN_ORDER:
        dx, dy = DIRECTION_DELTAS[name]
        for dist in builtins.range(1, range + 1):
            cx, cy = x + dx * dist, y + dy * dist
            if not grid.in_bounds(cx, cy):
                continue
            if int(grid.cells[cy, cx]) == tier:
                flags[name] = True
                matches.append(ScanMatch(cx, cy, dx * dist, dy * dist))

    return ScanResult(matches=tuple(matches), **flags)


def near_hazard(
    grid: HazardGrid,
    x: int,
    y: int,
    range: int = 1,
    tier: CellType = CellType.HAZARD_SILENT,
) -> bool:
    """True if any ``tier`` cell lies in the (2*range+1)^2 square around (x, y)."""
    if range < 0:
        raise InvalidConfigError(f"scan range must be >= 0, got {range}")
    x0, x1 = max(0, x - range), min(grid.cols, x + range + 1)
    y0, y1 = max(0, y - range), min(grid.rows, y + range + 1)
    if x0 >= x1 or y0 >= y1:
        return False
    return bool(np.any(grid.cells[y0:y1, x0:x1] == int(tier)))


def probe(
    grid: HazardGrid,
    x: int,
    y: int,
    direction: Union[str, Tuple[int, int]],
    tier: CellType = CellType.HAZARD_CONCEALED,
) -> bool:
    """Check the adjacent cell in ``direction`` for a ``tier`` hazard.

    ``direction`` is one of "up", "down", "left", "right" or a (dx, dy)
    unit step. Neighbours outside the grid report False.
    """
    if isinstance(direction, str):
        try:
            dx, dy = DIRECTION_DELTAS[direction.lower()]
        except KeyError:
            raise ValueError(f"Unknown direction: {direction!r}") from None
    else:
        dx, dy = direction
        if abs(dx) + abs(dy) != 1:
            raise ValueError(f"Probe step must be a cardinal unit step, got {direction!r}")

    nx, ny = x + dx, y + dy
    return grid.in_bounds(nx, ny) and int(grid.cells[ny, nx]) == tier
