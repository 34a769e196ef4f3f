"""Grid generation, read predicates and proximity queries."""

from __future__ import annotations

from .constants import CellType, HAZARD_TYPES
from .errors import (
    GridFrozenError,
    HazardGridError,
    InvalidConfigError,
    InvalidDimensionsError,
    OutOfBoundsError,
)
from .generation import generate, has_safe_route, safe_distance_map
from .grid import HazardGrid
from .scanning import ScanMatch, ScanResult, near_hazard, probe, scan


def classify(grid: HazardGrid, x: int, y: int) -> CellType:
    return grid.classify(x, y)


def can_move_to(grid: HazardGrid, x: int, y: int) -> bool:
    return grid.can_move_to(x, y)


def is_exit(grid: HazardGrid, x: int, y: int) -> bool:
    return grid.is_exit(x, y)


__all__ = [
    "CellType",
    "HAZARD_TYPES",
    "HazardGrid",
    "HazardGridError",
    "InvalidDimensionsError",
    "InvalidConfigError",
    "OutOfBoundsError",
    "GridFrozenError",
    "ScanMatch",
    "ScanResult",
    "generate",
    "has_safe_route",
    "safe_distance_map",
    "classify",
    "can_move_to",
    "is_exit",
    "scan",
    "near_hazard",
    "probe",
]
