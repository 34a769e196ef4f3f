"""
Hazard Grid
===========
Procedural hazard arenas for a grid navigation game.

This package provides:
- generate(): bordered arena with an exit and tiered hazards that always
  keeps a hazard-free route from (1, 1) to the exit
- scan() / probe(): proximity queries for hidden hazard tiers
- HazardGridEnv: Gymnasium environment that plays the game loop

Usage:
    from hazard_grid import generate, scan

    grid = generate(20, 15, {"density": 0.3, "tier_ratios": [0.5, 0.5]}, rng=7)
    flags = scan(grid, 1, 1, range=1)
    if flags.right:
        ...
"""

__version__ = "1.0.0"

from .environment import (
    CellType,
    HazardGrid,
    HazardGridError,
    InvalidConfigError,
    InvalidDimensionsError,
    OutOfBoundsError,
    GridFrozenError,
    ScanResult,
    generate,
    has_safe_route,
    classify,
    can_move_to,
    is_exit,
    scan,
    near_hazard,
    probe,
)
from .config import GenerationConfig, PRESETS
from .environment.hazard_env import HazardGridEnv

__all__ = [
    "GenerationConfig",
    "PRESETS",
    "CellType",
    "HazardGrid",
    "HazardGridError",
    "InvalidConfigError",
    "InvalidDimensionsError",
    "OutOfBoundsError",
    "GridFrozenError",
    "ScanResult",
    "generate",
    "has_safe_route",
    "classify",
    "can_move_to",
    "is_exit",
    "scan",
    "near_hazard",
    "probe",
    "HazardGridEnv",
]
