"""Exceptions raised by grid generation and grid queries."""

from __future__ import annotations


class HazardGridError(Exception):
    """Base class for every error raised by this package."""


class InvalidDimensionsError(HazardGridError, ValueError):
    """Arena too small to hold the border, a start cell and a distinct exit."""


class InvalidConfigError(HazardGridError, ValueError):
    """Density, tier ratio or scan range outside its valid range."""


class OutOfBoundsError(HazardGridError, IndexError):
    def __init__(self, x: int, y: int, cols: int, rows: int):
        super().__init__(f"({x}, {y}) is outside a {cols}x{rows} grid")
        self.x = x
        self.y = y


class GridFrozenError(HazardGridError, RuntimeError):
    """Write attempted on a grid that finished generation."""
