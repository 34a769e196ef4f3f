"""Grid model: a dense cell-type array with bounds-checked access.

Cells are stored in a numpy array indexed ``cells[y, x]`` (row-major, the
same layout the rest of the package reads). Hazard membership is a lookup
into this array, so there is no separate coordinate set to keep in sync.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np

from .constants import CellType, HAZARD_TYPES, SAFE_ROUTE_TYPES, START_POS
from .errors import GridFrozenError, OutOfBoundsError


class HazardGrid:
    """A ``rows x cols`` arena of :class:`CellType` tags.

    The start cell is fixed at ``(1, 1)`` and the exit at
    ``(cols - 2, rows - 2)``. Only the generator writes to a grid; once
    :meth:`freeze` is called every write raises :class:`GridFrozenError`.
    """

    def __init__(self, cols: int, rows: int, fill: CellType = CellType.SAFE):
        self.cols = int(cols)
        self.rows = int(rows)
        self.cells: np.ndarray = np.full((self.rows, self.cols), int(fill), dtype=np.int8)
        self.start: Tuple[int, int] = START_POS
        self.exit_pos: Tuple[int, int] = (self.cols - 2, self.rows - 2)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @property
    def frozen(self) -> bool:
        return not self.cells.flags.writeable

    def freeze(self) -> None:
        self.cells.flags.writeable = False

    # -- accessors

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.cols, self.rows)

    def get(self, x: int, y: int) -> CellType:
        self._check(x, y)
        return CellType(int(self.cells[y, x]))

    def set(self, x: int, y: int, cell_type: CellType) -> None:
        self._check(x, y)
        if self.frozen:
            raise GridFrozenError("grid is read-only once generation has finished")
        self.cells[y, x] = int(cell_type)

    # -- read interface for collaborators

    def classify(self, x: int, y: int) -> CellType:
        return self.get(x, y)

    def can_move_to(self, x: int, y: int) -> bool:
        """Walls and the outside block movement; hazards do not."""
        if not self.in_bounds(x, y):
            return False
        return int(self.cells[y, x]) != CellType.WALL

    def is_exit(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and int(self.cells[y, x]) == CellType.EXIT

    def is_hazard(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and int(self.cells[y, x]) in HAZARD_TYPES

    def is_safe_to_walk(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and int(self.cells[y, x]) in SAFE_ROUTE_TYPES

    # -- summaries

    def count(self, cell_type: CellType) -> int:
        return int(np.count_nonzero(self.cells == int(cell_type)))

    def positions(self, cell_type: CellType) -> List[Tuple[int, int]]:
        ys, xs = np.nonzero(self.cells == int(cell_type))
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def tier_counts(self) -> Dict[CellType, int]:
        return {t: self.count(t) for t in sorted(HAZARD_TYPES)}

    def hazard_count(self) -> int:
        return sum(self.tier_counts().values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HazardGrid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.cells, other.cells))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        counts = ", ".join(f"{t.name.lower()}={n}" for t, n in self.tier_counts().items())
        return f"HazardGrid({self.cols}x{self.rows}, {counts})"
