"""Procedural generation for the hazard grid.

Keeps the Gym env file small by isolating:
  - perimeter walls
  - safe-route reachability (BFS)
  - tiered hazard placement that never cuts the safe route
"""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from ..config import GenerationConfig, RATIO_TOLERANCE, TierSpec
from .constants import CellType, MIN_SIZE, SAFE_ROUTE_TYPES, START_POS
from .errors import InvalidDimensionsError
from .grid import HazardGrid

logger = logging.getLogger(__name__)

NEIGHBOURS = [(0, -1), (0, 1), (-1, 0), (1, 0)]

# Distance value for cells with no safe route to the target
UNREACHABLE = np.iinfo(np.int32).max

SeedLike = Union[None, int, np.random.Generator]
ConfigLike = Union[None, GenerationConfig, Mapping[str, Any]]


def build_perimeter(grid: HazardGrid) -> None:
    """Stamp the outer ring as walls; the interior is left untouched."""
    cells = grid.cells
    cells[0, :] = CellType.WALL
    cells[-1, :] = CellType.WALL
    cells[:, 0] = CellType.WALL
    cells[:, -1] = CellType.WALL


def _safe_mask(grid: HazardGrid) -> np.ndarray:
    return np.isin(grid.cells, [int(t) for t in SAFE_ROUTE_TYPES])


def has_safe_route(grid: HazardGrid, start: Tuple[int, int], target: Tuple[int, int]) -> bool:
    """BFS: can we get from start to target stepping only on Safe/Exit cells?

    Hazards are walkable for movement but never count toward this route.
    """
    sx, sy = start
    grid.get(sx, sy)  # bounds check on the start cell

    walkable = _safe_mask(grid)
    visited = np.zeros(grid.shape, dtype=bool)
    visited[sy, sx] = True
    q = deque([(sx, sy)])

    while q:
        x, y = q.popleft()
        if (x, y) == target:
            return True

        for dx, dy in NEIGHBOURS:
            nx, ny = x + dx, y + dy
            if not grid.in_bounds(nx, ny):
                continue
            if visited[ny, nx] or not walkable[ny, nx]:
                continue
            visited[ny, nx] = True
            q.append((nx, ny))

    return False


def safe_distance_map(grid: HazardGrid, target: Tuple[int, int]) -> np.ndarray:
    """Reverse BFS from the target over Safe/Exit cells.

    Returns:
        dist: int32 array shape (rows, cols)
              dist[y, x] = fewest safe steps from (x, y) to target.
              Cells without a safe route are set to UNREACHABLE.
    """
    tx, ty = target
    grid.get(tx, ty)

    walkable = _safe_mask(grid)
    dist = np.full(grid.shape, UNREACHABLE, dtype=np.int32)
    dist[ty, tx] = 0
    q = deque([(tx, ty)])

    while q:
        x, y = q.popleft()
        d = int(dist[y, x])

        for dx, dy in NEIGHBOURS:
            nx, ny = x + dx, y + dy
            if not grid.in_bounds(nx, ny) or not walkable[ny, nx]:
                continue
            if dist[ny, nx] > d + 1:
                dist[ny, nx] = d + 1
                q.append((nx, ny))

    return dist


def candidate_cells(grid: HazardGrid) -> List[Tuple[int, int]]:
    """Interior Safe cells other than the start and the exit, row-major."""
    out: List[Tuple[int, int]] = []
    for y in range(1, grid.rows - 1):
        for x in range(1, grid.cols - 1):
            if (x, y) == grid.start or (x, y) == grid.exit_pos:
                continue
            if int(grid.cells[y, x]) == CellType.SAFE:
                out.append((x, y))
    return out


def compute_quotas(n_candidates: int, tiers: Sequence[TierSpec], density: float) -> List[int]:
    """Split floor(n_candidates * density) across tiers by ratio.

    Each tier gets floor(total * ratio); what flooring drops is handed to
    the last tier, so ratios summing to 1 always use the whole target.
    """
    if not tiers:
        return []
    total = math.floor(n_candidates * density)
    quotas = [math.floor(total * ratio + RATIO_TOLERANCE) for _, ratio in tiers]
    budget = math.floor(total * sum(r for _, r in tiers) + RATIO_TOLERANCE)
    quotas[-1] += max(0, min(budget, total) - sum(quotas))
    return quotas


def place_hazards(
    grid: HazardGrid,
    tiers: Sequence[TierSpec],
    density: float,
    rng: np.random.Generator,
) -> Dict[CellType, int]:
    """Turn candidate cells into hazards without breaking the safe route.

    Candidates are visited in a shuffled order. Each one is tentatively set
    to the first tier still under quota and kept only if the exit is still
    reachable from the start over safe cells; otherwise it goes back to Safe
    and is not tried again.

    Returns the number of committed cells per tier.
    """
    candidates = candidate_cells(grid)
    quotas = compute_quotas(len(candidates), tiers, density)
    placed: Dict[CellType, int] = {tier: 0 for tier, _ in tiers}

    if not candidates or not quotas:
        return placed

    logger.debug(
        "placing hazards: %d candidates, quotas %s",
        len(candidates),
        {tier.name: q for (tier, _), q in zip(tiers, quotas)},
    )

    order = rng.permutation(len(candidates))
    rejected = 0

    for idx in order:
        tier: Optional[CellType] = None
        for (t, _), quota in zip(tiers, quotas):
            if placed[t] < quota:
                tier = t
                break
        if tier is None:
            break  # all quotas met

        x, y = candidates[int(idx)]
        grid.set(x, y, tier)

        if has_safe_route(grid, grid.start, grid.exit_pos):
            placed[tier] += 1
        else:
            grid.set(x, y, CellType.SAFE)
            rejected += 1

    logger.debug("placed %s, %d candidates rejected to keep the route",
                 {t.name: n for t, n in placed.items()}, rejected)
    return placed


def validate_dimensions(cols: int, rows: int) -> None:
    if cols < MIN_SIZE or rows < MIN_SIZE:
        raise InvalidDimensionsError(
            f"grid must be at least {MIN_SIZE}x{MIN_SIZE}, got {cols}x{rows}"
        )
    if (cols - 2, rows - 2) == START_POS:
        raise InvalidDimensionsError(
            f"{cols}x{rows} grid has one interior cell; start and exit would coincide"
        )


def as_config(config: ConfigLike) -> GenerationConfig:
    if config is None:
        return GenerationConfig()
    if isinstance(config, GenerationConfig):
        return config
    return GenerationConfig.from_dict(config)


def as_rng(rng: SeedLike) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def generate(
    cols: int,
    rows: int,
    config: ConfigLike = None,
    rng: SeedLike = None,
) -> HazardGrid:
    """Generate a bordered arena with an exit and tiered hazards.

    Args:
        cols, rows: grid size including the border walls
        config: GenerationConfig, a dict accepted by GenerationConfig.from_dict,
                or None for the default three-tier layout
        rng: numpy Generator or integer seed; the same seed always gives
             the same grid

    Returns a frozen HazardGrid.
    """
    cols, rows = int(cols), int(rows)
    validate_dimensions(cols, rows)
    cfg = as_config(config)
    gen = as_rng(rng)

    grid = HazardGrid(cols, rows, fill=CellType.SAFE)
    build_perimeter(grid)

    ex, ey = grid.exit_pos
    grid.set(ex, ey, CellType.EXIT)

    placed = place_hazards(grid, cfg.tiers, cfg.density, gen)
    grid.freeze()

    logger.info(
        "generated %dx%d grid: %s",
        cols, rows, ", ".join(f"{t.name.lower()}={n}" for t, n in placed.items()) or "no hazards",
    )
    return grid
