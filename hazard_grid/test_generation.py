"""Generation tests: layout invariants, hazard quotas and determinism."""

from __future__ import annotations

import math

import numpy as np
import pytest

from hazard_grid.config import GenerationConfig
from hazard_grid.environment import (
    CellType,
    HazardGrid,
    InvalidConfigError,
    InvalidDimensionsError,
    OutOfBoundsError,
    can_move_to,
    generate,
    has_safe_route,
    safe_distance_map,
)
from hazard_grid.environment.generation import (
    UNREACHABLE,
    build_perimeter,
    candidate_cells,
    compute_quotas,
    place_hazards,
)

V = CellType.HAZARD_VISIBLE
S = CellType.HAZARD_SILENT
C = CellType.HAZARD_CONCEALED

TWO_TIER = {"density": 0.4, "tiers": [("visible", 0.5), ("silent", 0.5)]}


def open_grid(cols: int, rows: int) -> HazardGrid:
    grid = HazardGrid(cols, rows)
    build_perimeter(grid)
    grid.set(*grid.exit_pos, CellType.EXIT)
    return grid


def assert_layout(grid: HazardGrid) -> None:
    cells = grid.cells
    assert np.all(cells[0, :] == CellType.WALL)
    assert np.all(cells[-1, :] == CellType.WALL)
    assert np.all(cells[:, 0] == CellType.WALL)
    assert np.all(cells[:, -1] == CellType.WALL)
    assert grid.positions(CellType.EXIT) == [(grid.cols - 2, grid.rows - 2)]
    assert grid.get(1, 1) == CellType.SAFE
    assert has_safe_route(grid, (1, 1), grid.exit_pos)


# -- layout invariants

def test_randomized_grids_keep_every_invariant():
    rng = np.random.default_rng(2024)
    for _ in range(1000):
        cols = int(rng.integers(4, 13))
        rows = int(rng.integers(4, 13))
        density = float(rng.uniform(0.0, 1.0))
        ratios = [0.33, 0.33, 0.34] if rng.random() < 0.5 else [0.5, 0.5]
        config = GenerationConfig.from_dict({"density": density, "tier_ratios": ratios})

        grid = generate(cols, rows, config, rng=int(rng.integers(0, 2**31)))
        assert_layout(grid)

        n_candidates = (cols - 2) * (rows - 2) - 2
        quotas = compute_quotas(n_candidates, config.tiers, density)
        counts = grid.tier_counts()
        for (tier, _), quota in zip(config.tiers, quotas):
            assert counts[tier] <= quota
        assert grid.hazard_count() <= math.floor(density * n_candidates)


def test_generated_grid_is_frozen():
    grid = generate(8, 6, rng=1)
    assert grid.frozen


def test_concrete_two_tier_scenario():
    config = GenerationConfig.from_dict(TWO_TIER)
    fresh = open_grid(10, 8)
    assert len(candidate_cells(fresh)) == 46
    assert compute_quotas(46, config.tiers, 0.4) == [9, 9]

    grid = generate(10, 8, config, rng=5)
    counts = grid.tier_counts()
    assert counts[V] <= 9
    assert counts[S] <= 9
    assert counts[C] == 0
    assert_layout(grid)


def test_open_arena_fills_quotas_in_priority_order():
    config = GenerationConfig(density=0.3)
    grid = generate(20, 20, config, rng=11)
    n_candidates = 18 * 18 - 2
    quotas = compute_quotas(n_candidates, config.tiers, 0.3)
    counts = grid.tier_counts()
    # visible is filled first and an open arena never runs out of candidates
    assert counts[V] == quotas[0]
    assert sum(counts.values()) == sum(quotas)


def test_zero_density_places_nothing():
    grid = generate(12, 9, {"density": 0.0}, rng=3)
    assert grid.hazard_count() == 0


def test_full_density_still_solvable():
    for seed in range(20):
        grid = generate(9, 7, {"density": 1.0}, rng=seed)
        assert_layout(grid)
        assert grid.hazard_count() > 0


def test_single_corridor_rejects_every_hazard():
    # 3x5: the only interior column is start, one candidate, exit
    grid = generate(3, 5, {"density": 1.0, "tier_ratios": [0.5, 0.5]}, rng=0)
    assert grid.hazard_count() == 0
    assert grid.get(1, 2) == CellType.SAFE
    assert_layout(grid)


def test_narrow_grid_with_no_candidates():
    grid = generate(3, 4, rng=0)
    assert grid.hazard_count() == 0
    assert grid.exit_pos == (1, 2)
    assert_layout(grid)


# -- determinism

def test_same_seed_same_grid():
    a = generate(15, 11, TWO_TIER, rng=99)
    b = generate(15, 11, TWO_TIER, rng=99)
    assert a == b
    assert a.cells.tobytes() == b.cells.tobytes()


def test_generator_and_seed_agree():
    a = generate(15, 11, None, rng=np.random.default_rng(7))
    b = generate(15, 11, None, rng=7)
    assert a == b


def test_different_seeds_differ():
    grids = {generate(15, 11, rng=s).cells.tobytes() for s in range(5)}
    assert len(grids) > 1


# -- errors

@pytest.mark.parametrize("cols, rows", [(3, 3), (2, 8), (8, 2), (0, 0), (-4, 10)])
def test_invalid_dimensions(cols, rows):
    with pytest.raises(InvalidDimensionsError):
        generate(cols, rows)


@pytest.mark.parametrize("config", [
    {"density": 1.5},
    {"density": -0.1},
    {"density": float("nan")},
    {"density": 0.3, "tier_ratios": [0.7, 0.5]},
    {"density": 0.3, "tier_ratios": [0.5, -0.1]},
    {"density": 0.3, "tiers": [("visible", 0.5), ("visible", 0.5)]},
    {"density": 0.3, "tiers": [("wall", 0.5)]},
    {"density": 0.3, "tiers": [("exit", 0.5)]},
])
def test_invalid_config(config):
    with pytest.raises(InvalidConfigError):
        generate(10, 8, config)


# -- quotas

def test_three_tier_remainder_goes_to_last_tier():
    tiers = GenerationConfig().tiers
    assert compute_quotas(46, tiers, 0.4) == [5, 5, 8]


def test_quota_edge_cases():
    two = [(V, 0.5), (S, 0.5)]
    assert compute_quotas(0, two, 0.4) == [0, 0]
    assert compute_quotas(1, two, 1.0) == [0, 1]
    assert compute_quotas(10, [], 0.5) == []
    # ratios below 1 leave the rest of the target unused
    assert compute_quotas(100, [(V, 0.2), (S, 0.2)], 0.5) == [10, 10]


def test_custom_tier_order_is_respected():
    config = GenerationConfig.from_dict({"density": 0.25, "tiers": [("concealed", 1.0)]})
    grid = generate(12, 12, config, rng=4)
    counts = grid.tier_counts()
    assert counts[V] == 0 and counts[S] == 0
    assert counts[C] > 0


# -- connectivity

def test_hazard_barrier_blocks_safe_route_but_not_movement():
    grid = open_grid(7, 5)
    for y in range(1, 4):
        grid.set(3, y, S)
    assert not has_safe_route(grid, grid.start, grid.exit_pos)
    assert can_move_to(grid, 3, 2)

    grid.set(3, 2, CellType.SAFE)
    assert has_safe_route(grid, grid.start, grid.exit_pos)


def test_route_to_self_and_bad_start():
    grid = open_grid(5, 5)
    assert has_safe_route(grid, (2, 2), (2, 2))
    with pytest.raises(OutOfBoundsError):
        has_safe_route(grid, (9, 9), grid.exit_pos)


def test_place_hazards_never_cuts_route():
    grid = open_grid(9, 9)
    placed = place_hazards(grid, [(V, 1.0)], 1.0, np.random.default_rng(0))
    assert placed[V] == grid.count(V)
    assert has_safe_route(grid, grid.start, grid.exit_pos)


def test_safe_distance_map():
    grid = open_grid(6, 5)
    dist = safe_distance_map(grid, grid.exit_pos)
    # open 4x3 interior: manhattan distance from (1,1) to (4,3)
    assert dist[1, 1] == 5
    assert dist[3, 4] == 0
    assert dist[0, 0] == UNREACHABLE

    grid.set(3, 3, V)
    grid.set(4, 2, V)
    dist = safe_distance_map(grid, grid.exit_pos)
    assert dist[1, 1] == UNREACHABLE
