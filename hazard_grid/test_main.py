from __future__ import annotations

from hazard_grid.config import GenerationConfig
from hazard_grid.environment import CellType, HazardGrid, generate
from hazard_grid.environment.generation import build_perimeter
from hazard_grid.main import find_violations, interior_candidates, main


def test_generate_command_prints_summary(capsys):
    code = main(["generate", "--cols", "10", "--rows", "8",
                 "--preset", "two_tier", "--density", "0.4", "--seed", "1"])
    out = capsys.readouterr().out

    assert code == 0
    assert "10x8" in out
    assert "Candidates:  46" in out
    assert "hazard_visible" in out
    assert "/ 9" in out
    assert "NONE" not in out


def test_check_command_passes(capsys):
    code = main(["check", "--trials", "40", "--max-size", "10", "--seed", "4"])
    out = capsys.readouterr().out
    assert code == 0
    assert "40/40 grids valid: PASS" in out


def test_invalid_dimensions_exit_code():
    assert main(["generate", "--cols", "3", "--rows", "3"]) == 2


def test_interior_candidates():
    assert interior_candidates(10, 8) == 46
    assert interior_candidates(3, 4) == 0


def test_find_violations_on_generated_grid():
    config = GenerationConfig.from_preset("three_tier")
    grid = generate(11, 9, config, rng=8)
    assert find_violations(grid, config) == []


def test_find_violations_reports_broken_grid():
    config = GenerationConfig.from_dict({"density": 0.5, "tier_ratios": [1.0]})
    grid = HazardGrid(6, 5)
    build_perimeter(grid)
    grid.set(*grid.exit_pos, CellType.EXIT)
    grid.set(1, 1, CellType.HAZARD_SILENT)
    grid.set(0, 2, CellType.SAFE)
    for y in range(1, 4):
        grid.set(3, y, CellType.HAZARD_VISIBLE)

    problems = find_violations(grid, config)
    assert "perimeter contains non-wall cells" in problems
    assert "start cell is HAZARD_SILENT" in problems
    assert "no safe route from start to exit" in problems
    assert "HAZARD_SILENT placed but not configured" in problems
