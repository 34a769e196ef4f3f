"""
Main entry point for Hazard Grid.
=================================

Commands:
    generate - Generate one grid and print its hazard summary (default)
    check    - Generate many grids and verify the layout invariants

Usage:
    python -m hazard_grid.main                       # Generate with defaults
    python -m hazard_grid.main generate --seed 7     # Reproducible grid
    python -m hazard_grid.main check --trials 1000   # Solvability self-check
    python -m hazard_grid.main --help                # Show help

"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import List, Optional, Sequence

import numpy as np

from .config import DEFAULT_PRESET, ENV_CONFIG, PRESETS, GenerationConfig
from .environment.constants import CellType, HAZARD_TYPES
from .environment.grid import HazardGrid
from .environment.generation import (
    UNREACHABLE,
    compute_quotas,
    generate,
    has_safe_route,
    safe_distance_map,
)
from .environment.errors import HazardGridError

logger = logging.getLogger(__name__)


def interior_candidates(cols: int, rows: int) -> int:
    """Cells the placer starts from: the interior minus start and exit."""
    return (cols - 2) * (rows - 2) - 2


def find_violations(grid: HazardGrid, config: GenerationConfig) -> List[str]:
    """Return a description of every broken layout invariant (empty if none)."""
    problems: List[str] = []
    cells = grid.cells

    ring = np.concatenate([cells[0, :], cells[-1, :], cells[:, 0], cells[:, -1]])
    if np.any(ring != CellType.WALL):
        problems.append("perimeter contains non-wall cells")

    exits = grid.positions(CellType.EXIT)
    if exits != [grid.exit_pos]:
        problems.append(f"expected single exit at {grid.exit_pos}, found {exits}")

    if grid.get(*grid.start) != CellType.SAFE:
        problems.append(f"start cell is {grid.get(*grid.start).name}")

    if not has_safe_route(grid, grid.start, grid.exit_pos):
        problems.append("no safe route from start to exit")

    n_candidates = interior_candidates(grid.cols, grid.rows)
    quotas = compute_quotas(n_candidates, config.tiers, config.density)
    counts = grid.tier_counts()
    for (tier, _), quota in zip(config.tiers, quotas):
        if counts[tier] > quota:
            problems.append(f"{tier.name} count {counts[tier]} exceeds quota {quota}")
    for tier in HAZARD_TYPES - set(config.tier_types):
        if counts[tier]:
            problems.append(f"{tier.name} placed but not configured")
    if grid.hazard_count() > math.floor(n_candidates * config.density):
        problems.append("hazard total exceeds density target")

    return problems


def resolve_config(args) -> GenerationConfig:
    return GenerationConfig.from_preset(args.preset, density=args.density)


def generate_command(args) -> int:
    """Generate one grid and print its summary."""
    config = resolve_config(args)
    cols = args.cols or ENV_CONFIG["cols"]
    rows = args.rows or ENV_CONFIG["rows"]

    grid = generate(cols, rows, config, rng=args.seed)

    n_candidates = interior_candidates(cols, rows)
    quotas = compute_quotas(n_candidates, config.tiers, config.density)
    dist = safe_distance_map(grid, grid.exit_pos)
    route = int(dist[grid.start[1], grid.start[0]])

    print("=" * 60)
    print("HAZARD GRID")
    print("=" * 60)
    print(f"  Size:        {cols}x{rows} (including border)")
    print(f"  Seed:        {args.seed if args.seed is not None else 'random'}")
    print(f"  Config:      {config.summary()}")
    print(f"  Candidates:  {n_candidates}")
    counts = grid.tier_counts()
    for (tier, _), quota in zip(config.tiers, quotas):
        print(f"  {tier.name.lower():<18s} {counts[tier]:>4d} / {quota}")
    print(f"  Safe route:  {route if route != UNREACHABLE else 'NONE'} steps")
    return 0


def check_command(args) -> int:
    """Generate grids over random sizes and densities and verify them."""
    rng = np.random.default_rng(args.seed)
    presets = sorted(PRESETS)
    failures = 0

    print("=" * 60)
    print("LAYOUT INVARIANT CHECK")
    print("=" * 60)

    for trial in range(1, args.trials + 1):
        cols = int(rng.integers(4, args.max_size + 1))
        rows = int(rng.integers(4, args.max_size + 1))
        density = float(rng.uniform(0.0, 1.0))
        config = GenerationConfig.from_preset(presets[trial % len(presets)], density=density)
        seed = int(rng.integers(0, 2**31))

        grid = generate(cols, rows, config, rng=seed)
        problems = find_violations(grid, config)
        if problems:
            failures += 1
            print(f"  Trial {trial}: {cols}x{rows} seed={seed} {config.summary()}")
            for p in problems:
                print(f"    FAIL: {p}")

    print(f"\n  {args.trials - failures}/{args.trials} grids valid: "
          f"{'PASS' if failures == 0 else 'FAIL'}")
    return 1 if failures else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Hazard Grid - procedural hazard arenas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m hazard_grid.main                          # Generate one grid
  python -m hazard_grid.main generate --preset two_tier --seed 3
  python -m hazard_grid.main check --trials 1000      # Verify invariants
        """,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Generate command (default)
    generate_parser = subparsers.add_parser("generate", help="Generate one grid")
    generate_parser.add_argument(
        "--cols",
        type=int,
        default=None,
        help=f"Grid width including border (default: {ENV_CONFIG['cols']})",
    )
    generate_parser.add_argument(
        "--rows",
        type=int,
        default=None,
        help=f"Grid height including border (default: {ENV_CONFIG['rows']})",
    )
    generate_parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=DEFAULT_PRESET,
        help=f"Hazard layout preset (default: {DEFAULT_PRESET})",
    )
    generate_parser.add_argument(
        "--density",
        type=float,
        default=None,
        help="Override the preset hazard density",
    )
    generate_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: unseeded)",
    )
    generate_parser.set_defaults(func=generate_command)

    # Check command
    check_parser = subparsers.add_parser("check", help="Verify layout invariants")
    check_parser.add_argument(
        "--trials",
        type=int,
        default=1000,
        help="Number of grids to generate (default: 1000)",
    )
    check_parser.add_argument(
        "--max-size",
        type=int,
        default=16,
        help="Largest width/height tried (default: 16)",
    )
    check_parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for the trial sequence (default: 0)",
    )
    check_parser.set_defaults(func=check_command)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Default to generate if no command specified
    if args.command is None:
        args = parser.parse_args(["generate"] if not args.verbose else ["-v", "generate"])

    try:
        return args.func(args)
    except HazardGridError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
