"""
Configuration for Hazard Grid
=============================
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence, Tuple, Union

from .environment.constants import CellType, HAZARD_TYPES
from .environment.errors import InvalidConfigError

# Environment Configuration
ENV_CONFIG = {
    "cols": 20,                    # 800px canvas / 40px cells
    "rows": 15,                    # 600px canvas / 40px cells
    "preset": "three_tier",        # hazard layout preset (see PRESETS)
    "scan_range": 1,               # proximity warning radius in cells
    "max_steps": None,             # None = 3 * cols * rows
}

# Hazard layouts. Tiers are filled in the order listed.
PRESETS = {
    "two_tier": {
        "density": 0.3,
        "tiers": [("visible", 0.5), ("silent", 0.5)],
    },
    "three_tier": {
        "density": 0.4,
        "tiers": [("visible", 0.33), ("silent", 0.33), ("concealed", 0.34)],
    },
}

DEFAULT_PRESET = "three_tier"

# Short names accepted in config dicts
TIER_ALIASES = {
    "visible": CellType.HAZARD_VISIBLE,
    "silent": CellType.HAZARD_SILENT,
    "audio": CellType.HAZARD_SILENT,
    "concealed": CellType.HAZARD_CONCEALED,
    "hidden": CellType.HAZARD_CONCEALED,
}

# Default tier order when only a list of ratios is given
TIER_ORDER = (CellType.HAZARD_VISIBLE, CellType.HAZARD_SILENT, CellType.HAZARD_CONCEALED)

# Float slack when checking that ratios sum to at most 1
RATIO_TOLERANCE = 1e-9

TierSpec = Tuple[CellType, float]


def parse_tier(value: Union[str, int, CellType]) -> CellType:
    if isinstance(value, str):
        key = value.strip().lower()
        if key in TIER_ALIASES:
            return TIER_ALIASES[key]
        try:
            tier = CellType[value.strip().upper()]
        except KeyError:
            raise InvalidConfigError(f"Unknown hazard tier: {value!r}") from None
    else:
        try:
            tier = CellType(int(value))
        except ValueError:
            raise InvalidConfigError(f"Unknown hazard tier: {value!r}") from None
    if tier not in HAZARD_TYPES:
        raise InvalidConfigError(f"{tier.name} is not a hazard tier")
    return tier


@dataclass(frozen=True)
class GenerationConfig:
    """
    Hazard placement settings.

    Attributes:
        density: fraction of candidate cells to turn into hazards, in [0, 1]
        tiers: ordered (tier, ratio) pairs; ratios are >= 0 and sum to <= 1.
               Earlier tiers are filled first and the last tier receives
               whatever flooring leaves over.
    """
    density: float = 0.4
    tiers: Tuple[TierSpec, ...] = field(
        default=((CellType.HAZARD_VISIBLE, 0.33),
                 (CellType.HAZARD_SILENT, 0.33),
                 (CellType.HAZARD_CONCEALED, 0.34))
    )

    def __post_init__(self):
        try:
            density = float(self.density)
        except (TypeError, ValueError):
            raise InvalidConfigError(f"density must be a number, got {self.density!r}") from None
        if math.isnan(density) or not 0.0 <= density <= 1.0:
            raise InvalidConfigError(f"density must be within [0, 1], got {self.density}")

        tiers = []
        seen = set()
        for entry in self.tiers:
            try:
                raw_tier, raw_ratio = entry
            except (TypeError, ValueError):
                raise InvalidConfigError(f"tier entry must be a (tier, ratio) pair, got {entry!r}") from None
            tier = parse_tier(raw_tier)
            if tier in seen:
                raise InvalidConfigError(f"tier {tier.name} listed more than once")
            seen.add(tier)
            try:
                ratio = float(raw_ratio)
            except (TypeError, ValueError):
                raise InvalidConfigError(f"ratio for {tier.name} must be a number") from None
            if math.isnan(ratio) or ratio < 0.0:
                raise InvalidConfigError(f"ratio for {tier.name} must be >= 0, got {raw_ratio}")
            tiers.append((tier, ratio))

        total = sum(r for _, r in tiers)
        if total > 1.0 + RATIO_TOLERANCE:
            raise InvalidConfigError(f"tier ratios sum to {total:.4f}, must be <= 1")

        # frozen dataclass: write normalised values through object.__setattr__
        object.__setattr__(self, "density", density)
        object.__setattr__(self, "tiers", tuple(tiers))

    @property
    def tier_types(self) -> Tuple[CellType, ...]:
        return tuple(t for t, _ in self.tiers)

    @property
    def ratios(self) -> Tuple[float, ...]:
        return tuple(r for _, r in self.tiers)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationConfig":
        """
        Build from a plain dict.

        Accepts ``tiers`` as (name, ratio) pairs or a name -> ratio mapping,
        or ``tier_ratios`` as a bare list of ratios applied to
        visible, silent, concealed in that order.
        """
        density = data.get("density", cls.density)
        if "tiers" in data:
            tiers = data["tiers"]
            if isinstance(tiers, Mapping):
                tiers = list(tiers.items())
        elif "tier_ratios" in data:
            ratios: Sequence[float] = data["tier_ratios"]
            if len(ratios) > len(TIER_ORDER):
                raise InvalidConfigError(
                    f"at most {len(TIER_ORDER)} tier ratios without tier names, got {len(ratios)}"
                )
            tiers = list(zip(TIER_ORDER, ratios))
        else:
            return cls(density=density)
        return cls(density=density, tiers=tuple(tuple(t) for t in tiers))

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "GenerationConfig":
        try:
            preset: Dict[str, Any] = dict(PRESETS[name])
        except KeyError:
            raise InvalidConfigError(
                f"Unknown preset {name!r}, expected one of {sorted(PRESETS)}"
            ) from None
        preset.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(preset)

    def summary(self) -> str:
        parts = [f"{t.name.lower()}={r:.2f}" for t, r in self.tiers]
        return f"density={self.density:.2f} | " + " | ".join(parts)
