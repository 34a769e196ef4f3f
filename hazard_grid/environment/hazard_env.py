"""Hazard grid Gymnasium environment (core dynamics only)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Tuple, Union

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from ..config import ENV_CONFIG, GenerationConfig
from .constants import (
    UP, DOWN, LEFT, RIGHT,
    PROBE_UP, PROBE_DOWN, PROBE_LEFT, PROBE_RIGHT,
    ACTION_DELTAS, PROBE_ACTIONS, DIRECTION_NAMES,
    CellType, HAZARD_TYPES,
    METADATA,
)
from .generation import generate
from .grid import HazardGrid
from .scanning import FLAG_ORDER, ScanResult, probe, scan

logger = logging.getLogger(__name__)

REWARD_EXIT = 1.0
REWARD_HAZARD = -1.0


class HazardGridEnv(gym.Env):
    """
    Navigate from (1, 1) to the exit without stepping on a hazard.

    Visible hazards are known from the grid, silent hazards are announced by
    the ``warnings`` observation (cardinal scan around the agent), and
    concealed hazards only show up after a probe action in their direction.

    Observation:
      - agent_pos: (x, y) of the agent
      - exit_pos:  (x, y) of the exit
      - warnings:  silent hazards within scan range, ordered up/down/left/right
      - probed:    concealed hazards found by probes since the last move

    Actions (Discrete(8)):
      0-3 = move UP / DOWN / LEFT / RIGHT
      4-7 = probe UP / DOWN / LEFT / RIGHT (no movement)

    Stepping onto any hazard ends the episode with REWARD_HAZARD; reaching
    the exit ends it with REWARD_EXIT. Walls and the border block movement.
    """

    # constants
    UP = UP
    DOWN = DOWN
    LEFT = LEFT
    RIGHT = RIGHT
    PROBE_UP = PROBE_UP
    PROBE_DOWN = PROBE_DOWN
    PROBE_LEFT = PROBE_LEFT
    PROBE_RIGHT = PROBE_RIGHT
    ACTION_DELTAS = ACTION_DELTAS

    metadata = METADATA

    def __init__(
        self,
        cols: int = ENV_CONFIG["cols"],
        rows: int = ENV_CONFIG["rows"],
        config: Union[None, str, GenerationConfig, Mapping[str, Any]] = None,
        max_steps: int | None = ENV_CONFIG["max_steps"],
        scan_range: int = ENV_CONFIG["scan_range"],
    ):
        self.cols = int(cols)
        self.rows = int(rows)
        self.scan_range = int(scan_range)

        if config is None:
            config = ENV_CONFIG["preset"]
        if isinstance(config, str):
            config = GenerationConfig.from_preset(config)
        elif not isinstance(config, GenerationConfig):
            config = GenerationConfig.from_dict(config)
        self.config: GenerationConfig = config

        if max_steps is None:
            max_steps = 3 * self.cols * self.rows
        self.max_steps = int(max_steps)

        # Episode state
        self.steps: int = 0
        self.grid: HazardGrid | None = None
        self.agent_pos: Tuple[int, int] | None = None
        self._scan: ScanResult = ScanResult()
        self._probed = np.zeros(len(FLAG_ORDER), dtype=np.int8)

        high = np.array([self.cols - 2, self.rows - 2], dtype=np.int32)
        self.action_space = spaces.Discrete(8)
        self.observation_space = spaces.Dict({
            "agent_pos": spaces.Box(low=1, high=high, shape=(2,), dtype=np.int32),
            "exit_pos": spaces.Box(low=1, high=high, shape=(2,), dtype=np.int32),
            "warnings": spaces.MultiBinary(len(FLAG_ORDER)),
            "probed": spaces.MultiBinary(len(FLAG_ORDER)),
        })

    """
    Reset the environment to a freshly generated level.

    Returns:
        observation: Dict with agent_pos, exit_pos, warnings, probed
        info: Dict with additional information
    """
    def reset(self, seed: int | None = None, options: dict | None = None
    ) -> tuple[Dict[str, Any], Dict[str, Any]]:

        super().reset(seed=seed)

        self.steps = 0
        self.grid = generate(self.cols, self.rows, self.config, rng=self.np_random)
        self.agent_pos = self.grid.start
        self._probed[:] = 0
        self._rescan()

        return self._get_obs(), self._get_info(outcome="start")

    def _rescan(self) -> None:
        assert self.grid is not None and self.agent_pos is not None
        x, y = self.agent_pos
        self._scan = scan(self.grid, x, y, self.scan_range)

    def _get_obs(self) -> Dict[str, Any]:
        assert self.grid is not None and self.agent_pos is not None
        return {
            "agent_pos": np.array(self.agent_pos, dtype=np.int32),
            "exit_pos": np.array(self.grid.exit_pos, dtype=np.int32),
            "warnings": self._scan.as_array(),
            "probed": self._probed.copy(),
        }

    def _get_info(self, outcome: str, **extra: Any) -> Dict[str, Any]:
        info = {
            "steps": int(self.steps),
            "outcome": outcome,
            "scan": self._scan,
        }
        info.update(extra)
        return info

    def step(self, action: int) -> tuple[Dict[str, Any], float, bool, bool, Dict[str, Any]]:
        assert self.grid is not None and self.agent_pos is not None
        assert self.action_space.contains(action), f"Invalid action: {action}"

        self.steps += 1
        action = int(action)
        truncated = self.steps >= self.max_steps

        if action in PROBE_ACTIONS:
            direction = DIRECTION_NAMES[PROBE_ACTIONS[action]]
            x, y = self.agent_pos
            hit = probe(self.grid, x, y, direction)
            if hit:
                self._probed[FLAG_ORDER.index(direction)] = 1
            info = self._get_info("probe", probe_direction=direction, probe_hit=hit)
            return self._get_obs(), 0.0, False, truncated, info

        dx, dy = ACTION_DELTAS[action]
        new_x = self.agent_pos[0] + dx
        new_y = self.agent_pos[1] + dy

        if not self.grid.can_move_to(new_x, new_y):
            info = self._get_info("blocked", blocked=True)
            return self._get_obs(), 0.0, False, truncated, info

        self.agent_pos = (new_x, new_y)
        self._probed[:] = 0
        self._rescan()

        cell = self.grid.classify(new_x, new_y)
        if cell in HAZARD_TYPES:
            logger.debug("agent stepped on %s at %s", cell.name, self.agent_pos)
            info = self._get_info("hazard", blocked=False, hazard=cell.name.lower())
            return self._get_obs(), REWARD_HAZARD, True, truncated, info

        if cell == CellType.EXIT:
            info = self._get_info("exit", blocked=False)
            return self._get_obs(), REWARD_EXIT, True, truncated, info

        return self._get_obs(), 0.0, False, truncated, self._get_info("moved", blocked=False)
