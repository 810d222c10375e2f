from __future__ import annotations

"""Gymnasium wrapper around the Broadside attack engine.

Lets an attack strategy be trained or benchmarked without a session: one
agent fires at a randomly placed catalog fleet until it is destroyed.

Observation
===========
2-channel (2, N, N) float32 tensor where
  chan 0 = 1.0 at coordinates already fired *and hit* (hit or sunk)
  chan 1 = 1.0 at coordinates already fired *and missed*
All zeros elsewhere.

Action space
============
Discrete(N*N) – flattened (y*N + x) coordinate.

Reward (dense, simple)
======================
See DEFAULT_REWARDS; a repeat shot is penalised and leaves the board alone.
"""

import random

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from . import config as _cfg
from .attack import resolve_attack
from .board import AttackRecord, BoardState, CellState, Coordinate, grid_rows
from .fleet import CATALOG, is_fleet_destroyed
from .placement import random_fleet


class BroadsideEnv(gym.Env):
    metadata = {"render_modes": ["ansi"]}

    DEFAULT_REWARDS = {
        "hit": 5.0,
        "sink": 20.0,
        "miss": -1.0,
        "repeat": -10.0,
        "win": 200.0,
    }

    def __init__(self, *, size: int = _cfg.BOARD_SIZE, reward_dict: dict | None = None, render_mode: str | None = None):
        super().__init__()
        self.size = size
        self.render_mode = render_mode
        self.action_space = spaces.Discrete(size * size)
        self.observation_space = spaces.Box(0.0, 1.0, shape=(2, size, size), dtype=np.float32)
        self._rewards = self.DEFAULT_REWARDS.copy()
        if reward_dict is not None:
            self._rewards.update(reward_dict)
        self.board: BoardState | None = None
        self.record: AttackRecord | None = None
        self._obs: np.ndarray | None = None

    # ------------------------------------------------------------------
    def reset(self, *, seed: int | None = None, options: dict | None = None):  # type: ignore[override]
        super().reset(seed=seed)
        rng = random.Random(int(self.np_random.integers(0, 2**31 - 1)))
        board = random_fleet(self.size, CATALOG, rng=rng)
        if board is None:
            raise RuntimeError(f"catalog does not fit on a {self.size}x{self.size} board")
        self.board = board
        self.record = AttackRecord.empty(self.size)
        self._obs = np.zeros((2, self.size, self.size), dtype=np.float32)
        return self._obs.copy(), {}

    # ------------------------------------------------------------------
    def step(self, action: int):  # type: ignore[override]
        if self.board is None or self.record is None or self._obs is None:
            raise RuntimeError("Env must be reset before step")
        y, x = divmod(int(action), self.size)
        coord = Coordinate(x, y)

        if self.record.cell(coord).resolved:
            return self._obs.copy(), self._rewards["repeat"], False, False, {"result": "repeat"}

        outcome = resolve_attack(self.board, coord)
        self.board = outcome.board
        self.record = self.record.record(coord, outcome.result, outcome.sunk_cells)

        done = False
        if outcome.result is CellState.MISS:
            self._obs[1, y, x] = 1.0
            reward = self._rewards["miss"]
        else:
            self._obs[0, y, x] = 1.0
            reward = self._rewards["hit"]
            if is_fleet_destroyed(self.board.ships):
                reward = self._rewards["win"]
                done = True
            elif outcome.result is CellState.SUNK:
                reward += self._rewards["sink"]

        info = {"result": outcome.result.value, "shots": self.record.hits + self.record.misses}
        return self._obs.copy(), reward, done, False, info

    # ------------------------------------------------------------------
    def action_masks(self) -> np.ndarray:
        """Boolean mask of squares not yet fired at (for maskable policies)."""
        if self._obs is None:
            return np.ones(self.size * self.size, dtype=bool)
        fired = (self._obs[0] + self._obs[1]) > 0
        return ~fired.reshape(-1)

    def render(self):
        if self.record is None:
            return None
        return "\n".join(grid_rows(self.record))
