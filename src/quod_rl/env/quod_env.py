from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from quod_rl.game import Direction, GameAnalytics, GameConfig, QuodGame, format_grid
from quod_rl.game.spawn import BATCH_SIZE


CELL_COLORS = {
    0: (30, 30, 36),
    1: (255, 89, 94),    # red
    2: (25, 130, 196),   # blue
    3: (255, 202, 58),   # yellow
    4: (138, 201, 38),   # green
}


def _compute_action_mask(game: QuodGame) -> np.ndarray:
    mask = np.zeros((len(Direction),), dtype=np.bool_)
    for direction in game.get_valid_directions():
        mask[int(direction)] = True
    return mask


class QuodEnv(gym.Env):
    metadata = {"render_modes": ["ansi", "rgb_array"], "render_fps": 4}

    def __init__(self, config: Optional[GameConfig] = None, grid_size: Optional[int] = None,
                 render_mode: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        config = config or GameConfig()
        if grid_size is not None:
            config = replace(config, grid_size=int(grid_size))
        self.game = QuodGame(config)
        self.render_mode = render_mode

        # Reward shaping parameters
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.reward_weights: Dict[str, float] = {
            "score": 0.01,          # per engine point
            "combo": 0.5,           # per combo level reached in the turn
            "free_anchors": 0.05,   # per 2x2 area opened (negative when closed)
            "survive": 0.1,         # per completed turn
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        size = self.game.config.grid_size
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=len(CELL_COLORS) - 1, shape=(size, size), dtype=np.int8),
                "next_colors": spaces.Box(low=1, high=len(CELL_COLORS) - 1, shape=(BATCH_SIZE,), dtype=np.int8),
                "next_anchor": spaces.Box(low=-1, high=size - 2, shape=(2,), dtype=np.int8),
            }
        )
        self.action_space = spaces.Discrete(len(Direction))

        self._last_obs: Optional[Dict[str, Any]] = None

    def _get_obs(self) -> Dict[str, Any]:
        anchor = self.game.next_anchor
        next_anchor = np.array(anchor if anchor is not None else (-1, -1), dtype=np.int8)
        return {
            "grid": self.game.grid.colors.astype(np.int8),
            "next_colors": np.array([int(c) for c in self.game.next_colors], dtype=np.int8),
            "next_anchor": next_anchor,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "combo": self.game.last_combo,
            "turns": self.game.turns,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int | np.integer):
        before = GameAnalytics.get_board_features(self.game.grid)
        result = self.game.apply_direction(int(action))
        after = GameAnalytics.get_board_features(self.game.grid)

        reward_components: Dict[str, float] = {}
        if result.blocked:
            reward_components["invalid"] = self.invalid_action_penalty
        else:
            reward_components["score"] = self.reward_weights["score"] * float(result.score_delta)
            reward_components["combo"] = self.reward_weights["combo"] * float(result.max_combo)
            reward_components["free_anchors"] = self.reward_weights["free_anchors"] * float(
                after["free_anchors"] - before["free_anchors"])
            reward_components["survive"] = self.reward_weights["survive"]

        reward_components["step"] = self.step_penalty
        terminated = bool(self.game.game_over)
        truncated = self.game.turns >= self.game.config.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = result.score_delta
        info["blocked"] = result.blocked
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray | str]:
        if self.render_mode == "ansi":
            return f"{format_grid(self.game.grid)}\nscore {self.game.score}  combo {self.game.last_combo}"
        if self.render_mode == "rgb_array":
            grid = self._last_obs["grid"] if self._last_obs is not None else self.game.grid.colors
            cell = 24
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    color = CELL_COLORS.get(int(grid[y, x]), (200, 200, 200))
                    img[y * cell : (y + 1) * cell - 1, x * cell : (x + 1) * cell - 1, :] = color
            return img
        return None

    def close(self) -> None:
        pass
