from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from quod_rl.game import Color

from .quod_env import _compute_action_mask


class OneHotObservationWrapper(gym.ObservationWrapper):
    """Encodes the dict observation as a flat one-hot float vector for MLP policies.

    Layout: grid cells one-hot over (empty + palette), then the pending batch
    one-hot over the palette, then the pending anchor as a one-hot over all
    anchors plus a trailing "no anchor" slot.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.observation_space, spaces.Dict)
        self.size = int(env.observation_space["grid"].shape[0])
        self.channels = len(Color) + 1
        self.batch = int(env.observation_space["next_colors"].shape[0])
        self.anchors = (self.size - 1) * (self.size - 1) + 1
        self.n = self.size * self.size * self.channels + self.batch * len(Color) + self.anchors
        self.observation_space = spaces.Box(low=0.0, high=1.0, shape=(self.n,), dtype=np.float32)

    def observation(self, observation):  # type: ignore[override]
        grid = np.asarray(observation["grid"], dtype=np.int64)
        grid_hot = np.eye(self.channels, dtype=np.float32)[grid.reshape(-1)].reshape(-1)
        colors = np.asarray(observation["next_colors"], dtype=np.int64) - 1
        batch_hot = np.eye(len(Color), dtype=np.float32)[colors].reshape(-1)
        anchor_hot = np.zeros((self.anchors,), dtype=np.float32)
        ax, ay = (int(v) for v in observation["next_anchor"])
        if ax < 0:
            anchor_hot[-1] = 1.0
        else:
            anchor_hot[ay * (self.size - 1) + ax] = 1.0
        return np.concatenate([grid_hot, batch_hot, anchor_hot])


class ResampleInvalidActionWrapper(gym.Wrapper):
    """If a sampled direction would not move anything, resample among those that do.

    Useful when training with vanilla PPO (no action masking).
    """

    def step(self, action):  # type: ignore[override]
        mask = self.get_action_mask()
        if 0 <= int(action) < mask.shape[0] and not bool(mask[int(action)]):
            valid_idxs = np.flatnonzero(mask)
            if valid_idxs.size > 0:
                action = int(self.np_random.choice(valid_idxs))
        return self.env.step(action)

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.env.unwrapped.game)
