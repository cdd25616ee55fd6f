"""Gymnasium environments for Quod."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Default 5x5 board
register(
    id="Quod-5x5-v0",
    entry_point="quod_rl.env.quod_env:QuodEnv",
)

# Larger 6x6 board
register(
    id="Quod-6x6-v0",
    entry_point="quod_rl.env.quod_env:QuodEnv",
    kwargs={"grid_size": 6},
)

__all__ = ["Quod-5x5-v0", "Quod-6x6-v0"]
