from __future__ import annotations

import random

import gymnasium as gym

import quod_rl.env  # noqa: F401  ensure registration


def run_random(steps: int = 200, env_id: str = "Quod-5x5-v0", seed: int | None = None) -> float:
    env = gym.make(env_id)
    rng = random.Random(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Prefer directions that actually move something
        valid = [i for i, ok in enumerate(info.get("action_mask", [])) if ok]
        if valid:
            action = rng.choice(valid)
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            print(f"episode {episodes} finished: score={info['score']} turns={info['turns']}")
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    run_random()
