from __future__ import annotations

import argparse
import time

import numpy as np

from quod_rl.game import GameConfig, QuodGame, print_grid
from quod_rl.rl.train_linear_q import greedy_action
from quod_rl.rl.train_ppo import ENV_IDS, make_env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable", "linear"], default="ppo")
    p.add_argument("--model", type=str, required=True,
                   help="SB3 .zip for ppo/maskable, .npy weights for linear")
    p.add_argument("--grid-size", type=int, choices=sorted(ENV_IDS), default=5)
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--show", action="store_true", help="print the grid after every turn")
    p.add_argument("--delay", type=float, default=0.0)
    return p


def eval_linear(weights: np.ndarray, episodes: int, grid_size: int, seed: int, show: bool, delay: float) -> None:
    game = QuodGame(GameConfig(grid_size=grid_size, random_seed=seed))
    for ep in range(episodes):
        game.reset(seed + ep)
        while not game.game_over and game.turns < game.config.max_episode_steps:
            actions = game.get_valid_directions()
            if not actions:
                break
            game.apply_direction(greedy_action(game, weights, actions))
            if show:
                print_grid(game.grid)
                print(f"score {game.score}  combo {game.last_combo}\n")
                time.sleep(delay)
        stats = game.get_game_stats()
        print(f"episode {ep + 1}: score={stats['final_score']} turns={stats['turns']} max_combo={stats['max_combo']}")


def eval_sb3(algo: str, model_path: str, episodes: int, grid_size: int, seed: int, show: bool, delay: float) -> None:
    if algo == "maskable":
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    env = make_env(ENV_IDS[grid_size], resample=(algo == "ppo"))
    model = Algo.load(model_path, device="auto")
    try:
        for ep in range(episodes):
            obs, info = env.reset(seed=seed + ep)
            done = False
            while not done:
                if algo == "maskable":
                    mask = env.unwrapped.get_action_mask()
                    action, _ = model.predict(obs, deterministic=True, action_masks=mask)
                else:
                    action, _ = model.predict(obs, deterministic=True)
                obs, reward, terminated, truncated, info = env.step(action)
                done = terminated or truncated
                if show:
                    print_grid(env.unwrapped.game.grid)
                    print(f"score {info['score']}  combo {info['combo']}\n")
                    time.sleep(delay)
            print(f"episode {ep + 1}: score={info['score']} turns={info['turns']}")
    finally:
        env.close()


def main() -> None:
    args = build_parser().parse_args()
    if args.algo == "linear":
        eval_linear(np.load(args.model), args.episodes, args.grid_size, args.seed, args.show, args.delay)
    else:
        eval_sb3(args.algo, args.model, args.episodes, args.grid_size, args.seed, args.show, args.delay)


if __name__ == "__main__":  # pragma: no cover
    main()
