from __future__ import annotations

import argparse
import os
import random
import sys
from typing import List

import numpy as np

from quod_rl.game import Direction, GameAnalytics, GameConfig, QuodGame


N_FEATURES = 8


def extract_features(game: QuodGame, direction: Direction) -> np.ndarray:
    outcome = game.simulate_direction(direction)
    if outcome is None:
        # Blocked move -> sentinel features
        return np.array([-1.0] * N_FEATURES, dtype=np.float32)

    before = GameAnalytics.get_board_features(game.grid)
    after = GameAnalytics.get_board_features(outcome.grid)

    # Features: [bias, cleared, combo, d_anchors, anchors, adjacent_pairs, largest_group, fill_ratio]
    return np.array([
        1.0,
        float(outcome.cells_cleared),
        float(outcome.combo),
        float(after["free_anchors"] - before["free_anchors"]),
        float(after["free_anchors"]),
        float(after["adjacent_pairs"]),
        float(after["largest_group"]),
        float(after["fill_ratio"]),
    ], dtype=np.float32)


def enumerate_actions(game: QuodGame) -> List[Direction]:
    return game.get_valid_directions()


def _print_progress(ep_idx: int, total: int, last_return: float, last_steps: int) -> None:
    width = 30
    filled = int(width * (ep_idx + 1) / max(1, total))
    bar = "=" * filled + "." * (width - filled)
    msg = f"\r[{bar}] {ep_idx + 1}/{total}  return={last_return:.1f}  turns={last_steps}"
    print(msg, end="", file=sys.stdout, flush=True)


def greedy_action(game: QuodGame, w: np.ndarray, actions: List[Direction]) -> Direction:
    best_q = None
    best_a = actions[0]
    for a_cand in actions:
        q = float(np.dot(w, extract_features(game, a_cand)))
        if (best_q is None) or (q > best_q):
            best_q, best_a = q, a_cand
    return best_a


def train_linear_q(episodes: int = 500, epsilon: float = 0.1, alpha: float = 1e-4, gamma: float = 0.99,
                   seed: int = 0, grid_size: int = 5, progress: bool = True) -> np.ndarray:
    rng = random.Random(seed)
    game = QuodGame(GameConfig(grid_size=grid_size, random_seed=seed))
    w = np.zeros((N_FEATURES,), dtype=np.float32)

    for ep in range(episodes):
        game.reset(seed + ep)
        done = False
        ep_return = 0.0

        while not done and game.turns < game.config.max_episode_steps:
            actions = enumerate_actions(game)
            if not actions:
                break
            if rng.random() < epsilon:
                a = rng.choice(actions)
            else:
                a = greedy_action(game, w, actions)

            # Features are computed on the grid before the move
            phi_sa = extract_features(game, a)

            result = game.apply_direction(a)
            # Engine points are large; scale them down to keep updates stable
            reward = float(result.score_delta) / 100.0 + 1.0
            ep_return += reward

            if game.game_over:
                target = reward
                done = True
            else:
                next_actions = enumerate_actions(game)
                if not next_actions:
                    target = reward
                    done = True
                else:
                    q_next_max = max(float(np.dot(w, extract_features(game, a2))) for a2 in next_actions)
                    target = reward + gamma * q_next_max

            q_sa = float(np.dot(w, phi_sa))
            td_error = target - q_sa
            w += alpha * td_error * phi_sa

        if progress:
            _print_progress(ep, episodes, ep_return, game.turns)
        elif (ep + 1) % 50 == 0:
            print(f"Episode {ep+1}/{episodes} return={ep_return:.1f} turns={game.turns} score={game.score}")

    if progress:
        print()
    return w


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--episodes", type=int, default=500)
    p.add_argument("--epsilon", type=float, default=0.1)
    p.add_argument("--alpha", type=float, default=1e-4)
    p.add_argument("--gamma", type=float, default=0.99)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--grid-size", type=int, default=5)
    p.add_argument("--out", type=str, default="models/linear_q_weights.npy")
    p.add_argument("--no-progress", action="store_true")
    args = p.parse_args()

    w = train_linear_q(args.episodes, args.epsilon, args.alpha, args.gamma, args.seed,
                       grid_size=args.grid_size, progress=not args.no_progress)
    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    np.save(args.out, w)
    print(f"Saved weights to {args.out}")


if __name__ == "__main__":  # pragma: no cover
    main()
