from __future__ import annotations

import argparse
from collections import deque
from typing import Deque, Dict, Optional

import pygame

from quod_rl.game import Direction, GameConfig, QuodGame, TurnStep
from .renderer import Renderer


KEY_TO_DIRECTION: Dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_w: Direction.UP,
    pygame.K_s: Direction.DOWN,
    pygame.K_a: Direction.LEFT,
    pygame.K_d: Direction.RIGHT,
}


def run(grid_size: int = 5, seed: Optional[int] = None, step_ms: int = 180) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = QuodGame(GameConfig(grid_size=grid_size, random_seed=seed))
        renderer = Renderer()
        screen = pygame.display.set_mode(renderer.window_size(grid_size))
        pygame.display.set_caption("Quod - Human Play")

        # Intermediate grids of the last turn, shown one by one before input resumes
        pending: Deque[TurnStep] = deque()
        last_step = 0

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r:
                        game.reset()
                        pending.clear()
                    elif not pending:
                        direction = KEY_TO_DIRECTION.get(event.key)
                        if direction is not None:
                            result = game.apply_direction(direction)
                            if not result.blocked:
                                pending.extend(result.steps)
                                last_step = pygame.time.get_ticks()

            now = pygame.time.get_ticks()
            if pending and now - last_step >= step_ms:
                pending.popleft()
                last_step = now

            diagonal = game.config.diagonal_matches
            if pending:
                renderer.draw(screen, pending[0].grid, game.score, game.last_combo, diagonal=diagonal)
            else:
                message = None
                if game.game_over:
                    message = f"Game Over - {game.score}. R to restart, ESC to quit"
                renderer.draw(
                    screen,
                    game.grid,
                    game.score,
                    game.last_combo,
                    game.next_colors,
                    game.next_anchor,
                    message=message,
                    diagonal=diagonal,
                )

            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--grid-size", type=int, default=5)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--step-ms", type=int, default=180, help="delay between animation frames of a turn")
    args = p.parse_args()
    run(args.grid_size, args.seed, args.step_ms)


if __name__ == "__main__":  # pragma: no cover
    main()
