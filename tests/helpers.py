import random

from quod_rl.game import Color, GameConfig, GameGrid, Phase, QuodGame


def make_grid(*rows):
    return GameGrid.from_rows(list(rows))


def load_state(game, rows, next_colors=None, next_anchor=None, combo=0):
    """Put ``game`` into an idle position built from ``rows``."""
    game.grid = GameGrid.from_rows(list(rows))
    game._next_id = int(game.grid.ids.max()) + 1
    game.next_colors = list(next_colors or [Color.RED, Color.BLUE, Color.YELLOW, Color.GREEN])
    game.next_anchor = next_anchor
    game.combo_count = combo
    game.last_combo = 0
    game.score = 0
    game.turns = 0
    game.phase = Phase.IDLE
    return game


def scripted_game(rows, **kwargs):
    game = QuodGame(GameConfig(grid_size=len(rows), random_seed=1234))
    return load_state(game, rows, **kwargs)


def random_grid(rng, size, empty_ratio=0.3):
    rows = []
    for _ in range(size):
        row = ""
        for _ in range(size):
            if rng.random() < empty_ratio:
                row += "."
            else:
                row += rng.choice("RBYG")
        rows.append(row)
    return GameGrid.from_rows(rows)


def random_grids(seed, count, size=5, empty_ratio=0.3):
    rng = random.Random(seed)
    return [random_grid(rng, size, empty_ratio) for _ in range(count)]
