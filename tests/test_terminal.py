import itertools
import random

from quod_rl.game import (
    Direction,
    GameConfig,
    GameGrid,
    QuodGame,
    can_open_space,
    find_matches,
    is_terminal,
)
from quod_rl.game.terminal import opens_space
from tests.helpers import load_state, make_grid


LETTERS = "RBYG"


def checkerboard(size):
    """Full grid where no two orthogonal neighbours share a color."""
    return make_grid(*["".join(LETTERS[(x + 2 * y) % 4] for x in range(size)) for y in range(size)])


def test_full_grid_without_neighbours_is_terminal():
    grid = checkerboard(5)
    assert grid.is_full()
    assert find_matches(grid) == set()
    assert grid.empty_anchors() == []
    for direction in Direction:
        assert not opens_space(grid, direction)
    assert not can_open_space(grid)
    assert is_terminal(grid)


def test_grid_with_free_anchor_is_not_terminal():
    assert not is_terminal(GameGrid(4))


def test_slide_that_triggers_a_match_can_open_space():
    grid = make_grid(
        "R.GB",
        ".RBG",
        "RBYR",
        "BYRY",
    )
    assert grid.empty_anchors() == []
    assert find_matches(grid) == set()
    assert opens_space(grid, Direction.LEFT)
    assert can_open_space(grid)
    assert not is_terminal(grid)


# Reference model used to cross-check the detector: plain lists, recursive search.

def _ref_cells(grid):
    return [[grid.color_at(x, y) for x in range(grid.size)] for y in range(grid.size)]


def _ref_slide(cells, direction):
    size = len(cells)
    out = [[0] * size for _ in range(size)]
    for i in range(size):
        if direction in (Direction.LEFT, Direction.RIGHT):
            line = [cells[i][x] for x in range(size)]
        else:
            line = [cells[y][i] for y in range(size)]
        blocks = [c for c in line if c]
        pad = [0] * (size - len(blocks))
        line = blocks + pad if direction in (Direction.LEFT, Direction.UP) else pad + blocks
        for j, c in enumerate(line):
            if direction in (Direction.LEFT, Direction.RIGHT):
                out[i][j] = c
            else:
                out[j][i] = c
    return out


def _ref_matches(cells):
    size = len(cells)
    seen = set()
    matched = set()

    def visit(x, y, color, group):
        if not (0 <= x < size and 0 <= y < size) or (x, y) in seen or cells[y][x] != color:
            return
        seen.add((x, y))
        group.append((x, y))
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            visit(x + dx, y + dy, color, group)

    for y in range(size):
        for x in range(size):
            if cells[y][x] and (x, y) not in seen:
                group = []
                visit(x, y, cells[y][x], group)
                if len(group) >= 3:
                    matched.update(group)
    return matched


def _ref_has_anchor(cells):
    size = len(cells)
    return any(
        not (cells[y][x] or cells[y][x + 1] or cells[y + 1][x] or cells[y + 1][x + 1])
        for y in range(size - 1)
        for x in range(size - 1)
    )


def _ref_resolve(cells, direction):
    while True:
        matched = _ref_matches(cells)
        if not matched:
            return cells
        cells = [[0 if (x, y) in matched else c for x, c in enumerate(row)] for y, row in enumerate(cells)]
        cells = _ref_slide(cells, direction)


def _ref_can_open(cells):
    for direction in Direction:
        moved = _ref_slide(cells, direction)
        if moved != cells and _ref_has_anchor(_ref_resolve(moved, direction)):
            return True
    return False


def _crowded_grids(seed, size, count):
    """Stable grids (no standing match) with a few holes and no free anchor."""
    rng = random.Random(seed)
    grids = []
    while len(grids) < count:
        rows = ["".join(rng.choice(LETTERS) for _ in range(size)) for _ in range(size)]
        for _ in range(rng.randint(0, size)):
            x, y = rng.randrange(size), rng.randrange(size)
            rows[y] = rows[y][:x] + "." + rows[y][x + 1:]
        grid = make_grid(*rows)
        if find_matches(grid) or grid.empty_anchors():
            continue
        grids.append(grid)
    return grids


def test_detector_agrees_with_reference_on_small_grids():
    for size in (3, 4):
        for grid in _crowded_grids(seed=size, size=size, count=300):
            cells = _ref_cells(grid)
            assert can_open_space(grid) == _ref_can_open(cells)
            assert is_terminal(grid) == (not _ref_can_open(cells))


def _crowded_three_by_three(alphabet=".RB"):
    """Every 3x3 grid over ``alphabet`` with no standing match and no free anchor."""
    for cells in itertools.product(alphabet, repeat=9):
        rows = ["".join(cells[i:i + 3]) for i in (0, 3, 6)]
        ref = [[0 if c == "." else LETTERS.index(c) + 1 for c in row] for row in rows]
        if _ref_matches(ref) or _ref_has_anchor(ref):
            continue
        yield rows, ref


def test_detector_agrees_with_reference_on_every_crowded_3x3_grid():
    checked = 0
    for rows, ref in _crowded_three_by_three():
        grid = make_grid(*rows)
        assert is_terminal(grid) == (not _ref_can_open(ref)), rows
        checked += 1
    assert checked > 0


def test_session_survives_a_move_exactly_when_space_can_open_on_3x3():
    game = QuodGame(GameConfig(grid_size=3, random_seed=0))
    terminal = opening = 0
    for rows, ref in _crowded_three_by_three():
        stuck = not _ref_can_open(ref)
        survived = False
        for direction in Direction:
            load_state(game, rows)
            result = game.apply_direction(direction)
            if result.blocked:
                continue
            if result.spawn_anchor is not None:
                survived = True
            else:
                assert result.game_over
        # A spawn happens after some move exactly when the detector says space can open
        assert survived == (not stuck), rows
        if stuck:
            terminal += 1
        else:
            opening += 1
    assert terminal > 0 and opening > 0
