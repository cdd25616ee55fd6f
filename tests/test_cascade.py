from quod_rl.game import Phase, ScoringRules, resolve_cascade
from tests.helpers import make_grid


CHAIN = (
    ".....",
    "B....",
    "R....",
    "R....",
    "RBB..",
)


def test_scoring_rules():
    rules = ScoringRules()
    assert rules.score_for_match(3, 1) == 350
    assert rules.score_for_match(4, 2) == 500
    assert rules.score_for_match(0, 3) == 0


def test_chain_reaction_falls_in_slide_direction():
    result = resolve_cascade(make_grid(*CHAIN), 0, 1)
    assert result.matched
    assert result.combo == 2
    # 3 cells at level 1, then 3 cells at level 2
    assert result.score == (300 + 50) + (300 + 100)
    assert result.cells_cleared == 6
    assert result.grid.count_occupied() == 0
    assert [step.kind for step in result.steps] == ["remove", "fall", "remove"]
    assert result.steps[0].points == [(0, 2), (0, 3), (0, 4)]
    assert all(step.phase is Phase.CASCADING for step in result.steps)


def test_combo_counts_on_from_start_level():
    grid = make_grid(
        "RRR",
        "...",
        "...",
    )
    result = resolve_cascade(grid, -1, 0, start_level=2)
    assert result.combo == 3
    assert result.score == 300 + 3 * 50


def test_settle_pass_removes_without_moving():
    grid = make_grid(
        "G...",
        "YYY.",
        "B...",
        "....",
    )
    result = resolve_cascade(grid, 0, 0, phase=Phase.POST_SPAWN_CASCADING)
    assert result.grid.to_rows() == ["G...", "....", "B...", "...."]
    assert [step.kind for step in result.steps] == ["remove"]
    assert result.steps[0].phase is Phase.POST_SPAWN_CASCADING


def test_no_match_resets_combo_and_keeps_grid():
    grid = make_grid(
        "RB.",
        "BR.",
        "...",
    )
    result = resolve_cascade(grid, 1, 0, start_level=4)
    assert not result.matched
    assert result.combo == 0
    assert result.score == 0
    assert result.grid == grid
    assert result.steps == []


def test_custom_rules_are_applied():
    grid = make_grid(
        "RRR",
        "...",
        "...",
    )
    result = resolve_cascade(grid, 0, 0, rules=ScoringRules(cell_points=10, combo_points=5))
    assert result.score == 35
