import pytest

from quod_rl.game import find_groups, find_matches, is_part_of_any_match
from tests.helpers import make_grid, random_grids


def test_horizontal_run_of_three_matches():
    grid = make_grid(
        "RRRBB",
        ".....",
        ".....",
        ".....",
        ".....",
    )
    assert find_matches(grid) == {(0, 0), (1, 0), (2, 0)}


def test_l_shaped_group_is_one_match():
    grid = make_grid(
        "Y...",
        "Y...",
        "YY..",
        "....",
    )
    assert find_matches(grid) == {(0, 0), (0, 1), (0, 2), (1, 2)}


def test_pairs_are_not_matches():
    grid = make_grid(
        "RR.B",
        "...B",
        "GG..",
        "....",
    )
    assert find_matches(grid) == set()


def test_whole_large_group_is_returned():
    grid = make_grid(
        "BBBB",
        "B..G",
        "....",
        "....",
    )
    assert find_matches(grid) == {(0, 0), (1, 0), (2, 0), (3, 0), (0, 1)}


def test_separate_groups_are_unioned():
    grid = make_grid(
        "RRR..",
        ".....",
        "..G..",
        "..G..",
        "..G..",
    )
    assert find_matches(grid) == {(0, 0), (1, 0), (2, 0), (2, 2), (2, 3), (2, 4)}


def test_diagonal_neighbours_only_count_when_enabled():
    grid = make_grid(
        "R...",
        ".R..",
        "..R.",
        "....",
    )
    assert find_matches(grid) == set()
    assert find_matches(grid, diagonal=True) == {(0, 0), (1, 1), (2, 2)}
    assert not is_part_of_any_match(grid, 1, 1)
    assert is_part_of_any_match(grid, 1, 1, diagonal=True)


def test_is_part_of_any_match():
    grid = make_grid(
        "RRR",
        "B..",
        "...",
    )
    assert is_part_of_any_match(grid, 1, 0)
    assert not is_part_of_any_match(grid, 0, 1)
    assert not is_part_of_any_match(grid, 2, 2)


def test_every_block_belongs_to_exactly_one_group():
    for grid in random_grids(seed=3, count=30):
        groups = find_groups(grid)
        cells = [p for g in groups for p in g]
        assert len(cells) == len(set(cells)) == grid.count_occupied()


def test_removing_matches_leaves_no_match():
    for grid in random_grids(seed=5, count=100, empty_ratio=0.1):
        matches = find_matches(grid)
        for group in find_groups(grid):
            if len(group) < 3:
                assert not set(group) & matches
        assert find_matches(grid.without(matches)) == set()


def test_point_outside_grid_does_not_wrap_to_opposite_edge():
    grid = make_grid(
        "..B",
        "..B",
        "..B",
    )
    with pytest.raises(ValueError):
        is_part_of_any_match(grid, -1, 0)
