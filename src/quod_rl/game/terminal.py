from __future__ import annotations

from typing import Optional

from .cascade import resolve_cascade
from .grid import GameGrid
from .rules import ScoringRules
from .slide import DIRECTION_VECTORS, Direction, slide


def opens_space(
    grid: GameGrid,
    direction: Direction,
    rules: Optional[ScoringRules] = None,
    diagonal: bool = False,
) -> bool:
    """Dry-run one slide with its cascade and report whether a 2x2 area frees up."""
    dx, dy = DIRECTION_VECTORS[direction]
    result = slide(grid, dx, dy)
    if not result.moved:
        return False
    settled = resolve_cascade(result.grid, dx, dy, rules, diagonal=diagonal)
    return bool(settled.grid.empty_anchors())


def can_open_space(
    grid: GameGrid,
    rules: Optional[ScoringRules] = None,
    diagonal: bool = False,
) -> bool:
    return any(opens_space(grid, d, rules, diagonal) for d in Direction)


def is_terminal(
    grid: GameGrid,
    rules: Optional[ScoringRules] = None,
    diagonal: bool = False,
) -> bool:
    """A grid is terminal when it has no free anchor and no slide can open one."""
    if grid.empty_anchors():
        return False
    return not can_open_space(grid, rules, diagonal)
