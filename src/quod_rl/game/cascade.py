from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .grid import GameGrid
from .matching import find_matches
from .rules import ScoringRules
from .slide import slide
from .turn import Phase, TurnStep


@dataclass
class CascadeResult:
    grid: GameGrid
    combo: int
    matched: bool
    score: int = 0
    cells_cleared: int = 0
    steps: List[TurnStep] = field(default_factory=list)


def resolve_cascade(
    grid: GameGrid,
    dx: int,
    dy: int,
    rules: Optional[ScoringRules] = None,
    start_level: int = 0,
    diagonal: bool = False,
    phase: Phase = Phase.CASCADING,
) -> CascadeResult:
    """Remove matches and slide the survivors until the grid is stable.

    Each iteration that finds matches raises the combo level by one, counting
    on from ``start_level``, and scores ``rules.score_for_match``. After the
    removal the remaining blocks slide along ``(dx, dy)``; ``(0, 0)`` removes
    without moving anything. The returned ``combo`` is the level reached, or
    0 when nothing matched.
    """
    rules = rules or ScoringRules()
    level = max(0, start_level)
    matched = False
    score = 0
    cleared = 0
    steps: List[TurnStep] = []
    while True:
        matches = find_matches(grid, diagonal=diagonal)
        if not matches:
            break
        matched = True
        level += 1
        gained = rules.score_for_match(len(matches), level)
        score += gained
        cleared += len(matches)
        grid = grid.without(matches)
        steps.append(TurnStep(phase, "remove", grid, sorted(matches), gained))
        result = slide(grid, dx, dy)
        grid = result.grid
        if result.moved:
            steps.append(TurnStep(phase, "fall", grid))
    combo = level if matched else 0
    return CascadeResult(
        grid=grid,
        combo=combo,
        matched=matched,
        score=score,
        cells_cleared=cleared,
        steps=steps,
    )
