from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .grid import GameGrid, Point


class Phase(Enum):
    IDLE = "idle"
    SLIDING = "sliding"
    CASCADING = "cascading"
    SPAWNING = "spawning"
    POST_SPAWN_CASCADING = "post_spawn_cascading"
    TERMINAL_CHECK = "terminal_check"
    GAME_OVER = "game_over"


@dataclass
class TurnStep:
    """One intermediate grid of a turn, kept for animation and inspection.

    ``kind`` is one of ``"slide"``, ``"remove"``, ``"fall"`` or ``"spawn"``;
    ``points`` lists the removed or spawned cells.
    """

    phase: Phase
    kind: str
    grid: GameGrid
    points: List[Point] = field(default_factory=list)
    score: int = 0


@dataclass
class TurnResult:
    moved: bool = False
    blocked: bool = False
    score_delta: int = 0
    cells_cleared: int = 0
    combo: int = 0
    max_combo: int = 0
    spawn_anchor: Optional[Point] = None
    game_over: bool = False
    steps: List[TurnStep] = field(default_factory=list)
