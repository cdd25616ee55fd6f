"""Game module for Quod.

Exports the engine and its building blocks:
- GameGrid, Block, Color: board state with stable block ids
- slide, Direction: directional compaction
- find_matches: same-color group detection
- SpawnPlanner: 2x2 spawn anchors and fair color batches
- resolve_cascade: match/remove/slide loop
- can_open_space, is_terminal: game-over detection
- ScoringRules: scoring configuration
- QuodGame: turn orchestrator and session state
"""

from .grid import Block, Color, GameGrid, Point, format_grid, print_grid
from .slide import Direction, SlideResult, slide, slide_direction
from .matching import find_matches, find_groups, is_part_of_any_match
from .spawn import SpawnPlanner, is_fair_batch
from .rules import ScoringRules
from .cascade import CascadeResult, resolve_cascade
from .terminal import can_open_space, is_terminal
from .turn import Phase, TurnResult, TurnStep
from .analytics import GameAnalytics
from .core import GameConfig, QuodGame, new_game

__all__ = [
    "Block",
    "Color",
    "GameGrid",
    "Point",
    "format_grid",
    "print_grid",
    "Direction",
    "SlideResult",
    "slide",
    "slide_direction",
    "find_matches",
    "find_groups",
    "is_part_of_any_match",
    "SpawnPlanner",
    "is_fair_batch",
    "ScoringRules",
    "CascadeResult",
    "resolve_cascade",
    "can_open_space",
    "is_terminal",
    "Phase",
    "TurnResult",
    "TurnStep",
    "GameAnalytics",
    "GameConfig",
    "QuodGame",
    "new_game",
]
