from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

from .cascade import CascadeResult, resolve_cascade
from .grid import Color, GameGrid, Point
from .rules import ScoringRules
from .slide import SETTLE, Direction, is_compacted, slide
from .spawn import BATCH_SIZE, SpawnPlanner, anchor_cells
from .terminal import can_open_space
from .turn import Phase, TurnResult, TurnStep


@dataclass
class GameConfig:
    grid_size: int = 5
    random_seed: Optional[int] = None
    max_episode_steps: int = 10000
    diagonal_matches: bool = False
    max_spawn_attempts: int = 1000


class QuodGame:
    """Turn orchestrator: slide, cascade, spawn, cascade, terminal check.

    The game owns the authoritative grid and every piece of session state.
    ``apply_direction`` runs a whole turn synchronously and returns a
    ``TurnResult`` describing what happened; a move that is rejected or that
    slides nothing comes back with ``blocked=True`` and changes nothing.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.planner = SpawnPlanner(self.rng, max_attempts=self.config.max_spawn_attempts)
        self.grid = GameGrid(self.config.grid_size)
        self.score = 0
        self.combo_count = 0  # level the next cascade starts from
        self.last_combo = 0  # highest level reached in the last turn
        self.max_combo = 0
        self.turns = 0
        self.total_cells_cleared = 0
        self.next_colors: List[Color] = []
        self.next_anchor: Optional[Point] = None
        self.phase = Phase.IDLE
        self._next_id = 1
        self.reset()

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def is_idle(self) -> bool:
        return self.phase is Phase.IDLE

    def new_game(self, size: Optional[int] = None, seed: Optional[int] = None) -> None:
        if size is not None:
            self.config = replace(self.config, grid_size=int(size))
        self.reset(seed)

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid = GameGrid(self.config.grid_size)
        self.score = 0
        self.combo_count = 0
        self.last_combo = 0
        self.max_combo = 0
        self.turns = 0
        self.total_cells_cleared = 0
        self._next_id = 1

        self.next_colors = self.planner.generate_spawn_batch()
        self._open_board(TurnResult())
        self._check_terminal()

    def _open_board(self, result: TurnResult) -> None:
        """Drop the pending batch onto an empty board at a random anchor."""
        anchor = self.planner.find_candidate_anchor(self.grid)
        assert anchor is not None
        self.grid = self._place(anchor, self.next_colors)
        result.steps.append(TurnStep(Phase.SPAWNING, "spawn", self.grid, anchor_cells(anchor)))
        self.next_colors = self.planner.generate_spawn_batch()
        # Settle once so the opening position follows the same rules as any spawn
        self._cascade(SETTLE, Phase.POST_SPAWN_CASCADING, result)

    def _issue_ids(self, count: int) -> List[int]:
        ids = list(range(self._next_id, self._next_id + count))
        self._next_id += count
        return ids

    def _place(self, anchor: Point, colors: Sequence[Color]) -> GameGrid:
        return self.planner.place_batch(self.grid, anchor, colors, self._issue_ids(BATCH_SIZE))

    def _cascade(self, vector: Sequence[int], phase: Phase, result: TurnResult) -> CascadeResult:
        dx, dy = vector
        self.phase = phase
        cascade = resolve_cascade(
            self.grid,
            dx,
            dy,
            self.rules,
            start_level=self.combo_count,
            diagonal=self.config.diagonal_matches,
            phase=phase,
        )
        self.grid = cascade.grid
        self.score += cascade.score
        self.combo_count = cascade.combo
        self.max_combo = max(self.max_combo, cascade.combo)
        self.total_cells_cleared += cascade.cells_cleared
        result.score_delta += cascade.score
        result.cells_cleared += cascade.cells_cleared
        result.max_combo = max(result.max_combo, cascade.combo)
        result.steps.extend(cascade.steps)
        return cascade

    def _check_terminal(self) -> None:
        self.phase = Phase.TERMINAL_CHECK
        self.next_anchor = self.planner.find_candidate_anchor(self.grid)
        if self.next_anchor is not None:
            self.phase = Phase.IDLE
        elif can_open_space(self.grid, self.rules, self.config.diagonal_matches):
            self.phase = Phase.IDLE
        else:
            self.phase = Phase.GAME_OVER

    def apply_direction(self, direction: Direction | int) -> TurnResult:
        result = TurnResult()
        if not self.is_idle:
            result.blocked = True
            result.game_over = self.game_over
            return result
        try:
            direction = Direction(direction)
        except ValueError:
            result.blocked = True
            return result

        self.phase = Phase.SLIDING
        dx, dy = direction.vector
        slid = slide(self.grid, dx, dy)
        if not slid.moved:
            self.phase = Phase.IDLE
            result.blocked = True
            return result
        result.moved = True
        result.steps.append(TurnStep(Phase.SLIDING, "slide", slid.grid))
        self.grid = slid.grid
        self.turns += 1

        self._cascade((dx, dy), Phase.CASCADING, result)

        self.phase = Phase.SPAWNING
        anchor = self.planner.revalidate_anchor(self.grid, self.next_anchor)
        if anchor is None:
            self.next_anchor = None
            self.phase = Phase.GAME_OVER
            result.combo = self.combo_count
            self.last_combo = result.max_combo
            result.game_over = True
            return result
        self.grid = self._place(anchor, self.next_colors)
        result.spawn_anchor = anchor
        result.steps.append(TurnStep(Phase.SPAWNING, "spawn", self.grid, anchor_cells(anchor)))
        self.next_colors = self.planner.generate_spawn_batch()

        self._cascade(SETTLE, Phase.POST_SPAWN_CASCADING, result)
        if self.grid.count_occupied() == 0:
            # Nothing left to slide; restart play from a fresh cluster
            self._open_board(result)

        self._check_terminal()
        result.combo = self.combo_count
        self.last_combo = result.max_combo
        result.game_over = self.game_over
        return result

    def get_valid_directions(self) -> List[Direction]:
        if not self.is_idle:
            return []
        return [d for d in Direction if not is_compacted(self.grid, d)]

    def simulate_direction(self, direction: Direction | int) -> Optional[CascadeResult]:
        """Dry-run the slide and cascade for ``direction`` without touching the session.

        Returns ``None`` when the slide would not move anything.
        """
        direction = Direction(direction)
        dx, dy = direction.vector
        slid = slide(self.grid, dx, dy)
        if not slid.moved:
            return None
        return resolve_cascade(
            slid.grid,
            dx,
            dy,
            self.rules,
            start_level=self.combo_count,
            diagonal=self.config.diagonal_matches,
        )

    def get_state(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.clone_state(),
            "ids": self.grid.ids.copy(),
            "blocks": [
                {"id": block.id, "color": int(block.color), "x": x, "y": y}
                for (x, y), block in self.grid.blocks()
            ],
            "score": self.score,
            "combo": self.last_combo,
            "carried_combo": self.combo_count,
            "next_colors": [int(c) for c in self.next_colors],
            "next_anchor": self.next_anchor,
            "phase": self.phase.value,
            "game_over": self.game_over,
            "turns": self.turns,
            "filled_ratio": self.grid.get_filled_ratio(),
        }

    def get_game_stats(self) -> Dict[str, Any]:
        return {
            "final_score": self.score,
            "turns": self.turns,
            "cells_cleared": self.total_cells_cleared,
            "max_combo": self.max_combo,
            "final_fill_ratio": self.grid.get_filled_ratio(),
            "avg_score_per_turn": self.score / max(1, self.turns),
        }


def new_game(size: int = 5, seed: Optional[int] = None, **kwargs: Any) -> QuodGame:
    return QuodGame(GameConfig(grid_size=size, random_seed=seed, **kwargs))
