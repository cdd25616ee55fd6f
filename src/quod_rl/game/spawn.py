from __future__ import annotations

import random
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from .grid import Block, Color, GameGrid, Point


# Canonical placement order: top-left, top-right, bottom-left, bottom-right
SPAWN_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 0), (1, 0), (0, 1), (1, 1))
BATCH_SIZE = len(SPAWN_OFFSETS)
MAX_SAME_COLOR = 2


def is_fair_batch(colors: Sequence[Color]) -> bool:
    """A batch is fair when no color appears three or more times."""
    if not colors:
        return True
    return max(Counter(colors).values()) <= MAX_SAME_COLOR


def anchor_cells(anchor: Point) -> List[Point]:
    x, y = anchor
    return [(x + ox, y + oy) for ox, oy in SPAWN_OFFSETS]


class SpawnPlanner:
    """Chooses where the next 2x2 cluster goes and what colors it has."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        palette: Sequence[Color] = tuple(Color),
        max_attempts: int = 1000,
    ) -> None:
        if len(palette) == 0:
            raise ValueError("palette must contain at least one color")
        self.rng = rng or random.Random()
        self.palette = tuple(palette)
        self.max_attempts = max(1, int(max_attempts))

    def find_candidate_anchor(self, grid: GameGrid) -> Optional[Point]:
        anchors = grid.empty_anchors()
        if not anchors:
            return None
        return self.rng.choice(anchors)

    def revalidate_anchor(self, grid: GameGrid, anchor: Optional[Point]) -> Optional[Point]:
        """Keep ``anchor`` when it is still free, otherwise pick a new one."""
        if grid.is_anchor_free(anchor):
            return anchor
        return self.find_candidate_anchor(grid)

    def _draw(self) -> List[Color]:
        return [self.rng.choice(self.palette) for _ in range(BATCH_SIZE)]

    def generate_spawn_batch(self) -> List[Color]:
        colors = self._draw()
        attempts = 1
        while not is_fair_batch(colors) and attempts < self.max_attempts:
            colors = self._draw()
            attempts += 1
        # Past the cap the last draw is kept as is
        return colors

    @staticmethod
    def place_batch(
        grid: GameGrid,
        anchor: Point,
        colors: Sequence[Color],
        ids: Optional[Sequence[int]] = None,
    ) -> GameGrid:
        """Return a copy of ``grid`` with ``colors`` written into the anchor area.

        Colors map onto ``SPAWN_OFFSETS`` order. When ``ids`` is omitted the
        new blocks get ids above the largest id already on the grid.
        """
        if len(colors) != BATCH_SIZE:
            raise ValueError(f"spawn batch needs {BATCH_SIZE} colors, got {len(colors)}")
        if not grid.is_anchor_free(anchor):
            raise ValueError(f"anchor {anchor} is not a free 2x2 area")
        if ids is None:
            base = int(grid.ids.max()) + 1
            ids = [base + i for i in range(BATCH_SIZE)]
        if len(ids) != BATCH_SIZE:
            raise ValueError(f"spawn batch needs {BATCH_SIZE} ids, got {len(ids)}")
        new_grid = grid.copy()
        for (x, y), color, block_id in zip(anchor_cells(anchor), colors, ids):
            new_grid.set_block(x, y, Block(int(block_id), Color(color)))
        return new_grid
