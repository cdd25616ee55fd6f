from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

from .grid import GameGrid


class Direction(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def vector(self) -> Tuple[int, int]:
        return DIRECTION_VECTORS[self]


DIRECTION_VECTORS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

SETTLE = (0, 0)


@dataclass
class SlideResult:
    grid: GameGrid
    moved: bool


def _scan_order(size: int, step: int) -> range:
    # Cells nearest the destination edge come first
    if step == 1:
        return range(size - 1, -1, -1)
    return range(size)


def slide(grid: GameGrid, dx: int, dy: int) -> SlideResult:
    """Compact every block toward the edge given by ``(dx, dy)``.

    Each block travels to the farthest empty cell it can reach in unit steps
    without leaving the grid or crossing another block. ``(0, 0)`` is accepted
    and leaves the grid untouched. The input grid is never modified.
    """
    if (dx, dy) not in DIRECTION_VECTORS.values() and (dx, dy) != SETTLE:
        raise ValueError(f"slide vector must be a unit vector or (0, 0), got {(dx, dy)}")
    new_grid = grid.copy()
    if (dx, dy) == SETTLE:
        return SlideResult(new_grid, False)

    size = new_grid.size
    moved = False
    for x in _scan_order(size, dx):
        for y in _scan_order(size, dy):
            if new_grid.is_empty(x, y):
                continue
            dest_x, dest_y = x, y
            next_x, next_y = x + dx, y + dy
            while new_grid.is_inside(next_x, next_y) and new_grid.is_empty(next_x, next_y):
                dest_x, dest_y = next_x, next_y
                next_x += dx
                next_y += dy
            if (dest_x, dest_y) != (x, y):
                new_grid.move((x, y), (dest_x, dest_y))
                moved = True
    return SlideResult(new_grid, moved)


def slide_direction(grid: GameGrid, direction: Direction) -> SlideResult:
    dx, dy = DIRECTION_VECTORS[direction]
    return slide(grid, dx, dy)


def is_compacted(grid: GameGrid, direction: Direction) -> bool:
    return not slide_direction(grid, direction).moved
