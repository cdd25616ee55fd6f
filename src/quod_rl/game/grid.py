from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np


Point = Tuple[int, int]

EMPTY = 0


class Color(IntEnum):
    RED = 1
    BLUE = 2
    YELLOW = 3
    GREEN = 4


COLOR_LETTERS = {
    Color.RED: "R",
    Color.BLUE: "B",
    Color.YELLOW: "Y",
    Color.GREEN: "G",
}
LETTER_COLORS = {letter: color for color, letter in COLOR_LETTERS.items()}


@dataclass(frozen=True)
class Block:
    id: int
    color: Color


class GameGrid:
    """Square grid of colored blocks.

    Two planes are kept side by side: ``colors`` holds 0 for empty cells and a
    ``Color`` value otherwise, ``ids`` holds the block id (0 when empty).
    Both are indexed ``[y, x]`` with ``y = 0`` as the top row.

    Mutating helpers (``set_block``, ``remove``) act in place and are meant for
    the owner of a grid; everything that transforms a grid for another caller
    works on a ``copy()``.
    """

    def __init__(self, size: int) -> None:
        if int(size) < 2:
            raise ValueError(f"grid size must be at least 2, got {size}")
        self.size = int(size)
        self.colors = np.zeros((self.size, self.size), dtype=np.int8)
        self.ids = np.zeros((self.size, self.size), dtype=np.int64)

    @classmethod
    def from_rows(cls, rows: Sequence[str], first_id: int = 1) -> "GameGrid":
        """Build a grid from strings such as ``"RR.BB"`` (top row first).

        Letters are ``R``, ``B``, ``Y``, ``G``; ``.`` marks an empty cell.
        Ids are handed out in reading order starting at ``first_id``.
        """
        grid = cls(len(rows))
        next_id = first_id
        for y, row in enumerate(rows):
            if len(row) != grid.size:
                raise ValueError(f"row {y} has length {len(row)}, expected {grid.size}")
            for x, ch in enumerate(row):
                if ch == ".":
                    continue
                grid.set_block(x, y, Block(next_id, LETTER_COLORS[ch.upper()]))
                next_id += 1
        return grid

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def _require_inside(self, x: int, y: int) -> None:
        # Negative indices would silently wrap to the opposite edge
        if not self.is_inside(x, y):
            raise ValueError(f"point {(x, y)} is outside a {self.size}x{self.size} grid")

    def is_empty(self, x: int, y: int) -> bool:
        self._require_inside(x, y)
        return self.colors[y, x] == EMPTY

    def get(self, x: int, y: int) -> Optional[Block]:
        self._require_inside(x, y)
        color = int(self.colors[y, x])
        if color == EMPTY:
            return None
        return Block(int(self.ids[y, x]), Color(color))

    def color_at(self, x: int, y: int) -> int:
        self._require_inside(x, y)
        return int(self.colors[y, x])

    def set_block(self, x: int, y: int, block: Block) -> None:
        self._require_inside(x, y)
        self.colors[y, x] = int(block.color)
        self.ids[y, x] = block.id

    def remove(self, x: int, y: int) -> None:
        self._require_inside(x, y)
        self.colors[y, x] = EMPTY
        self.ids[y, x] = 0

    def move(self, src: Point, dst: Point) -> None:
        (sx, sy), (dx, dy) = src, dst
        self.colors[dy, dx] = self.colors[sy, sx]
        self.ids[dy, dx] = self.ids[sy, sx]
        self.remove(sx, sy)

    def without(self, points: Iterable[Point]) -> "GameGrid":
        """Return a copy with the given cells emptied."""
        new_grid = self.copy()
        for x, y in points:
            new_grid.remove(x, y)
        return new_grid

    def occupied_points(self) -> List[Point]:
        ys, xs = np.nonzero(self.colors)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def blocks(self) -> Iterator[Tuple[Point, Block]]:
        for x, y in self.occupied_points():
            yield (x, y), Block(int(self.ids[y, x]), Color(int(self.colors[y, x])))

    def count_occupied(self) -> int:
        return int(np.count_nonzero(self.colors))

    def is_full(self) -> bool:
        return self.count_occupied() == self.size * self.size

    def is_anchor_free(self, anchor: Optional[Point]) -> bool:
        """True when the 2x2 area whose top-left corner is ``anchor`` is empty."""
        if anchor is None:
            return False
        x, y = anchor
        if not (0 <= x <= self.size - 2 and 0 <= y <= self.size - 2):
            return False
        return not np.any(self.colors[y : y + 2, x : x + 2])

    def empty_anchors(self) -> List[Point]:
        anchors: List[Point] = []
        for x in range(self.size - 1):
            for y in range(self.size - 1):
                if self.is_anchor_free((x, y)):
                    anchors.append((x, y))
        return anchors

    def get_filled_ratio(self) -> float:
        return float(self.count_occupied()) / float(self.size * self.size)

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.size)
        new_grid.colors = self.colors.copy()
        new_grid.ids = self.ids.copy()
        return new_grid

    def clone_state(self) -> np.ndarray:
        return self.colors.copy()

    def to_rows(self) -> List[str]:
        rows: List[str] = []
        for y in range(self.size):
            rows.append(
                "".join(
                    COLOR_LETTERS[Color(int(c))] if c != EMPTY else "." for c in self.colors[y]
                )
            )
        return rows

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return (
            self.size == other.size
            and np.array_equal(self.colors, other.colors)
            and np.array_equal(self.ids, other.ids)
        )

    def __repr__(self) -> str:
        return f"GameGrid({self.to_rows()!r})"


def format_grid(grid: GameGrid) -> str:
    return "\n".join(" ".join(row) for row in grid.to_rows())


def print_grid(grid: GameGrid) -> None:
    print(format_grid(grid))
