from __future__ import annotations

from collections import deque
from typing import List, Sequence, Set, Tuple

import numpy as np

from .grid import EMPTY, GameGrid, Point


ORTHOGONAL: Tuple[Tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
DIAGONAL: Tuple[Tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))

MIN_GROUP_SIZE = 3


def find_group(
    grid: GameGrid,
    x: int,
    y: int,
    visited: np.ndarray,
    neighbours: Sequence[Tuple[int, int]] = ORTHOGONAL,
) -> List[Point]:
    """Flood-fill the same-colored group containing ``(x, y)``.

    Uses an explicit queue. Every cell added to the group is marked in
    ``visited`` so a detection pass touches each cell once.
    """
    color = grid.color_at(x, y)
    if color == EMPTY:
        return []
    visited[y, x] = True
    group: List[Point] = [(x, y)]
    queue = deque(group)
    while queue:
        cx, cy = queue.popleft()
        for dx, dy in neighbours:
            nx, ny = cx + dx, cy + dy
            if not grid.is_inside(nx, ny) or visited[ny, nx]:
                continue
            if grid.color_at(nx, ny) != color:
                continue
            visited[ny, nx] = True
            group.append((nx, ny))
            queue.append((nx, ny))
    return group


def find_groups(grid: GameGrid, neighbours: Sequence[Tuple[int, int]] = ORTHOGONAL) -> List[List[Point]]:
    """All maximal same-colored groups, matched or not."""
    visited = np.zeros((grid.size, grid.size), dtype=np.bool_)
    groups: List[List[Point]] = []
    for x in range(grid.size):
        for y in range(grid.size):
            if visited[y, x] or grid.is_empty(x, y):
                continue
            groups.append(find_group(grid, x, y, visited, neighbours))
    return groups


def find_matches(grid: GameGrid, diagonal: bool = False) -> Set[Point]:
    """Points of every group with at least three blocks.

    With ``diagonal`` set, groups connected only through diagonal neighbours
    are searched in a second pass and unioned in.
    """
    matches: Set[Point] = set()
    for group in find_groups(grid, ORTHOGONAL):
        if len(group) >= MIN_GROUP_SIZE:
            matches.update(group)
    if diagonal:
        for group in find_groups(grid, DIAGONAL):
            if len(group) >= MIN_GROUP_SIZE:
                matches.update(group)
    return matches


def is_part_of_any_match(grid: GameGrid, x: int, y: int, diagonal: bool = False) -> bool:
    if grid.is_empty(x, y):
        return False
    passes = [ORTHOGONAL, DIAGONAL] if diagonal else [ORTHOGONAL]
    for neighbours in passes:
        visited = np.zeros((grid.size, grid.size), dtype=np.bool_)
        if len(find_group(grid, x, y, visited, neighbours)) >= MIN_GROUP_SIZE:
            return True
    return False
