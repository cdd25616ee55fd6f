from __future__ import annotations

from typing import Dict

import numpy as np

from .grid import EMPTY, GameGrid
from .matching import find_groups


class GameAnalytics:
    """Helper class for analyzing grid states"""

    @staticmethod
    def count_adjacent_pairs(colors: np.ndarray) -> int:
        """Orthogonally adjacent cells that share a color."""
        horizontal = (colors[:, 1:] == colors[:, :-1]) & (colors[:, 1:] != EMPTY)
        vertical = (colors[1:, :] == colors[:-1, :]) & (colors[1:, :] != EMPTY)
        return int(np.sum(horizontal) + np.sum(vertical))

    @staticmethod
    def get_board_features(grid: GameGrid) -> Dict[str, float]:
        size = grid.size
        colors = grid.colors
        filled = grid.count_occupied()
        groups = find_groups(grid)
        return {
            "filled_cells": filled,
            "fill_ratio": float(filled) / float(size * size),
            "free_anchors": len(grid.empty_anchors()),
            "adjacent_pairs": GameAnalytics.count_adjacent_pairs(colors),
            "largest_group": max((len(g) for g in groups), default=0),
            "group_count": len(groups),
            "empty_rows": sum(1 for row in range(size) if not np.any(colors[row, :])),
            "empty_cols": sum(1 for col in range(size) if not np.any(colors[:, col])),
        }
