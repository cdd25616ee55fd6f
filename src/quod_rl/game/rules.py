from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    cell_points: int = 100
    combo_points: int = 50

    def score_for_match(self, cells: int, combo_level: int) -> int:
        """Points for one cascade step removing ``cells`` blocks at ``combo_level``."""
        if cells <= 0:
            return 0
        return cells * self.cell_points + max(0, combo_level) * self.combo_points
