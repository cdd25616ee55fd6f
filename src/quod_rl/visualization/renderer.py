from __future__ import annotations

from typing import Optional, Sequence, Tuple

import pygame

from quod_rl.env.quod_env import CELL_COLORS
from quod_rl.game import Color, GameGrid, Point, is_part_of_any_match
from quod_rl.game.spawn import anchor_cells


def _color_for_value(v: int) -> Tuple[int, int, int]:
    return CELL_COLORS.get(int(v), (200, 200, 200))


class Renderer:
    def __init__(self, cell_size: int = 56, margin: int = 20, hud_height: int = 40) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.hud_height = hud_height
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, grid_size: int) -> Tuple[int, int]:
        side = grid_size * self.cell_size + self.margin * 2
        return side, side + self.hud_height

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        return self._font

    def _cell_rect(self, x: int, y: int, inset: int = 0) -> pygame.Rect:
        return pygame.Rect(
            x * self.cell_size + inset,
            y * self.cell_size + inset,
            self.cell_size - 1 - 2 * inset,
            self.cell_size - 1 - 2 * inset,
        )

    def _grid_surface(
        self,
        grid: GameGrid,
        next_colors: Sequence[Color] = (),
        next_anchor: Optional[Point] = None,
        diagonal: bool = False,
    ) -> pygame.Surface:
        side = grid.size * self.cell_size
        surf = pygame.Surface((side, side))
        surf.fill((30, 30, 36))
        for y in range(grid.size):
            for x in range(grid.size):
                pygame.draw.rect(surf, _color_for_value(grid.color_at(x, y)), self._cell_rect(x, y))
                # Blocks about to be cleared get a white frame
                if is_part_of_any_match(grid, x, y, diagonal):
                    pygame.draw.rect(surf, (255, 255, 255), self._cell_rect(x, y), 3)
        if next_anchor is not None and next_colors:
            # Preview of the pending batch: colored outlines on the target area
            for (x, y), color in zip(anchor_cells(next_anchor), next_colors):
                pygame.draw.rect(surf, _color_for_value(int(color)), self._cell_rect(x, y, inset=6), 3)
        return surf

    def draw(
        self,
        screen: pygame.Surface,
        grid: GameGrid,
        score: int,
        combo: int,
        next_colors: Sequence[Color] = (),
        next_anchor: Optional[Point] = None,
        message: Optional[str] = None,
        diagonal: bool = False,
    ) -> None:
        screen.fill((10, 10, 14))
        hud = self.font.render(f"Score {score}   Combo {combo}", True, (235, 235, 235))
        screen.blit(hud, (self.margin, (self.hud_height - hud.get_height()) // 2 + 4))
        screen.blit(self._grid_surface(grid, next_colors, next_anchor, diagonal), (self.margin, self.hud_height + self.margin // 2))
        if message:
            text = self.font.render(message, True, (255, 255, 255))
            rect = text.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
            backdrop = rect.inflate(16, 12)
            pygame.draw.rect(screen, (0, 0, 0), backdrop)
            screen.blit(text, rect)
        pygame.display.flip()
