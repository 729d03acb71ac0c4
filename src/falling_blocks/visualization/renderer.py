from __future__ import annotations

import pygame

from falling_blocks.game import Snapshot
from .palette import color_for_value


BACKGROUND = (10, 10, 14)
BORDER = (59, 130, 246)
TEXT = (255, 255, 255)
GAME_OVER_TEXT = (239, 68, 68)


class Renderer:
    """Draws a game snapshot: board, falling piece, score and game-over banner."""

    def __init__(self, cell_size: int = 28, margin: int = 20, header: int = 40, footer: int = 60) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.header = header
        self.footer = footer
        self._font = None

    def window_size(self, width: int, height: int) -> tuple[int, int]:
        return (
            width * self.cell_size + self.margin * 2,
            height * self.cell_size + self.margin * 2 + self.header + self.footer,
        )

    def _font_obj(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 32)
        return self._font

    def _grid_surface(self, snapshot: Snapshot) -> pygame.Surface:
        h, w = snapshot.board.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        active = set(snapshot.active_cells)
        for y in range(h):
            for x in range(w):
                v = int(snapshot.board[y, x])
                if v == 0 and (x, y) in active:
                    v = snapshot.active_tag
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color_for_value(v), rect)
        return surf

    def draw(self, screen: pygame.Surface, snapshot: Snapshot) -> None:
        font = self._font_obj()
        screen.fill(BACKGROUND)

        title = font.render("Falling Blocks", True, TEXT)
        screen.blit(title, title.get_rect(center=(screen.get_width() // 2, self.header // 2 + 4)))

        grid_surf = self._grid_surface(snapshot)
        origin = (self.margin, self.margin + self.header)
        screen.blit(grid_surf, origin)
        pygame.draw.rect(screen, BORDER, grid_surf.get_rect(topleft=origin).inflate(6, 6), 3)

        bottom = origin[1] + grid_surf.get_height() + 12
        score = font.render(f"Score: {snapshot.score}", True, TEXT)
        screen.blit(score, (self.margin, bottom))

        if snapshot.game_over:
            msg = font.render("Game Over - R to play again", True, GAME_OVER_TEXT)
        else:
            msg = font.render("R to reset", True, (160, 160, 170))
        screen.blit(msg, (self.margin, bottom + 26))

        pygame.display.flip()
