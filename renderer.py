# renderer.py - Pygame Rendering System (Layer 3)
#
# Pure rendering layer. Receives visual specifications from presentation_model
# and draws pixels. Does NOT make game logic decisions.

import itertools

import pygame
from typing import Tuple, TYPE_CHECKING

from board_system import TileKind
from presentation_model import ViewModelBuilder

if TYPE_CHECKING:
    from presentation_model import FrameViewSpec, BoardViewSpec, BoxViewSpec


def blend_color(color: Tuple[int, int, int], toward: Tuple[int, int, int],
                amount: float) -> Tuple[int, int, int]:
    """Linear blend from color to toward (amount 0.0 keeps color)."""
    return tuple(int(c + (t - c) * amount) for c, t in zip(color, toward))


# Constants
WINDOW_WIDTH = ViewModelBuilder.WINDOW_WIDTH
WINDOW_HEIGHT = ViewModelBuilder.WINDOW_HEIGHT
PADDING = ViewModelBuilder.PADDING

# Colors
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GRAY = (200, 200, 200)
DARK_GRAY = (100, 100, 100)
WALL_COLOR = (60, 60, 70)
FLOOR_COLOR = (235, 230, 220)
TARGET_COLOR = (255, 200, 0)
GREEN = (50, 150, 50)
PLAYER_COLOR = (0, 100, 200)

# Box colors (colorblind-friendly palette)
BOX_COLORS = [
    (230, 80, 80),    # Red
    (70, 130, 180),   # Steel Blue
    (255, 180, 0),    # Orange
]

# Hint panel colors
HINT_BG = (40, 40, 40)
HINT_TEXT_GRAY = (200, 200, 200)
VICTORY_GREEN = (120, 230, 120)
BLINK_FRAMES = 30  # prompt blink half-period at 60 fps

TILE_COLORS = {
    TileKind.WALL: WALL_COLOR,
    TileKind.FLOOR: FLOOR_COLOR,
    TileKind.TARGET: FLOOR_COLOR,
}


class Renderer:
    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self.font = pygame.font.Font(None, 24)
        self.hint_font = pygame.font.Font(None, 28)
        self.title_font = pygame.font.Font(None, 36)
        self.big_font = pygame.font.Font(None, 64)

    def draw_frame(self, spec: 'FrameViewSpec'):
        """Main entry point for rendering a complete frame."""
        self.screen.fill(BLACK)

        self.draw_static_hints(spec)
        self.draw_board(spec.board)

        if spec.is_victory:
            self.draw_overlay(spec)

    def draw_static_hints(self, spec: 'FrameViewSpec'):
        """Draw hints in the top-left corner, title and move counter on the right."""
        y = 12
        for line in spec.hint_lines:
            text_surface = self.font.render(line, True, HINT_TEXT_GRAY)
            self.screen.blit(text_surface, (PADDING, y))
            y += 22

        title_surface = self.title_font.render(spec.title, True, WHITE)
        self.screen.blit(title_surface, title_surface.get_rect(topright=(WINDOW_WIDTH - PADDING, 12)))

        moves_surface = self.hint_font.render(spec.moves_text, True, HINT_TEXT_GRAY)
        self.screen.blit(moves_surface, moves_surface.get_rect(topright=(WINDOW_WIDTH - PADDING, 48)))

    def draw_board(self, board: 'BoardViewSpec'):
        self.draw_terrain(board)
        for box in board.boxes:
            self.draw_box(board, box)
        self.draw_player(board)
        self.draw_grid_lines(board)

    def draw_terrain(self, board: 'BoardViewSpec'):
        """Draw terrain layer"""
        size = board.cell_size
        for tile in board.tiles:
            x, y = board.cell_origin(tile.pos)
            rect = pygame.Rect(x, y, size, size)
            pygame.draw.rect(self.screen, TILE_COLORS[tile.kind], rect)

            if tile.kind == TileKind.TARGET:
                inset = size // 3
                pygame.draw.rect(self.screen, TARGET_COLOR, rect.inflate(-inset, -inset))

    def draw_box(self, board: 'BoardViewSpec', box: 'BoxViewSpec'):
        """Draw a single box (color cycles by uid)"""
        size = board.cell_size
        padding = max(2, size // 8)
        x, y = board.cell_origin(box.pos)
        rect = pygame.Rect(x + padding, y + padding, size - padding * 2, size - padding * 2)

        base_color = BOX_COLORS[(box.uid - 1) % len(BOX_COLORS)]
        if box.on_target:
            pygame.draw.rect(self.screen, blend_color(base_color, GREEN, 0.5), rect)
            pygame.draw.rect(self.screen, GREEN, rect, 3)
        else:
            pygame.draw.rect(self.screen, base_color, rect)
            pygame.draw.rect(self.screen, BLACK, rect, 2)

    def draw_arrow(self, cx: int, cy: int, dx: int, dy: int, size: int, color: Tuple):
        """Triangle with its tip size px from (cx, cy) along (dx, dy)."""
        half = size // 2
        base_x, base_y = cx + dx * half, cy + dy * half
        points = [
            (cx + dx * size, cy + dy * size),
            (base_x - dy * half, base_y + dx * half),
            (base_x + dy * half, base_y - dx * half),
        ]
        pygame.draw.polygon(self.screen, color, points)

    def draw_player(self, board: 'BoardViewSpec'):
        """Draw the player with an arrow showing facing."""
        size = board.cell_size
        x, y = board.cell_origin(board.player_pos)
        center_x = x + size // 2
        center_y = y + size // 2

        dx, dy = board.facing.value
        offset = size // 8
        pygame.draw.circle(self.screen, PLAYER_COLOR, (center_x, center_y), size // 3)
        self.draw_arrow(center_x + dx * offset, center_y + dy * offset, dx, dy, size // 4, WHITE)

    def draw_grid_lines(self, board: 'BoardViewSpec'):
        size = board.cell_size
        left, top = board.pos_x, board.pos_y
        right = left + board.width * size
        bottom = top + board.height * size
        for gx in range(board.width + 1):
            px = left + gx * size
            pygame.draw.line(self.screen, DARK_GRAY, (px, top), (px, bottom), 1)
        for gy in range(board.height + 1):
            py = top + gy * size
            pygame.draw.line(self.screen, DARK_GRAY, (left, py), (right, py), 1)

    def draw_text_with_outline(self, text: str, pos: Tuple[int, int],
                               font: pygame.font.Font,
                               text_color: Tuple = WHITE,
                               outline_color: Tuple = BLACK,
                               outline_width: int = 2):
        """Centered text over an 8-way outline."""
        x, y = pos
        outline_surface = font.render(text, True, outline_color)
        for dx, dy in itertools.product((-outline_width, 0, outline_width), repeat=2):
            if dx or dy:
                self.screen.blit(outline_surface, outline_surface.get_rect(center=(x + dx, y + dy)))

        text_surface = font.render(text, True, text_color)
        self.screen.blit(text_surface, text_surface.get_rect(center=pos))

    def draw_overlay(self, spec: 'FrameViewSpec'):
        """Semi-transparent victory overlay."""
        overlay = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
        overlay.fill((*HINT_BG, 200))
        self.screen.blit(overlay, (0, 0))

        headline, *rest = spec.victory_lines
        cx = WINDOW_WIDTH // 2
        y = WINDOW_HEIGHT // 2 - 80
        self.draw_text_with_outline(headline, (cx, y), self.title_font, VICTORY_GREEN)
        y += 70
        blink_off = (spec.animation_frame // BLINK_FRAMES) % 2 == 1
        for line in rest:
            if line.startswith("Press") and blink_off:
                y += 60
                continue
            font = self.big_font if line.startswith("Number") else self.hint_font
            self.draw_text_with_outline(line, (cx, y), font)
            y += 60
