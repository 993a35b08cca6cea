# render_arc.py - Arcade Rendering System (Layer 3)
#
# Arcade-based renderer. Receives visual specifications from presentation_model
# and draws using arcade's drawing primitives.

import arcade
from typing import Dict, Tuple, TYPE_CHECKING

from board_system import TileKind
from presentation_model import ViewModelBuilder

if TYPE_CHECKING:
    from presentation_model import FrameViewSpec, BoardViewSpec, BoxViewSpec

# === Layout Constants ===
WINDOW_WIDTH = ViewModelBuilder.WINDOW_WIDTH
WINDOW_HEIGHT = ViewModelBuilder.WINDOW_HEIGHT
PADDING = ViewModelBuilder.PADDING

# === Colors (RGBA for arcade) ===
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
DARK_GRAY = (100, 100, 100)
WALL_COLOR = (60, 60, 70)
FLOOR_COLOR = (235, 230, 220)
TARGET_COLOR = (255, 200, 0)
GREEN = (50, 150, 50)
PLAYER_COLOR = (0, 100, 200)

# Box colors (colorblind-friendly)
BOX_COLORS = [
    (230, 80, 80),    # Red
    (70, 130, 180),   # Steel Blue
    (255, 180, 0),    # Orange
]

# Hint panel colors
HINT_BG = (40, 40, 40)
HINT_TEXT_GRAY = (200, 200, 200)
VICTORY_GREEN = (120, 230, 120)
BLINK_FRAMES = 30

TILE_COLORS = {
    TileKind.WALL: WALL_COLOR,
    TileKind.FLOOR: FLOOR_COLOR,
    TileKind.TARGET: FLOOR_COLOR,
}


def blend_color(color: Tuple[int, int, int], toward: Tuple[int, int, int],
                amount: float) -> Tuple[int, int, int]:
    """Linear blend from color to toward (amount 0.0 keeps color)."""
    return tuple(int(c + (t - c) * amount) for c, t in zip(color[:3], toward[:3]))


class ArcadeRenderer:
    """Arcade-based renderer for the game."""

    def __init__(self):
        self._text_cache: Dict[tuple, arcade.Text] = {}

    def _get_text(self, text: str, x: int, y: int, color: tuple,
                  font_size: int = 14, anchor_x: str = "center", anchor_y: str = "center") -> arcade.Text:
        """Text objects are cached by content and style; only position changes per frame."""
        key = (text, font_size, color, anchor_x, anchor_y)
        label = self._text_cache.get(key)
        if label is None:
            label = arcade.Text(text, x, y, color, font_size=font_size,
                                anchor_x=anchor_x, anchor_y=anchor_y)
            self._text_cache[key] = label
        label.position = (x, y)
        return label

    def _draw_cached_text(self, text: str, x: int, y: int, color: tuple,
                          font_size: int = 14, anchor_x: str = "center", anchor_y: str = "center"):
        self._get_text(text, x, y, color, font_size, anchor_x, anchor_y).draw()

    def draw_frame(self, spec: 'FrameViewSpec'):
        """Main entry point for rendering a complete frame."""
        arcade.draw_lrbt_rectangle_filled(0, WINDOW_WIDTH, 0, WINDOW_HEIGHT, BLACK)

        self._draw_hints(spec)
        self._draw_board(spec.board)

        if spec.is_victory:
            self._draw_overlay(spec)

    def _flip_y(self, y: int) -> int:
        """Convert top-down Y to arcade's bottom-up Y."""
        return WINDOW_HEIGHT - y

    def _draw_rect_outline(self, x: int, y: int, w: int, h: int,
                           color: Tuple, thickness: int):
        """Draw rectangle outline (top-down coordinates)."""
        arcade.draw_lrbt_rectangle_outline(x, x + w, self._flip_y(y + h), self._flip_y(y),
                                           color, thickness)

    def _draw_rect_filled(self, x: int, y: int, w: int, h: int, color: Tuple):
        """Draw filled rectangle (top-down coordinates)."""
        arcade.draw_lrbt_rectangle_filled(x, x + w, self._flip_y(y + h), self._flip_y(y), color)

    def _draw_hints(self, spec: 'FrameViewSpec'):
        y = 20
        for line in spec.hint_lines:
            self._draw_cached_text(line, PADDING, self._flip_y(y), HINT_TEXT_GRAY,
                                   font_size=12, anchor_x="left")
            y += 22
        self._draw_cached_text(spec.title, WINDOW_WIDTH - PADDING, self._flip_y(24), WHITE,
                               font_size=18, anchor_x="right")
        self._draw_cached_text(spec.moves_text, WINDOW_WIDTH - PADDING, self._flip_y(58),
                               HINT_TEXT_GRAY, font_size=14, anchor_x="right")

    def _draw_board(self, board: 'BoardViewSpec'):
        size = board.cell_size
        for tile in board.tiles:
            x, y = board.cell_origin(tile.pos)
            self._draw_rect_filled(x, y, size, size, TILE_COLORS[tile.kind])
            if tile.kind == TileKind.TARGET:
                inset = size // 6
                self._draw_rect_filled(x + inset, y + inset, size - inset * 2, size - inset * 2,
                                       TARGET_COLOR)

        for box in board.boxes:
            self._draw_box(board, box)
        self._draw_player(board)
        self._draw_grid_lines(board)

    def _draw_box(self, board: 'BoardViewSpec', box: 'BoxViewSpec'):
        size = board.cell_size
        padding = max(2, size // 8)
        x, y = board.cell_origin(box.pos)
        inner = size - padding * 2

        base_color = BOX_COLORS[(box.uid - 1) % len(BOX_COLORS)]
        if box.on_target:
            self._draw_rect_filled(x + padding, y + padding, inner, inner,
                                   blend_color(base_color, GREEN, 0.5))
            self._draw_rect_outline(x + padding, y + padding, inner, inner, GREEN, 3)
        else:
            self._draw_rect_filled(x + padding, y + padding, inner, inner, base_color)
            self._draw_rect_outline(x + padding, y + padding, inner, inner, BLACK, 2)

    def _draw_player(self, board: 'BoardViewSpec'):
        size = board.cell_size
        x, y = board.cell_origin(board.player_pos)
        center_x = x + size // 2
        center_y = self._flip_y(y + size // 2)

        dx, dy = board.facing.value
        offset = size // 8
        arcade.draw_circle_filled(center_x, center_y, size // 3, PLAYER_COLOR)
        # Flip Y for arrow
        self._draw_arrow(center_x + dx * offset, center_y - dy * offset, dx, -dy, size // 4, WHITE)

    def _draw_arrow(self, cx: int, cy: int, dx: int, dy: int,
                    size: int, color: Tuple):
        """Triangle pointing along (dx, dy) in arcade's y-up space."""
        half = size // 2
        base_x, base_y = cx + dx * half, cy + dy * half
        arcade.draw_polygon_filled([
            (cx + dx * size, cy + dy * size),
            (base_x - dy * half, base_y + dx * half),
            (base_x + dy * half, base_y - dx * half),
        ], color)

    def _draw_grid_lines(self, board: 'BoardViewSpec'):
        size = board.cell_size
        left, right = board.pos_x, board.pos_x + board.width * size
        top, bottom = self._flip_y(board.pos_y), self._flip_y(board.pos_y + board.height * size)
        for gx in range(board.width + 1):
            px = left + gx * size
            arcade.draw_line(px, bottom, px, top, DARK_GRAY, 1)
        for gy in range(board.height + 1):
            py = self._flip_y(board.pos_y + gy * size)
            arcade.draw_line(left, py, right, py, DARK_GRAY, 1)

    def _draw_overlay(self, spec: 'FrameViewSpec'):
        """Draw full-screen victory overlay."""
        arcade.draw_lrbt_rectangle_filled(0, WINDOW_WIDTH, 0, WINDOW_HEIGHT, (*HINT_BG, 200))

        headline, *rest = spec.victory_lines
        cx = WINDOW_WIDTH // 2
        y = WINDOW_HEIGHT // 2 - 80
        self._draw_cached_text(headline, cx, self._flip_y(y), VICTORY_GREEN, font_size=24)
        y += 70
        blink_off = (spec.animation_frame // BLINK_FRAMES) % 2 == 1
        for line in rest:
            if line.startswith("Press") and blink_off:
                y += 60
                continue
            font_size = 36 if line.startswith("Number") else 16
            self._draw_cached_text(line, cx, self._flip_y(y), WHITE, font_size=font_size)
            y += 60
