# presentation_model.py - Presentation Model Layer (Layer 2)
#
# Transforms game state into visual specifications.
# This layer decides WHAT to display, not HOW to display it.

from dataclasses import dataclass
from typing import List, Tuple

from board_system import Direction, Point, TileKind
from game_controller import GameController, GamePhase


@dataclass
class TileViewSpec:
    pos: Point
    kind: TileKind


@dataclass
class BoxViewSpec:
    uid: int
    pos: Point
    on_target: bool


@dataclass
class BoardViewSpec:
    """Visual specification for the board panel."""
    width: int
    height: int
    tiles: List[TileViewSpec]
    boxes: List[BoxViewSpec]
    player_pos: Point
    facing: Direction
    cell_size: int
    pos_x: int
    pos_y: int

    def cell_origin(self, pos: Point) -> Tuple[int, int]:
        """Top-left pixel of a cell (top-down coordinates)."""
        return (self.pos_x + pos.x * self.cell_size, self.pos_y + pos.y * self.cell_size)


@dataclass
class FrameViewSpec:
    """Complete visual specification for one frame."""
    board: BoardViewSpec
    title: str
    hint_lines: List[str]
    moves_text: str
    animation_frame: int

    # Game end state
    is_victory: bool
    victory_lines: List[str]


class ViewModelBuilder:
    """Transforms game state into visual specifications."""

    # === Layout Constants ===
    WINDOW_WIDTH = 1150
    WINDOW_HEIGHT = 700

    PADDING = 30
    HEADER_HEIGHT = 90
    MAX_CELL_SIZE = 64
    MIN_CELL_SIZE = 12

    HINTS = [
        "Arrows / WASD move",
        "Z or BACKSPACE undo last move",
        "R reset level",
    ]

    @staticmethod
    def build(controller: GameController, animation_frame: int = 0) -> FrameViewSpec:
        B = ViewModelBuilder
        snap = controller.snapshot()

        board = B._build_board_spec(snap)

        label = f"Level {snap.level_index + 1}/{snap.level_count}"
        if snap.title:
            label = f"{label}  {snap.title}"

        is_victory = snap.phase == GamePhase.SOLVED
        victory_lines = []
        if is_victory:
            victory_lines = [
                "Well done, you solved this level!",
                f"Number of Moves: {snap.move_count}",
                "Press ENTER to play the next level",
            ]

        return FrameViewSpec(
            board=board,
            title=label,
            hint_lines=list(B.HINTS),
            moves_text=f"Moves: {snap.move_count}  Pushes: {snap.push_count}",
            animation_frame=animation_frame,
            is_victory=is_victory,
            victory_lines=victory_lines,
        )

    @staticmethod
    def cell_size_for(width: int, height: int) -> int:
        """Largest cell size (clamped) that fits the board under the header."""
        B = ViewModelBuilder
        avail_w = B.WINDOW_WIDTH - B.PADDING * 2
        avail_h = B.WINDOW_HEIGHT - B.HEADER_HEIGHT - B.PADDING * 2
        size = min(avail_w // width, avail_h // height, B.MAX_CELL_SIZE)
        return max(size, B.MIN_CELL_SIZE)

    @staticmethod
    def _build_board_spec(snap) -> BoardViewSpec:
        B = ViewModelBuilder
        grid = snap.grid
        cell_size = B.cell_size_for(grid.width, grid.height)

        # Center the board below the header
        pos_x = (B.WINDOW_WIDTH - grid.width * cell_size) // 2
        body_h = B.WINDOW_HEIGHT - B.HEADER_HEIGHT
        pos_y = B.HEADER_HEIGHT + (body_h - grid.height * cell_size) // 2

        tiles = [
            TileViewSpec(pos=Point(x, y), kind=kind)
            for y, row in enumerate(grid.rows())
            for x, kind in enumerate(row)
        ]
        boxes = [
            BoxViewSpec(uid=uid, pos=pos, on_target=pos in snap.targets)
            for uid, pos in sorted(snap.box_positions.items())
        ]

        return BoardViewSpec(
            width=grid.width,
            height=grid.height,
            tiles=tiles,
            boxes=boxes,
            player_pos=snap.player_pos,
            facing=snap.facing,
            cell_size=cell_size,
            pos_x=pos_x,
            pos_y=pos_y,
        )
