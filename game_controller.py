# game_controller.py - Game Controller

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from board_system import Direction, Grid, Level, Point, SessionState
from game_logic import GameLogic
from map_parser import LevelSet
from move_history import MoveHistory, lurd_to_directions

logger = logging.getLogger(__name__)


class Command(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    UNDO = "undo"
    RESET = "reset"
    ADVANCE = "advance"


COMMAND_DIRECTIONS = {
    Command.UP: Direction.UP,
    Command.DOWN: Direction.DOWN,
    Command.LEFT: Direction.LEFT,
    Command.RIGHT: Direction.RIGHT,
}
DIRECTION_COMMANDS = {d: c for c, d in COMMAND_DIRECTIONS.items()}


class GamePhase(Enum):
    PLAYING = "playing"
    SOLVED = "solved"


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the session for the presentation layer."""
    level_index: int
    level_count: int
    title: str
    grid: Grid
    player_pos: Point
    facing: Direction
    box_positions: Dict[int, Point]
    targets: FrozenSet[Point]
    move_count: int
    push_count: int
    phase: GamePhase


class GameController:
    def __init__(self, levels: LevelSet, start_index: int = 0):
        if len(levels) == 0:
            raise ValueError("GameController needs at least one level")
        self.levels = levels
        self.state: Optional[SessionState] = None
        self.history = MoveHistory()
        self.phase = GamePhase.PLAYING

        self._start_level(start_index % len(levels))

    # ===== Read-only accessors =====
    @property
    def level_index(self) -> int:
        return self.state.level_index

    @property
    def level(self) -> Level:
        return self.levels.get_level(self.state.level_index)

    @property
    def grid(self) -> Grid:
        return self.level.grid

    @property
    def move_count(self) -> int:
        return len(self.history)

    @property
    def push_count(self) -> int:
        return self.history.push_count

    def snapshot(self) -> GameSnapshot:
        level = self.level
        return GameSnapshot(
            level_index=self.state.level_index,
            level_count=len(self.levels),
            title=level.title,
            grid=level.grid,
            player_pos=self.state.player.pos,
            facing=self.state.player.direction,
            box_positions=self.state.box_positions(),
            targets=level.targets,
            move_count=self.move_count,
            push_count=self.push_count,
            phase=self.phase,
        )

    # ===== Level lifecycle =====
    def _start_level(self, index: int):
        """Rebuild session state from the level's spawn data"""
        level = self.levels.get_level(index)
        self.state = SessionState.from_level(index, level)
        self.history.clear()
        self.phase = GamePhase.PLAYING
        logger.info("Level %d/%d started%s", index + 1, len(self.levels),
                    f" ({level.title})" if level.title else "")

    def reset(self):
        """Reset level"""
        self._start_level(self.state.level_index)

    def advance(self) -> bool:
        """Go to the next level (wrapping). Only allowed once solved."""
        if self.phase != GamePhase.SOLVED:
            return False
        self._start_level((self.state.level_index + 1) % len(self.levels))
        return True

    # ===== Play =====
    def check_victory(self) -> bool:
        """Check victory conditions"""
        return GameLogic.is_solved(self.state.boxes.values(), self.level.targets)

    def update_phase(self) -> GamePhase:
        if self.phase == GamePhase.PLAYING and self.check_victory():
            self.phase = GamePhase.SOLVED
            logger.info("Level %d solved in %d moves (%d pushes)",
                        self.state.level_index + 1, self.move_count, self.push_count)
        return self.phase

    def handle_move(self, direction: Direction) -> bool:
        """Handle movement input. Facing turns even when the step is blocked."""
        if self.phase == GamePhase.SOLVED:
            return False

        outcome = GameLogic.try_move(self.state, self.grid, direction)
        if not outcome.moved:
            return False

        self.history.push(GameLogic.apply(self.state, outcome))
        return True

    def undo(self) -> bool:
        """Step back one move. Returns True if successful."""
        if self.phase == GamePhase.SOLVED:
            return False
        record = self.history.undo()
        if record is None:
            return False
        GameLogic.revert(self.state, record)
        return True

    def tick(self, command: Optional[Command] = None) -> bool:
        """
        One simulation tick: run the win check, then dispatch command.
        Returns True if the command changed anything.
        """
        phase = self.update_phase()
        if command is None:
            return False

        if phase == GamePhase.SOLVED:
            if command == Command.ADVANCE:
                return self.advance()
            return False

        if command == Command.UNDO:
            return self.undo()
        if command == Command.RESET:
            self.reset()
            return True
        if command in COMMAND_DIRECTIONS:
            return self.handle_move(COMMAND_DIRECTIONS[command])
        return False

    # ===== Solution log =====
    def solution_string(self) -> str:
        return self.history.to_lurd()

    def replay(self, moves: str) -> int:
        """Feed a LURD string through tick(); returns the number of applied moves"""
        applied = 0
        for direction in lurd_to_directions(moves):
            if self.tick(DIRECTION_COMMANDS[direction]):
                applied += 1
        return applied
