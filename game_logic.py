# game_logic.py - Game Rules and Actions

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Iterable, Optional

from board_system import Box, Direction, Grid, Point, SessionState

logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    BLOCKED = "blocked"
    MOVED = "moved"


@dataclass(frozen=True)
class MoveRecord:
    """One applied player action, kept for undo"""
    delta: Point
    box_id: Optional[int] = None

    @property
    def is_push(self) -> bool:
        return self.box_id is not None


@dataclass(frozen=True)
class Outcome:
    """Result of resolving one directional move. Describes, never applies."""
    kind: OutcomeKind
    delta: Point
    player_dest: Optional[Point] = None
    box_id: Optional[int] = None
    box_dest: Optional[Point] = None

    @property
    def moved(self) -> bool:
        return self.kind == OutcomeKind.MOVED

    def to_record(self) -> MoveRecord:
        if not self.moved:
            raise ValueError("Blocked outcome has no move record")
        return MoveRecord(delta=self.delta, box_id=self.box_id)


class GameLogic:
    @staticmethod
    def resolve(delta: Point, grid: Grid, player_pos: Point, boxes: Iterable[Box]) -> Outcome:
        """Compute the transition for one step; inputs are left untouched"""
        if abs(delta.x) + abs(delta.y) != 1:
            raise ValueError(f"Move delta must be a unit vector, got {delta}")

        boxes = list(boxes)
        player_dest = player_pos + delta

        if not grid.is_accessible(player_dest):
            logger.debug("[MOVE] %s blocked by wall/boundary at %s", delta, player_dest)
            return Outcome(OutcomeKind.BLOCKED, delta)

        pushed = next((b for b in boxes if b.pos == player_dest), None)
        if pushed is None:
            return Outcome(OutcomeKind.MOVED, delta, player_dest=player_dest)

        box_dest = pushed.pos + delta
        if not grid.is_accessible(box_dest):
            logger.debug("[MOVE] box %d blocked by wall/boundary at %s", pushed.uid, box_dest)
            return Outcome(OutcomeKind.BLOCKED, delta)
        if any(b.pos == box_dest for b in boxes):
            logger.debug("[MOVE] box %d blocked by another box at %s", pushed.uid, box_dest)
            return Outcome(OutcomeKind.BLOCKED, delta)

        return Outcome(OutcomeKind.MOVED, delta, player_dest=player_dest,
                       box_id=pushed.uid, box_dest=box_dest)

    @staticmethod
    def try_move(state: SessionState, grid: Grid, direction: Direction) -> Outcome:
        """Turn to face direction, then resolve the step against state"""
        state.player.direction = direction
        return GameLogic.resolve(direction.delta, grid, state.player.pos, state.boxes.values())

    @staticmethod
    def apply(state: SessionState, outcome: Outcome) -> MoveRecord:
        """Commit a Moved outcome: player first, then the single pushed box (by id)"""
        record = outcome.to_record()
        state.player.pos = outcome.player_dest
        if outcome.box_id is not None:
            state.boxes[outcome.box_id].pos = outcome.box_dest
        return record

    @staticmethod
    def revert(state: SessionState, record: MoveRecord):
        """Undo one record: step the player (and pushed box) back by its delta"""
        state.player.pos = state.player.pos - record.delta
        if record.box_id is not None:
            box = state.boxes[record.box_id]
            box.pos = box.pos - record.delta

    @staticmethod
    def is_solved(boxes: Iterable[Box], targets: AbstractSet[Point]) -> bool:
        """Every box sits on a target. Order of boxes/targets is irrelevant."""
        return all(b.pos in targets for b in boxes)

    @staticmethod
    def boxes_on_targets(boxes: Iterable[Box], targets: AbstractSet[Point]) -> int:
        return sum(1 for b in boxes if b.pos in targets)
