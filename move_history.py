# move_history.py - Undo Stack

from typing import Iterator, List, Optional

from board_system import Direction
from game_logic import MoveRecord

# LURD notation: lower case walks, upper case pushes
_DIRECTION_LETTERS = {
    Direction.UP: 'u',
    Direction.DOWN: 'd',
    Direction.LEFT: 'l',
    Direction.RIGHT: 'r',
}
_LETTER_DIRECTIONS = {letter: d for d, letter in _DIRECTION_LETTERS.items()}


class MoveHistory:
    """Unbounded stack of applied moves since the last reset."""

    def __init__(self):
        self._records: List[MoveRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MoveRecord]:
        return iter(self._records)

    def push(self, record: MoveRecord):
        self._records.append(record)

    def undo(self) -> Optional[MoveRecord]:
        """Pop the most recent record; None when there is nothing to undo"""
        if not self._records:
            return None
        return self._records.pop()

    def clear(self):
        self._records.clear()

    @property
    def push_count(self) -> int:
        return sum(1 for r in self._records if r.is_push)

    def to_lurd(self) -> str:
        letters = []
        for record in self._records:
            letter = _DIRECTION_LETTERS[Direction.from_delta(record.delta)]
            letters.append(letter.upper() if record.is_push else letter)
        return ''.join(letters)


def lurd_to_directions(moves: str) -> List[Direction]:
    """Parse a LURD string (case ignored, whitespace skipped)."""
    directions = []
    for char in moves:
        if char.isspace():
            continue
        direction = _LETTER_DIRECTIONS.get(char.lower())
        if direction is None:
            raise ValueError(f"Not a LURD move letter: {char!r}")
        directions.append(direction)
    return directions
