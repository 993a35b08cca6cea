"""
Sokoban level parser.

Canonical (command) grammar, one level per !LEVEL ... !END block:

    !LEVEL Optional title
    !WIDTH 5
    !HEIGHT 3
    !BEGIN
    #####
    #@$.#
    #####
    !END

Glyphs: # (wall) ' ' - _ (floor) @ (player) + (player on target)
        $ (box) * (box on target) . (target)

Legacy grammar: levels are ';'-separated segments whose rows are the lines
containing at least one '#'. Legacy text is converted to canonical text and
parsed by the same validator.

Box IDs are auto-generated in left-to-right, top-to-bottom order, starting at 1.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional, Set, Union

from board_system import Grid, Level, Point, TileKind

logger = logging.getLogger(__name__)

COMMAND_PREFIX = '!'
COMMENT_PREFIX = ';'
LEGACY_DELIMITER = ';'
MIN_LEGACY_ROWS = 3

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')
_LEVEL_DIRECTIVE = re.compile(r"^\s*" + re.escape(COMMAND_PREFIX) + r"LEVEL\b", re.IGNORECASE | re.MULTILINE)


class LoadError(ValueError):
    """Structural level error. Aborts the load; no partial level is kept."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        super().__init__(f"line {line}: {message}" if line is not None else message)


class Glyph(NamedTuple):
    tile: TileKind
    player: bool = False
    box: bool = False


GLYPHS = {
    '#': Glyph(TileKind.WALL),
    ' ': Glyph(TileKind.FLOOR),
    '-': Glyph(TileKind.FLOOR),
    '_': Glyph(TileKind.FLOOR),
    '@': Glyph(TileKind.FLOOR, player=True),
    '+': Glyph(TileKind.TARGET, player=True),
    '$': Glyph(TileKind.FLOOR, box=True),
    '*': Glyph(TileKind.TARGET, box=True),
    '.': Glyph(TileKind.TARGET),
}


class LevelFormat(Enum):
    CANONICAL = "canonical"
    LEGACY = "legacy"


class ParseMode(Enum):
    COMMAND = "command"
    LAYOUT = "layout"


@dataclass
class _LevelDraft:
    """In-progress level between !LEVEL and !END"""
    title: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    tiles: List[TileKind] = field(default_factory=list)
    row: int = 0
    player: Point = Point(0, 0)
    player_set: bool = False  # (0, 0) is a legal spawn, so track it explicitly
    boxes: List[Point] = field(default_factory=list)
    targets: Set[Point] = field(default_factory=set)


# ===== Level Set =====
class LevelSet:
    """Validated levels in file order."""

    def __init__(self, levels: List[Level]):
        self._levels = list(levels)

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[Level]:
        return iter(self._levels)

    @property
    def count(self) -> int:
        return len(self._levels)

    def get_level(self, index: int) -> Optional[Level]:
        if 0 <= index < len(self._levels):
            return self._levels[index]
        return None


# ===== Canonical Grammar =====
class CommandParser:
    """Two-mode line reader: command lines start with '!', layout lines are rows."""

    def __init__(self):
        self.mode = ParseMode.COMMAND
        self.draft: Optional[_LevelDraft] = None
        self.levels: List[Level] = []

    def parse(self, text: str) -> List[Level]:
        for line_no, raw in enumerate(text.splitlines(), start=1):
            line = raw.rstrip()
            if not line:
                continue
            stripped = line.lstrip()
            if stripped.startswith(COMMAND_PREFIX):
                self._handle_command(stripped[len(COMMAND_PREFIX):], line_no)
            elif self.mode == ParseMode.LAYOUT:
                self._handle_row(line, line_no)
            elif stripped.startswith(COMMENT_PREFIX):
                continue
            else:
                raise LoadError(f"unexpected text outside a layout: {stripped!r}", line_no)

        if self.draft is not None:
            raise LoadError(f"level {self.draft.title!r} is missing !END")
        return self.levels

    def _handle_command(self, body: str, line_no: int):
        parts = body.split()
        if not parts:
            raise LoadError("empty command", line_no)
        name, args = parts[0].upper(), parts[1:]
        self.mode = ParseMode.COMMAND

        if name == 'LEVEL':
            if self.draft is not None:
                logger.debug("line %d: !LEVEL discards unfinished level %r", line_no, self.draft.title)
            self.draft = _LevelDraft(title=' '.join(args))
        elif name in ('WIDTH', 'HEIGHT'):
            draft = self._require_draft(name, line_no)
            value = self._parse_dimension(name, args, line_no)
            if name == 'WIDTH':
                draft.width = value
            else:
                draft.height = value
        elif name == 'BEGIN':
            draft = self._require_draft(name, line_no)
            if draft.width is None or draft.height is None:
                raise LoadError("!BEGIN before !WIDTH and !HEIGHT", line_no)
            draft.tiles.clear()
            draft.row = 0
            self.mode = ParseMode.LAYOUT
        elif name == 'END':
            draft = self._require_draft(name, line_no)
            self.levels.append(self._commit(draft, line_no))
            self.draft = None
        else:
            raise LoadError(f"unknown command !{name}", line_no)

    def _require_draft(self, name: str, line_no: int) -> _LevelDraft:
        if self.draft is None:
            raise LoadError(f"!{name} outside of a !LEVEL block", line_no)
        return self.draft

    @staticmethod
    def _parse_dimension(name: str, args: List[str], line_no: int) -> int:
        if len(args) != 1:
            raise LoadError(f"!{name} takes exactly one integer argument, got {len(args)}", line_no)
        try:
            value = int(args[0])
        except ValueError:
            raise LoadError(f"!{name} argument is not an integer: {args[0]!r}", line_no) from None
        if value <= 0:
            raise LoadError(f"!{name} must be positive, got {value}", line_no)
        return value

    def _handle_row(self, line: str, line_no: int):
        draft = self.draft
        y = draft.row
        for x, char in enumerate(line):
            glyph = GLYPHS.get(char)
            if glyph is None:
                raise LoadError(f"unknown glyph {char!r} at column {x + 1}", line_no)
            pos = Point(x, y)
            draft.tiles.append(glyph.tile)
            if glyph.tile == TileKind.TARGET:
                draft.targets.add(pos)
            if glyph.player:
                if draft.player_set:
                    raise LoadError(f"second player spawn at {pos.as_tuple()}", line_no)
                draft.player = pos
                draft.player_set = True
            if glyph.box:
                draft.boxes.append(pos)

        # Trailing floor is often trimmed by editors
        for _ in range(draft.width - len(line)):
            draft.tiles.append(TileKind.FLOOR)

        draft.row += 1
        if draft.row >= draft.height:
            draft.row = 0

    @staticmethod
    def _commit(draft: _LevelDraft, line_no: int) -> Level:
        """End-of-level validation. Any failure aborts the whole load."""
        label = f"level {draft.title!r}" if draft.title else "level"
        if draft.width is None or draft.height is None:
            raise LoadError(f"{label} has no !WIDTH/!HEIGHT", line_no)
        expected = draft.width * draft.height
        if len(draft.tiles) != expected:
            raise LoadError(
                f"{label} has {len(draft.tiles)} tiles, expected {draft.width}x{draft.height}={expected}",
                line_no)
        if not draft.player_set:
            raise LoadError(f"{label} has no player spawn", line_no)
        if not draft.targets:
            raise LoadError(f"{label} has no targets", line_no)
        if len(draft.boxes) < len(draft.targets):
            raise LoadError(
                f"{label} has {len(draft.boxes)} boxes for {len(draft.targets)} targets", line_no)

        return Level(
            grid=Grid(draft.width, draft.height, tuple(draft.tiles)),
            player_spawn=draft.player,
            box_spawns=tuple(draft.boxes),
            targets=frozenset(draft.targets),
            title=draft.title,
        )


def parse_canonical(text: str) -> List[Level]:
    return CommandParser().parse(text)


# ===== Legacy Grammar Adapter =====
def legacy_to_canonical(text: str) -> str:
    """
    Convert ';'-separated glyph segments into canonical command text.
    Segments with fewer than three wall-bearing rows are dropped.
    """
    blocks = []
    for index, segment in enumerate(text.split(LEGACY_DELIMITER)):
        pieces = _CONTROL_CHARS.split(segment)
        rows = [p for p in pieces if '#' in p]
        if len(rows) < MIN_LEGACY_ROWS:
            if rows:
                logger.warning("Dropping legacy segment %d: only %d rows", index, len(rows))
            continue

        title = next((p.strip() for p in pieces if p.strip() and '#' not in p), "")
        width = max(len(r) for r in rows)

        lines = [f"{COMMAND_PREFIX}LEVEL {title}".rstrip(),
                 f"{COMMAND_PREFIX}WIDTH {width}",
                 f"{COMMAND_PREFIX}HEIGHT {len(rows)}",
                 f"{COMMAND_PREFIX}BEGIN"]
        for y, row in enumerate(rows):
            repaired = []
            for x, char in enumerate(row):
                if char not in GLYPHS:
                    logger.warning("Legacy segment %d: unknown glyph %r at (%d, %d) read as floor",
                                   index, char, x, y)
                    char = ' '
                repaired.append(char)
            lines.append(''.join(repaired).ljust(width))
        lines.append(f"{COMMAND_PREFIX}END")
        blocks.append('\n'.join(lines))

    return '\n\n'.join(blocks) + '\n'


def parse_legacy(text: str) -> List[Level]:
    return parse_canonical(legacy_to_canonical(text))


# ===== Entry Points =====
def detect_format(text: str) -> LevelFormat:
    """Canonical only if some line opens a level; stray '!' headers stay legacy."""
    if _LEVEL_DIRECTIVE.search(text):
        return LevelFormat.CANONICAL
    return LevelFormat.LEGACY


def parse_levels(text: str, fmt: Optional[LevelFormat] = None) -> LevelSet:
    """Parse level text (format auto-detected) into a non-empty LevelSet."""
    fmt = fmt or detect_format(text)
    if fmt == LevelFormat.CANONICAL:
        levels = parse_canonical(text)
    else:
        levels = parse_legacy(text)

    if not levels:
        raise LoadError("no playable levels found")
    logger.info("Loaded %d level(s) from %s text", len(levels), fmt.value)
    return LevelSet(levels)


def load_level_file(path: Union[str, Path], fmt: Optional[LevelFormat] = None) -> LevelSet:
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"cannot read level file {path}: {e}") from e
    return parse_levels(text, fmt)
