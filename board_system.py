# board_system.py - Grid Model and Entity State

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple
from enum import Enum


@dataclass(frozen=True)
class Point:
    """Integer grid coordinate (x grows right, y grows down)."""
    x: int
    y: int

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> Point:
        return Point(*self.value)

    @staticmethod
    def from_delta(delta: Point) -> 'Direction':
        for d in Direction:
            if d.value == (delta.x, delta.y):
                return d
        raise ValueError(f"Not a unit direction: {delta}")


class TileKind(Enum):
    WALL = "#"
    FLOOR = " "
    TARGET = "."


# ===== Grid Model =====
@dataclass(frozen=True)
class Grid:
    """Immutable rectangular tile grid, row-major (index = width * y + x)."""
    width: int
    height: int
    tiles: Tuple[TileKind, ...]

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        if len(self.tiles) != self.width * self.height:
            raise ValueError(
                f"Grid needs {self.width * self.height} tiles, got {len(self.tiles)}")

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Optional[TileKind]:
        """Bounds-checked lookup; None outside the grid"""
        if not self.in_bounds(x, y):
            return None
        return self.tiles[self.width * y + x]

    def is_accessible(self, point: Point) -> bool:
        """In bounds and not a wall. Floor and Target are both walkable."""
        tile = self.tile_at(point.x, point.y)
        return tile is not None and tile != TileKind.WALL

    def rows(self) -> List[Tuple[TileKind, ...]]:
        return [self.tiles[y * self.width:(y + 1) * self.width] for y in range(self.height)]


# ===== Static Configuration =====
@dataclass(frozen=True)
class Level:
    """Validated level produced by map_parser; never mutated during play"""
    grid: Grid
    player_spawn: Point
    box_spawns: Tuple[Point, ...]
    targets: FrozenSet[Point]
    title: str = ""

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def box_definitions(self) -> Dict[int, Point]:
        """Box spawns keyed by uid (1, 2, ... in reading order; 0 = player)."""
        return {uid: pos for uid, pos in enumerate(self.box_spawns, start=1)}


# ===== Runtime Entity =====
@dataclass
class Box:
    uid: int
    pos: Point


@dataclass
class Player:
    pos: Point
    direction: Direction = Direction.DOWN  # presentation only


# ===== Session State =====
@dataclass
class SessionState:
    """Mutable per-level play state. Rebuilt wholesale on reset/advance."""
    level_index: int
    player: Player
    boxes: Dict[int, Box] = field(default_factory=dict)

    @classmethod
    def from_level(cls, level_index: int, level: Level) -> 'SessionState':
        """Create initial state from a Level's spawn data"""
        boxes = {uid: Box(uid=uid, pos=pos) for uid, pos in level.box_definitions().items()}
        return cls(level_index=level_index, player=Player(pos=level.player_spawn), boxes=boxes)

    def box_positions(self) -> Dict[int, Point]:
        return {uid: b.pos for uid, b in self.boxes.items()}
