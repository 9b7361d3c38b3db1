# src/towergen/tiles.py
# Canonical tile kinds and path-shape geometry.
# Ordinals are part of the display contract: glyph tables index by them.

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple


class TileKind(IntEnum):
    END_UD = 0
    END_LR = 1
    START_UD = 2
    START_LR = 3
    HORIZ_PATH = 4
    VERT_PATH = 5
    ELBOW_LEFT_UP = 6
    ELBOW_RIGHT_UP = 7
    ELBOW_LEFT_DOWN = 8
    ELBOW_RIGHT_DOWN = 9
    SPLIT_UDL = 10
    SPLIT_UDR = 11
    SPLIT_ULR = 12
    SPLIT_DLR = 13
    SPLIT_4WAYS = 14
    EMPTY = 15
    CURRENTLY_PLACING = 16
    DECORATION = 17
    DECORATION2 = 18
    TOWER_PLOT = 19


class Direction(Enum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    NONE = 4

    @property
    def delta(self) -> Tuple[int, int]:
        return _DELTAS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]


# (drow, dcol); row 0 is the top edge
_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
    Direction.NONE: (0, 0),
}
_OPPOSITE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.NONE: Direction.NONE,
}

# Cardinal directions in draw order (index == Direction.value)
CARDINALS: Tuple[Direction, ...] = (
    Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT,
)

U, D, L, R = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT

OPEN_SIDES: Dict[TileKind, FrozenSet[Direction]] = {
    TileKind.END_UD: frozenset((U, D)),
    TileKind.END_LR: frozenset((L, R)),
    TileKind.START_UD: frozenset((U, D)),
    TileKind.START_LR: frozenset((L, R)),
    TileKind.HORIZ_PATH: frozenset((L, R)),
    TileKind.VERT_PATH: frozenset((U, D)),
    TileKind.ELBOW_LEFT_UP: frozenset((L, U)),
    TileKind.ELBOW_RIGHT_UP: frozenset((R, U)),
    TileKind.ELBOW_LEFT_DOWN: frozenset((L, D)),
    TileKind.ELBOW_RIGHT_DOWN: frozenset((R, D)),
    TileKind.SPLIT_UDL: frozenset((U, D, L)),
    TileKind.SPLIT_UDR: frozenset((U, D, R)),
    TileKind.SPLIT_ULR: frozenset((U, L, R)),
    TileKind.SPLIT_DLR: frozenset((D, L, R)),
    TileKind.SPLIT_4WAYS: frozenset((U, D, L, R)),
}

# Connector shapes only; terminals are never produced by classification.
_SHAPE_FOR_SIDES: Dict[FrozenSet[Direction], TileKind] = {
    sides: kind for kind, sides in OPEN_SIDES.items()
    if kind >= TileKind.HORIZ_PATH
}

SPLIT_KINDS = frozenset((
    TileKind.SPLIT_UDL, TileKind.SPLIT_UDR, TileKind.SPLIT_ULR,
    TileKind.SPLIT_DLR, TileKind.SPLIT_4WAYS,
))
TURN_KINDS = frozenset((
    TileKind.ELBOW_LEFT_UP, TileKind.ELBOW_RIGHT_UP,
    TileKind.ELBOW_LEFT_DOWN, TileKind.ELBOW_RIGHT_DOWN,
    TileKind.SPLIT_UDL, TileKind.SPLIT_UDR,
    TileKind.SPLIT_ULR, TileKind.SPLIT_DLR,
))
START_KINDS = frozenset((TileKind.START_UD, TileKind.START_LR))
END_KINDS = frozenset((TileKind.END_UD, TileKind.END_LR))
DECORATION_KINDS = frozenset((TileKind.DECORATION, TileKind.DECORATION2))


def is_path(kind: TileKind) -> bool:
    # Path shapes occupy the low ordinals, up to and including the 4-way split.
    return kind <= TileKind.SPLIT_4WAYS


def is_terminal(kind: TileKind) -> bool:
    return kind in START_KINDS or kind in END_KINDS


def is_split(kind: TileKind) -> bool:
    return kind in SPLIT_KINDS


def is_turn(kind: TileKind) -> bool:
    """Elbows and 3-way splits; the walker must go straight after one."""
    return kind in TURN_KINDS


def open_sides(kind: TileKind) -> FrozenSet[Direction]:
    return OPEN_SIDES.get(kind, frozenset())


def kind_for_sides(sides: Iterable[Direction]) -> Optional[TileKind]:
    """Connector shape exposing exactly `sides`, or None for fewer than two."""
    return _SHAPE_FOR_SIDES.get(frozenset(sides))


def shape_for_move(heading: Direction, new_heading: Direction) -> TileKind:
    """Tile laid on a cell entered travelling `heading` and left via `new_heading`."""
    kind = kind_for_sides((heading.opposite, new_heading))
    if kind is None:
        raise ValueError(f"no connector joins {heading.name} to {new_heading.name}")
    return kind
