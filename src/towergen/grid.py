# src/towergen/grid.py
# Square cell store shared by every phase of one generation attempt.

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, NamedTuple, Tuple

from .tiles import Direction, TileKind, CARDINALS, is_path, is_split, DECORATION_KINDS

class Position(NamedTuple):
    row: int
    col: int

    def step(self, direction: Direction) -> "Position":
        dr, dc = direction.delta
        return Position(self.row + dr, self.col + dc)

    def manhattan(self, other: "Position") -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)

# 8-neighbourhood order used by tower placement: up, down, left, right,
# up-left, up-right, down-left, down-right.
NEIGHBOUR8_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
)

@dataclass
class Cell:
    kind: TileKind = TileKind.EMPTY
    direction: Direction = Direction.NONE
    split_marked: bool = False

    def clear(self) -> None:
        self.kind = TileKind.EMPTY
        self.direction = Direction.NONE
        self.split_marked = False

@dataclass
class Grid:
    side: int
    cells: List[List[Cell]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.side < 3:
            raise ValueError(f"grid side must be at least 3, got {self.side}")
        if not self.cells:
            self.cells = [[Cell() for _ in range(self.side)] for _ in range(self.side)]

    @classmethod
    def empty(cls, side: int) -> "Grid":
        return cls(side=side)

    def reset(self) -> None:
        """Every cell back to EMPTY with no direction and no split mark."""
        for row in self.cells:
            for cell in row:
                cell.clear()

    # --- addressing -------------------------------------------------------

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.row < self.side and 0 <= pos.col < self.side

    def on_border(self, pos: Position) -> bool:
        last = self.side - 1
        return pos.row in (0, last) or pos.col in (0, last)

    def cell(self, pos: Position) -> Cell:
        if not self.in_bounds(pos):
            raise IndexError(f"{pos} outside {self.side}x{self.side} grid")
        return self.cells[pos.row][pos.col]

    def kind(self, pos: Position) -> TileKind:
        return self.cell(pos).kind

    def set_kind(self, pos: Position, kind: TileKind) -> None:
        self.cell(pos).kind = kind

    def positions(self) -> Iterator[Position]:
        """Raster order: row by row, left to right."""
        for r in range(self.side):
            for c in range(self.side):
                yield Position(r, c)

    def neighbours4(self, pos: Position) -> Iterator[Tuple[Direction, Position]]:
        for d in CARDINALS:
            nb = pos.step(d)
            if self.in_bounds(nb):
                yield d, nb

    def neighbours8(self, pos: Position) -> Iterator[Position]:
        for dr, dc in NEIGHBOUR8_OFFSETS:
            nb = Position(pos.row + dr, pos.col + dc)
            if self.in_bounds(nb):
                yield nb

    # --- queries ----------------------------------------------------------

    def find(self, pred: Callable[[TileKind], bool]) -> List[Position]:
        return [p for p in self.positions() if pred(self.cells[p.row][p.col].kind)]

    def count(self, *kinds: TileKind) -> int:
        wanted = set(kinds)
        return sum(1 for row in self.cells for c in row if c.kind in wanted)

    def path_cells(self) -> List[Position]:
        return self.find(is_path)

    def tally(self) -> Counter:
        """Summary counts: path, split, tower, decoration, empty."""
        out: Counter = Counter()
        for row in self.cells:
            for c in row:
                if is_path(c.kind):
                    out["path"] += 1
                if is_split(c.kind):
                    out["split"] += 1
                if c.kind == TileKind.TOWER_PLOT:
                    out["tower"] += 1
                elif c.kind in DECORATION_KINDS:
                    out["decoration"] += 1
                elif c.kind == TileKind.EMPTY:
                    out["empty"] += 1
        return out

    def as_matrix(self) -> Tuple[Tuple[TileKind, ...], ...]:
        return tuple(tuple(c.kind for c in row) for row in self.cells)
