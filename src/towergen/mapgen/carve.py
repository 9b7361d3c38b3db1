# src/towergen/mapgen/carve.py
# Primary path: a self-avoiding random walk from a border entry to a border exit.
# Row 0 is the top edge; positions are (row, col), 0-based.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from ..config import LengthBand, MAX_WALK_FAILURES, TOWER_FREQUENCY
from ..errors import MapGenerationFailed, Rejection
from ..grid import Grid, Position
from ..rng import PMRandom
from ..tiles import Direction, TileKind, is_turn, shape_for_move
from .feasibility import is_safe
from .placement import place_diagonal_tower

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkResult:
    start: Position
    end: Position
    length: int
    towers: int


def candidate_moves(heading: Direction) -> Tuple[Direction, Direction, Direction]:
    """
    The three moves open to the walker, in draw order.
    Vertical headings list straight first; horizontal headings list the
    upward/downward turns first and straight last.
    """
    if heading in (Direction.UP, Direction.DOWN):
        return (heading, Direction.LEFT, Direction.RIGHT)
    return (Direction.UP, Direction.DOWN, heading)


class PathWalker:
    """
    Lays the primary path on an EMPTY grid.

    State is the travel heading plus `turn_tile`: after an elbow the next
    move is forced straight so two turns never touch.
    """

    def __init__(
        self,
        grid: Grid,
        rng: PMRandom,
        band: LengthBand,
        *,
        tower_density: float = 0.0,
        tower_frequency: int = TOWER_FREQUENCY,
    ) -> None:
        self.grid = grid
        self.rng = rng
        self.band = band
        self.tower_density = tower_density
        self.tower_frequency = tower_frequency

        self.heading = Direction.NONE
        self.turn_tile = False
        self.position = Position(0, 0)
        self.start = Position(0, 0)
        self.length = 0
        self.towers = 0

    # --- setup ------------------------------------------------------------

    def place_start(self) -> None:
        """Entry on the top edge (heading down) or the left edge (heading right)."""
        side = self.grid.side
        if self.rng.randrange(0, 2) == 1:
            self.start = Position(0, self.rng.randrange(0, side))
            start_kind, first_kind = TileKind.START_UD, TileKind.VERT_PATH
            self.heading = Direction.DOWN
        else:
            self.start = Position(self.rng.randrange(0, side), 0)
            start_kind, first_kind = TileKind.START_LR, TileKind.HORIZ_PATH
            self.heading = Direction.RIGHT

        cell = self.grid.cell(self.start)
        cell.kind = start_kind
        cell.direction = self.heading

        self.position = self.start.step(self.heading)
        self.grid.set_kind(self.position, first_kind)
        self.turn_tile = False
        self.length = 1

    # --- stepping ---------------------------------------------------------

    def step(self) -> bool:
        """Try one move from the current cell. True if a tile was laid."""
        cell = self.grid.cell(self.position)
        cell.direction = self.heading
        cell.kind = TileKind.CURRENTLY_PLACING

        moves = candidate_moves(self.heading)
        pick = self.rng.randrange(0, 3)
        if self.turn_tile:
            pick = moves.index(self.heading)
        new_heading = moves[pick]

        dest = self.position.step(new_heading)
        if not self.grid.in_bounds(dest) or not is_safe(self.grid, dest):
            return False

        shape = shape_for_move(self.heading, new_heading)
        cell.kind = shape
        self.turn_tile = is_turn(shape)
        self.position = dest
        self.heading = new_heading
        return True

    def _tower_budget(self) -> int:
        return int(self.length * self.tower_density)

    def _place_end(self) -> None:
        last = self.grid.side - 1
        cell = self.grid.cell(self.position)
        cell.kind = TileKind.END_UD if self.position.row in (0, last) else TileKind.END_LR
        cell.direction = self.heading

    def walk(self) -> WalkResult:
        """
        Run the walk to completion or raise MapGenerationFailed.
        - Ends on the first border cell reached once length > band.minimum.
        - MAX_WALK_FAILURES consecutive failed steps abandon the attempt.
        - Reaching band.maximum abandons the attempt (it could never be accepted).
        """
        self.place_start()
        failures = 0
        tower_wanted = False

        while True:
            if self.step():
                self.length += 1
                if self.length % self.tower_frequency == 0:
                    tower_wanted = True
                failures = 0
            else:
                failures += 1

            if failures >= MAX_WALK_FAILURES:
                raise MapGenerationFailed(
                    Rejection.DEAD_END, f"stuck at {tuple(self.position)} after {self.length} tiles"
                )
            if self.length >= self.band.maximum:
                raise MapGenerationFailed(
                    Rejection.PATH_TOO_LONG, f"length {self.length} >= {self.band.maximum}"
                )

            if (
                tower_wanted
                and self.towers < self._tower_budget()
                and place_diagonal_tower(self.grid, self.rng, self.position)
            ):
                tower_wanted = False
                self.towers += 1

            if self.length > self.band.minimum and self.grid.on_border(self.position):
                self._place_end()
                break

        logger.debug(
            "walk finished: start=%s end=%s length=%d towers=%d",
            tuple(self.start), tuple(self.position), self.length, self.towers,
        )
        return WalkResult(self.start, self.position, self.length, self.towers)


def carve_path(
    grid: Grid,
    rng: PMRandom,
    band: LengthBand,
    *,
    tower_density: float = 0.0,
    tower_frequency: int = TOWER_FREQUENCY,
) -> WalkResult:
    """Lay the primary path on `grid` (which must be EMPTY)."""
    walker = PathWalker(
        grid, rng, band, tower_density=tower_density, tower_frequency=tower_frequency
    )
    return walker.walk()
