# src/towergen/mapgen/braid.py
# Secondary ("split") path: joins two interior path cells with a walk that
# only ever closes distance, then reshapes every touched cell into the
# connector its path neighbours imply.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Set, Tuple

from ..config import MAX_ENDPOINT_DRAWS
from ..errors import MapGenerationFailed, Rejection
from ..grid import Grid, Position
from ..rng import PMRandom
from ..tiles import CARDINALS, Direction, SPLIT_KINDS, is_path, is_terminal, kind_for_sides

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitBraid:
    start: Position
    end: Position
    cells: Tuple[Position, ...]   # start .. end inclusive, 4-connected


def is_braid_anchor(grid: Grid, pos: Position) -> bool:
    kind = grid.kind(pos)
    return is_path(kind) and not is_terminal(kind) and not grid.on_border(pos)


def pick_anchors(grid: Grid, rng: PMRandom, max_draws: int = MAX_ENDPOINT_DRAWS) -> Tuple[Position, Position]:
    """Two distinct interior path cells; more than `max_draws` redraws fails the attempt."""
    n = grid.side

    def draw() -> Position:
        return Position(rng.randrange(1, n - 1), rng.randrange(1, n - 1))

    failed = 0
    start = draw()
    while not is_braid_anchor(grid, start):
        failed += 1
        if failed > max_draws:
            raise MapGenerationFailed(Rejection.SPLIT_ENDPOINTS, "no interior path cell for braid start")
        start = draw()
    end = draw()
    while not is_braid_anchor(grid, end) or end == start:
        failed += 1
        if failed > max_draws:
            raise MapGenerationFailed(Rejection.SPLIT_ENDPOINTS, "no interior path cell for braid end")
        end = draw()
    return start, end


def _closes_distance(pos: Position, target: Position, d: Direction) -> bool:
    nxt = pos.step(d)
    if d in (Direction.UP, Direction.DOWN):
        return abs(nxt.row - target.row) < abs(pos.row - target.row)
    return abs(nxt.col - target.col) < abs(pos.col - target.col)


def braid_walk(grid: Grid, rng: PMRandom, start: Position, end: Position, tick_limit: int) -> List[Position]:
    """
    Mark a monotone walk from `start` to `end` as split cells.
    Each tick draws one of four directions; the move is taken only if it
    shortens the distance to `end` on that axis, otherwise the tick idles.
    """
    grid.cell(start).split_marked = True
    grid.cell(end).split_marked = True
    pos = start
    cells = [start]
    ticks = 0
    while pos != end:
        ticks += 1
        if ticks > tick_limit:
            raise MapGenerationFailed(
                Rejection.SPLIT_STALLED, f"braid {tuple(start)}->{tuple(end)} idle after {tick_limit} ticks"
            )
        d = CARDINALS[rng.randrange(0, len(CARDINALS))]
        if _closes_distance(pos, end, d):
            pos = pos.step(d)
            grid.cell(pos).split_marked = True
            cells.append(pos)
    return cells


def connective_sides(grid: Grid, pos: Position) -> Set[Direction]:
    """
    Sides of `pos` whose neighbour is a path shape or already split-marked.
    Such neighbours are marked too, pulling them into the reclassification.
    """
    sides: Set[Direction] = set()
    for d, nb in grid.neighbours4(pos):
        cell = grid.cell(nb)
        if is_path(cell.kind) or cell.split_marked:
            cell.split_marked = True
            sides.add(d)
    return sides


def reclassify_split_cells(grid: Grid) -> int:
    """
    One raster pass: every split-marked non-terminal cell takes the shape
    its connective sides imply. Returns how many cells changed kind.
    """
    changed = 0
    for pos in grid.positions():
        cell = grid.cell(pos)
        if not cell.split_marked or is_terminal(cell.kind):
            continue
        kind = kind_for_sides(connective_sides(grid, pos))
        if kind is not None and kind != cell.kind:
            cell.kind = kind
            changed += 1
    return changed


def braid_split(
    grid: Grid,
    rng: PMRandom,
    *,
    tick_limit: int = 10_000,
    max_draws: int = MAX_ENDPOINT_DRAWS,
) -> SplitBraid:
    """
    Add a secondary path to an accepted primary path.
    Marking spreads while classifying, so the pass runs twice.
    Raises MapGenerationFailed if no split shape results.
    """
    start, end = pick_anchors(grid, rng, max_draws)
    cells = braid_walk(grid, rng, start, end, tick_limit)
    reclassify_split_cells(grid)
    reclassify_split_cells(grid)

    splits = grid.count(*SPLIT_KINDS)
    if splits == 0:
        raise MapGenerationFailed(Rejection.NO_SPLIT, f"braid {tuple(start)}->{tuple(end)} made no junction")
    logger.debug("braid %s->%s over %d cells, %d junctions", tuple(start), tuple(end), len(cells), splits)
    return SplitBraid(start, end, tuple(cells))
