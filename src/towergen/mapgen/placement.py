# src/towergen/mapgen/placement.py
# Tower plots next to the path and decorative filler elsewhere.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Set

from ..config import BLOOM_RUN_THRESHOLD, DECOR2_ODDS, TOO_MANY_TILES
from ..grid import Grid, Position
from ..rng import PMRandom
from ..tiles import CARDINALS, Direction, TileKind

logger = logging.getLogger(__name__)

# Diagonals tried by the walker's tower request, indexed by a 0..3 draw.
_DIAGONALS = ((1, 1), (1, -1), (-1, 1), (-1, -1))


@dataclass(frozen=True)
class PlacementReport:
    target: int
    placed: int
    sequential: bool

    @property
    def shortfall(self) -> int:
        return max(0, self.target - self.placed)


# --- towers ---------------------------------------------------------------

def place_diagonal_tower(grid: Grid, rng: PMRandom, pos: Position) -> bool:
    """
    One try at a tower on a random diagonal of `pos` (interior positions only).
    Matches the walker's periodic tower request: failure is not an error.
    """
    if grid.on_border(pos):
        return False
    dr, dc = _DIAGONALS[rng.randrange(0, 4)]
    target = Position(pos.row + dr, pos.col + dc)
    if grid.kind(target) != TileKind.EMPTY:
        return False
    grid.set_kind(target, TileKind.TOWER_PLOT)
    return True


def tower_candidates(grid: Grid) -> Set[Position]:
    """Distinct EMPTY cells 8-adjacent to at least one path cell."""
    seen: Set[Position] = set()
    for p in grid.path_cells():
        for nb in grid.neighbours8(p):
            if nb not in seen and grid.kind(nb) == TileKind.EMPTY:
                seen.add(nb)
    return seen


def tower_target(grid: Grid, density: float) -> int:
    """New towers to add; plots laid during the walk come on top of these."""
    return int(len(tower_candidates(grid)) * density)


def _first_empty_neighbour(grid: Grid, pos: Position):
    for nb in grid.neighbours8(pos):
        if grid.kind(nb) == TileKind.EMPTY:
            return nb
    return None


def place_towers_sequentially(grid: Grid, target: int) -> int:
    """Raster over path cells, filling EMPTY neighbours until `target` towers are added."""
    placed = 0
    for p in grid.path_cells():
        for nb in grid.neighbours8(p):
            if placed >= target:
                return placed
            if grid.kind(nb) == TileKind.EMPTY:
                grid.set_kind(nb, TileKind.TOWER_PLOT)
                placed += 1
    return placed


def place_single_tower(grid: Grid, rng: PMRandom, path: List[Position]) -> bool:
    """Random path cell; convert its first EMPTY neighbour. False if all are taken."""
    nb = _first_empty_neighbour(grid, rng.choice(path))
    if nb is None:
        return False
    grid.set_kind(nb, TileKind.TOWER_PLOT)
    return True


def place_towers(grid: Grid, rng: PMRandom, density: float, draw_limit: int) -> PlacementReport:
    """
    Add int(candidates * density) towers beside the path.
    Above TOO_MANY_TILES the fill is sequential; otherwise random path cells
    are drawn until the target is met or `draw_limit` draws are spent.
    """
    target = tower_target(grid, density)
    sequential = density > TOO_MANY_TILES
    if sequential:
        placed = place_towers_sequentially(grid, target)
    else:
        path = grid.path_cells()
        placed = 0
        draws = 0
        while placed < target and draws < draw_limit and path:
            draws += 1
            if place_single_tower(grid, rng, path):
                placed += 1
            elif not tower_candidates(grid):
                break

    report = PlacementReport(target, placed, sequential)
    if report.shortfall:
        logger.warning("tower target not reached: %d/%d", report.placed, report.target)
    return report


# --- decoration -----------------------------------------------------------

def decor_target(grid: Grid, density: float) -> int:
    return int(grid.count(TileKind.EMPTY) * density)


def place_decor_sequentially(grid: Grid, rng: PMRandom, target: int) -> int:
    """Raster over EMPTY cells; one in DECOR2_ODDS becomes the alternate decoration."""
    placed = 0
    for p in grid.positions():
        if placed >= target:
            break
        if grid.kind(p) != TileKind.EMPTY:
            continue
        kind = TileKind.DECORATION2 if rng.randrange(0, DECOR2_ODDS) == 0 else TileKind.DECORATION
        grid.set_kind(p, kind)
        placed += 1
    return placed


def empty_run(grid: Grid, pos: Position, direction: Direction) -> int:
    """EMPTY cells in an unbroken line from `pos` (exclusive) toward `direction`."""
    run = 0
    cur = pos.step(direction)
    while grid.in_bounds(cur) and grid.kind(cur) == TileKind.EMPTY:
        run += 1
        cur = cur.step(direction)
    return run


def bloom_decor(grid: Grid, seed: Position, kind: TileKind, budget: int) -> int:
    """
    Grow a cluster of `kind` from `seed`.
    Each placed cell extends one cell further in every cardinal direction
    whose open EMPTY run exceeded BLOOM_RUN_THRESHOLD before placement.
    """
    placed = 0
    stack = [seed]
    while stack and placed < budget:
        pos = stack.pop()
        if not grid.in_bounds(pos) or grid.kind(pos) != TileKind.EMPTY:
            continue
        runs = {d: empty_run(grid, pos, d) for d in CARDINALS}
        grid.set_kind(pos, kind)
        placed += 1
        # Reversed so UP is grown first, as a recursive descent would.
        for d in reversed(CARDINALS):
            if runs[d] > BLOOM_RUN_THRESHOLD:
                stack.append(pos.step(d))
    return placed


def _random_position(grid: Grid, rng: PMRandom) -> Position:
    return Position(rng.randrange(0, grid.side), rng.randrange(0, grid.side))


def place_decor(grid: Grid, rng: PMRandom, density: float, draw_limit: int) -> PlacementReport:
    """
    Decorate int(EMPTY * density) cells.
    Above TOO_MANY_TILES: raster fill. Otherwise each round blooms a
    DECORATION2 cluster from a random cell and drops one DECORATION elsewhere.
    """
    target = decor_target(grid, density)
    sequential = density > TOO_MANY_TILES
    if sequential:
        placed = place_decor_sequentially(grid, rng, target)
    else:
        placed = 0
        rounds = 0
        while placed < target and rounds < draw_limit:
            rounds += 1
            placed += bloom_decor(grid, _random_position(grid, rng), TileKind.DECORATION2, target - placed)
            if placed >= target:
                break
            p = _random_position(grid, rng)
            if grid.kind(p) == TileKind.EMPTY:
                grid.set_kind(p, TileKind.DECORATION)
                placed += 1

    report = PlacementReport(target, placed, sequential)
    if report.shortfall:
        logger.warning("decoration target not reached: %d/%d", report.placed, report.target)
    return report
