# src/towergen/mapgen/adjacency.py
# Rejects layouts where two path strands touch without connecting.

from __future__ import annotations

from typing import Iterator, List, Tuple

from ..grid import Grid, Position
from ..tiles import is_path, open_sides

Violation = Tuple[Position, Position]


def iter_violations(grid: Grid) -> Iterator[Violation]:
    """
    Yield (cell, neighbour) for every path cell whose path-shaped orthogonal
    neighbour does not open back toward it. Scanning every path cell checks
    each touching pair from both sides.
    """
    for pos in grid.positions():
        if not is_path(grid.kind(pos)):
            continue
        for d, nb in grid.neighbours4(pos):
            nk = grid.kind(nb)
            if is_path(nk) and d.opposite not in open_sides(nk):
                yield pos, nb


def adjacency_violations(grid: Grid) -> List[Violation]:
    return list(iter_violations(grid))


def has_invalid_adjacency(grid: Grid) -> bool:
    return next(iter_violations(grid), None) is not None
