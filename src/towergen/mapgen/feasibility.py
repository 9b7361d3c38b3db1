# src/towergen/mapgen/feasibility.py
# Lookahead probe: can the walker still escape to the border from here?

from __future__ import annotations

from typing import List, Optional, Set

from ..grid import Grid, Position
from ..tiles import TileKind


def is_safe(grid: Grid, pos: Position, visited: Optional[Set[Position]] = None) -> bool:
    """
    True when `pos` is an EMPTY cell from which EMPTY cells lead to the border.
    - Out of bounds or occupied: False.
    - Border cells: True immediately (the walk can always end there).
    - Otherwise a depth-first search over 4-connected EMPTY cells.
    `visited` is scratch for this one probe; pass a set to inspect it afterwards.
    """
    if not grid.in_bounds(pos) or grid.kind(pos) != TileKind.EMPTY:
        return False
    if grid.on_border(pos):
        return True

    seen = visited if visited is not None else set()
    seen.add(pos)
    stack: List[Position] = [pos]
    while stack:
        cur = stack.pop()
        if grid.on_border(cur):
            return True
        for _, nb in grid.neighbours4(cur):
            if nb not in seen and grid.kind(nb) == TileKind.EMPTY:
                seen.add(nb)
                stack.append(nb)
    return False
