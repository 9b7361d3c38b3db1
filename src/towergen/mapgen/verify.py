# src/towergen/mapgen/verify.py
# Last gate before a map leaves the generator. A failure here means a bug
# in one of the phases, so it raises instead of asking for a retry.

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Set

from ..config import GenerationConfig
from ..errors import InvariantViolation
from ..grid import Grid, Position
from ..tiles import (
    END_KINDS, SPLIT_KINDS, START_KINDS, TileKind, is_path, open_sides,
)
from .adjacency import adjacency_violations
from .braid import SplitBraid


def traverse_path(grid: Grid, start: Position) -> Set[Position]:
    """Path cells reachable from `start` by following mutually open sides."""
    seen = {start}
    queue: Deque[Position] = deque([start])
    while queue:
        cur = queue.popleft()
        for d, nb in grid.neighbours4(cur):
            if nb in seen or not is_path(grid.kind(nb)):
                continue
            if d in open_sides(grid.kind(cur)) and d.opposite in open_sides(grid.kind(nb)):
                seen.add(nb)
                queue.append(nb)
    return seen


def braid_is_connected(grid: Grid, braid: SplitBraid) -> bool:
    cells = braid.cells
    if not cells or cells[0] != braid.start or cells[-1] != braid.end:
        return False
    for a, b in zip(cells, cells[1:]):
        if a.manhattan(b) != 1 or not (is_path(grid.kind(a)) and is_path(grid.kind(b))):
            return False
        d = next(d for d, nb in grid.neighbours4(a) if nb == b)
        if d not in open_sides(grid.kind(a)) or d.opposite not in open_sides(grid.kind(b)):
            return False
    return True


def check_map(
    grid: Grid,
    config: GenerationConfig,
    path_length: int,
    split: Optional[SplitBraid] = None,
) -> List[str]:
    """Every broken invariant, as human-readable problems. Empty means valid."""
    problems: List[str] = []

    starts = grid.find(lambda k: k in START_KINDS)
    ends = grid.find(lambda k: k in END_KINDS)
    if len(starts) != 1:
        problems.append(f"expected one start cell, found {len(starts)}")
    if len(ends) != 1:
        problems.append(f"expected one end cell, found {len(ends)}")
    for p in starts + ends:
        if not grid.on_border(p):
            problems.append(f"terminal {tuple(p)} is not on the border")

    if len(starts) == 1 and len(ends) == 1:
        start, end = starts[0], ends[0]
        if start.manhattan(end) < config.min_endpoint_distance:
            problems.append(
                f"start/end distance {start.manhattan(end)} < {config.min_endpoint_distance}"
            )
        reached = traverse_path(grid, start)
        if end not in reached:
            problems.append("end is not reachable from start")
        stray = [p for p in grid.path_cells() if p not in reached]
        if stray:
            problems.append(f"{len(stray)} path cells are not connected to the start")

    violations = adjacency_violations(grid)
    if violations:
        problems.append(f"{len(violations)} mismatched path neighbours, first at {tuple(violations[0][0])}")

    if grid.count(TileKind.CURRENTLY_PLACING):
        problems.append("walker marker left on the grid")

    if not config.band.contains(path_length):
        problems.append(f"path length {path_length} outside {config.band}")

    splits = grid.count(*SPLIT_KINDS)
    if config.want_split:
        if not splits:
            problems.append("split path requested but no junction exists")
        if split is None or not braid_is_connected(grid, split):
            problems.append("split segment is not connected end to end")
    elif splits:
        problems.append(f"{splits} junction cells without a split request")

    path = set(grid.path_cells())
    for p in grid.find(lambda k: k == TileKind.TOWER_PLOT):
        if not any(nb in path for nb in grid.neighbours8(p)):
            problems.append(f"tower plot {tuple(p)} is not beside the path")
            break

    return problems


def verify_map(
    grid: Grid,
    config: GenerationConfig,
    path_length: int,
    split: Optional[SplitBraid] = None,
) -> None:
    problems = check_map(grid, config, path_length, split)
    if problems:
        raise InvariantViolation("; ".join(problems))
