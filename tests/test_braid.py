import pytest

from towergen.config import GenerationConfig
from towergen.errors import MapGenerationFailed, Rejection
from towergen.grid import Grid, Position
from towergen.mapgen.adjacency import adjacency_violations
from towergen.mapgen.braid import (
    braid_split, braid_walk, connective_sides, is_braid_anchor, pick_anchors,
    reclassify_split_cells,
)
from towergen.mapgen.carve import carve_path
from towergen.mapgen.verify import braid_is_connected, traverse_path
from towergen.rng import PMRandom
from towergen.tiles import SPLIT_KINDS, Direction, TileKind, is_path


def braided(seed, size="small", length="short"):
    """First primary path + braid that the generator would accept."""
    cfg = GenerationConfig(size=size, path_length=length, want_split=True)
    rng = PMRandom(seed)
    grid = Grid.empty(cfg.side)
    for _ in range(1000):
        grid.reset()
        try:
            walk = carve_path(grid, rng, cfg.band)
            if adjacency_violations(grid):
                continue
            return grid, walk, braid_split(grid, rng)
        except MapGenerationFailed:
            continue
    pytest.fail("no braided map in 1000 tries")

def test_walk_is_monotone_and_marked():
    g = Grid.empty(8)
    start, end = Position(1, 1), Position(5, 6)
    cells = braid_walk(g, PMRandom(3), start, end, tick_limit=10_000)
    assert cells[0] == start and cells[-1] == end
    assert len(cells) == start.manhattan(end) + 1
    for a, b in zip(cells, cells[1:]):
        assert a.manhattan(b) == 1
        assert b.manhattan(end) < a.manhattan(end)
    assert all(g.cell(p).split_marked for p in cells)

def test_walk_gives_up_after_tick_limit():
    with pytest.raises(MapGenerationFailed) as exc:
        braid_walk(Grid.empty(8), PMRandom(3), Position(1, 1), Position(5, 6), tick_limit=0)
    assert exc.value.reason == Rejection.SPLIT_STALLED

def test_anchors_need_interior_path():
    with pytest.raises(MapGenerationFailed) as exc:
        pick_anchors(Grid.empty(8), PMRandom(1), max_draws=10)
    assert exc.value.reason == Rejection.SPLIT_ENDPOINTS

def test_anchor_rules():
    g = Grid.empty(6)
    g.set_kind(Position(0, 2), TileKind.START_UD)
    g.set_kind(Position(1, 2), TileKind.VERT_PATH)
    g.set_kind(Position(2, 0), TileKind.HORIZ_PATH)
    assert is_braid_anchor(g, Position(1, 2))
    assert not is_braid_anchor(g, Position(0, 2))
    assert not is_braid_anchor(g, Position(2, 0))
    assert not is_braid_anchor(g, Position(3, 3))

def test_connective_sides_marks_neighbours():
    g = Grid.empty(5)
    g.set_kind(Position(1, 2), TileKind.VERT_PATH)
    g.cell(Position(2, 3)).split_marked = True
    sides = connective_sides(g, Position(2, 2))
    assert sides == {Direction.UP, Direction.RIGHT}
    assert g.cell(Position(1, 2)).split_marked

def test_braid_adds_connected_junctions():
    for seed in (1, 2, 3):
        g, walk, braid = braided(seed)
        assert g.count(*SPLIT_KINDS) > 0
        assert braid_is_connected(g, braid)
        assert adjacency_violations(g) == []
        reached = traverse_path(g, walk.start)
        assert walk.end in reached
        assert set(g.path_cells()) == reached

def test_third_pass_changes_nothing():
    g, _, _ = braided(7)
    before = g.as_matrix()
    assert reclassify_split_cells(g) == 0
    assert g.as_matrix() == before

def test_terminals_keep_their_kind():
    g, walk, _ = braided(4)
    assert g.kind(walk.start) in (TileKind.START_UD, TileKind.START_LR)
    assert g.kind(walk.end) in (TileKind.END_UD, TileKind.END_LR)
    assert all(is_path(g.kind(p)) for p in (walk.start, walk.end))
