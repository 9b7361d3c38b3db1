from towergen.grid import Grid, Position
from towergen.mapgen.placement import (
    PlacementReport, bloom_decor, empty_run, place_decor, place_diagonal_tower,
    place_towers, tower_candidates, tower_target,
)
from towergen.rng import PMRandom
from towergen.tiles import DECORATION_KINDS, Direction, TileKind


def straight_row(side=5):
    g = Grid.empty(side)
    mid = side // 2
    g.set_kind(Position(mid, 0), TileKind.START_LR)
    for c in range(1, side - 1):
        g.set_kind(Position(mid, c), TileKind.HORIZ_PATH)
    g.set_kind(Position(mid, side - 1), TileKind.END_LR)
    return g

def test_candidates_hug_the_path():
    g = straight_row()
    cands = tower_candidates(g)
    assert cands == {Position(r, c) for r in (1, 3) for c in range(5)}
    assert tower_target(g, 0.5) == 5

def test_existing_towers_are_not_candidates():
    g = straight_row()
    g.set_kind(Position(1, 1), TileKind.TOWER_PLOT)
    assert Position(1, 1) not in tower_candidates(g)
    assert len(tower_candidates(g)) == 9

def test_target_comes_on_top_of_walk_towers():
    g = straight_row()
    g.set_kind(Position(1, 1), TileKind.TOWER_PLOT)
    rep = place_towers(g, PMRandom(2), 1.0, draw_limit=10)
    assert rep.target == rep.placed == 9
    assert g.count(TileKind.TOWER_PLOT) == 10

def test_dense_towers_fill_sequentially():
    g = straight_row()
    rep = place_towers(g, PMRandom(1), 1.0, draw_limit=10)
    assert rep.sequential
    assert rep.placed == rep.target == 10
    assert g.count(TileKind.EMPTY) == 10

def test_random_towers_meet_target():
    g = straight_row()
    rep = place_towers(g, PMRandom(1), 0.5, draw_limit=5000)
    assert not rep.sequential
    assert rep.placed == 5 == g.count(TileKind.TOWER_PLOT)
    assert rep.shortfall == 0

def test_zero_tower_density():
    g = straight_row()
    rep = place_towers(g, PMRandom(1), 0.0, draw_limit=5000)
    assert rep.placed == 0 and g.count(TileKind.TOWER_PLOT) == 0

def test_diagonal_tower():
    g = straight_row()
    assert not place_diagonal_tower(g, PMRandom(1), Position(2, 0))
    assert place_diagonal_tower(g, PMRandom(1), Position(2, 2))
    towers = g.find(lambda k: k == TileKind.TOWER_PLOT)
    assert len(towers) == 1
    t = towers[0]
    assert abs(t.row - 2) == 1 and abs(t.col - 2) == 1

def test_full_decor_leaves_nothing_empty():
    g = straight_row(10)
    empties = g.count(TileKind.EMPTY)
    rep = place_decor(g, PMRandom(3), 1.0, draw_limit=5000)
    assert rep.sequential
    assert rep.placed == empties
    assert g.count(TileKind.EMPTY) == 0
    assert g.count(TileKind.HORIZ_PATH) == 8

def test_random_decor_hits_target_exactly():
    g = straight_row(10)
    rep = place_decor(g, PMRandom(3), 0.3, draw_limit=5000)
    assert rep.target == int(90 * 0.3)
    assert rep.placed == rep.target
    assert g.count(*DECORATION_KINDS) == rep.placed

def test_empty_run():
    g = Grid.empty(10)
    assert empty_run(g, Position(0, 0), Direction.RIGHT) == 9
    assert empty_run(g, Position(0, 0), Direction.UP) == 0
    g.set_kind(Position(0, 5), TileKind.DECORATION)
    assert empty_run(g, Position(0, 0), Direction.RIGHT) == 4

def test_bloom_respects_budget_and_kind():
    g = Grid.empty(10)
    placed = bloom_decor(g, Position(5, 5), TileKind.DECORATION2, budget=6)
    assert 1 <= placed <= 6
    assert g.count(TileKind.DECORATION2) == placed
    assert g.kind(Position(5, 5)) == TileKind.DECORATION2

def test_bloom_on_occupied_seed_places_nothing():
    g = straight_row(10)
    assert bloom_decor(g, Position(5, 3), TileKind.DECORATION2, budget=10) == 0

def test_shortfall():
    assert PlacementReport(10, 7, False).shortfall == 3
    assert PlacementReport(3, 3, True).shortfall == 0
