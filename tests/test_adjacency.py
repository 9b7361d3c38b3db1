from towergen.grid import Grid, Position
from towergen.mapgen.adjacency import adjacency_violations, has_invalid_adjacency
from towergen.tiles import TileKind


def straight_row():
    # 5x5, single path along row 2 from the left edge to the right edge
    g = Grid.empty(5)
    g.set_kind(Position(2, 0), TileKind.START_LR)
    for c in (1, 2, 3):
        g.set_kind(Position(2, c), TileKind.HORIZ_PATH)
    g.set_kind(Position(2, 4), TileKind.END_LR)
    return g

def test_clean_path_passes():
    assert not has_invalid_adjacency(straight_row())

def test_parallel_strand_is_rejected():
    g = straight_row()
    g.set_kind(Position(1, 2), TileKind.HORIZ_PATH)
    bad = adjacency_violations(g)
    assert (Position(1, 2), Position(2, 2)) in bad
    assert (Position(2, 2), Position(1, 2)) in bad

def test_matching_junction_passes():
    g = straight_row()
    g.set_kind(Position(2, 2), TileKind.SPLIT_ULR)
    g.set_kind(Position(1, 2), TileKind.VERT_PATH)
    g.set_kind(Position(0, 2), TileKind.VERT_PATH)
    assert adjacency_violations(g) == []

def test_terminal_touched_from_the_side():
    g = Grid.empty(5)
    g.set_kind(Position(0, 2), TileKind.START_UD)
    g.set_kind(Position(1, 2), TileKind.VERT_PATH)
    g.set_kind(Position(0, 1), TileKind.HORIZ_PATH)
    assert has_invalid_adjacency(g)

def test_props_never_count():
    g = straight_row()
    g.set_kind(Position(1, 2), TileKind.TOWER_PLOT)
    g.set_kind(Position(3, 2), TileKind.DECORATION2)
    g.set_kind(Position(1, 1), TileKind.CURRENTLY_PLACING)
    assert not has_invalid_adjacency(g)
