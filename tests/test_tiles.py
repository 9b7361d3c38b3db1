import pytest

from towergen.tiles import (
    Direction, TileKind, is_path, is_split, is_terminal, is_turn,
    kind_for_sides, open_sides, shape_for_move,
)

U, D, L, R = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT


def test_ordinals_are_stable():
    assert TileKind.END_UD == 0
    assert TileKind.SPLIT_4WAYS == 14
    assert TileKind.EMPTY == 15
    assert TileKind.TOWER_PLOT == 19

def test_path_range():
    assert all(is_path(k) for k in TileKind if k <= TileKind.SPLIT_4WAYS)
    assert not is_path(TileKind.EMPTY)
    assert not is_path(TileKind.CURRENTLY_PLACING)
    assert not is_path(TileKind.TOWER_PLOT)

def test_straight_moves():
    assert shape_for_move(D, D) == TileKind.VERT_PATH
    assert shape_for_move(R, R) == TileKind.HORIZ_PATH

def test_elbows_from_heading_change():
    # entered moving down (open up), leaving left
    assert shape_for_move(D, L) == TileKind.ELBOW_LEFT_UP
    assert shape_for_move(D, R) == TileKind.ELBOW_RIGHT_UP
    assert shape_for_move(R, U) == TileKind.ELBOW_LEFT_UP
    assert shape_for_move(R, D) == TileKind.ELBOW_LEFT_DOWN
    assert shape_for_move(U, R) == TileKind.ELBOW_RIGHT_DOWN

def test_reversal_has_no_shape():
    with pytest.raises(ValueError):
        shape_for_move(U, D)

def test_kind_for_sides():
    assert kind_for_sides({U, D, L, R}) == TileKind.SPLIT_4WAYS
    assert kind_for_sides({U, D, L}) == TileKind.SPLIT_UDL
    assert kind_for_sides({D, L, R}) == TileKind.SPLIT_DLR
    assert kind_for_sides({U}) is None
    assert kind_for_sides(()) is None

def test_classification_never_yields_terminals():
    for kind in TileKind:
        sides = open_sides(kind)
        if len(sides) >= 2:
            assert not is_terminal(kind_for_sides(sides))

def test_turn_and_split_sets():
    assert is_turn(TileKind.ELBOW_RIGHT_DOWN)
    assert is_turn(TileKind.SPLIT_ULR)
    assert not is_turn(TileKind.SPLIT_4WAYS)
    assert not is_turn(TileKind.VERT_PATH)
    assert is_split(TileKind.SPLIT_4WAYS)
    assert not is_split(TileKind.ELBOW_LEFT_UP)

def test_direction_helpers():
    assert U.opposite == D
    assert L.delta == (0, -1)
