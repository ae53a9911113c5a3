import numpy as np
import pytest

from block_puzzle_core.game.errors import InvalidPatternError
from block_puzzle_core.game.pieces import (
    Category,
    Piece,
    ShapeCatalog,
    ShapeId,
    generate_orientations,
    trim,
)


def test_trim_crops_to_bounding_box():
    trimmed = trim([[0, 0, 0], [0, 1, 1], [0, 0, 1]])
    assert trimmed.tolist() == [[True, True], [False, True]]


@pytest.mark.parametrize(
    "pattern",
    [
        [[0, 0], [0, 0]],
        [],
        [[1, 1], [1]],
        [[1, 0], [0, 1]],
    ],
)
def test_trim_rejects_invalid_patterns(pattern):
    with pytest.raises(InvalidPatternError):
        trim(pattern)


def test_rotation_is_clockwise():
    orientations = generate_orientations([[1, 0], [1, 1]])
    assert orientations[1].astype(int).tolist() == [[1, 1], [1, 0]]


def test_orientations_start_with_original_and_are_unique():
    for shape_id in ShapeId:
        spec = ShapeCatalog.spec(shape_id)
        variants = ShapeCatalog.orientations(shape_id)
        assert np.array_equal(variants[0], trim(spec.pattern))
        assert len(variants) in (1, 2, 4, 8)
        for i, a in enumerate(variants):
            for b in variants[i + 1:]:
                assert not np.array_equal(a, b)


@pytest.mark.parametrize(
    "shape_id, expected",
    [
        (ShapeId.SINGLE, 1),
        (ShapeId.DOMINO, 2),
        (ShapeId.TET_SQUARE, 1),
        (ShapeId.TET_T, 4),
        (ShapeId.TET_S, 4),
        (ShapeId.TET_L, 8),
        (ShapeId.PENT_PLUS, 1),
        (ShapeId.RECT_2X3, 2),
    ],
)
def test_orientation_counts(shape_id, expected):
    assert len(ShapeCatalog.orientations(shape_id)) == expected


def test_cached_orientations_are_read_only():
    variant = ShapeCatalog.orientations(ShapeId.TET_L)[0]
    with pytest.raises(ValueError):
        variant[0, 0] = False


def test_catalog_table_is_consistent():
    for shape_id in ShapeId:
        assert 1 <= ShapeCatalog.complexity(shape_id) <= 10
        cells = ShapeCatalog.cell_count(shape_id)
        category = ShapeCatalog.category(shape_id)
        if category is Category.REWARD:
            assert 6 <= cells <= 9
        else:
            assert cells == int(category)


def test_smallest_prefers_fewest_cells():
    assert ShapeCatalog.smallest() is ShapeId.SINGLE
    assert ShapeCatalog.smallest([ShapeId.TET_T, ShapeId.TRI_LINE]) is ShapeId.TRI_LINE


def test_piece_geometry():
    piece = Piece(ShapeId.TET_L, 0)
    assert (piece.height, piece.width) == (3, 2)
    assert piece.cell_count == 4
    assert piece.cells_at(2, 5) == [(2, 5), (3, 5), (4, 5), (4, 6)]


def test_piece_rejects_unknown_orientation():
    with pytest.raises(ValueError):
        Piece(ShapeId.TET_SQUARE, 1)


def test_piece_equality_ignores_cached_cells():
    assert Piece(ShapeId.DOMINO, 1) == Piece(ShapeId.DOMINO, 1)
    assert Piece(ShapeId.DOMINO, 1).with_color(Piece(ShapeId.DOMINO).color) == Piece(ShapeId.DOMINO, 1)
