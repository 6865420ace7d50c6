"""
Test Shelf Packer
=================
Placement rules of the greedy shelf packer on a single slab.
"""

import random

import pytest

from cad.geometry import Point
from quotations.models import PieceRequest, SlabSpec, Placement
from quotations.nesting.shelf_packer import pack, pack_pieces, sort_for_packing


def placements_by_id(placed):
    return {p.id: p.placement for p in placed}


# ============================================================
# Scenarios
# ============================================================

def test_exact_fit(make_piece):
    result = pack_pieces(SlabSpec("granite", 2.0, 1.0), [make_piece("A", 2.0, 1.0)])

    assert result.placement_for("A") == Placement(0.0, 0.0, True)
    assert result.used_area == 2.0
    assert result.waste_percentage == 0.0
    assert result.utilization_percentage == 100.0


def test_overflow(make_piece):
    result = pack_pieces(SlabSpec("granite", 1.0, 1.0), [make_piece("A", 1.5, 1.0)])

    assert result.placement_for("A") == Placement(0.0, 0.0, False)
    assert result.used_area == 0
    assert result.waste_percentage == 100.0
    assert result.unfit_count == 1


def test_wider_than_slab_does_not_move_cursor(make_piece):
    pieces = [make_piece("A", 3.0, 0.5), make_piece("B", 3.0, 0.5), make_piece("C", 0.5, 0.5)]

    result = pack_pieces(SlabSpec("granite", 1.0, 1.0), pieces)

    assert result.placement_for("A") == Placement(0, 0, False)
    assert result.placement_for("B") == Placement(0, 0, False)
    assert result.placement_for("C") == Placement(0, 0, True)
    assert result.used_area == 0.25
    assert result.waste_percentage == 75.0


def test_two_shelf_layout(make_piece):
    pieces = [make_piece("A", 2, 1), make_piece("B", 2, 1), make_piece("C", 2, 1)]

    placed = placements_by_id(pack(3, 2, pieces))

    assert placed["A"] == Placement(0, 0, True)
    assert placed["B"] == Placement(0, 1, True)   # 2 + 2 > 3 -> new shelf at y=1
    assert placed["C"] == Placement(0, 0, False)  # next shelf at y=2 exceeds height


def test_pieces_share_a_shelf(make_piece):
    pieces = [make_piece("A", 1.0, 0.5), make_piece("B", 1.0, 0.8), make_piece("C", 0.9, 0.3)]

    placed = placements_by_id(pack(3, 2, pieces))

    assert placed["A"] == Placement(0.0, 0, True)
    assert placed["B"] == Placement(1.0, 0, True)
    assert placed["C"] == Placement(2.0, 0, True)


def test_shelf_height_is_tallest_piece(make_piece):
    pieces = [make_piece("A", 1.2, 0.5), make_piece("B", 0.8, 0.9), make_piece("C", 0.7, 0.3)]

    placed = placements_by_id(pack(2.5, 2, pieces))

    # A then B on shelf 0 (shelf height 0.9), C opens shelf at y=0.9
    assert placed["A"] == Placement(0, 0, True)
    assert placed["B"] == Placement(1.2, 0, True)
    assert placed["C"] == Placement(0, 0.9, True)


def test_rejected_piece_keeps_opened_shelf(make_piece):
    # B overflows the width, opens shelf y=1 and is too tall for it;
    # C would still fit on the first shelf but starts the opened one
    pieces = [make_piece("A", 2.5, 1.0), make_piece("B", 1.0, 1.5), make_piece("C", 0.4, 0.4)]

    placed = placements_by_id(pack(3, 2, pieces))

    assert placed["A"] == Placement(0, 0, True)
    assert placed["B"] == Placement(0, 0, False)
    assert placed["C"] == Placement(0, 1.0, True)


# ============================================================
# Ordering
# ============================================================

def test_sorted_by_longest_side(make_piece):
    pieces = [make_piece("A", 2, 1), make_piece("B", 1, 1), make_piece("C", 1.5, 1.5)]

    assert [p.id for p in sort_for_packing(pieces)] == ["A", "C", "B"]
    assert [p.id for p in pack(10, 10, pieces)] == ["A", "C", "B"]


def test_ties_keep_input_order(make_piece):
    pieces = [make_piece(f"p{i}", 1, 0.5 + i / 10) for i in range(5)]

    assert [p.id for p in pack(10, 10, pieces)] == ["p0", "p1", "p2", "p3", "p4"]


def test_output_has_one_record_per_piece(make_piece):
    pieces = [make_piece(f"p{i}", 1, 1) for i in range(8)]

    placed = pack(2, 2, pieces)

    assert sorted(p.id for p in placed) == sorted(p.id for p in pieces)
    assert sum(1 for p in placed if p.fit) == 4


def test_deterministic(make_piece):
    rng = random.Random(7)
    pieces = [make_piece(f"p{i}", rng.uniform(0.1, 1.5), rng.uniform(0.1, 1.5)) for i in range(20)]

    assert pack(3, 2, pieces) == pack(3, 2, pieces)
    assert pack_pieces(SlabSpec("granite", 3, 2), pieces) == pack_pieces(SlabSpec("granite", 3, 2), pieces)


# ============================================================
# Invalid input
# ============================================================

@pytest.mark.parametrize("width, height", [(0, 2), (3, 0), (-3, 2), (3, -2), (-3, -2)])
def test_invalid_slab_fits_nothing(make_piece, width, height):
    pieces = [make_piece("A", 0.5, 0.5), make_piece("B", 1, 1)]

    result = pack_pieces(SlabSpec("granite", width, height), pieces)

    assert all(not p.fit for p in result.placements)
    assert result.summary.total_area == 0
    assert result.waste_percentage == 100.0


def test_invalid_piece_does_not_move_cursor(make_piece):
    pieces = [make_piece("A", 1, 1), make_piece("Z", 1, -1), make_piece("B", 1, 1)]

    placed = placements_by_id(pack(3, 2, pieces))

    assert placed["Z"] == Placement(0, 0, False)
    assert placed["A"] == Placement(0, 0, True)
    assert placed["B"] == Placement(1, 0, True)


def test_zero_sized_piece_is_not_fit(make_piece):
    placed = pack(3, 2, [make_piece("Z", 0, 0)])
    assert placed[0].placement == Placement(0, 0, False)


def test_empty_request_list(granite_slab):
    result = pack_pieces(granite_slab, [])

    assert result.placements == ()
    assert result.used_area == 0
    assert result.unfit_count == 0


def test_custom_shapes_are_not_packed(make_piece, granite_slab):
    triangle = (Point(0, 0), Point(1, 0), Point(0, 1), Point(0, 0))
    custom = PieceRequest(id="S", material_id="granite", shape_points=triangle)

    result = pack_pieces(granite_slab, [make_piece("A", 1, 1), custom])

    assert [p.id for p in result.placements] == ["A"]
    assert result.custom_shapes == (custom,)
    assert result.placement_for("S") is None

    # handed to pack directly it is a non-fitting record, not an error
    placed = pack(3, 2, [make_piece("A", 1, 1), custom])
    assert placements_by_id(placed) == {"A": Placement(0, 0, True), "S": Placement(0, 0, False)}


# ============================================================
# Properties
# ============================================================

def test_random_layouts_stay_inside_slab(make_piece):
    rng = random.Random(42)

    for trial in range(40):
        slab_w, slab_h = rng.uniform(0.5, 3.5), rng.uniform(0.5, 2.5)
        pieces = [
            make_piece(f"t{trial}-{i}", rng.uniform(0.1, 2.0), rng.uniform(0.1, 2.0))
            for i in range(rng.randint(0, 15))
        ]

        result = pack_pieces(SlabSpec("granite", slab_w, slab_h), pieces)
        fitted = result.fitted

        assert result.used_area <= slab_w * slab_h + 1e-9
        assert result.waste_percentage + result.utilization_percentage == pytest.approx(100.0)

        for placed in fitted:
            p, pl = placed.piece, placed.placement
            assert pl.x >= 0 and pl.y >= 0
            assert pl.x + p.width <= slab_w + 1e-9
            assert pl.y + p.height <= slab_h + 1e-9

        for i, a in enumerate(fitted):
            for b in fitted[i + 1:]:
                overlap_x = a.placement.x + a.piece.width - 1e-9 > b.placement.x and \
                    b.placement.x + b.piece.width - 1e-9 > a.placement.x
                overlap_y = a.placement.y + a.piece.height - 1e-9 > b.placement.y and \
                    b.placement.y + b.piece.height - 1e-9 > a.placement.y
                assert not (overlap_x and overlap_y)
