"""
Test Cutting Plan Service
=========================
Quantity expansion, per-material planning, memoization and hand-off events.
"""

import pytest

from cad.geometry import Point
from cad.shape_session import CapturedShape
from core.events import EventType
from quotations.cutting_service import CuttingPlanService, expand_quantities, materials_in
from quotations.models import PieceRequest, Placement, SlabSpec


@pytest.fixture
def published(fresh_event_bus):
    events = []
    fresh_event_bus.subscribe_all(events.append)
    return events


@pytest.fixture
def quote(make_piece):
    return [
        make_piece("p1", 2.0, 1.0),
        make_piece("p2", 0.5, 0.5, quantity=3),
        make_piece("m1", 1.0, 1.0, material_id="marble"),
    ]


# ============================================================
# Expansion
# ============================================================

def test_expand_quantities(make_piece):
    pieces = [make_piece("a", 1, 1, quantity=3), make_piece("b", 1, 1), make_piece("c", 1, 1, quantity=0)]

    expanded = expand_quantities(pieces)

    assert [p.id for p in expanded] == ["a-copy-0", "a-copy-1", "a-copy-2", "b", "c"]
    assert all(p.quantity == 1 for p in expanded[:3])


def test_materials_in_skips_custom_shapes(quote):
    custom = PieceRequest(id="s", material_id="onyx",
                          shape_points=(Point(0, 0), Point(1, 0), Point(0, 1), Point(0, 0)))

    assert materials_in(quote + [custom]) == ["granite", "marble"]


# ============================================================
# Planning
# ============================================================

def test_plan_uses_only_slab_material(quote, granite_slab):
    result = CuttingPlanService().plan(granite_slab, quote)

    assert [p.id for p in result.placements] == ["p1", "p2-copy-0", "p2-copy-1", "p2-copy-2"]
    assert result.used_area == pytest.approx(2.75)


def test_plan_is_memoized(quote, granite_slab, published):
    service = CuttingPlanService()

    first = service.plan(granite_slab, quote)
    second = service.plan(granite_slab, quote)

    assert second is first
    assert service.cache_info() == {'hits': 1, 'misses': 1, 'size': 1}
    assert [e.type for e in published] == [EventType.CUTTING_PLAN_COMPUTED]


def test_changed_slab_misses_cache(quote, granite_slab):
    service = CuttingPlanService()

    service.plan(granite_slab, quote)
    service.plan(SlabSpec("granite", 1.0, 1.0), quote)

    assert service.cache_info()['misses'] == 2


def test_cache_is_bounded(make_piece):
    service = CuttingPlanService(cache_size=2)
    slab = SlabSpec("granite", 3, 2)

    for i in range(4):
        service.plan(slab, [make_piece(f"p{i}", 1, 1)])

    assert service.cache_info()['size'] == 2


def test_cache_can_be_disabled(quote, granite_slab):
    service = CuttingPlanService(cache_enabled=False)

    assert service.plan(granite_slab, quote) is not service.plan(granite_slab, quote)
    assert service.cache_info()['size'] == 0


def test_plan_all(quote, granite_slab):
    slabs = {"granite": granite_slab, "marble": SlabSpec("marble", 0.5, 0.5)}

    results = CuttingPlanService().plan_all(slabs, quote)

    assert list(results) == ["granite", "marble"]
    assert results["marble"].unfit_count == 1
    assert results["marble"].waste_percentage == 100.0


def test_plan_all_skips_material_without_slab(quote, granite_slab):
    results = CuttingPlanService().plan_all({"granite": granite_slab}, quote)
    assert list(results) == ["granite"]


# ============================================================
# Hand-off
# ============================================================

def test_confirm_plan(quote, granite_slab, published):
    service = CuttingPlanService()
    result = service.plan(granite_slab, quote)

    updated, waste = service.confirm_plan(result, quote)

    assert waste == result.waste_percentage
    assert updated[0].id == "p1"
    assert updated[0].placement == Placement(0, 0, True)
    assert published[-1].type == EventType.CUTTING_PLAN_CONFIRMED
    assert published[-1].data['source_piece_ids'] == ["p1", "p2"]


def test_apply_shape(make_piece, published):
    shape = CapturedShape(area=8.0, points=(Point(0, 0), Point(4, 0), Point(0, 4), Point(0, 0)))
    piece = make_piece("c1", 0, 0, placement=Placement(1, 1, True))

    updated = CuttingPlanService().apply_shape(piece, shape)

    assert updated.is_custom_shape
    assert updated.area == 8.0
    assert updated.placement is None
    assert published[-1].type == EventType.SHAPE_CAPTURED
    assert published[-1].data['piece_id'] == "c1"
    assert published[-1].data['points'][1] == {'x': 4, 'y': 0}


def test_copies_keep_their_quote_piece(make_piece):
    expanded = expand_quantities([make_piece("p2", 1, 1, quantity=3)])

    assert [p.source_id for p in expanded] == ["p2", "p2", "p2"]
    assert make_piece("p1", 1, 1).source_id == "p1"


def test_confirm_plan_merges_copies_by_quote_piece(quote, granite_slab, published):
    service = CuttingPlanService()
    result = service.plan(granite_slab, quote)

    updated, _ = service.confirm_plan(result, quote)

    # every returned piece matches a quote piece
    assert [p.id for p in updated] == ["p1", "p2"]
    assert updated[1].placement == result.placement_for("p2-copy-0")
    assert updated[1].quantity == 3

    by_source = published[-1].data['placements_by_source']
    assert len(by_source["p2"]) == 3
    assert all(p['fit'] for p in by_source["p2"])


def test_confirm_plan_prefers_a_fitting_copy(make_piece):
    service = CuttingPlanService()
    pieces = [make_piece("p", 1, 1, quantity=5)]
    result = service.plan(SlabSpec("granite", 2, 1), pieces)

    updated, waste = service.confirm_plan(result, pieces)

    assert updated[0].placement == Placement(0, 0, True)
    assert waste == 0.0


def test_recaptured_shape_is_replanned(granite_slab):
    service = CuttingPlanService()
    piece = PieceRequest(id="c1", material_id="granite", width=0, height=0)
    small = CapturedShape(area=0.5, points=(Point(0, 0), Point(1, 0), Point(0, 1), Point(0, 0)))
    large = CapturedShape(area=2.0, points=(Point(0, 0), Point(2, 0), Point(0, 2), Point(0, 0)))

    first = service.plan(granite_slab, [service.apply_shape(piece, small)])
    second = service.plan(granite_slab, [service.apply_shape(piece, large)])

    assert first.custom_shapes[0].area == 0.5
    assert second.custom_shapes[0].area == 2.0
    assert service.cache_info()['misses'] == 2
