"""
Cutting Plan Service
====================
Glue between the quotation workflow and the cutting core:

- picks the pieces of one material and expands quantities into copies
- runs the shelf packer (memoized per material, slab and piece list)
- merges confirmed placements and captured shapes back into piece records
- publishes results on the event bus for the order/quote workflow

Usage:
    service = CuttingPlanService()
    result = service.plan(slab, pieces)
    updated, waste = service.confirm_plan(result, pieces)
"""

from collections import OrderedDict
from dataclasses import replace
from typing import Dict, Hashable, List, Optional, Sequence, Tuple
import logging

from config.settings import OPTIMIZER_CACHE_ENABLED, OPTIMIZER_CACHE_SIZE
from cad.shape_session import CapturedShape
from core.events import EventBus, EventType, create_event
from quotations.models import PieceRequest, PackingResult, SlabSpec
from quotations.nesting.shelf_packer import pack_pieces

logger = logging.getLogger(__name__)

COPY_ID_FORMAT = "{id}-copy-{index}"


def expand_quantities(pieces: Sequence[PieceRequest]) -> List[PieceRequest]:
    """
    One request per physical piece.

    A request with quantity n > 1 becomes n copies with ids "<id>-copy-<i>";
    each copy keeps the request id in source_id. Quantity below 1 counts as 1.
    """
    expanded = []
    for piece in pieces:
        quantity = piece.quantity if piece.quantity and piece.quantity > 0 else 1
        if quantity == 1:
            expanded.append(piece)
            continue
        for i in range(quantity):
            expanded.append(replace(
                piece,
                id=COPY_ID_FORMAT.format(id=piece.id, index=i),
                quantity=1,
                source_id=piece.source_id,
            ))
    return expanded


def materials_in(pieces: Sequence[PieceRequest]) -> List[str]:
    """Distinct material ids of rectangular pieces, first-seen order"""
    seen = OrderedDict()
    for piece in pieces:
        if not piece.is_custom_shape and piece.material_id:
            seen.setdefault(piece.material_id, None)
    return list(seen)


class CuttingPlanService:
    """Per-material packing with memoization and result hand-off"""

    def __init__(self, event_bus: EventBus = None,
                 cache_enabled: bool = OPTIMIZER_CACHE_ENABLED,
                 cache_size: int = OPTIMIZER_CACHE_SIZE):
        self.event_bus = event_bus or EventBus()
        self.cache_enabled = cache_enabled and cache_size > 0
        self.cache_size = cache_size
        self._cache: "OrderedDict[Hashable, PackingResult]" = OrderedDict()
        self._stats = {'hits': 0, 'misses': 0}

    # ==================== Planning ====================

    def pieces_for(self, slab: SlabSpec, pieces: Sequence[PieceRequest]) -> List[PieceRequest]:
        """Pieces of the slab's material, quantities expanded"""
        return expand_quantities([p for p in pieces if p.material_id == slab.material_id])

    @staticmethod
    def _cache_key(slab: SlabSpec, pieces: Sequence[PieceRequest]) -> Hashable:
        # Requests are frozen: a recaptured shape or edited field is a new key
        return slab, tuple(pieces)

    def plan(self, slab: SlabSpec, pieces: Sequence[PieceRequest],
             use_cache: bool = True) -> PackingResult:
        """
        Pack the pieces of slab.material_id onto the slab.

        Args:
            slab: Slab of the selected material
            pieces: All quote pieces (other materials are ignored)
            use_cache: Reuse a previous result for identical input

        Returns:
            PackingResult
        """
        selected = self.pieces_for(slab, pieces)

        if not (self.cache_enabled and use_cache):
            return self._compute(slab, selected)

        key = self._cache_key(slab, selected)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            self._stats['hits'] += 1
            logger.debug(f"[CuttingPlan] Cache hit for {slab.material_id}")
            return cached

        self._stats['misses'] += 1
        result = self._compute(slab, selected)
        self._cache[key] = result
        while len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)
        return result

    def _compute(self, slab: SlabSpec, pieces: List[PieceRequest]) -> PackingResult:
        result = pack_pieces(slab, pieces)
        self.event_bus.publish(create_event(
            EventType.CUTTING_PLAN_COMPUTED,
            {
                'material_id': slab.material_id,
                'piece_count': len(pieces),
                'waste_percentage': result.waste_percentage,
                'unfit_count': result.unfit_count,
            },
            source=__name__
        ))
        return result

    def plan_all(self, slabs: Dict[str, SlabSpec],
                 pieces: Sequence[PieceRequest]) -> Dict[str, PackingResult]:
        """Plan every material of the quote that has a slab"""
        results = {}
        for material_id in materials_in(pieces):
            slab = slabs.get(material_id)
            if slab is None:
                logger.warning(f"[CuttingPlan] No slab for material {material_id}")
                continue
            results[material_id] = self.plan(slab, pieces)
        return results

    # ==================== Hand-off ====================

    def confirm_plan(self, result: PackingResult,
                     pieces: Sequence[PieceRequest]) -> Tuple[List[PieceRequest], float]:
        """
        Merge placements back into the quote pieces of the slab material.

        Quantity copies are matched to their quote piece through source_id;
        a piece takes the placement of its first fitting copy (or of its
        first copy when none fits). All copy placements are published.

        Returns:
            (quote pieces with placement, waste percentage)
        """
        by_source = result.placements_by_source()
        updated = []
        for piece in pieces:
            placements = by_source.get(piece.id)
            if piece.material_id != result.slab.material_id or not placements:
                continue
            fitting = [p for p in placements if p.fit]
            updated.append(piece.with_placement(fitting[0] if fitting else placements[0]))

        self.event_bus.publish(create_event(
            EventType.CUTTING_PLAN_CONFIRMED,
            {
                'material_id': result.slab.material_id,
                'waste_percentage': result.waste_percentage,
                'utilization_percentage': result.utilization_percentage,
                'placements': [p.to_dict() for p in result.placements],
                'placements_by_source': {
                    source_id: [p.to_dict() for p in placements]
                    for source_id, placements in by_source.items()
                },
                'source_piece_ids': [p.id for p in pieces if p.material_id == result.slab.material_id],
            },
            source=__name__
        ))
        logger.info(
            f"[CuttingPlan] Confirmed {result.slab.material_id}: "
            f"waste {result.waste_percentage:.2f}%"
        )
        return updated, result.waste_percentage

    def apply_shape(self, piece: PieceRequest, shape: CapturedShape) -> PieceRequest:
        """Store a captured shape on a piece; its area becomes the quantity basis"""
        updated = replace(piece, shape_points=shape.points, area_basis=shape.area, placement=None)

        self.event_bus.publish(create_event(
            EventType.SHAPE_CAPTURED,
            {'piece_id': piece.id, **shape.to_dict()},
            source=__name__
        ))
        return updated

    # ==================== Cache ====================

    def clear_cache(self):
        self._cache.clear()

    def cache_info(self) -> Dict[str, int]:
        return {**self._stats, 'size': len(self._cache)}
