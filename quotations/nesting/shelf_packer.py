"""
Shelf Packer - Greedy rectangle packing on a single slab
========================================================
Fills the slab left to right in rows ("shelves"). A piece that does not
fit in the remaining width opens a new shelf below the tallest piece of
the current one. This is a heuristic, not an optimal bin-packing solver:
pieces are never rotated and there is no overflow to a second slab.

Processing order: descending max(width, height), stable for ties.

The walk is a left fold over the sorted pieces carrying
(current_x, current_y, shelf_height, results).
"""

from dataclasses import dataclass, replace
from functools import reduce
from typing import Iterable, List, Sequence, Tuple
import logging

from quotations.models import PieceRequest, Placement, PlacedPiece, PackingResult, SlabSpec
from quotations.nesting.waste import calculate_waste

logger = logging.getLogger(__name__)

NOT_FIT = Placement(0.0, 0.0, False)


@dataclass(frozen=True)
class ShelfCursor:
    """Fold accumulator"""
    current_x: float = 0.0
    current_y: float = 0.0
    shelf_height: float = 0.0
    results: Tuple[PlacedPiece, ...] = ()

    def reject(self, piece: PieceRequest) -> 'ShelfCursor':
        """Piece does not fit; the cursor does not advance past it"""
        return replace(self, results=self.results + (PlacedPiece(piece, NOT_FIT),))


def sort_for_packing(pieces: Iterable[PieceRequest]) -> List[PieceRequest]:
    """Largest side first; ties keep input order"""
    return sorted(pieces, key=lambda p: p.max_dimension, reverse=True)


def _place(slab_width: float, slab_height: float):
    """Build the fold step for a slab"""

    def step(cursor: ShelfCursor, piece: PieceRequest) -> ShelfCursor:
        if piece.is_custom_shape:
            logger.debug(f"[ShelfPacker] {piece.id}: custom shape, not packed")
            return cursor.reject(piece)

        if not piece.has_valid_dimensions:
            logger.debug(f"[ShelfPacker] {piece.id}: invalid size {piece.width}x{piece.height}")
            return cursor.reject(piece)

        width, height = piece.width, piece.height

        # Wider than the slab: no shelf can hold it
        if width > slab_width:
            logger.debug(f"[ShelfPacker] {piece.id}: wider than slab ({width} > {slab_width})")
            return cursor.reject(piece)

        current_x, current_y, shelf_height = cursor.current_x, cursor.current_y, cursor.shelf_height

        # New shelf when the piece overflows the current row
        if current_x + width > slab_width:
            current_y += shelf_height
            current_x = 0.0
            shelf_height = 0.0

        # An opened shelf stays open even when the piece is rejected
        if current_y + height > slab_height:
            logger.debug(f"[ShelfPacker] {piece.id}: does not fit ({width}x{height})")
            return replace(
                cursor,
                current_x=current_x,
                current_y=current_y,
                shelf_height=shelf_height,
            ).reject(piece)

        placed = PlacedPiece(piece, Placement(current_x, current_y, True))
        return ShelfCursor(
            current_x=current_x + width,
            current_y=current_y,
            shelf_height=max(shelf_height, height),
            results=cursor.results + (placed,)
        )

    return step


def pack(slab_width: float, slab_height: float,
         pieces: Sequence[PieceRequest]) -> List[PlacedPiece]:
    """
    Place rectangular pieces on one slab.

    Args:
        slab_width, slab_height: Slab size [m]
        pieces: Rectangular piece requests

    Returns:
        One PlacedPiece per input piece, in processing order.
        Non-fitting pieces have placement (0, 0, fit=False); so do
        custom-shape pieces, which are never packed.
    """
    ordered = sort_for_packing(pieces)

    if slab_width <= 0 or slab_height <= 0:
        logger.warning(f"[ShelfPacker] Invalid slab {slab_width}x{slab_height}, nothing fits")
        return [PlacedPiece(p, NOT_FIT) for p in ordered]

    final = reduce(_place(slab_width, slab_height), ordered, ShelfCursor())
    return list(final.results)


def pack_pieces(slab: SlabSpec, pieces: Sequence[PieceRequest]) -> PackingResult:
    """
    Pack a piece list on a slab and compute waste.

    Custom-shape pieces are reported in custom_shapes and never placed.
    """
    rectangular = [p for p in pieces if not p.is_custom_shape]
    custom = tuple(p for p in pieces if p.is_custom_shape)

    placed = pack(slab.slab_width, slab.slab_height, rectangular)
    summary = calculate_waste(slab.slab_width, slab.slab_height, placed)

    logger.info(
        f"[ShelfPacker] Slab {slab.material_id} {slab.slab_width}x{slab.slab_height}: "
        f"{summary.placed_count}/{len(placed)} placed, waste {summary.waste_percentage:.2f}%"
        + (f", {len(custom)} custom shape(s) skipped" if custom else "")
    )

    return PackingResult(
        slab=slab,
        placements=tuple(placed),
        custom_shapes=custom,
        summary=summary,
    )
