"""
StoneERP - Quotations Module
============================
Cutting plans for quote pieces: slab packing and waste.
"""

from quotations.models import (
    PieceRequest,
    SlabSpec,
    Placement,
    PlacedPiece,
    PackingResult,
    WasteSummary,
)


# Lazy import - GUI needs customtkinter
def get_cutting_optimizer_window():
    from quotations.gui.cutting_optimizer import CuttingOptimizerWindow
    return CuttingOptimizerWindow


__all__ = [
    'PieceRequest',
    'SlabSpec',
    'Placement',
    'PlacedPiece',
    'PackingResult',
    'WasteSummary',
    'get_cutting_optimizer_window',
]
