"""
StoneERP Nesting Module
=======================
Slab packing for stone pieces.

Main algorithm: shelf packer
- pieces sorted by their longest side, largest first
- rows filled left to right, a new row opens under the tallest piece
- no rotation, one slab per run

Functions:
- pack / pack_pieces: placements on one slab
- calculate_waste: used area, waste and utilization percentages
"""

from .shelf_packer import (
    pack,
    pack_pieces,
    sort_for_packing,
)
from .waste import calculate_waste, slab_area

__all__ = [
    'pack',
    'pack_pieces',
    'sort_for_packing',
    'calculate_waste',
    'slab_area',
]
