"""
Quotations GUI
==============
GUI components for cutting plans.

Main components:
- CuttingOptimizerWindow: slab preview, waste summary, piece list
- SlabCanvas: canvas drawing one slab with placed pieces
"""

from .cutting_optimizer import (
    CuttingOptimizerWindow,
    SlabCanvas,
    Theme,
)

__all__ = [
    'CuttingOptimizerWindow',
    'SlabCanvas',
    'Theme',
]
