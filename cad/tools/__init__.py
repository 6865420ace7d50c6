"""
CAD Tools - Shape capture helpers
=================================
"""

from .dimension import DimensionLabel, segment_dimension
from .snap import GridSnapper, snap_to_grid

__all__ = ['DimensionLabel', 'segment_dimension', 'GridSnapper', 'snap_to_grid']
