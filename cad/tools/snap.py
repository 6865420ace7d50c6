"""
Snap Tool - Grid snapping for shape capture
===========================================
Every pointer position is pulled onto the nearest grid node.
"""

import math
from dataclasses import dataclass

from config.settings import SHAPE_GRID_SIZE_PX
from cad.geometry import Point


def snap_to_grid(value: float, grid_size: float = SHAPE_GRID_SIZE_PX) -> float:
    """
    Snap a coordinate to the nearest multiple of grid_size.

    Halves round up (towards +inf), so snap(10) on a 20 px grid is 20.
    Idempotent: snap(snap(v)) == snap(v).
    """
    return math.floor(value / grid_size + 0.5) * grid_size


@dataclass(frozen=True)
class GridSnapper:
    """Grid snap with proximity tests in pixel space"""
    grid_size: float = SHAPE_GRID_SIZE_PX

    def snap(self, x: float, y: float) -> Point:
        """Snapped point for a raw pointer position"""
        return Point(snap_to_grid(x, self.grid_size), snap_to_grid(y, self.grid_size))

    @property
    def close_radius(self) -> float:
        """Half a grid cell"""
        return self.grid_size / 2

    def is_within(self, point: Point, target: Point, radius: float) -> bool:
        """Strictly closer than radius"""
        return point.distance_to(target) < radius


__all__ = ['snap_to_grid', 'GridSnapper']
