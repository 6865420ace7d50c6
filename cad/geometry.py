"""
Geometry - Plane geometry helpers for shape capture
===================================================
Scale conversion between canvas pixels and meters, shoelace area,
segment lengths and the closure test.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from config.settings import SHAPE_SCALE

SCALE = SHAPE_SCALE  # pixels per meter


@dataclass(frozen=True)
class Point:
    """2D point (pixels or meters, depending on context)"""
    x: float
    y: float

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}


# ==================== Scale conversion ====================

def to_real(value: float, scale: float = SCALE) -> float:
    """Pixels -> meters"""
    return value / scale


def to_pixels(value: float, scale: float = SCALE) -> float:
    """Meters -> pixels"""
    return value * scale


def point_to_real(point: Point, scale: float = SCALE) -> Point:
    return Point(point.x / scale, point.y / scale)


# ==================== Measurements ====================

def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance"""
    return p1.distance_to(p2)


def polygon_area(points: Sequence[Point]) -> float:
    """
    Polygon area using the shoelace formula.

    The vertex list is treated as a closed loop (last connects to first).
    A repeated closing vertex adds a zero-length edge and does not change
    the result. Direction and starting vertex do not matter.

    Returns:
        Area in squared input units, 0.0 for fewer than 3 points
    """
    n = len(points)
    if n < 3:
        return 0.0

    twice_area = 0.0
    for i in range(n):
        p1 = points[i]
        p2 = points[(i + 1) % n]
        twice_area += p1.x * p2.y - p2.x * p1.y

    return abs(twice_area) / 2


def polygon_area_real(points: Sequence[Point], scale: float = SCALE) -> float:
    """Area of a pixel-space polygon in square meters"""
    return polygon_area(points) / (scale * scale)


def segment_lengths(points: Sequence[Point]) -> List[float]:
    """Length of every consecutive segment (open polyline)"""
    return [points[i].distance_to(points[i + 1]) for i in range(len(points) - 1)]


def perimeter(points: Sequence[Point]) -> float:
    """Sum of segment lengths of the polyline as stored"""
    return sum(segment_lengths(points))


def is_closed(points: Sequence[Point]) -> bool:
    """
    True when there are at least 3 points and the last point is
    the first point (exact coordinate equality).
    """
    if len(points) < 3:
        return False
    return points[0] == points[-1]
