"""
Shape Session - Capture of custom (non-rectangular) pieces
==========================================================
Immutable capture state for tracing a polygon on a snapped grid.
Every transition returns a new session; the UI adapter only swaps
references.

States:
    EMPTY     - no points
    DRAWING   - 1-2 points
    DRAWABLE  - 3+ points, open
    CLOSED    - last point is the first point

Closing stores the first point itself as the last vertex, so the closure
test is exact equality and never a distance comparison.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import logging

from config.settings import SHAPE_GRID_SIZE_PX, SHAPE_SCALE
from cad import geometry
from cad.geometry import Point
from cad.tools.snap import GridSnapper
from cad.tools.dimension import DimensionLabel, segment_dimension
from core.exceptions import ShapeNotClosedError, ZeroAreaShapeError

logger = logging.getLogger(__name__)


class ShapeState(Enum):
    """Capture state derived from the point list"""
    EMPTY = "empty"
    DRAWING = "drawing"
    DRAWABLE = "drawable"
    CLOSED = "closed"


@dataclass(frozen=True)
class CapturedShape:
    """Confirmed shape in real-world units (meters, square meters)"""
    area: float
    points: Tuple[Point, ...]

    @property
    def perimeter(self) -> float:
        return geometry.perimeter(self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'area': self.area,
            'points': [p.as_dict() for p in self.points],
        }


@dataclass(frozen=True)
class ShapeSession:
    """Vertex capture state in pixel coordinates"""
    points: Tuple[Point, ...] = ()
    cursor: Point = field(default_factory=lambda: Point(0.0, 0.0))
    grid_size: float = SHAPE_GRID_SIZE_PX
    scale: float = SHAPE_SCALE

    # ==================== Derived state ====================

    @property
    def snapper(self) -> GridSnapper:
        return GridSnapper(self.grid_size)

    @property
    def is_closed(self) -> bool:
        return geometry.is_closed(self.points)

    @property
    def state(self) -> ShapeState:
        if not self.points:
            return ShapeState.EMPTY
        if self.is_closed:
            return ShapeState.CLOSED
        if len(self.points) < 3:
            return ShapeState.DRAWING
        return ShapeState.DRAWABLE

    @property
    def area(self) -> float:
        """Enclosed area [m2]"""
        return geometry.polygon_area_real(self.points, self.scale)

    @property
    def segments(self) -> List[Tuple[Point, Point]]:
        """Committed segments in pixels"""
        return [(self.points[i], self.points[i + 1]) for i in range(len(self.points) - 1)]

    @property
    def segment_lengths(self) -> List[float]:
        """Committed segment lengths [m]"""
        return [length / self.scale for length in geometry.segment_lengths(self.points)]

    @property
    def perimeter(self) -> float:
        """Length of the traced outline [m]"""
        return sum(self.segment_lengths)

    @property
    def live_segment(self) -> Optional[Tuple[Point, Point]]:
        """Rubber-band segment from the last point to the cursor (open shapes only)"""
        if not self.points or self.is_closed:
            return None
        return (self.points[-1], self.cursor)

    @property
    def closing_hint(self) -> bool:
        """True when the cursor hovers close enough to the first point to close the shape"""
        if len(self.points) < 3 or self.is_closed:
            return False
        return self.snapper.is_within(self.cursor, self.points[0], self.grid_size)

    # ==================== Transitions ====================

    def add_point(self, x: float, y: float) -> 'ShapeSession':
        """
        Handle a click at raw canvas position (x, y).

        - closed shape: ignored
        - same node as the last point: ignored
        - 3+ points and within half a cell of the first point: closes
          by appending the first point itself
        """
        if self.is_closed:
            return self

        snapper = self.snapper
        point = snapper.snap(x, y)

        if self.points and point == self.points[-1]:
            return self

        if len(self.points) > 2 and snapper.is_within(point, self.points[0], snapper.close_radius):
            logger.debug(f"[ShapeSession] Closing shape with {len(self.points)} points")
            return replace(self, points=self.points + (self.points[0],))

        return replace(self, points=self.points + (point,))

    def move_cursor(self, x: float, y: float) -> 'ShapeSession':
        """Track the pointer (snapped) for the live preview"""
        return replace(self, cursor=self.snapper.snap(x, y))

    def undo(self) -> 'ShapeSession':
        """Remove the last point; removing the closing point re-opens the shape"""
        if not self.points:
            return self
        return replace(self, points=self.points[:-1])

    def clear(self) -> 'ShapeSession':
        return replace(self, points=())

    # ==================== Output ====================

    def dimension_labels(self) -> List[DimensionLabel]:
        """Labels for committed segments plus the live segment while open"""
        labels = []
        for p1, p2 in self.segments:
            label = segment_dimension(p1, p2, self.scale)
            if label:
                labels.append(label)

        live = self.live_segment
        if live:
            label = segment_dimension(live[0], live[1], self.scale, live=True)
            if label:
                labels.append(label)

        return labels

    def real_points(self) -> Tuple[Point, ...]:
        """Points converted to meters"""
        return tuple(geometry.point_to_real(p, self.scale) for p in self.points)

    def validate(self) -> None:
        """
        Raises:
            ShapeNotClosedError: outline is open
            ZeroAreaShapeError: outline encloses nothing
        """
        if not self.is_closed:
            raise ShapeNotClosedError(len(self.points))
        if self.area == 0:
            raise ZeroAreaShapeError(len(self.points))

    def confirm(self) -> CapturedShape:
        """
        Convert the closed outline to real-world units.

        The session is left untouched when validation fails.
        """
        self.validate()
        shape = CapturedShape(area=self.area, points=self.real_points())
        logger.info(
            f"[ShapeSession] Confirmed shape: {len(shape.points)} points, "
            f"area={shape.area:.3f} m2, perimeter={shape.perimeter:.2f} m"
        )
        return shape


__all__ = ['ShapeState', 'ShapeSession', 'CapturedShape']
