"""
Dimension Tool - Segment length labels
======================================
Each segment of a traced shape carries a label with its real-world
length, placed next to the midpoint and shifted perpendicular to the
segment so the text does not sit on the line.
"""

import math
from dataclasses import dataclass
from typing import Optional
import logging

from config.settings import SHAPE_SCALE, DIMENSION_LABEL_OFFSET_PX, DIMENSION_MIN_LENGTH_M
from cad.geometry import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DimensionLabel:
    """Dimension label of one segment (positions in pixels)"""
    start: Point
    end: Point
    position: Point
    length_m: float
    live: bool = False

    @property
    def text(self) -> str:
        return f"{self.length_m:.2f}m"


def segment_dimension(
    p1: Point,
    p2: Point,
    scale: float = SHAPE_SCALE,
    offset: float = DIMENSION_LABEL_OFFSET_PX,
    live: bool = False,
) -> Optional[DimensionLabel]:
    """
    Build the dimension label for segment p1 -> p2.

    Args:
        p1, p2: Segment ends in pixels
        scale: Pixels per meter
        offset: Perpendicular distance of the label from the segment [px]
        live: True for the rubber-band segment

    Returns:
        DimensionLabel, or None when the segment is shorter than 1 cm
    """
    length_m = p1.distance_to(p2) / scale
    if length_m < DIMENSION_MIN_LENGTH_M:
        return None

    mid_x = (p1.x + p2.x) / 2
    mid_y = (p1.y + p2.y) / 2

    # Normal to the segment
    angle = math.atan2(p2.y - p1.y, p2.x - p1.x)
    nx = -math.sin(angle) * offset
    ny = math.cos(angle) * offset

    return DimensionLabel(
        start=p1,
        end=p2,
        position=Point(mid_x + nx, mid_y + ny),
        length_m=length_m,
        live=live,
    )


__all__ = ['DimensionLabel', 'segment_dimension']
