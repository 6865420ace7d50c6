"""
CAD Module - Custom piece capture
=================================

Components:
- geometry: scale conversion, shoelace area, closure test
- ShapeSession: immutable vertex capture state
- ShapeCaptureController: canvas adapter driving a session
- ShapeDesignerDialog: customtkinter dialog (cad.shape_designer)

Usage:
    from cad import ShapeSession

    session = ShapeSession()
    for x, y in [(0, 0), (800, 0), (0, 800), (3, -2)]:
        session = session.add_point(x, y)
    shape = session.confirm()   # CapturedShape(area=8.0, ...)
"""

from .geometry import Point, SCALE, polygon_area, polygon_area_real, is_closed
from .shape_session import ShapeSession, ShapeState, CapturedShape
from .shape_controller import ShapeCaptureController


__all__ = [
    'Point',
    'SCALE',
    'polygon_area',
    'polygon_area_real',
    'is_closed',
    'ShapeSession',
    'ShapeState',
    'CapturedShape',
    'ShapeCaptureController',
]
