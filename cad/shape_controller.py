"""
Shape Capture Controller - Canvas adapter for ShapeSession
==========================================================
Forwards pointer events from a Tkinter-style canvas to the immutable
ShapeSession and redraws the capture state:
- grid
- outline (filled once closed)
- vertices (first vertex red)
- rubber-band line to the cursor
- closing hint around the first vertex
- dimension labels

The canvas only needs bind/unbind/create_*/delete, so any Tk canvas works.
"""

from typing import Callable, Optional
import logging

from config.settings import SHAPE_GRID_SIZE_PX, SHAPE_SCALE
from cad.shape_session import ShapeSession, ShapeState, CapturedShape
from core.events import EventBus, EventType, create_event
from core.exceptions import ActionNotAllowedError

logger = logging.getLogger(__name__)


class ShapeCaptureController:
    """
    Drives one capture session on a canvas.

    Lifecycle: active until confirm() succeeds or cancel() is called,
    then terminal. The session is discarded on either.
    """

    # Colors
    GRID_COLOR = "#c8c8c8"
    OUTLINE_COLOR = "#1e40af"
    FILL_COLOR = "#3b5bc4"
    FIRST_POINT_COLOR = "#dc2626"
    POINT_COLOR = "#1e40af"
    HINT_COLOR = "#f87171"
    TEXT_COLOR = "#e5e7eb"

    POINT_RADIUS = 3
    HINT_RADIUS = 6

    SHAPE_TAG = "shape"
    GRID_TAG = "grid"

    def __init__(
        self,
        canvas,
        on_complete: Callable[[CapturedShape], None] = None,
        on_cancel: Callable[[], None] = None,
        on_change: Callable[[ShapeSession], None] = None,
        grid_size: float = SHAPE_GRID_SIZE_PX,
        scale: float = SHAPE_SCALE,
    ):
        """
        Args:
            canvas: Tk canvas (or anything with the same drawing API)
            on_complete: Called with the confirmed shape
            on_cancel: Called when the capture is cancelled
            on_change: Called with the new session after every change
            grid_size: Grid cell [px]
            scale: Pixels per meter
        """
        self.canvas = canvas
        self.on_complete = on_complete
        self.on_cancel = on_cancel
        self.on_change = on_change

        self.session: Optional[ShapeSession] = ShapeSession(grid_size=grid_size, scale=scale)
        self.outcome: Optional[str] = None  # "confirmed" / "cancelled"
        self._bound = False

    # ==================== Bindings ====================

    def bind(self):
        """Attach pointer and keyboard handlers"""
        self.canvas.bind("<Button-1>", self._on_click)
        self.canvas.bind("<Motion>", self._on_motion)
        self.canvas.bind("<Control-z>", self._on_undo)
        self.canvas.bind("<Escape>", self._on_escape)
        self._bound = True

    def unbind(self):
        if not self._bound:
            return
        for sequence in ("<Button-1>", "<Motion>", "<Control-z>", "<Escape>"):
            self.canvas.unbind(sequence)
        self._bound = False

    def _on_click(self, event):
        if self.is_active:
            self.add_point(event.x, event.y)

    def _on_motion(self, event):
        if self.is_active:
            self.move_cursor(event.x, event.y)

    def _on_undo(self, event):
        if self.is_active:
            self.undo()

    def _on_escape(self, event):
        if self.is_active:
            self.cancel()

    # ==================== State ====================

    @property
    def is_active(self) -> bool:
        return self.outcome is None

    @property
    def state(self) -> str:
        if self.outcome:
            return self.outcome
        return self.session.state.value

    def _require_active(self, action: str):
        if not self.is_active:
            raise ActionNotAllowedError(action, self.outcome, entity_type="ShapeCapture")

    def _apply(self, session: ShapeSession):
        if session is self.session:
            return
        self.session = session
        self.redraw()
        if self.on_change:
            self.on_change(session)

    # ==================== Operations ====================

    def add_point(self, x: float, y: float):
        self._require_active("add_point")
        self._apply(self.session.add_point(x, y))

    def move_cursor(self, x: float, y: float):
        self._require_active("move_cursor")
        self._apply(self.session.move_cursor(x, y))

    def undo(self):
        self._require_active("undo")
        self._apply(self.session.undo())

    def clear(self):
        self._require_active("clear")
        self._apply(self.session.clear())

    def confirm(self) -> CapturedShape:
        """
        Confirm the shape.

        Raises:
            ValidationError: shape open or without area; controller stays active
        """
        self._require_active("confirm")
        shape = self.session.confirm()

        self.outcome = "confirmed"
        self.session = None
        self.unbind()

        if self.on_complete:
            self.on_complete(shape)
        return shape

    def cancel(self):
        """Discard the session from any state"""
        self._require_active("cancel")
        point_count = len(self.session.points)
        self.outcome = "cancelled"
        self.session = None
        self.unbind()
        self.canvas.delete(self.SHAPE_TAG)
        logger.debug(f"[ShapeCapture] Cancelled with {point_count} point(s)")
        EventBus().publish(create_event(EventType.SHAPE_CANCELLED, {'point_count': point_count}, source=__name__))

        if self.on_cancel:
            self.on_cancel()

    # ==================== Drawing ====================

    def draw_grid(self, width: int, height: int):
        """Draw grid lines over a width x height area"""
        self.canvas.delete(self.GRID_TAG)
        step = self.session.grid_size if self.session else SHAPE_GRID_SIZE_PX

        x = 0.0
        while x <= width:
            self.canvas.create_line(x, 0, x, height, fill=self.GRID_COLOR, width=0.5, tags=self.GRID_TAG)
            x += step

        y = 0.0
        while y <= height:
            self.canvas.create_line(0, y, width, y, fill=self.GRID_COLOR, width=0.5, tags=self.GRID_TAG)
            y += step

    def redraw(self):
        """Redraw the outline, vertices, preview and labels"""
        self.canvas.delete(self.SHAPE_TAG)
        session = self.session
        if session is None or session.state == ShapeState.EMPTY:
            return

        coords = [c for p in session.points for c in p.as_tuple()]

        if session.is_closed:
            self.canvas.create_polygon(
                *coords,
                fill=self.FILL_COLOR,
                outline=self.OUTLINE_COLOR,
                width=2,
                tags=self.SHAPE_TAG
            )
        elif len(session.points) > 1:
            self.canvas.create_line(*coords, fill=self.OUTLINE_COLOR, width=2, tags=self.SHAPE_TAG)

        live = session.live_segment
        if live:
            start, end = live
            self.canvas.create_line(
                start.x, start.y, end.x, end.y,
                fill=self.OUTLINE_COLOR,
                width=1,
                dash=(4, 4),
                tags=self.SHAPE_TAG
            )

        for i, p in enumerate(session.points):
            r = self.POINT_RADIUS
            self.canvas.create_oval(
                p.x - r, p.y - r, p.x + r, p.y + r,
                fill=self.FIRST_POINT_COLOR if i == 0 else self.POINT_COLOR,
                outline="",
                tags=self.SHAPE_TAG
            )

        if session.closing_hint:
            first = session.points[0]
            r = self.HINT_RADIUS
            self.canvas.create_oval(
                first.x - r, first.y - r, first.x + r, first.y + r,
                outline=self.HINT_COLOR,
                width=2,
                tags=self.SHAPE_TAG
            )

        for label in session.dimension_labels():
            self.canvas.create_text(
                label.position.x, label.position.y,
                text=label.text,
                fill=self.TEXT_COLOR,
                font=("Arial", 9),
                tags=self.SHAPE_TAG
            )


__all__ = ['ShapeCaptureController']
