"""
StoneERP - Cutting Optimizer
============================
Slab layout preview for the pieces of a quote.

Uses a Tkinter Canvas to draw:
- the slab (grey)
- placed pieces (colored rectangles with labels)
and a side panel with waste/utilization and the piece list.
"""

import tkinter as tk
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging

import customtkinter as ctk

from config.settings import DEFAULT_WINDOW_SIZE, OPTIMIZER_VIEW_SCALE
from quotations.cutting_service import CuttingPlanService, materials_in
from quotations.models import PackingResult, PieceRequest, PlacedPiece, SlabSpec

logger = logging.getLogger(__name__)


class Theme:
    """Colors"""
    BG_DARK = "#0f0f0f"
    BG_CARD = "#1a1a1a"
    BG_SLAB = "#6b7280"
    SLAB_BORDER = "#9ca3af"

    TEXT_PRIMARY = "#ffffff"
    TEXT_SECONDARY = "#a0a0a0"

    PIECE_FILL = "#2563eb"
    PIECE_OUTLINE = "#1e3a8a"

    OK = "#22c55e"
    NOT_FIT = "#ef4444"
    WASTE = "#f87171"


class SlabCanvas(tk.Canvas):
    """
    Canvas drawing one slab with its fitted pieces.
    Origin is the top-left corner of the slab, Y grows downwards.
    """

    def __init__(self, parent, **kwargs):
        kwargs.setdefault('bg', Theme.BG_CARD)
        kwargs.setdefault('highlightthickness', 0)
        super().__init__(parent, **kwargs)

        self.result: Optional[PackingResult] = None
        self.scale = OPTIMIZER_VIEW_SCALE
        self.offset_x = 20
        self.offset_y = 20
        self.padding = 20

        self.bind('<Configure>', lambda e: self.redraw())

    def set_result(self, result: Optional[PackingResult]):
        self.result = result
        self.redraw()

    def _calculate_scale(self):
        """Fit the slab in the canvas, never above the configured scale"""
        slab = self.result.slab
        canvas_w = self.winfo_width() - 2 * self.padding
        canvas_h = self.winfo_height() - 2 * self.padding
        if canvas_w <= 0 or canvas_h <= 0 or not slab.is_valid:
            self.scale = OPTIMIZER_VIEW_SCALE
            return

        self.scale = min(OPTIMIZER_VIEW_SCALE, canvas_w / slab.slab_width, canvas_h / slab.slab_height)
        self.offset_x = self.padding
        self.offset_y = self.padding

    def _to_canvas(self, x: float, y: float) -> Tuple[float, float]:
        return self.offset_x + x * self.scale, self.offset_y + y * self.scale

    def redraw(self):
        self.delete('all')
        if not self.result:
            self.create_text(
                self.winfo_width() / 2, self.winfo_height() / 2,
                text="No material selected or no valid pieces to optimize.",
                fill=Theme.TEXT_SECONDARY
            )
            return

        self._calculate_scale()
        slab = self.result.slab
        if not slab.is_valid:
            self.create_text(
                self.winfo_width() / 2, self.winfo_height() / 2,
                text=f"Invalid slab size {slab.slab_width}m x {slab.slab_height}m",
                fill=Theme.NOT_FIT
            )
            return

        x1, y1 = self._to_canvas(0, 0)
        x2, y2 = self._to_canvas(slab.slab_width, slab.slab_height)
        self.create_rectangle(x1, y1, x2, y2, fill=Theme.BG_SLAB, outline=Theme.SLAB_BORDER, width=2, tags='slab')

        for placed in self.result.fitted:
            self._draw_piece(placed)

    def _draw_piece(self, placed: PlacedPiece):
        piece = placed.piece
        x1, y1 = self._to_canvas(placed.placement.x, placed.placement.y)
        x2, y2 = self._to_canvas(placed.placement.x + piece.width, placed.placement.y + piece.height)

        self.create_rectangle(x1, y1, x2, y2, fill=Theme.PIECE_FILL, outline=Theme.PIECE_OUTLINE, tags='piece')

        label = (piece.description or piece.id).split(' - ')[0]
        if (x2 - x1) > 30 and (y2 - y1) > 14:
            self.create_text(
                (x1 + x2) / 2, (y1 + y2) / 2,
                text=label,
                fill=Theme.TEXT_PRIMARY,
                font=("Arial", 9),
                width=max(x2 - x1 - 4, 10),
                tags='piece'
            )


class CuttingOptimizerWindow(ctk.CTkToplevel):
    """
    Cutting optimizer for the rectangular pieces of a quote.

    on_complete(updated_pieces, waste_percentage) is called on confirmation.
    """

    def __init__(
        self,
        parent,
        pieces: Sequence[PieceRequest],
        slabs: Dict[str, SlabSpec],
        on_complete: Callable[[List[PieceRequest], float], None] = None,
        service: CuttingPlanService = None,
    ):
        super().__init__(parent)

        self.pieces = list(pieces)
        self.slabs = slabs
        self.on_complete = on_complete
        self.service = service or CuttingPlanService()

        self.material_ids = [m for m in materials_in(self.pieces) if m in self.slabs]
        self.result: Optional[PackingResult] = None

        self.title("Cutting Optimizer")
        self.geometry(DEFAULT_WINDOW_SIZE)
        self.minsize(900, 600)
        self.configure(fg_color=Theme.BG_DARK)

        self._setup_ui()

        if self.material_ids:
            self._select_material(self.material_ids[0])
        else:
            self._refresh()

    def _setup_ui(self):
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        # Preview
        preview = ctk.CTkFrame(self, fg_color=Theme.BG_CARD)
        preview.grid(row=0, column=0, sticky="nsew", padx=10, pady=10)

        ctk.CTkLabel(
            preview,
            text="Slab Preview",
            font=ctk.CTkFont(size=14, weight="bold")
        ).pack(anchor="w", padx=10, pady=(10, 0))

        self.slab_canvas = SlabCanvas(preview)
        self.slab_canvas.pack(fill="both", expand=True, padx=10, pady=10)

        # Details
        side = ctk.CTkFrame(self, width=360, fg_color=Theme.BG_CARD)
        side.grid(row=0, column=1, sticky="ns", padx=(0, 10), pady=10)

        if len(self.material_ids) > 1:
            ctk.CTkLabel(side, text="Optimize material").pack(anchor="w", padx=10, pady=(10, 0))
            self.material_menu = ctk.CTkOptionMenu(
                side,
                values=self.material_ids,
                command=self._select_material
            )
            self.material_menu.pack(fill="x", padx=10, pady=5)

        self.title_label = ctk.CTkLabel(side, text="", font=ctk.CTkFont(size=14, weight="bold"))
        self.title_label.pack(anchor="w", padx=10, pady=(10, 0))

        self.slab_label = ctk.CTkLabel(side, text="", text_color=Theme.TEXT_SECONDARY)
        self.slab_label.pack(anchor="w", padx=10)

        self.waste_label = ctk.CTkLabel(
            side, text="", text_color=Theme.WASTE,
            font=ctk.CTkFont(size=22, weight="bold")
        )
        self.waste_label.pack(anchor="w", padx=10, pady=(15, 0))

        self.utilization_label = ctk.CTkLabel(
            side, text="", text_color=Theme.OK,
            font=ctk.CTkFont(size=16, weight="bold")
        )
        self.utilization_label.pack(anchor="w", padx=10)

        self.unfit_label = ctk.CTkLabel(side, text="", text_color=Theme.TEXT_SECONDARY)
        self.unfit_label.pack(anchor="w", padx=10, pady=(5, 10))

        ctk.CTkLabel(side, text="Pieces", font=ctk.CTkFont(size=14, weight="bold")).pack(anchor="w", padx=10)
        self.piece_list = ctk.CTkScrollableFrame(side, width=320, height=300)
        self.piece_list.pack(fill="both", expand=True, padx=10, pady=5)

        self.confirm_button = ctk.CTkButton(side, text="Confirm Optimization", command=self._confirm)
        self.confirm_button.pack(fill="x", padx=10, pady=10)

    def _select_material(self, material_id: str):
        slab = self.slabs[material_id]
        self.result = self.service.plan(slab, self.pieces)
        self._refresh()

    def _refresh(self):
        result = self.result
        self.slab_canvas.set_result(result)

        if result is None:
            self.confirm_button.configure(state="disabled")
            return

        slab = result.slab
        self.title_label.configure(text=f"Results for {slab.name or slab.material_id}")
        self.slab_label.configure(text=f"Slab size: {slab.slab_width}m x {slab.slab_height}m")
        self.waste_label.configure(text=f"{result.waste_percentage:.2f}% waste")
        self.utilization_label.configure(text=f"{result.utilization_percentage:.2f}% utilization")
        self.unfit_label.configure(text=f"{result.unfit_count} piece(s) did not fit on the slab.")

        for child in self.piece_list.winfo_children():
            child.destroy()

        for placed in result.placements:
            piece = placed.piece
            row = ctk.CTkFrame(self.piece_list, fg_color="transparent")
            row.pack(fill="x", pady=1)
            ctk.CTkLabel(row, text=f"{piece.description or piece.id} ({piece.width}x{piece.height})").pack(side="left")
            ctk.CTkLabel(
                row,
                text="OK" if placed.fit else "Does not fit",
                text_color=Theme.OK if placed.fit else Theme.NOT_FIT
            ).pack(side="right")

        for piece in result.custom_shapes:
            row = ctk.CTkFrame(self.piece_list, fg_color="transparent")
            row.pack(fill="x", pady=1)
            ctk.CTkLabel(row, text=f"{piece.description or piece.id} (custom, {piece.area:.3f} m²)").pack(side="left")
            ctk.CTkLabel(row, text="Not nested", text_color=Theme.TEXT_SECONDARY).pack(side="right")

        self.confirm_button.configure(state="normal")

    def _confirm(self):
        if self.result is None:
            return
        updated, waste = self.service.confirm_plan(self.result, self.pieces)
        if self.on_complete:
            self.on_complete(updated, waste)
        self.destroy()
