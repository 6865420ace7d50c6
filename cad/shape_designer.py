#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shape Designer
Dialog for tracing a custom (non-rectangular) piece on a snapped grid
"""

import tkinter as tk
from tkinter import messagebox
from typing import Callable
import logging

import customtkinter as ctk

from config.settings import SHAPE_GRID_SIZE_PX, SHAPE_GRID_STEP_M
from cad.shape_controller import ShapeCaptureController
from cad.shape_session import CapturedShape, ShapeSession
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ShapeDesignerDialog(ctk.CTkToplevel):
    """Custom piece designer"""

    CANVAS_BG = "#1f2937"
    CANVAS_WIDTH = 900
    CANVAS_HEIGHT = 640

    def __init__(
        self,
        parent,
        on_complete: Callable[[CapturedShape], None],
        on_cancel: Callable[[], None] = None,
    ):
        super().__init__(parent)

        self._on_complete = on_complete
        self._on_cancel = on_cancel

        self.title("Custom Piece Designer")
        self.geometry("1250x720")

        self.transient(parent)
        self.grab_set()

        self.setup_ui()

        self.controller = ShapeCaptureController(
            self.canvas,
            on_complete=self._handle_complete,
            on_cancel=self._handle_cancel,
            on_change=self._update_measurements,
        )
        self.controller.bind()
        self.controller.draw_grid(self.CANVAS_WIDTH, self.CANVAS_HEIGHT)

        self.protocol("WM_DELETE_WINDOW", self.cancel)
        self.canvas.focus_set()

    def setup_ui(self):
        """Build the dialog layout"""
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        # Drawing area
        self.canvas = tk.Canvas(
            self,
            width=self.CANVAS_WIDTH,
            height=self.CANVAS_HEIGHT,
            bg=self.CANVAS_BG,
            highlightthickness=0,
            cursor="crosshair"
        )
        self.canvas.grid(row=0, column=0, sticky="nsew", padx=10, pady=10)

        # Side panel
        side = ctk.CTkFrame(self, width=300)
        side.grid(row=0, column=1, sticky="ns", padx=(0, 10), pady=10)

        ctk.CTkLabel(
            side,
            text="Instructions",
            font=ctk.CTkFont(size=14, weight="bold")
        ).pack(anchor="w", padx=10, pady=(10, 5))

        instructions = (
            "- Click on the grid to add points.\n"
            f"- One grid cell is {SHAPE_GRID_STEP_M}m ({SHAPE_GRID_SIZE_PX:.0f}px).\n"
            "- Click the first (red) point to close the shape.\n"
            "- Use Undo (Ctrl+Z) to remove the last point."
        )
        ctk.CTkLabel(side, text=instructions, justify="left").pack(anchor="w", padx=10)

        ctk.CTkLabel(
            side,
            text="Measurements",
            font=ctk.CTkFont(size=14, weight="bold")
        ).pack(anchor="w", padx=10, pady=(20, 5))

        self.area_label = ctk.CTkLabel(
            side,
            text="0.000 m²",
            font=ctk.CTkFont(size=22, weight="bold")
        )
        self.area_label.pack(anchor="w", padx=10)
        ctk.CTkLabel(side, text="Calculated area").pack(anchor="w", padx=10)

        self.perimeter_label = ctk.CTkLabel(side, text="Perimeter: 0.00 m")
        self.perimeter_label.pack(anchor="w", padx=10, pady=(10, 0))

        # Buttons
        buttons = ctk.CTkFrame(side, fg_color="transparent")
        buttons.pack(side="bottom", fill="x", padx=10, pady=10)

        row = ctk.CTkFrame(buttons, fg_color="transparent")
        row.pack(fill="x", pady=(0, 5))

        self.undo_button = ctk.CTkButton(row, text="Undo", width=130, command=self.undo, state="disabled")
        self.undo_button.pack(side="left")

        ctk.CTkButton(row, text="Clear", width=130, command=self.clear).pack(side="right")

        self.confirm_button = ctk.CTkButton(
            buttons,
            text="Confirm Shape",
            command=self.confirm,
            state="disabled"
        )
        self.confirm_button.pack(fill="x")

    # ==================== Actions ====================

    def undo(self):
        self.controller.undo()

    def clear(self):
        self.controller.clear()

    def confirm(self):
        try:
            self.controller.confirm()
        except ValidationError as e:
            logger.info(f"[ShapeDesigner] Confirmation rejected: {e}")
            messagebox.showwarning("Invalid shape", e.user_message, parent=self)

    def cancel(self):
        if self.controller.is_active:
            self.controller.cancel()
        else:
            self.destroy()

    # ==================== Callbacks ====================

    def _update_measurements(self, session: ShapeSession):
        self.area_label.configure(text=f"{session.area:.3f} m²")
        self.perimeter_label.configure(text=f"Perimeter: {session.perimeter:.2f} m")
        self.undo_button.configure(state="normal" if session.points else "disabled")
        self.confirm_button.configure(state="normal" if session.is_closed else "disabled")

    def _handle_complete(self, shape: CapturedShape):
        self.destroy()
        self._on_complete(shape)

    def _handle_cancel(self):
        self.destroy()
        if self._on_cancel:
            self._on_cancel()


def open_shape_designer(parent, on_complete: Callable[[CapturedShape], None],
                        on_cancel: Callable[[], None] = None) -> ShapeDesignerDialog:
    """Open the designer dialog"""
    return ShapeDesignerDialog(parent, on_complete=on_complete, on_cancel=on_cancel)
