#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StoneERP - Cutting core
Launcher

Usage:
    python main.py                    # Cutting optimizer with demo data
    python main.py --shape            # Custom piece designer
    python main.py --plan quote.json  # Print cutting plans as JSON (no GUI)

quote.json:
    {"slabs": [{"material_id": "granite", "slab_width": 3.0, "slab_height": 2.0}],
     "pieces": [{"id": "p1", "material_id": "granite", "width": 2.0, "height": 1.0}]}
"""

import sys
import json
import argparse
import logging

from config.settings import CTK_APPEARANCE_MODE, CTK_COLOR_THEME, LOG_FORMAT, LOG_LEVEL, validate_config

# Logging setup
logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO), format=LOG_FORMAT)
logger = logging.getLogger(__name__)


DEMO_SLABS = [
    {'material_id': 'granite-black', 'name': 'Black Granite', 'slab_width': 3.0, 'slab_height': 1.8},
    {'material_id': 'marble-white', 'name': 'White Marble', 'slab_width': 2.8, 'slab_height': 1.6},
]

DEMO_PIECES = [
    {'id': 'q1-1', 'material_id': 'granite-black', 'description': 'Kitchen top - left', 'width': 2.2, 'height': 0.6},
    {'id': 'q1-2', 'material_id': 'granite-black', 'description': 'Kitchen top - right', 'width': 1.4, 'height': 0.6},
    {'id': 'q1-3', 'material_id': 'granite-black', 'description': 'Backsplash', 'width': 0.8, 'height': 0.1, 'quantity': 3},
    {'id': 'q1-4', 'material_id': 'marble-white', 'description': 'Vanity top', 'width': 1.2, 'height': 0.55},
    {'id': 'q1-5', 'material_id': 'marble-white', 'description': 'Window sill', 'width': 1.5, 'height': 0.25, 'quantity': 2},
]


def setup_ctk():
    """CustomTkinter setup"""
    import customtkinter as ctk
    ctk.set_appearance_mode(CTK_APPEARANCE_MODE)
    ctk.set_default_color_theme(CTK_COLOR_THEME)
    return ctk


def load_quote(data: dict):
    """Slabs (by material) and pieces from a quote dict"""
    from quotations.models import PieceRequest, SlabSpec

    slabs = {}
    for raw in data.get('slabs', []):
        slab = SlabSpec.from_dict(raw)
        slabs[slab.material_id] = slab
    pieces = [PieceRequest.from_dict(raw) for raw in data.get('pieces', [])]
    return slabs, pieces


def run_plan(path: str) -> int:
    """Print cutting plans for a quote file"""
    from quotations.cutting_service import CuttingPlanService

    with open(path, encoding='utf-8') as f:
        slabs, pieces = load_quote(json.load(f))

    results = CuttingPlanService().plan_all(slabs, pieces)
    print(json.dumps({m: r.to_dict() for m, r in results.items()}, indent=2))
    return 0


def run_optimizer_window() -> int:
    """Cutting optimizer on demo data"""
    ctk = setup_ctk()
    from quotations.gui import CuttingOptimizerWindow

    slabs, pieces = load_quote({'slabs': DEMO_SLABS, 'pieces': DEMO_PIECES})

    root = ctk.CTk()
    root.withdraw()

    def on_complete(updated, waste):
        logger.info(f"Optimization confirmed: {len(updated)} piece(s), waste {waste:.2f}%")
        root.quit()

    window = CuttingOptimizerWindow(root, pieces, slabs, on_complete=on_complete)

    def on_close():
        window.destroy()
        root.quit()

    window.protocol("WM_DELETE_WINDOW", on_close)
    root.mainloop()
    return 0


def run_shape_designer() -> int:
    """Custom piece designer"""
    ctk = setup_ctk()
    from cad.shape_designer import open_shape_designer
    from quotations.cutting_service import CuttingPlanService
    from quotations.models import PieceRequest

    service = CuttingPlanService()
    piece = PieceRequest(id='custom-1', material_id='granite-black', description='Custom piece', width=0, height=0)

    root = ctk.CTk()
    root.withdraw()

    def on_complete(shape):
        updated = service.apply_shape(piece, shape)
        print(json.dumps(updated.to_dict(), indent=2))
        root.quit()

    open_shape_designer(root, on_complete=on_complete, on_cancel=root.quit)
    root.mainloop()
    return 0


def main():
    """Entry point"""
    parser = argparse.ArgumentParser(description="StoneERP cutting core")
    parser.add_argument('--shape', action='store_true', help='Open the custom piece designer')
    parser.add_argument('--plan', metavar='FILE', help='Print cutting plans for a quote JSON file')
    parser.add_argument('--debug', action='store_true', help='Debug logging')

    args = parser.parse_args()

    if args.debug:
        from core.events import setup_event_logging
        logging.getLogger().setLevel(logging.DEBUG)
        setup_event_logging()

    try:
        validate_config()
    except ValueError as e:
        print(f"Configuration error: {e}")
        print("\nCheck config/settings.py or create a .env file")
        return 1

    if args.plan:
        return run_plan(args.plan)

    if args.shape:
        return run_shape_designer()

    return run_optimizer_window()


if __name__ == "__main__":
    sys.exit(main())
