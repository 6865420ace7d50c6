#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StoneERP configuration
Cutting core for stone slab fabrication

Values can be overridden from a .env file or the environment.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# ============================================================
# SHAPE CAPTURE - GRID AND SCALE
# ============================================================

# Size of one grid cell on the capture canvas (pixels)
SHAPE_GRID_SIZE_PX = float(os.getenv("SHAPE_GRID_SIZE_PX", "20"))

# Real-world length represented by one grid cell (meters)
SHAPE_GRID_STEP_M = float(os.getenv("SHAPE_GRID_STEP_M", "0.1"))

# Pixels per meter
SHAPE_SCALE = SHAPE_GRID_SIZE_PX / SHAPE_GRID_STEP_M

# Perpendicular distance between a segment and its dimension label (pixels)
DIMENSION_LABEL_OFFSET_PX = 15.0

# Segments shorter than this get no dimension label (meters)
DIMENSION_MIN_LENGTH_M = 0.01

# ============================================================
# CUTTING OPTIMIZER
# ============================================================

# Pixels per meter in the slab preview
OPTIMIZER_VIEW_SCALE = float(os.getenv("OPTIMIZER_VIEW_SCALE", "150"))

# Memoize packing runs per (material, slab, pieces)
OPTIMIZER_CACHE_ENABLED = os.getenv("OPTIMIZER_CACHE_ENABLED", "true").lower() == "true"

# Maximum number of cached packing results
OPTIMIZER_CACHE_SIZE = int(os.getenv("OPTIMIZER_CACHE_SIZE", "64"))

# ============================================================
# GUI
# ============================================================

DEFAULT_WINDOW_SIZE = "1200x800"

# CustomTkinter theme
CTK_APPEARANCE_MODE = os.getenv("CTK_APPEARANCE_MODE", "dark")  # "dark", "light", "system"
CTK_COLOR_THEME = os.getenv("CTK_COLOR_THEME", "blue")           # "blue", "green", "dark-blue"

# ============================================================
# LOGGING
# ============================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# ============================================================
# CONFIG VALIDATION
# ============================================================

def validate_config():
    """
    Check that the configuration is usable.
    Call on application start.
    """
    errors = []

    if SHAPE_GRID_SIZE_PX <= 0:
        errors.append("SHAPE_GRID_SIZE_PX must be positive")

    if SHAPE_GRID_STEP_M <= 0:
        errors.append("SHAPE_GRID_STEP_M must be positive")

    if OPTIMIZER_VIEW_SCALE <= 0:
        errors.append("OPTIMIZER_VIEW_SCALE must be positive")

    if OPTIMIZER_CACHE_SIZE < 0:
        errors.append("OPTIMIZER_CACHE_SIZE must not be negative")

    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")

    return True


if __name__ == "__main__":
    print("=" * 60)
    print("StoneERP CONFIGURATION")
    print("=" * 60)
    print(f"Grid: {SHAPE_GRID_SIZE_PX} px = {SHAPE_GRID_STEP_M} m")
    print(f"Scale: {SHAPE_SCALE} px/m")
    print(f"Optimizer view scale: {OPTIMIZER_VIEW_SCALE} px/m")
    print()

    try:
        validate_config()
        print("Configuration OK")
    except ValueError as e:
        print(f"Configuration error: {e}")
