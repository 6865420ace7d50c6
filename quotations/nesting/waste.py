"""
Waste Calculator
================
Slab usage metrics from packer output.

    used_area   = sum(w * h) over fitting pieces
    total_area  = slab_width * slab_height  (0 for a non-positive dimension)
    waste %     = 100 - used / total * 100, or 100 when total is 0
    utilization = 100 - waste
"""

from typing import Sequence
import logging

from quotations.models import PlacedPiece, WasteSummary

logger = logging.getLogger(__name__)


def slab_area(slab_width: float, slab_height: float) -> float:
    if slab_width <= 0 or slab_height <= 0:
        return 0.0
    return slab_width * slab_height


def calculate_waste(slab_width: float, slab_height: float,
                    placed: Sequence[PlacedPiece]) -> WasteSummary:
    """
    Compute waste for one slab.

    Args:
        slab_width, slab_height: Slab size [m]
        placed: Packer output (fitting and non-fitting pieces)

    Returns:
        WasteSummary
    """
    total_area = slab_area(slab_width, slab_height)
    used_area = sum(p.area for p in placed if p.fit)
    placed_count = sum(1 for p in placed if p.fit)

    if total_area > 0:
        waste_percentage = 100.0 - (used_area / total_area) * 100.0
    else:
        waste_percentage = 100.0

    summary = WasteSummary(
        total_area=total_area,
        used_area=used_area,
        waste_percentage=waste_percentage,
        placed_count=placed_count,
        unfit_count=len(placed) - placed_count,
    )

    logger.debug(
        f"[Waste] used={used_area:.3f}/{total_area:.3f} m2, "
        f"waste={waste_percentage:.2f}%, unfit={summary.unfit_count}"
    )
    return summary
