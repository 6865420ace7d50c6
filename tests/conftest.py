"""
Shared fixtures for the cutting core tests.
"""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.events import EventBus
from quotations.models import PieceRequest, SlabSpec


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Every test gets its own event bus singleton"""
    EventBus.reset()
    yield EventBus()
    EventBus.reset()


@pytest.fixture
def make_piece():
    """Factory for rectangular piece requests"""
    def _make(piece_id: str, width: float, height: float, material_id: str = "granite", **kwargs):
        return PieceRequest(id=piece_id, material_id=material_id, width=width, height=height, **kwargs)
    return _make


@pytest.fixture
def granite_slab() -> SlabSpec:
    return SlabSpec(material_id="granite", slab_width=3.0, slab_height=2.0, name="Black Granite")
