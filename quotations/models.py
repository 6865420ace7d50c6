"""
Quotation cutting models
========================
Piece requests, slab specification and packing output.
All lengths in meters, areas in square meters.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from cad.geometry import Point, polygon_area
from core.exceptions import RequiredFieldError


@dataclass(frozen=True)
class Placement:
    """Position of a piece on the slab (top-left corner)"""
    x: float = 0.0
    y: float = 0.0
    fit: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y, 'fit': self.fit}


@dataclass(frozen=True)
class PieceRequest:
    """
    One item to be cut.

    A request either has width and height, or shape_points (custom piece).
    Custom pieces take their area from the shape and are never packed.
    """
    id: str
    material_id: str
    description: str = ""
    width: Optional[float] = None
    height: Optional[float] = None
    shape_points: Optional[Tuple[Point, ...]] = None
    quantity: int = 1
    area_basis: Optional[float] = None     # area of a captured shape [m2]
    placement: Optional[Placement] = None
    source_id: Optional[str] = None        # quote item a quantity copy belongs to

    def __post_init__(self):
        if not self.shape_points and (self.width is None or self.height is None):
            raise RequiredFieldError("width/height", entity_type=f"PieceRequest {self.id}")
        if self.source_id is None:
            object.__setattr__(self, 'source_id', self.id)

    @property
    def is_custom_shape(self) -> bool:
        return bool(self.shape_points)

    @property
    def area(self) -> float:
        """Quantity basis of a single piece [m2]"""
        if self.is_custom_shape:
            if self.area_basis is not None:
                return self.area_basis
            return polygon_area(self.shape_points)
        return self.width * self.height

    @property
    def max_dimension(self) -> float:
        """Longest side; 0 for a custom shape without dimensions"""
        if self.width is None or self.height is None:
            return 0.0
        return max(self.width, self.height)

    @property
    def has_valid_dimensions(self) -> bool:
        if self.width is None or self.height is None:
            return False
        return self.width > 0 and self.height > 0

    def with_placement(self, placement: Placement) -> 'PieceRequest':
        return replace(self, placement=placement)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PieceRequest':
        """Build from a quote item dict (camelCase or snake_case keys)"""
        raw_points = data.get('shape_points', data.get('shapePoints'))
        points = tuple(Point(float(p['x']), float(p['y'])) for p in raw_points) if raw_points else None
        width = data.get('width')
        height = data.get('height')
        return cls(
            id=str(data['id']),
            material_id=str(data.get('material_id', data.get('materialId', ''))),
            description=data.get('description', ''),
            width=float(width) if width is not None else None,
            height=float(height) if height is not None else None,
            shape_points=points,
            quantity=int(data.get('quantity') or 1),
            area_basis=float(data['area_basis']) if data.get('area_basis') is not None else None,
            source_id=data.get('source_id', data.get('originalItemId')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'source_id': self.source_id,
            'material_id': self.material_id,
            'description': self.description,
            'width': self.width,
            'height': self.height,
            'shape_points': [p.as_dict() for p in self.shape_points] if self.shape_points else None,
            'quantity': self.quantity,
            'area': self.area,
            'placement': self.placement.to_dict() if self.placement else None,
        }


@dataclass(frozen=True)
class SlabSpec:
    """Raw material sheet"""
    material_id: str
    slab_width: float
    slab_height: float
    name: str = ""

    @property
    def is_valid(self) -> bool:
        return self.slab_width > 0 and self.slab_height > 0

    @property
    def total_area(self) -> float:
        """Usable area, 0 when a dimension is not positive"""
        if not self.is_valid:
            return 0.0
        return self.slab_width * self.slab_height

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SlabSpec':
        return cls(
            material_id=str(data.get('material_id', data.get('materialId', data.get('id', '')))),
            slab_width=float(data.get('slab_width', data.get('slabWidth', 0))),
            slab_height=float(data.get('slab_height', data.get('slabHeight', 0))),
            name=data.get('name', ''),
        )


@dataclass(frozen=True)
class PlacedPiece:
    """Packer output for one piece"""
    piece: PieceRequest
    placement: Placement

    @property
    def id(self) -> str:
        return self.piece.id

    @property
    def fit(self) -> bool:
        return self.placement.fit

    @property
    def area(self) -> float:
        return self.piece.width * self.piece.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.piece.id,
            'source_id': self.piece.source_id,
            'description': self.piece.description,
            'width': self.piece.width,
            'height': self.piece.height,
            **self.placement.to_dict(),
        }


@dataclass(frozen=True)
class WasteSummary:
    """Slab usage metrics"""
    total_area: float = 0.0
    used_area: float = 0.0
    waste_percentage: float = 100.0
    placed_count: int = 0
    unfit_count: int = 0

    @property
    def waste_area(self) -> float:
        return max(self.total_area - self.used_area, 0.0)

    @property
    def utilization_percentage(self) -> float:
        return 100.0 - self.waste_percentage

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_area': self.total_area,
            'used_area': self.used_area,
            'waste_area': self.waste_area,
            'waste_percentage': self.waste_percentage,
            'utilization_percentage': self.utilization_percentage,
            'placed_count': self.placed_count,
            'unfit_count': self.unfit_count,
        }


@dataclass(frozen=True)
class PackingResult:
    """Result of one packing run on one slab"""
    slab: SlabSpec
    placements: Tuple[PlacedPiece, ...] = ()
    custom_shapes: Tuple[PieceRequest, ...] = ()
    summary: WasteSummary = field(default_factory=WasteSummary)

    @property
    def used_area(self) -> float:
        return self.summary.used_area

    @property
    def waste_percentage(self) -> float:
        return self.summary.waste_percentage

    @property
    def utilization_percentage(self) -> float:
        return self.summary.utilization_percentage

    @property
    def unfit_count(self) -> int:
        return self.summary.unfit_count

    @property
    def fitted(self) -> List[PlacedPiece]:
        return [p for p in self.placements if p.fit]

    @property
    def unfitted(self) -> List[PlacedPiece]:
        return [p for p in self.placements if not p.fit]

    def placements_by_source(self) -> Dict[str, List[Placement]]:
        """Placements grouped by the quote item they were expanded from"""
        grouped: Dict[str, List[Placement]] = {}
        for placed in self.placements:
            grouped.setdefault(placed.piece.source_id, []).append(placed.placement)
        return grouped

    def placement_for(self, piece_id: str) -> Optional[Placement]:
        for placed in self.placements:
            if placed.id == piece_id:
                return placed.placement
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'material_id': self.slab.material_id,
            'slab_width': self.slab.slab_width,
            'slab_height': self.slab.slab_height,
            'placements': [p.to_dict() for p in self.placements],
            'custom_shapes': [p.id for p in self.custom_shapes],
            **self.summary.to_dict(),
        }
