"""Domain layer: field, shapes, cyclic generators, and cycle detection."""

from rockfall.domain.cycle import CycleDetector, Extrapolation, Sighting, encode_fingerprint
from rockfall.domain.field import Coordinate, OccupancyField
from rockfall.domain.generators import (
    CyclicGenerator,
    PushPatternGenerator,
    ShapeGenerator,
    parse_push_pattern,
    validate_push_pattern,
)
from rockfall.domain.shapes import SHAPE_CATALOG, Placement, Shape

__all__ = [
    "Coordinate",
    "CycleDetector",
    "CyclicGenerator",
    "Extrapolation",
    "OccupancyField",
    "Placement",
    "PushPatternGenerator",
    "SHAPE_CATALOG",
    "Shape",
    "ShapeGenerator",
    "Sighting",
    "encode_fingerprint",
    "parse_push_pattern",
    "validate_push_pattern",
]
