"""
Core geometry operations and predicates.
"""

from .errors import InvalidInputError
from .geometry import (
    EPS,
    sq_dist,
    sq_seg_dist,
    sq_seg_seg_dist,
    contains,
    polygon_area,
    polygon_perimeter,
    is_simple,
)
from .predicates import orient2d, orient, segments_cross

__all__ = [
    'InvalidInputError',
    'EPS',
    'sq_dist',
    'sq_seg_dist',
    'sq_seg_seg_dist',
    'contains',
    'polygon_area',
    'polygon_perimeter',
    'is_simple',
    'orient2d',
    'orient',
    'segments_cross',
]
