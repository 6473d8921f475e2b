"""
Spatial indexing and ordering primitives.
"""

from .heap import PriorityQueue
from .partition import quickselect, multi_select
from .rtree import BBox, RTree, PointTree, EdgeTree

__all__ = [
    'PriorityQueue',
    'quickselect',
    'multi_select',
    'BBox',
    'RTree',
    'PointTree',
    'EdgeTree',
]
