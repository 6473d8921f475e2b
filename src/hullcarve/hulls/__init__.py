"""
Hull construction algorithms.
"""

from .boundary import BoundaryVertex, insert_vertex, iter_ring, ring_points
from .convex import convex_hull, fast_convex_hull
from .concave import concave_hull, hull_stats

__all__ = [
    'BoundaryVertex',
    'insert_vertex',
    'iter_ring',
    'ring_points',
    'convex_hull',
    'fast_convex_hull',
    'concave_hull',
    'hull_stats',
]
