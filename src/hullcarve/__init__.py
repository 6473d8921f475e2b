"""
hullcarve - Concave hulls of 2D point sets.

This package computes concave hulls that:
- Wrap the points more tightly than the convex hull
- Are simple polygons whose vertices are all input points
- Are tuned by a concavity factor and a minimum edge length
- Stay valid near degeneracies thanks to exact orientation tests

Main Functions
--------------
concave_hull : Carve a concave hull out of the convex hull
hull_stats : Diagnostic statistics for a hull
convex_hull : Plain convex hull (monotone chain)
orient2d : Exact orientation predicate
contains : Test point containment in a polygon

Example
-------
>>> import numpy as np
>>> from hullcarve import concave_hull, contains

>>> points = np.random.rand(200, 2)
>>> hull = concave_hull(points, concavity=2.0)
>>> inside = contains(hull, points)
"""

from .core.errors import InvalidInputError
from .core.geometry import contains, polygon_area, polygon_perimeter, is_simple
from .core.predicates import orient2d, orient
from .hulls.concave import concave_hull, hull_stats
from .hulls.convex import convex_hull, fast_convex_hull
from .index.heap import PriorityQueue
from .index.partition import quickselect, multi_select
from .index.rtree import BBox, RTree, PointTree, EdgeTree

__all__ = [
    # Hulls
    'concave_hull',
    'hull_stats',
    'convex_hull',
    'fast_convex_hull',
    # Predicates
    'orient2d',
    'orient',
    # Indexing
    'BBox',
    'RTree',
    'PointTree',
    'EdgeTree',
    'PriorityQueue',
    'quickselect',
    'multi_select',
    # Geometry
    'contains',
    'polygon_area',
    'polygon_perimeter',
    'is_simple',
    # Errors
    'InvalidInputError',
]
