"""
Convex Hull Module

Seeds the concave hull with the plain convex hull:
- Andrew's monotone chain with exact turn tests
- An extreme-point quadrilateral pre-filter that drops points which
  cannot be hull vertices before sorting
"""

from typing import List, Sequence, Tuple

import numpy as np
import shapely
from shapely.geometry import Polygon

from ..core.predicates import orient

Point = Tuple[float, float]


def convex_hull(points: Sequence[Point]) -> List[Point]:
    """
    Convex hull by Andrew's monotone chain.

    Parameters
    ----------
    points : sequence of tuple
        Points as ``(x, y)`` tuples. Returned vertices are the same
        objects, not copies.

    Returns
    -------
    list of tuple
        Hull vertices in counter-clockwise order, starting from the
        lowest-x (then lowest-y) point, without repeating it. Collinear
        boundary points are not included.
    """
    ordered = sorted(points, key=lambda p: (p[0], p[1]))

    lower: List[Point] = []
    for p in ordered:
        while len(lower) >= 2 and orient(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: List[Point] = []
    for p in reversed(ordered):
        while len(upper) >= 2 and orient(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    upper.pop()
    lower.pop()
    return lower + upper


def fast_convex_hull(points: Sequence[Point]) -> List[Point]:
    """
    Convex hull with interior culling.

    The leftmost, topmost, rightmost and bottommost points span a
    quadrilateral inside the hull; points strictly inside it are dropped
    before running :func:`convex_hull` on the rest.

    Parameters
    ----------
    points : sequence of tuple
        Points as ``(x, y)`` tuples.

    Returns
    -------
    list of tuple
        Hull vertices in counter-clockwise order.
    """
    left = top = right = bottom = points[0]

    for p in points:
        if p[0] < left[0]:
            left = p
        if p[0] > right[0]:
            right = p
        if p[1] < top[1]:
            top = p
        if p[1] > bottom[1]:
            bottom = p

    cull = [left, top, right, bottom]
    quad = Polygon(cull)

    coords = np.asarray(points, dtype=np.float64)
    inside = shapely.contains_xy(quad, coords[:, 0], coords[:, 1])

    cull_ids = {id(p) for p in cull}
    filtered = list({id(p): p for p in cull}.values())
    filtered.extend(
        p for p, is_inside in zip(points, inside)
        if not is_inside and id(p) not in cull_ids
    )

    return convex_hull(filtered)
