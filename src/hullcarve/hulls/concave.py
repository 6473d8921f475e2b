"""
Concave Hull Module

Carves a concave hull out of the convex hull of a point set:
- Seeds a boundary ring from the convex hull
- Indexes interior points and boundary edges in R-trees
- Repeatedly replaces an edge (a, b) by (a, p), (p, b) through the nearest
  admissible interior point p, while the concavity measure allows it
- Rejects any carve that would make the boundary touch itself or leave a
  remaining point outside, using the exact orientation predicate

The result is a simple counter-clockwise polygon whose vertices are all
input points.
"""

import logging
import math
from collections import deque
from typing import NamedTuple, Optional

import numpy as np

from ..core.errors import InvalidInputError
from ..core.geometry import (
    contains,
    is_simple,
    polygon_area,
    polygon_perimeter,
    sq_dist,
    sq_seg_dist,
    sq_seg_seg_dist,
)
from ..core.predicates import orient
from ..index.heap import PriorityQueue
from ..index.rtree import BBox, EdgeTree, PointTree
from .boundary import insert_vertex, ring_points
from .convex import convex_hull, fast_convex_hull

logger = logging.getLogger(__name__)

# Node fan-out of the two indices. The point tree is bulk-loaded once and
# then only shrinks; the edge tree takes one insert per new edge.
POINT_TREE_MAX_ENTRIES = 16
EDGE_TREE_MAX_ENTRIES = 16


class _Candidate(NamedTuple):
    dist: float
    item: object
    is_point: bool


def _candidate_dist(candidate: _Candidate) -> float:
    return candidate.dist


def _validate_points(points) -> np.ndarray:
    try:
        points = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Points must be numeric of shape (N, 2): {e}") from e

    if points.ndim != 2 or points.shape[1] != 2:
        raise InvalidInputError(f"Expected points of shape (N, 2), got {points.shape}")

    n_points = len(points)

    if n_points < 3:
        raise InvalidInputError(f"Need at least 3 points, got {n_points}")

    if not np.all(np.isfinite(points)):
        raise InvalidInputError("Point coordinates must be finite")

    return points


def _validate_parameter(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError(f"{name} must be a finite value >= 0, got {value}")
    return value


def _unique_points(points: np.ndarray) -> list:
    """Point tuples in input order, keeping the first of exact duplicates."""
    unique = {}
    for x, y in points.tolist():
        key = (x, y)
        if key not in unique:
            unique[key] = key
    return list(unique.values())


def _inside(p, bbox) -> bool:
    return (bbox.min_x <= p[0] <= bbox.max_x and
            bbox.min_y <= p[1] <= bbox.max_y)


def _sq_seg_box_dist(a, b, bbox) -> float:
    """Lower bound of the squared distance from segment (a, b) to anything in ``bbox``."""
    if _inside(a, bbox) or _inside(b, bbox):
        return 0.0
    d1 = sq_seg_seg_dist(a[0], a[1], b[0], b[1], bbox.min_x, bbox.min_y, bbox.max_x, bbox.min_y)
    if d1 == 0:
        return 0.0
    d2 = sq_seg_seg_dist(a[0], a[1], b[0], b[1], bbox.min_x, bbox.min_y, bbox.min_x, bbox.max_y)
    if d2 == 0:
        return 0.0
    d3 = sq_seg_seg_dist(a[0], a[1], b[0], b[1], bbox.max_x, bbox.min_y, bbox.max_x, bbox.max_y)
    if d3 == 0:
        return 0.0
    d4 = sq_seg_seg_dist(a[0], a[1], b[0], b[1], bbox.min_x, bbox.max_y, bbox.max_x, bbox.max_y)
    if d4 == 0:
        return 0.0
    return min(d1, d2, d3, d4)


def _triangle_is_empty(tree: PointTree, a, b, p) -> bool:
    """
    Check that carving edge (a, b) to p cuts off no remaining point.

    The region given up is triangle (a, b, p) without the new edges
    (a, p) and (p, b). Points on (a, b) itself would end up outside.
    """
    bbox = BBox(min(a[0], b[0], p[0]), min(a[1], b[1], p[1]),
                max(a[0], b[0], p[0]), max(a[1], b[1], p[1]))

    for q in tree.search(bbox):
        if q is p:
            continue
        if orient(a, b, q) >= 0 and orient(b, p, q) > 0 and orient(p, a, q) > 0:
            return False
    return True


def _find_candidate(
    tree: PointTree,
    a,
    b,
    c,
    d,
    max_sq_dist: float,
    seg_tree: EdgeTree
) -> Optional[tuple]:
    """
    Find the interior point to carve edge (b, c) towards.

    Best-first search of the point tree in order of squared distance to
    (b, c), pruning everything farther than ``max_sq_dist``. A point is
    admissible only if it is strictly closer to (b, c) than to both
    neighbouring edges (a, b) and (c, d), neither new edge (b, p) nor
    (c, p) touches the boundary, and no other remaining point lies in the
    triangle (b, c, p) that the carve would cut off.

    Returns
    -------
    tuple or None
        The closest admissible point, or None if there is none.
    """
    queue = PriorityQueue(key=_candidate_dist)
    node = tree.root

    while node is not None:
        for child in node.children:
            if node.leaf:
                dist = sq_seg_dist(child, b, c)
            else:
                dist = _sq_seg_box_dist(b, c, child)
            if dist > max_sq_dist:
                continue  # farther than we ever need

            queue.push(_Candidate(dist, child, node.leaf))

        while queue and queue.peek().is_point:
            candidate = queue.pop()
            p = candidate.item

            # ties go to the neighbouring edge
            d0 = sq_seg_dist(p, a, b)
            d1 = sq_seg_dist(p, c, d)
            if (candidate.dist < d0 and candidate.dist < d1 and
                    not seg_tree.crosses(b, p) and
                    not seg_tree.crosses(c, p) and
                    _triangle_is_empty(tree, b, c, p)):
                return p

        candidate = queue.pop()
        node = candidate.item if candidate is not None else None

    return None


def concave_hull(
    points: np.ndarray,
    concavity: float = 2.0,
    length_threshold: float = 0.0
) -> np.ndarray:
    """
    Compute the concave hull of a 2D point set.

    Parameters
    ----------
    points : np.ndarray
        Array of shape (N, 2) containing at least 3 distinct, non-collinear
        points.
    concavity : float
        Relative measure of concavity, >= 0. Default 2. Smaller values
        carve deeper (0 carves as far as the crossing constraints allow);
        large values approach the convex hull.
    length_threshold : float
        Edges shorter than this are never carved further, >= 0. Default 0.
        Larger values trade detail for speed.

    Returns
    -------
    np.ndarray
        Hull vertices of shape (K + 1, 2) in counter-clockwise order, with
        the first vertex repeated as the last to close the ring. Every
        vertex is one of the input points.

    Raises
    ------
    InvalidInputError
        If points has the wrong shape, has fewer than 3 distinct points,
        has non-finite coordinates or is collinear, or if a parameter is
        negative or non-finite.

    Examples
    --------
    >>> square = [(0, 0), (10, 0), (10, 10), (0, 10), (5, 5)]
    >>> concave_hull(square, concavity=0).shape
    (5, 2)
    """
    points = _validate_points(points)
    concavity = _validate_parameter("concavity", concavity)
    length_threshold = _validate_parameter("length_threshold", length_threshold)

    unique = _unique_points(points)
    if len(unique) < 3:
        raise InvalidInputError(f"Need at least 3 distinct points, got {len(unique)}")

    # start with a convex hull of the points
    hull = fast_convex_hull(unique)
    if len(hull) < 3:
        raise InvalidInputError("Points are collinear; the hull has no interior")

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Concave hull of %d points (%d duplicates dropped), convex hull has %d vertices",
            len(points), len(points) - len(unique), len(hull),
        )

    # index the points with an R-tree
    tree = PointTree(POINT_TREE_MAX_ENTRIES)
    tree.load(unique)

    # turn the convex hull into a linked list and populate the initial edge queue
    queue = deque()
    last = None
    for p in hull:
        tree.remove(p)
        last = insert_vertex(p, last)
        queue.append(last)

    # index the segments with an R-tree (for intersection checks)
    seg_tree = EdgeTree(EDGE_TREE_MAX_ENTRIES)
    for vertex in queue:
        seg_tree.insert(vertex.update_bbox())

    logger.debug("Seeded %d interior candidates and %d boundary edges", len(tree), len(seg_tree))

    sq_concavity = concavity * concavity
    sq_len_threshold = length_threshold * length_threshold
    carves = 0
    finalized = 0

    # process edges one by one
    while queue:
        vertex = queue.popleft()
        a = vertex.p
        b = vertex.next.p

        # skip the edge if it's already short enough
        sq_len = sq_dist(a, b)
        if sq_len < sq_len_threshold:
            finalized += 1
            continue

        max_sq_len = sq_len / sq_concavity if sq_concavity > 0 else math.inf

        # find the best connection point for the current edge to flex inward to
        p = _find_candidate(tree, vertex.prev.p, a, b, vertex.next.next.p, max_sq_len, seg_tree)

        # if we found a connection and it satisfies our concavity measure
        if p is not None and min(sq_dist(p, a), sq_dist(p, b)) <= max_sq_len:
            # connect the edge endpoints through this point and queue both new edges
            queue.append(vertex)
            queue.append(insert_vertex(p, vertex))

            # update point and segment indexes
            tree.remove(p)
            seg_tree.remove(vertex)
            seg_tree.insert(vertex.update_bbox())
            seg_tree.insert(vertex.next.update_bbox())
            carves += 1
        else:
            finalized += 1

    logger.debug("Carved %d points; %d edges finalized", carves, finalized)

    return np.array(ring_points(last), dtype=np.float64)


def hull_stats(hull: np.ndarray, points: np.ndarray) -> dict:
    """
    Compute diagnostic statistics for a hull.

    Parameters
    ----------
    hull : np.ndarray
        Hull vertices of shape (M, 2), open or closed.
    points : np.ndarray
        Data points of shape (N, 2).

    Returns
    -------
    dict
        Statistics including:
        - fraction_contained: Fraction of points inside or on the hull
        - num_vertices: Number of distinct hull vertices
        - area: Hull area
        - perimeter: Hull perimeter
        - convex_area: Area of the convex hull of the points
        - convex_perimeter: Perimeter of the convex hull of the points
        - is_simple: Whether the hull boundary has no self-intersections
        - points_inside: Count of points inside
        - points_outside: Count of points outside
    """
    hull = np.asarray(hull, dtype=np.float64)
    points = np.atleast_2d(np.asarray(points, dtype=np.float64))

    if len(hull) > 1 and np.array_equal(hull[0], hull[-1]):
        ring = hull[:-1]
    else:
        ring = hull

    inside_mask = contains(ring, points)
    convex = np.array(convex_hull(_unique_points(points)), dtype=np.float64)

    return {
        'fraction_contained': float(np.mean(inside_mask)),
        'num_vertices': len(ring),
        'area': float(polygon_area(ring)),
        'perimeter': float(polygon_perimeter(ring)),
        'convex_area': float(polygon_area(convex)),
        'convex_perimeter': float(polygon_perimeter(convex)),
        'is_simple': is_simple(ring),
        'points_inside': int(np.sum(inside_mask)),
        'points_outside': int(np.sum(~inside_mask)),
    }
