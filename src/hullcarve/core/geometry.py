"""
Core geometry operations for points, segments and polygons.

Contains utility functions for:
- Squared distances (point-point, point-segment, segment-segment)
- Point-in-polygon testing
- Polygon area and perimeter
- Simplicity (no self-intersections) checks
"""

import numpy as np
from shapely.geometry import LinearRing, Point, Polygon


# Numerical tolerance for floating point comparisons
EPS = 1e-10


def sq_dist(p1, p2) -> float:
    """Squared distance between two points."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return dx * dx + dy * dy


def sq_seg_dist(p, p1, p2) -> float:
    """
    Squared distance from point ``p`` to the segment (p1, p2).

    Parameters
    ----------
    p, p1, p2 : sequence of float
        Points as (x, y).

    Returns
    -------
    float
        Squared Euclidean distance to the closest point of the segment.
    """
    x = p1[0]
    y = p1[1]
    dx = p2[0] - x
    dy = p2[1] - y

    if dx != 0 or dy != 0:
        t = ((p[0] - x) * dx + (p[1] - y) * dy) / (dx * dx + dy * dy)

        if t > 1:
            x = p2[0]
            y = p2[1]
        elif t > 0:
            x += dx * t
            y += dy * t

    dx = p[0] - x
    dy = p[1] - y

    return dx * dx + dy * dy


def sq_seg_seg_dist(x0, y0, x1, y1, x2, y2, x3, y3) -> float:
    """
    Squared distance between segments (x0, y0)-(x1, y1) and (x2, y2)-(x3, y3).

    Closest-point parameters are clamped to both segments (Sunday's method).
    """
    ux = x1 - x0
    uy = y1 - y0
    vx = x3 - x2
    vy = y3 - y2
    wx = x0 - x2
    wy = y0 - y2
    a = ux * ux + uy * uy
    b = ux * vx + uy * vy
    c = vx * vx + vy * vy
    d = ux * wx + uy * wy
    e = vx * wx + vy * wy
    denom = a * c - b * b

    s_d = denom
    t_d = denom

    if denom == 0:
        # parallel segments
        s_n = 0.0
        s_d = 1.0
        t_n = e
        t_d = c
    else:
        s_n = b * e - c * d
        t_n = a * e - b * d
        if s_n < 0:
            s_n = 0.0
            t_n = e
            t_d = c
        elif s_n > s_d:
            s_n = s_d
            t_n = e + b
            t_d = c

    if t_n < 0.0:
        t_n = 0.0
        if -d < 0.0:
            s_n = 0.0
        elif -d > a:
            s_n = s_d
        else:
            s_n = -d
            s_d = a
    elif t_n > t_d:
        t_n = t_d
        if (-d + b) < 0.0:
            s_n = 0.0
        elif -d + b > a:
            s_n = s_d
        else:
            s_n = -d + b
            s_d = a

    sc = 0.0 if s_n == 0 else s_n / s_d
    tc = 0.0 if t_n == 0 else t_n / t_d

    cx = (1 - sc) * x0 + sc * x1
    cy = (1 - sc) * y0 + sc * y1
    cx2 = (1 - tc) * x2 + tc * x3
    cy2 = (1 - tc) * y2 + tc * y3
    dx = cx2 - cx
    dy = cy2 - cy

    return dx * dx + dy * dy


def contains(poly: np.ndarray, points: np.ndarray) -> np.ndarray:
    """
    Test if points are inside or on a polygon (convex or concave).

    Uses Shapely for robust point-in-polygon testing that works with
    both convex and concave polygons.

    Parameters
    ----------
    poly : np.ndarray
        Polygon vertices of shape (M, 2). A closing vertex equal to the
        first one is allowed.
    points : np.ndarray
        Points to test of shape (N, 2) or (2,).

    Returns
    -------
    np.ndarray
        Boolean array of shape (N,) indicating containment.
    """
    points = np.atleast_2d(np.asarray(points, dtype=np.float64))
    poly = np.asarray(poly, dtype=np.float64)

    n_points = len(points)

    if len(poly) < 3:
        return np.zeros(n_points, dtype=bool)

    shapely_poly = Polygon(poly)

    inside = np.zeros(n_points, dtype=bool)
    for i, pt in enumerate(points):
        shapely_point = Point(pt)
        # covers() accepts both interior and boundary points
        inside[i] = shapely_poly.covers(shapely_point)

    return inside


def polygon_area(poly: np.ndarray) -> float:
    """
    Compute the area of a polygon using the shoelace formula.

    Parameters
    ----------
    poly : np.ndarray
        Polygon vertices of shape (M, 2), open or closed.

    Returns
    -------
    float
        Area of the polygon.
    """
    poly = np.asarray(poly, dtype=np.float64)
    if len(poly) < 3:
        return 0.0

    x = poly[:, 0]
    y = poly[:, 1]
    return 0.5 * abs(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def polygon_perimeter(poly: np.ndarray) -> float:
    """
    Length of the closed boundary through the polygon vertices.

    Parameters
    ----------
    poly : np.ndarray
        Polygon vertices of shape (M, 2), open or closed.

    Returns
    -------
    float
        Total edge length, including the edge back to the first vertex.
    """
    poly = np.asarray(poly, dtype=np.float64)
    if len(poly) < 2:
        return 0.0

    edges = np.roll(poly, -1, axis=0) - poly
    return float(np.sum(np.hypot(edges[:, 0], edges[:, 1])))


def is_simple(poly: np.ndarray) -> bool:
    """
    Check that a polygon ring has no self-intersections.

    Parameters
    ----------
    poly : np.ndarray
        Polygon vertices of shape (M, 2), open or closed.

    Returns
    -------
    bool
        True if the ring is simple.
    """
    poly = np.asarray(poly, dtype=np.float64)
    if len(poly) < 3:
        return False
    return bool(LinearRing(poly).is_simple)
