"""
Unit tests for core geometry module.
"""

import math

import numpy as np
import pytest

from hullcarve.core.geometry import (
    EPS,
    contains,
    is_simple,
    polygon_area,
    polygon_perimeter,
    sq_dist,
    sq_seg_dist,
    sq_seg_seg_dist,
)


class TestSquaredDistances:
    """Tests for the point and segment distance helpers."""

    def test_sq_dist(self):
        """3-4-5 triangle gives squared distance 25."""
        assert sq_dist((0.0, 0.0), (3.0, 4.0)) == 25.0

    def test_point_projects_inside_segment(self):
        """Perpendicular foot inside the segment."""
        assert abs(sq_seg_dist((5.0, 3.0), (0.0, 0.0), (10.0, 0.0)) - 9.0) < EPS

    def test_point_beyond_segment_end(self):
        """Closest point clamps to the far endpoint."""
        assert abs(sq_seg_dist((13.0, 4.0), (0.0, 0.0), (10.0, 0.0)) - 25.0) < EPS

    def test_point_before_segment_start(self):
        """Closest point clamps to the near endpoint."""
        assert abs(sq_seg_dist((-1.0, 1.0), (0.0, 0.0), (10.0, 0.0)) - 2.0) < EPS

    def test_degenerate_segment(self):
        """Zero-length segment behaves like a point."""
        assert sq_seg_dist((1.0, 1.0), (0.0, 0.0), (0.0, 0.0)) == 2.0

    def test_crossing_segments_have_zero_distance(self):
        """Segments forming an X touch."""
        assert sq_seg_seg_dist(0, 0, 2, 2, 0, 2, 2, 0) == 0.0

    def test_parallel_segments(self):
        """Parallel horizontal segments one unit apart."""
        assert abs(sq_seg_seg_dist(0, 0, 4, 0, 1, 1, 3, 1) - 1.0) < EPS

    def test_disjoint_collinear_segments(self):
        """Collinear segments separated by a gap of 2."""
        assert abs(sq_seg_seg_dist(0, 0, 1, 0, 3, 0, 5, 0) - 4.0) < EPS

    def test_segment_to_segment_matches_brute_force(self):
        """Compare with dense sampling on random segments."""
        rng = np.random.default_rng(42)
        for _ in range(20):
            x0, y0, x1, y1, x2, y2, x3, y3 = rng.uniform(-5, 5, 8)
            exact = sq_seg_seg_dist(x0, y0, x1, y1, x2, y2, x3, y3)

            t = np.linspace(0.0, 1.0, 201)
            s1 = np.column_stack([x0 + t * (x1 - x0), y0 + t * (y1 - y0)])
            best = min(sq_seg_dist(p, (x2, y2), (x3, y3)) for p in s1)

            assert exact <= best + 1e-9
            assert math.sqrt(best) - math.sqrt(exact) < 0.05


class TestPolygonArea:
    """Tests for polygon_area() function."""

    def test_unit_square(self):
        """Unit square should have area 1."""
        square = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        assert abs(polygon_area(square) - 1.0) < EPS

    def test_triangle(self):
        """Triangle with base 2 and height 2 should have area 2."""
        triangle = np.array([[0, 0], [2, 0], [1, 2]], dtype=float)
        assert abs(polygon_area(triangle) - 2.0) < EPS

    def test_degenerate_polygon(self):
        """Polygon with < 3 vertices should have area 0."""
        line = np.array([[0, 0], [1, 1]], dtype=float)
        assert polygon_area(line) == 0.0

    def test_closed_ring_same_area(self):
        """Repeating the first vertex does not change the area."""
        square = np.array([[0, 0], [2, 0], [2, 2], [0, 2]], dtype=float)
        closed = np.vstack([square, square[:1]])
        assert abs(polygon_area(closed) - polygon_area(square)) < EPS

    def test_order_invariant(self):
        """Area should be same regardless of vertex order (CCW vs CW)."""
        ccw_square = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        cw_square = np.array([[0, 0], [0, 1], [1, 1], [1, 0]], dtype=float)
        assert abs(polygon_area(ccw_square) - polygon_area(cw_square)) < EPS


class TestPolygonPerimeter:
    """Tests for polygon_perimeter() function."""

    def test_unit_square(self):
        """Unit square has perimeter 4."""
        square = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        assert abs(polygon_perimeter(square) - 4.0) < EPS

    def test_closed_ring_same_perimeter(self):
        """The zero-length closing edge adds nothing."""
        triangle = np.array([[0, 0], [3, 0], [0, 4], [0, 0]], dtype=float)
        assert abs(polygon_perimeter(triangle) - 12.0) < EPS


class TestIsSimple:
    """Tests for is_simple() function."""

    def test_square_is_simple(self):
        """A square has no self-intersections."""
        square = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        assert is_simple(square)

    def test_bowtie_is_not_simple(self):
        """Crossed quadrilateral is rejected."""
        bowtie = np.array([[0, 0], [1, 1], [1, 0], [0, 1]], dtype=float)
        assert not is_simple(bowtie)

    def test_too_few_vertices(self):
        """A segment is not a polygon."""
        assert not is_simple(np.array([[0, 0], [1, 1]], dtype=float))


class TestContains:
    """Tests for contains() function."""

    def test_simple_containment(self):
        """Basic containment test."""
        square = np.array([[-1, -1], [1, -1], [1, 1], [-1, 1]], dtype=float)

        # Point inside
        assert contains(square, np.array([[0, 0]]))[0]

        # Point outside
        assert not contains(square, np.array([[5, 5]]))[0]

    def test_boundary_points_count_as_inside(self):
        """Vertices and edge points are contained."""
        square = np.array([[0, 0], [2, 0], [2, 2], [0, 2]], dtype=float)
        result = contains(square, np.array([[0, 0], [1, 0], [2, 1]]))
        assert result.all()

    def test_single_point_input(self):
        """A (2,) point is accepted."""
        square = np.array([[0, 0], [2, 0], [2, 2], [0, 2]], dtype=float)
        assert contains(square, np.array([1.0, 1.0])).shape == (1,)

    def test_concave_polygon(self):
        """Test containment in concave polygon (L-shape)."""
        # L-shaped polygon
        l_shape = np.array([
            [0, 0], [2, 0], [2, 1], [1, 1], [1, 2], [0, 2]
        ], dtype=float)

        # Point in the "leg" of L
        assert contains(l_shape, np.array([[0.5, 0.5]]))[0]

        # Point in the "foot" of L
        assert contains(l_shape, np.array([[0.5, 1.5]]))[0]

        # Point in the "notch" (should be outside)
        assert not contains(l_shape, np.array([[1.5, 1.5]]))[0]

    def test_degenerate_polygon_contains_nothing(self):
        """Fewer than 3 vertices contains no points."""
        line = np.array([[0, 0], [1, 1]], dtype=float)
        assert not contains(line, np.array([[0.5, 0.5]])).any()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
