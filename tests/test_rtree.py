"""
Tests for the R-tree spatial index and its point and edge specializations.
"""

import numpy as np
import pytest

from hullcarve.hulls.boundary import insert_vertex, iter_ring
from hullcarve.index.rtree import BBox, EdgeTree, PointTree, RTree


def _random_points(n, seed=42):
    rng = np.random.default_rng(seed)
    return [tuple(p) for p in rng.uniform(0, 100, (n, 2)).tolist()]


def _brute_force(points, bbox):
    return [p for p in points
            if bbox.min_x <= p[0] <= bbox.max_x and bbox.min_y <= p[1] <= bbox.max_y]


def _key(p):
    return (p[0], p[1])


class TestBulkLoad:
    """Tests for RTree.load()."""

    @pytest.mark.parametrize("n", [0, 1, 3, 16, 17, 500])
    def test_search_matches_brute_force(self, n):
        """Bulk-loaded tree returns exactly the points in the query box."""
        points = _random_points(n)
        tree = PointTree(16).load(points)
        bbox = BBox(20.0, 30.0, 70.0, 60.0)

        assert len(tree) == n
        assert sorted(tree.search(bbox), key=_key) == sorted(_brute_force(points, bbox), key=_key)

    def test_all_returns_every_item(self):
        """all() yields the same objects that were loaded."""
        points = _random_points(200)
        tree = PointTree(9).load(points)

        result = tree.all()
        assert len(result) == 200
        assert {id(p) for p in result} == {id(p) for p in points}

    def test_tree_is_balanced(self):
        """Every leaf sits at the same depth."""
        tree = PointTree(4).load(_random_points(300))

        depths = set()
        stack = [(tree.root, 1)]
        while stack:
            node, depth = stack.pop()
            if node.leaf:
                depths.add(depth)
            else:
                stack.extend((child, depth + 1) for child in node.children)

        assert len(depths) == 1
        assert depths.pop() == tree.root.height

    def test_load_merges_into_existing_tree(self):
        """A second load keeps the first batch searchable."""
        first = _random_points(100, seed=1)
        second = _random_points(40, seed=2)

        tree = PointTree(9).load(first)
        tree.load(second)

        bbox = BBox(0.0, 0.0, 100.0, 100.0)
        assert len(tree) == 140
        assert len(tree.search(bbox)) == 140

    def test_small_load_falls_back_to_insert(self):
        """Loading fewer items than the minimum fill still indexes them."""
        tree = PointTree(16).load([(1.0, 1.0)])
        assert tree.all() == [(1.0, 1.0)]


class TestInsert:
    """Tests for RTree.insert()."""

    def test_insert_matches_bulk_load(self):
        """One-by-one insertion answers queries like bulk loading."""
        points = _random_points(300)
        inserted = PointTree(6)
        for p in points:
            inserted.insert(p)
        loaded = PointTree(6).load(points)

        for bbox in (BBox(0.0, 0.0, 50.0, 50.0), BBox(10.0, 40.0, 90.0, 45.0)):
            expected = sorted(_brute_force(points, bbox), key=_key)
            assert sorted(inserted.search(bbox), key=_key) == expected
            assert sorted(loaded.search(bbox), key=_key) == expected

    def test_insert_none_is_ignored(self):
        """None is not an item."""
        tree = PointTree()
        tree.insert(None)
        assert len(tree) == 0

    def test_root_box_covers_all_items(self):
        """The root box grows with every insertion."""
        tree = PointTree(4)
        for p in [(0.0, 0.0), (5.0, -2.0), (3.0, 8.0), (-1.0, 4.0), (2.0, 2.0)]:
            tree.insert(p)

        assert (tree.root.min_x, tree.root.min_y) == (-1.0, -2.0)
        assert (tree.root.max_x, tree.root.max_y) == (5.0, 8.0)


class TestRemove:
    """Tests for RTree.remove()."""

    def test_remove_by_identity(self):
        """Removed points disappear from search results."""
        points = _random_points(200)
        tree = PointTree(9).load(points)

        for p in points[::2]:
            tree.remove(p)

        remaining = points[1::2]
        bbox = BBox(0.0, 0.0, 100.0, 100.0)
        assert len(tree) == len(remaining)
        assert sorted(tree.search(bbox), key=_key) == sorted(remaining, key=_key)

    def test_equal_but_distinct_object_is_not_removed(self):
        """Without an equality function only the same object matches."""
        p = tuple([1.5, 2.5])
        twin = tuple([1.5, 2.5])
        tree = PointTree().load([p, (3.0, 4.0), (5.0, 6.0)])

        tree.remove(twin)

        assert twin is not p
        assert len(tree) == 3

    def test_remove_with_equality_function(self):
        """A custom equality function matches by value."""
        tree = PointTree().load([(1.5, 2.5), (3.0, 4.0), (5.0, 6.0)])

        tree.remove([1.5, 2.5], equals=lambda a, b: a[0] == b[0] and a[1] == b[1])

        assert len(tree) == 2
        assert (1.5, 2.5) not in tree.all()

    def test_remove_everything_resets_tree(self):
        """Emptying the tree condenses it back to an empty leaf."""
        points = _random_points(150)
        tree = PointTree(5).load(points)

        for p in points:
            tree.remove(p)

        assert len(tree) == 0
        assert tree.all() == []
        assert tree.root.leaf
        assert tree.root.height == 1

    def test_remove_absent_item(self):
        """Removing something never inserted is a no-op."""
        tree = PointTree().load(_random_points(20))
        tree.remove((500.0, 500.0))
        tree.remove(None)
        assert len(tree) == 20


class TestQueries:
    """Tests for collides(), clear() and snapshots."""

    def test_collides(self):
        """collides() agrees with a non-empty search."""
        points = _random_points(100)
        tree = PointTree().load(points)

        hit = BBox(points[0][0], points[0][1], points[0][0], points[0][1])
        miss = BBox(200.0, 200.0, 300.0, 300.0)

        assert tree.collides(hit)
        assert not tree.collides(miss)

    def test_empty_tree_queries(self):
        """An empty tree finds nothing."""
        tree = PointTree()
        bbox = BBox(0.0, 0.0, 1.0, 1.0)
        assert tree.search(bbox) == []
        assert not tree.collides(bbox)
        assert tree.all() == []

    def test_clear(self):
        """clear() drops every item."""
        tree = PointTree().load(_random_points(50))
        tree.clear()
        assert len(tree) == 0
        assert tree.all() == []

    def test_snapshot_round_trip(self):
        """A restored tree answers the same queries."""
        points = _random_points(120)
        tree = PointTree(8).load(points)

        restored = PointTree(8).from_dict(tree.to_dict())

        bbox = BBox(25.0, 25.0, 75.0, 75.0)
        assert len(restored) == len(tree)
        assert sorted(restored.search(bbox), key=_key) == sorted(tree.search(bbox), key=_key)

    def test_boxes_compare_by_identity(self):
        """Equal bounds do not make two boxes or nodes the same."""
        a = BBox(0.0, 0.0, 1.0, 1.0)
        b = BBox(0.0, 0.0, 1.0, 1.0)
        assert a != b
        assert a == a
        assert len({a, b}) == 2

        tree = PointTree(4).load(_random_points(50))
        assert hash(tree.root) == hash(tree.root)

    def test_nodes_with_equal_boxes(self):
        """Leaves over coincident points are removed one by one."""
        points = [tuple([1.0, 1.0]) for _ in range(20)]
        tree = PointTree(4).load(points)

        for i, p in enumerate(points):
            tree.remove(p)
            assert len(tree) == 19 - i
            assert all(q is not p for q in tree.all())

        assert tree.root.leaf

    def test_plain_tree_indexes_boxes(self):
        """The base class stores items that are their own boxes."""
        boxes = [BBox(i, i, i + 2.0, i + 2.0) for i in range(30)]
        tree = RTree(4).load(boxes)

        found = tree.search(BBox(10.5, 10.5, 11.0, 11.0))
        assert sorted(b.min_x for b in found) == [9, 10, 11]


class TestEdgeTree:
    """Tests for EdgeTree.crosses()."""

    def _square_ring(self):
        corners = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
        last = None
        for p in corners:
            last = insert_vertex(p, last)

        tree = EdgeTree(4)
        for vertex in iter_ring(last):
            tree.insert(vertex.update_bbox())
        return corners, tree

    def test_segment_through_boundary_crosses(self):
        """A segment leaving the square crosses an edge."""
        _, tree = self._square_ring()
        assert tree.crosses((5.0, 5.0), (15.0, 5.0))

    def test_interior_segment_does_not_cross(self):
        """A segment strictly inside crosses nothing."""
        _, tree = self._square_ring()
        assert not tree.crosses((2.0, 2.0), (8.0, 7.0))

    def test_segment_from_vertex_does_not_cross(self):
        """Edges sharing the vertex object are not reported."""
        corners, tree = self._square_ring()
        assert not tree.crosses(corners[0], (5.0, 5.0))

    def test_removed_edge_is_not_reported(self):
        """After removal the edge no longer blocks."""
        corners = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
        last = None
        vertices = []
        for p in corners:
            last = insert_vertex(p, last)
            vertices.append(last)

        tree = EdgeTree(4)
        for vertex in vertices:
            tree.insert(vertex.update_bbox())

        tree.remove(vertices[1])  # edge (10, 0) -> (10, 10)
        assert not tree.crosses((5.0, 5.0), (15.0, 5.0))
        assert len(tree) == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
