"""
Boundary Model

The evolving hull polygon as a circular doubly linked list. Each vertex
also carries the bounding box of the edge to its successor, which is the
entry stored in the edge index.
"""

from typing import Iterator, List, Optional, Tuple

Point = Tuple[float, float]


class BoundaryVertex:
    """
    Vertex of the boundary ring.

    Attributes
    ----------
    p : tuple of float
        The input point this vertex refers to.
    prev, next : BoundaryVertex
        Neighbours in ring order (counter-clockwise for hulls).
    min_x, min_y, max_x, max_y : float
        Cached box of the edge ``(p, next.p)``; refreshed by update_bbox().
    """

    def __init__(self, p: Point):
        self.p = p
        self.prev = self
        self.next = self
        self.min_x = 0.0
        self.min_y = 0.0
        self.max_x = 0.0
        self.max_y = 0.0

    def update_bbox(self) -> "BoundaryVertex":
        """Recompute the cached box of the outgoing edge and return self."""
        p1 = self.p
        p2 = self.next.p
        self.min_x = min(p1[0], p2[0])
        self.min_y = min(p1[1], p2[1])
        self.max_x = max(p1[0], p2[0])
        self.max_y = max(p1[1], p2[1])
        return self

    def __repr__(self) -> str:
        return f"BoundaryVertex({self.p!r} -> {self.next.p!r})"


def insert_vertex(p: Point, prev: Optional[BoundaryVertex] = None) -> BoundaryVertex:
    """
    Create a vertex for ``p`` and splice it in after ``prev``.

    With no ``prev`` the vertex forms a ring of one, linked to itself.
    """
    vertex = BoundaryVertex(p)

    if prev is not None:
        vertex.next = prev.next
        vertex.prev = prev
        prev.next.prev = vertex
        prev.next = vertex

    return vertex


def iter_ring(start: BoundaryVertex) -> Iterator[BoundaryVertex]:
    """Yield each vertex of the ring once, beginning at ``start``."""
    vertex = start
    while True:
        yield vertex
        vertex = vertex.next
        if vertex is start:
            break


def ring_points(start: BoundaryVertex, close: bool = True) -> List[Point]:
    """
    Points of the ring in order from ``start``.

    If ``close`` is True the start point is repeated at the end.
    """
    points = [vertex.p for vertex in iter_ring(start)]
    if close:
        points.append(start.p)
    return points
