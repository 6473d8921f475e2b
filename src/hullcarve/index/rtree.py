"""
R-tree Spatial Index

Balanced bounding-box tree for 2D items:
- Bulk loading by Overlap-Minimizing Top-down (OMT) tile packing
- Insertion with least-enlargement descent and R*-style node splits
- Removal by identity with upward condensing
- Overlap search with an explicit stack (no recursion)
- Snapshot/restore as nested dicts

Items are opaque; the tree asks ``to_bbox(item)`` for their bounds and
``min_x(item)`` / ``min_y(item)`` for bulk-load ordering. Subclass to index
other item types (see PointTree and EdgeTree).
"""

import math
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..core.predicates import segments_cross
from .partition import multi_select


@dataclass(eq=False)
class BBox:
    """
    Axis-aligned bounding box.

    The default instance is empty (inverted infinite bounds) so that
    extending it by any box yields that box.
    """
    min_x: float = math.inf
    min_y: float = math.inf
    max_x: float = -math.inf
    max_y: float = -math.inf


@dataclass(eq=False)
class _Node(BBox):
    children: List[Any] = field(default_factory=list)
    height: int = 1
    leaf: bool = True


_node_min_x = attrgetter("min_x")
_node_min_y = attrgetter("min_y")


def _extend(a, b):
    a.min_x = min(a.min_x, b.min_x)
    a.min_y = min(a.min_y, b.min_y)
    a.max_x = max(a.max_x, b.max_x)
    a.max_y = max(a.max_y, b.max_y)
    return a


def _dist_bbox(node: _Node, k: int, p: int, to_bbox, dest=None):
    """Bounding box of ``node.children[k:p]``, written into ``dest``."""
    if dest is None:
        dest = BBox()
    dest.min_x = math.inf
    dest.min_y = math.inf
    dest.max_x = -math.inf
    dest.max_y = -math.inf

    for child in node.children[k:p]:
        _extend(dest, to_bbox(child) if node.leaf else child)

    return dest


def _calc_bbox(node: _Node, to_bbox) -> None:
    _dist_bbox(node, 0, len(node.children), to_bbox, node)


def _bbox_area(a) -> float:
    return (a.max_x - a.min_x) * (a.max_y - a.min_y)


def _bbox_margin(a) -> float:
    return (a.max_x - a.min_x) + (a.max_y - a.min_y)


def _enlarged_area(a, b) -> float:
    return ((max(b.max_x, a.max_x) - min(b.min_x, a.min_x)) *
            (max(b.max_y, a.max_y) - min(b.min_y, a.min_y)))


def _intersection_area(a, b) -> float:
    min_x = max(a.min_x, b.min_x)
    min_y = max(a.min_y, b.min_y)
    max_x = min(a.max_x, b.max_x)
    max_y = min(a.max_y, b.max_y)

    return max(0.0, max_x - min_x) * max(0.0, max_y - min_y)


def _contains(a, b) -> bool:
    return (a.min_x <= b.min_x and
            a.min_y <= b.min_y and
            b.max_x <= a.max_x and
            b.max_y <= a.max_y)


def _intersects(a, b) -> bool:
    return (b.min_x <= a.max_x and
            b.min_y <= a.max_y and
            b.max_x >= a.min_x and
            b.max_y >= a.min_y)


def _index_of(item, items: List[Any], equals: Optional[Callable[[Any, Any], bool]]) -> int:
    if equals is None:
        for i, candidate in enumerate(items):
            if candidate is item:
                return i
        return -1

    for i, candidate in enumerate(items):
        if equals(item, candidate):
            return i
    return -1


class RTree:
    """
    Balanced bounding-box tree.

    Parameters
    ----------
    max_entries : int
        Maximum children per node (M), at least 4. Minimum fill is
        ``max(2, ceil(0.4 * M))``. Small values favour insertion-heavy
        use, larger ones favour trees built once and queried often.

    Attributes
    ----------
    root : _Node
        Root node; an empty leaf when the tree is empty.
    """

    def __init__(self, max_entries: int = 9):
        self._max_entries = max(4, max_entries)
        self._min_entries = max(2, math.ceil(self._max_entries * 0.4))
        self.clear()

    # Item protocol, overridden by subclasses

    def to_bbox(self, item):
        return item

    def min_x(self, item) -> float:
        return item.min_x

    def min_y(self, item) -> float:
        return item.min_y

    # Queries

    def all(self) -> List[Any]:
        """Return every item in the tree."""
        return self._all(self.root, [])

    def search(self, bbox) -> List[Any]:
        """
        Return all items whose boxes intersect ``bbox`` (boundaries inclusive).

        Subtrees fully inside ``bbox`` are collected without per-item tests.
        """
        node = self.root
        result = []

        if not _intersects(bbox, node):
            return result

        to_bbox = self.to_bbox
        nodes_to_search = []

        while node is not None:
            for child in node.children:
                child_bbox = to_bbox(child) if node.leaf else child

                if _intersects(bbox, child_bbox):
                    if node.leaf:
                        result.append(child)
                    elif _contains(bbox, child_bbox):
                        self._all(child, result)
                    else:
                        nodes_to_search.append(child)
            node = nodes_to_search.pop() if nodes_to_search else None

        return result

    def collides(self, bbox) -> bool:
        """Return True if any item's box intersects ``bbox``."""
        node = self.root

        if not _intersects(bbox, node):
            return False

        nodes_to_search = []
        while node is not None:
            for child in node.children:
                child_bbox = self.to_bbox(child) if node.leaf else child

                if _intersects(bbox, child_bbox):
                    if node.leaf or _contains(bbox, child_bbox):
                        return True
                    nodes_to_search.append(child)
            node = nodes_to_search.pop() if nodes_to_search else None

        return False

    def __len__(self) -> int:
        return self._size

    # Mutation

    def load(self, items: Iterable[Any]) -> "RTree":
        """
        Bulk-insert items.

        Much faster than repeated ``insert`` and gives better query
        locality. Loading into a non-empty tree merges the packed subtree
        into the existing one.
        """
        items = list(items)
        if not items:
            return self

        if len(items) < self._min_entries:
            for item in items:
                self.insert(item)
            return self

        node = self._build(items, 0, len(items) - 1, 0)
        self._size += len(items)

        if not self.root.children:
            # save as is if tree is empty
            self.root = node

        elif self.root.height == node.height:
            # split root if trees have the same height
            self._split_root(self.root, node)

        else:
            if self.root.height < node.height:
                # swap trees if inserted one is bigger
                self.root, node = node, self.root

            # insert the small tree into the large tree at appropriate level
            self._insert(node, self.root.height - node.height - 1, is_node=True)

        return self

    def insert(self, item) -> "RTree":
        if item is not None:
            self._insert(item, self.root.height - 1)
            self._size += 1
        return self

    def clear(self) -> "RTree":
        self.root = _Node()
        self._size = 0
        return self

    def remove(self, item, equals: Optional[Callable[[Any, Any], bool]] = None) -> "RTree":
        """
        Remove ``item`` if present.

        Matching is by identity unless ``equals(item, candidate)`` is given.
        Only subtrees whose box contains the item's box are visited.
        Removing an absent item does nothing.
        """
        if item is None:
            return self

        node = self.root
        bbox = self.to_bbox(item)
        path = []
        indexes = []
        i = 0
        parent = None
        going_up = False

        # depth-first iterative tree traversal
        while node is not None or path:

            if node is None:  # go up
                node = path.pop()
                parent = path[-1] if path else None
                i = indexes.pop()
                going_up = True

            if node.leaf:
                index = _index_of(item, node.children, equals)

                if index != -1:
                    # item found, remove the item and condense tree upwards
                    del node.children[index]
                    path.append(node)
                    self._size -= 1
                    self._condense(path)
                    return self

            if not going_up and not node.leaf and _contains(node, bbox):  # go down
                path.append(node)
                indexes.append(i)
                i = 0
                parent = node
                node = node.children[0] if node.children else None

            elif parent is not None:  # go right
                i += 1
                node = parent.children[i] if i < len(parent.children) else None
                going_up = False

            else:
                node = None  # nothing found

        return self

    # Snapshot

    def to_dict(self) -> Dict[str, Any]:
        """Nested-dict snapshot of the tree; leaf items are stored as-is."""
        return self._node_to_dict(self.root)

    def from_dict(self, data: Dict[str, Any]) -> "RTree":
        """Replace the tree contents with a snapshot from ``to_dict``."""
        self.root = self._node_from_dict(data)
        self._size = len(self.all())
        return self

    def _node_to_dict(self, node: _Node) -> Dict[str, Any]:
        children = node.children if node.leaf else [self._node_to_dict(c) for c in node.children]
        return {
            'children': list(children),
            'height': node.height,
            'leaf': node.leaf,
            'min_x': node.min_x,
            'min_y': node.min_y,
            'max_x': node.max_x,
            'max_y': node.max_y,
        }

    def _node_from_dict(self, data: Dict[str, Any]) -> _Node:
        if data['leaf']:
            children = list(data['children'])
        else:
            children = [self._node_from_dict(c) for c in data['children']]
        return _Node(
            min_x=data['min_x'],
            min_y=data['min_y'],
            max_x=data['max_x'],
            max_y=data['max_y'],
            children=children,
            height=data['height'],
            leaf=data['leaf'],
        )

    # Internals

    def _all(self, node: _Node, result: List[Any]) -> List[Any]:
        nodes_to_search = []
        while node is not None:
            if node.leaf:
                result.extend(node.children)
            else:
                nodes_to_search.extend(node.children)
            node = nodes_to_search.pop() if nodes_to_search else None
        return result

    def _build(self, items: List[Any], left: int, right: int, height: int) -> _Node:
        n = right - left + 1
        m = self._max_entries

        if n <= m:
            # reached leaf level; return leaf
            node = _Node(children=items[left:right + 1])
            _calc_bbox(node, self.to_bbox)
            return node

        if not height:
            # target height of the bulk-loaded tree
            height = math.ceil(math.log(n) / math.log(m))

            # target number of root entries to maximize storage utilization
            m = math.ceil(n / m ** (height - 1))

        node = _Node(height=height, leaf=False)

        # split the items into m mostly square tiles
        n2 = math.ceil(n / m)
        n1 = n2 * math.ceil(math.sqrt(m))

        multi_select(items, left, right, n1, self.min_x)

        for i in range(left, right + 1, n1):
            right2 = min(i + n1 - 1, right)

            multi_select(items, i, right2, n2, self.min_y)

            for j in range(i, right2 + 1, n2):
                right3 = min(j + n2 - 1, right2)

                # pack each entry recursively
                node.children.append(self._build(items, j, right3, height - 1))

        _calc_bbox(node, self.to_bbox)

        return node

    def _choose_subtree(self, bbox, node: _Node, level: int, path: List[_Node]) -> _Node:
        while True:
            path.append(node)

            if node.leaf or len(path) - 1 == level:
                break

            min_area = math.inf
            min_enlargement = math.inf
            target = None

            for child in node.children:
                area = _bbox_area(child)
                enlargement = _enlarged_area(bbox, child) - area

                # choose entry with the least area enlargement
                if enlargement < min_enlargement:
                    min_enlargement = enlargement
                    min_area = area if area < min_area else min_area
                    target = child

                elif enlargement == min_enlargement:
                    # otherwise choose one with the smallest area
                    if area < min_area:
                        min_area = area
                        target = child

            node = target if target is not None else node.children[0]

        return node

    def _insert(self, item, level: int, is_node: bool = False) -> None:
        bbox = item if is_node else self.to_bbox(item)
        insert_path: List[_Node] = []

        # find the best node for accommodating the item, saving all nodes along the path too
        node = self._choose_subtree(bbox, self.root, level, insert_path)

        node.children.append(item)
        _extend(node, bbox)

        # split on node overflow; propagate upwards if necessary
        while level >= 0:
            if len(insert_path[level].children) > self._max_entries:
                self._split(insert_path, level)
                level -= 1
            else:
                break

        # adjust bboxes along the insertion path
        for i in range(level, -1, -1):
            _extend(insert_path[i], bbox)

    def _split(self, insert_path: List[_Node], level: int) -> None:
        node = insert_path[level]
        total = len(node.children)
        m = self._min_entries

        self._choose_split_axis(node, m, total)

        split_index = self._choose_split_index(node, m, total)

        new_node = _Node(children=node.children[split_index:], height=node.height, leaf=node.leaf)
        del node.children[split_index:]

        _calc_bbox(node, self.to_bbox)
        _calc_bbox(new_node, self.to_bbox)

        if level:
            insert_path[level - 1].children.append(new_node)
        else:
            self._split_root(node, new_node)

    def _split_root(self, node: _Node, new_node: _Node) -> None:
        self.root = _Node(children=[node, new_node], height=node.height + 1, leaf=False)
        _calc_bbox(self.root, self.to_bbox)

    def _choose_split_index(self, node: _Node, m: int, total: int) -> int:
        index = None
        min_overlap = math.inf
        min_area = math.inf

        for i in range(m, total - m + 1):
            bbox1 = _dist_bbox(node, 0, i, self.to_bbox)
            bbox2 = _dist_bbox(node, i, total, self.to_bbox)

            overlap = _intersection_area(bbox1, bbox2)
            area = _bbox_area(bbox1) + _bbox_area(bbox2)

            # choose distribution with minimum overlap
            if overlap < min_overlap:
                min_overlap = overlap
                index = i

                min_area = area if area < min_area else min_area

            elif overlap == min_overlap:
                # otherwise choose distribution with minimum area
                if area < min_area:
                    min_area = area
                    index = i

        return index if index is not None else total - m

    def _choose_split_axis(self, node: _Node, m: int, total: int) -> None:
        """Sort node children along the axis with the smaller total margin."""
        key_x = self.min_x if node.leaf else _node_min_x
        key_y = self.min_y if node.leaf else _node_min_y
        x_margin = self._all_dist_margin(node, m, total, key_x)
        y_margin = self._all_dist_margin(node, m, total, key_y)

        # children are left sorted by y unless x gives the smaller margin
        if x_margin < y_margin:
            node.children.sort(key=key_x)

    def _all_dist_margin(self, node: _Node, m: int, total: int, key) -> float:
        """Total margin of all split distributions with at least m items per side."""
        node.children.sort(key=key)

        to_bbox = self.to_bbox
        left_bbox = _dist_bbox(node, 0, m, to_bbox)
        right_bbox = _dist_bbox(node, total - m, total, to_bbox)
        margin = _bbox_margin(left_bbox) + _bbox_margin(right_bbox)

        for i in range(m, total - m):
            child = node.children[i]
            _extend(left_bbox, to_bbox(child) if node.leaf else child)
            margin += _bbox_margin(left_bbox)

        for i in range(total - m - 1, m - 1, -1):
            child = node.children[i]
            _extend(right_bbox, to_bbox(child) if node.leaf else child)
            margin += _bbox_margin(right_bbox)

        return margin

    def _condense(self, path: List[_Node]) -> None:
        # go through the path, removing empty nodes and updating bboxes
        for i in range(len(path) - 1, -1, -1):
            if not path[i].children:
                if i > 0:
                    siblings = path[i - 1].children
                    del siblings[_index_of(path[i], siblings, None)]
                else:
                    self.clear()
            else:
                _calc_bbox(path[i], self.to_bbox)


class PointTree(RTree):
    """R-tree over ``(x, y)`` point tuples, each with a degenerate box."""

    def to_bbox(self, item) -> BBox:
        return BBox(item[0], item[1], item[0], item[1])

    def min_x(self, item) -> float:
        return item[0]

    def min_y(self, item) -> float:
        return item[1]


class EdgeTree(RTree):
    """
    R-tree over boundary edges.

    Items are boundary vertices carrying the cached box of the edge to
    their successor (``vertex.p`` -> ``vertex.next.p``).
    """

    def crosses(self, a, b) -> bool:
        """Return True if segment (a, b) crosses or touches any indexed edge."""
        bbox = BBox(min(a[0], b[0]), min(a[1], b[1]), max(a[0], b[0]), max(a[1], b[1]))

        for edge in self.search(bbox):
            if segments_cross(edge.p, edge.next.p, a, b):
                return True
        return False
