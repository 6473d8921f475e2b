"""
Binary min-heap keyed by a priority function.
"""

import heapq
import itertools
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


def _identity(item):
    return item


class PriorityQueue(Generic[T]):
    """
    Min-heap with push/pop/peek over items ordered by ``key(item)``.

    Items with equal keys leave the queue in the order they were pushed,
    and the items themselves are never compared.

    Parameters
    ----------
    items : iterable, optional
        Initial items, heapified in O(n).
    key : callable, optional
        Priority function. Defaults to the item itself.
    """

    def __init__(self, items: Iterable[T] = (), key: Optional[Callable[[T], Any]] = None):
        self._key = key or _identity
        self._counter = itertools.count()
        self._data: List[Tuple[Any, int, T]] = [
            (self._key(item), next(self._counter), item) for item in items
        ]
        heapq.heapify(self._data)

    def push(self, item: T) -> None:
        heapq.heappush(self._data, (self._key(item), next(self._counter), item))

    def pop(self) -> Optional[T]:
        """Remove and return the smallest item, or None when empty."""
        if not self._data:
            return None
        return heapq.heappop(self._data)[2]

    def peek(self) -> Optional[T]:
        """Return the smallest item without removing it, or None when empty."""
        if not self._data:
            return None
        return self._data[0][2]

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)
