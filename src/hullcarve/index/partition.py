"""
Order-statistics partitioning for tree bulk loading.

- quickselect: Floyd-Rivest selection, places the k-th smallest item at k
- multi_select: splits a range into sorted groups of n unsorted items
"""

import math
from typing import Any, Callable, List, Optional


def _identity(item):
    return item


def _swap(items: List[Any], i: int, j: int) -> None:
    items[i], items[j] = items[j], items[i]


def quickselect(
    items: List[Any],
    k: int,
    left: int = 0,
    right: Optional[int] = None,
    key: Optional[Callable[[Any], Any]] = None
) -> None:
    """
    Partially sort ``items`` in place around index ``k``.

    After the call, ``items[k]`` holds the item that would be there if
    ``items[left:right + 1]`` were sorted by ``key``; items in
    ``[left, k)`` are not greater and items in ``(k, right]`` are not
    smaller.

    Parameters
    ----------
    items : list
        Items to rearrange in place.
    k : int
        Target index.
    left, right : int
        Inclusive bounds of the range to partition. Default whole list.
    key : callable, optional
        Sort key. Defaults to the item itself.
    """
    if right is None:
        right = len(items) - 1
    if key is None:
        key = _identity

    while right > left:
        if right - left > 600:
            # sample a smaller range around k to pick a good pivot
            n = right - left + 1
            m = k - left + 1
            z = math.log(n)
            s = 0.5 * math.exp(2 * z / 3)
            sd = 0.5 * math.sqrt(z * s * (n - s) / n) * (-1 if m - n / 2 < 0 else 1)
            new_left = max(left, math.floor(k - m * s / n + sd))
            new_right = min(right, math.floor(k + (n - m) * s / n + sd))
            quickselect(items, k, new_left, new_right, key)

        t = key(items[k])
        i = left
        j = right

        _swap(items, left, k)
        if key(items[right]) > t:
            _swap(items, left, right)

        while i < j:
            _swap(items, i, j)
            i += 1
            j -= 1
            while key(items[i]) < t:
                i += 1
            while key(items[j]) > t:
                j -= 1

        if key(items[left]) == t:
            _swap(items, left, j)
        else:
            j += 1
            _swap(items, j, right)

        if j <= k:
            left = j + 1
        if k <= j:
            right = j - 1


def multi_select(
    items: List[Any],
    left: int,
    right: int,
    n: int,
    key: Optional[Callable[[Any], Any]] = None
) -> None:
    """
    Arrange ``items[left:right + 1]`` into consecutive groups of ``n``.

    Every item of a group is not greater than any item of the following
    group; order within a group is arbitrary. Combines selection with
    binary divide and conquer, so the cost is O(N log(N / n)).
    """
    stack = [(left, right)]

    while stack:
        left, right = stack.pop()

        # a range of at most n items is a single group
        if right - left < n:
            continue

        # mid is a multiple of n past the range start
        mid = left + math.ceil((right - left) / n / 2) * n
        quickselect(items, mid, left, right, key)

        stack.append((left, mid - 1))
        stack.append((mid, right))
