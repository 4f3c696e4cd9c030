"""
Binary min-heap engine over a plain Python list.

The heap is stored in the usual array layout: the children of slot i are
2i+1 and 2i+2. "Min" is defined by the supplied order; among
order-equivalent elements no further ordering is imposed.

Public API (stable):
    sift_up(heap, index, order) -> None
    sift_down(heap, index, size, order) -> None
    heapify(items, order) -> None
    remove_min(heap, order) -> element
    is_heap(items, order) -> bool

All functions mutate their list argument in place and never allocate a new
one.
"""

from __future__ import annotations

from typing import Any, List

from sortmachine.order import Order

__all__ = ["sift_up", "sift_down", "heapify", "remove_min", "is_heap"]


def sift_up(heap: List[Any], index: int, order: Order) -> None:
    """Move heap[index] toward the root while it strictly precedes its parent."""
    while index > 0:
        parent = (index - 1) // 2
        if order(heap[index], heap[parent]) >= 0:
            break
        heap[parent], heap[index] = heap[index], heap[parent]
        index = parent


def sift_down(heap: List[Any], index: int, size: int, order: Order) -> None:
    """
    Move heap[index] toward the leaves, swapping with the smaller child,
    considering only the first `size` slots of `heap`.
    """
    while True:
        left = 2 * index + 1
        if left >= size:
            return
        right = left + 1
        smallest = left
        if right < size and order(heap[right], heap[left]) < 0:
            smallest = right
        if order(heap[smallest], heap[index]) >= 0:
            return
        heap[index], heap[smallest] = heap[smallest], heap[index]
        index = smallest


def heapify(items: List[Any], order: Order) -> None:
    """Turn `items` into a heap in place in O(n), last internal node first."""
    n = len(items)
    for i in range(n // 2 - 1, -1, -1):
        sift_down(items, i, n, order)


def remove_min(heap: List[Any], order: Order) -> Any:
    """
    Remove and return the root of a non-empty heap.

    Swaps the root with the last slot, shrinks the list by one, then
    restores heap order from the root. O(log n).
    """
    if not heap:
        raise IndexError("remove_min from empty heap")
    last = len(heap) - 1
    heap[0], heap[last] = heap[last], heap[0]
    root = heap.pop()
    sift_down(heap, 0, len(heap), order)
    return root


def is_heap(items: List[Any], order: Order) -> bool:
    n = len(items)
    for child in range(1, n):
        if order(items[child], items[(child - 1) // 2]) < 0:
            return False
    return True
