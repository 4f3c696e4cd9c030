"""
Heap-backed sorting machine.

Insertion mode appends to a list (O(1) amortized) and leaves it unordered;
the mode switch heapifies it in O(n); each `remove_first` is a binary-heap
remove-min in O(log n). With `incremental=True` the list is kept
heap-ordered on every `add` (sift-up) and the mode switch has nothing left
to do. Both variants are observably identical.
"""

from __future__ import annotations

import logging
from typing import Any, List

from sortmachine.machine.base import SortingMachine
from sortmachine.machine.heap import heapify, remove_min, sift_up
from sortmachine.order import Order

logger = logging.getLogger(__name__)

__all__ = ["HeapSortingMachine"]


class HeapSortingMachine(SortingMachine):
    def __init__(self, order: Order, *, incremental: bool = False) -> None:
        super().__init__(order)
        self._incremental = incremental
        self._heap: List[Any] = []

    def _add(self, x: Any) -> None:
        self._heap.append(x)
        if self._incremental:
            sift_up(self._heap, len(self._heap) - 1, self._order)

    def _prepare_extraction(self) -> None:
        if not self._incremental:
            heapify(self._heap, self._order)
            logger.debug("heapified %d entries", len(self._heap))

    def _remove_first(self) -> Any:
        return remove_min(self._heap, self._order)

    def _entries(self) -> List[Any]:
        return self._heap

    def _reset(self) -> None:
        self._heap = []

    def new_instance(self) -> "HeapSortingMachine":
        return HeapSortingMachine(self._order, incremental=self._incremental)

    @property
    def incremental(self) -> bool:
        return self._incremental
