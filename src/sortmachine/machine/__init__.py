"""
Sorting machine implementations public API.

Re-exports so callers can write:
    from sortmachine.machine import HeapSortingMachine, drain
"""

from .base import SortingMachine, create_from_args, drain, same_multiset
from .heap import heapify, is_heap, remove_min, sift_down, sift_up
from .heap_machine import HeapSortingMachine

__all__ = [
    "SortingMachine",
    "HeapSortingMachine",
    "create_from_args",
    "drain",
    "same_multiset",
    "heapify",
    "is_heap",
    "remove_min",
    "sift_down",
    "sift_up",
]
