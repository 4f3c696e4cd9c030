"""
sortmachine: a heap-backed sorting machine.

Elements go in while the machine is in insertion mode; after one call to
`change_to_extraction_mode` they come back out through `remove_first` in
nondecreasing order under a caller-supplied three-way comparison.

    from sortmachine import HeapSortingMachine, case_insensitive_order

    m = HeapSortingMachine(case_insensitive_order)
    m.add("beer")
    m.add("apple")
    m.change_to_extraction_mode()
    m.remove_first()  # "apple"
"""

from .errors import PreconditionViolation
from .machine import HeapSortingMachine, SortingMachine, create_from_args, drain
from .order import Order, case_insensitive_order, natural_order

__all__ = [
    "PreconditionViolation",
    "SortingMachine",
    "HeapSortingMachine",
    "create_from_args",
    "drain",
    "Order",
    "natural_order",
    "case_insensitive_order",
]
