"""
Oracle for sorting machine correctness.

We use Python's built-in `sorted()` (with `functools.cmp_to_key`) as the
ground truth:
- Correct for any total preorder expressed as a three-way compare
- Deterministic and portable
- Stable, so order-equivalent elements keep their insertion order

`ReferenceSortingMachine` wraps the same idea in the full machine contract
(sort once on the mode switch, then pop from the front) so that it can be
driven step by step next to the heap machine and compared for equality.

Public API (stable):
    ORACLE_NAME
    oracle_sort(items, order) -> list
    equals_oracle(items, out, order) -> bool
    ReferenceSortingMachine

Conventions:
- The oracle never mutates its input and always returns a **new** list.
- Under a preorder, ties may legitimately come out in any order, so
  `equals_oracle` accepts any output that is order-equivalent to the oracle
  slot by slot and holds the same multiset.
"""

from __future__ import annotations

from typing import Any, List, Sequence

from sortmachine.machine.base import SortingMachine, same_multiset
from sortmachine.order import Order, order_key

ORACLE_NAME: str = "python_sorted_timsort"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle", "ReferenceSortingMachine"]


def oracle_sort(items: Sequence[Any], order: Order) -> List[Any]:
    """
    Return the ground-truth extraction sequence for `items` under `order`.

    Parameters
    ----------
    items : sequence
        Elements inserted into a machine. Not mutated.
    order : Order
        Three-way comparison describing a total preorder.

    Returns
    -------
    list
        A new list with the same elements, nondecreasing under `order`.
    """
    return sorted(items, key=order_key(order))


def equals_oracle(items: Sequence[Any], out: Sequence[Any], order: Order) -> bool:
    """
    Check whether an extraction sequence is acceptable for `items`.

    Returns True iff `out` holds exactly the multiset `items` and each
    position of `out` is order-equivalent to the same position of the
    oracle output.
    """
    expected = oracle_sort(items, order)
    if len(expected) != len(out):
        return False
    if any(order(x, y) != 0 for x, y in zip(expected, out)):
        return False
    return same_multiset(items, out)


class ReferenceSortingMachine(SortingMachine):
    """Naive sort-on-extraction machine used as the trusted model."""

    def __init__(self, order: Order) -> None:
        super().__init__(order)
        self._items: List[Any] = []

    def _add(self, x: Any) -> None:
        self._items.append(x)

    def _prepare_extraction(self) -> None:
        self._items = oracle_sort(self._items, self._order)

    def _remove_first(self) -> Any:
        return self._items.pop(0)

    def _entries(self) -> List[Any]:
        return self._items

    def _reset(self) -> None:
        self._items = []
