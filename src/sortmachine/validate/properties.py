"""
Property helpers for validating extraction sequences.

These functions provide lightweight checks you can use in tests and inside
the benchmark harness for sanity validation of a drained machine.

Public API (stable):
    is_nondecreasing(xs, order=natural_order) -> bool
    first_nondecreasing_violation_index(xs, order=natural_order) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict
    assert_no_mutation(before, after) -> None

Notes
-----
- "Nondecreasing" is relative to an order, which is only a preorder: "A"
  followed by "a" and "a" followed by "A" are both nondecreasing under the
  case-insensitive order.
- Permutation checks compare elements by `==`, not by order, because
  order-equivalent elements are still distinct members of the multiset.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Sequence

from sortmachine.machine.base import same_multiset
from sortmachine.order import Order, natural_order, precedes

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
]


def is_nondecreasing(xs: Sequence[Any], order: Order = natural_order) -> bool:
    """Return True iff order(xs[i], xs[i+1]) <= 0 for all i."""
    return first_nondecreasing_violation_index(xs, order) is None


def first_nondecreasing_violation_index(
    xs: Sequence[Any], order: Order = natural_order
) -> int | None:
    """
    Return the first index i where xs[i+1] strictly precedes xs[i], or None.

    Useful for precise error messages:
        i = first_nondecreasing_violation_index(out, order)
        assert i is None, f"not nondecreasing at i={i}: {out[i]!r} > {out[i+1]!r}"
    """
    for i in range(len(xs) - 1):
        if not precedes(order, xs[i], xs[i + 1]):
            return i
    return None


def is_permutation(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """Return True iff `a` and `b` contain exactly the same multiset of values."""
    return same_multiset(a, b)


def permutation_counter_diff(a: Sequence[Any], b: Sequence[Any]) -> Dict[Any, int]:
    """
    Return a dict of value -> count difference (count_a - count_b).

    Empty dict means `a` and `b` have identical multiplicities. Values must
    be hashable.
    """
    ca = Counter(a)
    cb = Counter(b)
    diff: Dict[Any, int] = {}
    for k in set(ca) | set(cb):
        d = ca.get(k, 0) - cb.get(k, 0)
        if d != 0:
            diff[k] = d
    return diff


def assert_no_mutation(before: Sequence[Any], after: Sequence[Any]) -> None:
    """
    Assert that two sequences are exactly equal (element-wise), used to ensure
    a harness did not mutate its input list while feeding a machine.

    Raises AssertionError with a concise message if they differ.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x!r}, after={y!r}")
