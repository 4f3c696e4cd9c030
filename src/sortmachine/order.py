"""
Orders for sorting machines.

An order is a plain three-way comparison function:

    order(a, b) < 0   -> a precedes b
    order(a, b) == 0  -> a and b are order-equivalent (not necessarily equal)
    order(a, b) > 0   -> b precedes a

It must describe a total preorder (reflexive, transitive, total). Machines do
not validate this; they only use it consistently.

Public API (stable):
    Order
    natural_order(a, b) -> int
    case_insensitive_order(a, b) -> int
    precedes(order, a, b) -> bool
    equivalent(order, a, b) -> bool
    order_key(order) -> key function for sorted()/list.sort()
    ORDERS, resolve_order(name) -> Order
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Dict, TypeVar

T = TypeVar("T")

Order = Callable[[T, T], int]

__all__ = [
    "Order",
    "natural_order",
    "case_insensitive_order",
    "precedes",
    "equivalent",
    "order_key",
    "ORDERS",
    "resolve_order",
]


def natural_order(a: Any, b: Any) -> int:
    """Three-way compare using the elements' own `<`."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def case_insensitive_order(a: str, b: str) -> int:
    """Lexicographic compare ignoring case; "A" and "a" are equivalent."""
    fa = a.casefold()
    fb = b.casefold()
    if fa < fb:
        return -1
    if fa > fb:
        return 1
    return 0


def precedes(order: Order, a: Any, b: Any) -> bool:
    """True iff `a` may come before `b` in a nondecreasing sequence."""
    return order(a, b) <= 0


def equivalent(order: Order, a: Any, b: Any) -> bool:
    return order(a, b) == 0


def order_key(order: Order) -> Callable[[Any], Any]:
    return cmp_to_key(order)


# Named orders usable from YAML configs.
ORDERS: Dict[str, Order] = {
    "natural": natural_order,
    "case_insensitive": case_insensitive_order,
}


def resolve_order(name: str) -> Order:
    if name not in ORDERS:
        raise ValueError(f"Unknown order: {name!r}. Supported: {sorted(ORDERS)}")
    return ORDERS[name]
