"""
Differential checking of a machine implementation against the reference.

The same sequence of operations is applied to a machine under test and to a
trusted reference machine; after every step both must agree on size and
mode, any removed values must be order-equivalent, and the machines must
compare equal (or, once something was removed, hold order-equivalent bags).
Operations whose precondition does not hold on the reference are skipped,
so arbitrary generated sequences can be replayed.

Operation encoding:
    ("add", x)     -> machine.add(x)
    ("change",)    -> machine.change_to_extraction_mode()
    ("remove",)    -> machine.remove_first()

Public API (stable):
    ADD, CHANGE, REMOVE
    DivergenceError
    run_differential(ops, order, test_factory, ref_factory=ReferenceSortingMachine)
        -> list[tuple[removed_by_test, removed_by_reference]]
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Sequence, Tuple

from sortmachine.machine.base import SortingMachine
from sortmachine.order import Order, equivalent
from sortmachine.validate.oracle import ReferenceSortingMachine, oracle_sort

logger = logging.getLogger(__name__)

ADD = "add"
CHANGE = "change"
REMOVE = "remove"

__all__ = ["ADD", "CHANGE", "REMOVE", "DivergenceError", "run_differential"]


class DivergenceError(AssertionError):
    """The machine under test stopped matching the reference."""

    def __init__(self, step: int, op: Sequence[Any], detail: str) -> None:
        super().__init__(f"step {step} {tuple(op)!r}: {detail}")
        self.step = step
        self.op = tuple(op)
        self.detail = detail


def _applicable(ref: SortingMachine, op: Sequence[Any]) -> bool:
    kind = op[0]
    if kind in (ADD, CHANGE):
        return ref.is_in_insertion_mode()
    if kind == REMOVE:
        return not ref.is_in_insertion_mode() and ref.size() > 0
    raise ValueError(f"Unknown operation: {op!r}")


def _equivalent_bags(a: List[Any], b: List[Any], order: Order) -> bool:
    if len(a) != len(b):
        return False
    return all(equivalent(order, x, y) for x, y in zip(oracle_sort(a, order), oracle_sort(b, order)))


def run_differential(
    ops: Iterable[Sequence[Any]],
    order: Order,
    test_factory: Callable[[Order], SortingMachine],
    ref_factory: Callable[[Order], SortingMachine] = ReferenceSortingMachine,
) -> List[Tuple[Any, Any]]:
    """
    Replay `ops` on a fresh test machine and a fresh reference machine.

    Returns the (test, reference) pairs of values returned by each applied
    `remove`. Raises DivergenceError at the first observable mismatch.
    """
    test = test_factory(order)
    ref = ref_factory(order)
    if test != ref:
        raise DivergenceError(-1, ("construct",), f"{test!r} != {ref!r}")

    removed: List[Tuple[Any, Any]] = []
    skipped = 0
    for step, op in enumerate(ops):
        if not _applicable(ref, op):
            skipped += 1
            continue
        kind = op[0]
        if kind == ADD:
            test.add(op[1])
            ref.add(op[1])
        elif kind == CHANGE:
            test.change_to_extraction_mode()
            ref.change_to_extraction_mode()
        else:
            got = test.remove_first()
            want = ref.remove_first()
            removed.append((got, want))
            if not equivalent(order, got, want):
                raise DivergenceError(step, op, f"removed {got!r}, reference removed {want!r}")

        if test.size() != ref.size():
            raise DivergenceError(step, op, f"size {test.size()} != reference size {ref.size()}")
        if test.is_in_insertion_mode() != ref.is_in_insertion_mode():
            raise DivergenceError(step, op, "mode differs from reference")
        # Once ties may have been removed in a different order the bags can
        # differ by order-equivalent members only.
        if not removed:
            if test != ref:
                raise DivergenceError(step, op, f"{test!r} != {ref!r}")
        elif not _equivalent_bags(list(test), list(ref), order):
            raise DivergenceError(step, op, f"{test!r} not order-equivalent to {ref!r}")

    logger.debug("differential run: %d removals, %d skipped ops", len(removed), skipped)
    return removed
