"""
Abstract sorting machine: the mode state machine shared by every
implementation.

A machine starts in insertion mode, accepts `add` calls, switches exactly
once to extraction mode, and then hands elements back through
`remove_first` in nondecreasing order under its order. Public methods check
the contract and raise `PreconditionViolation` on misuse; subclasses only
supply storage through the underscore hooks.

Public API (stable):
    SortingMachine
    create_from_args(factory, order, insertion_mode, *entries) -> SortingMachine
    drain(machine) -> list
    same_multiset(a, b) -> bool
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, Callable, Iterator, List, Sequence

from sortmachine.errors import PreconditionViolation
from sortmachine.order import Order

logger = logging.getLogger(__name__)

__all__ = ["SortingMachine", "create_from_args", "drain", "same_multiset"]


class SortingMachine(ABC):
    """Multiset with one-way insertion -> extraction mode switch."""

    def __init__(self, order: Order) -> None:
        self._order = order
        self._insertion_mode = True

    # ------------------------- storage hooks ------------------------- #

    @abstractmethod
    def _add(self, x: Any) -> None: ...

    @abstractmethod
    def _prepare_extraction(self) -> None: ...

    @abstractmethod
    def _remove_first(self) -> Any: ...

    @abstractmethod
    def _entries(self) -> List[Any]:
        """The live storage list; callers must not mutate it."""

    @abstractmethod
    def _reset(self) -> None:
        """Rebind storage to a new empty list (never clear the old one in place)."""

    # ------------------------- kernel ------------------------- #

    def add(self, x: Any) -> None:
        if not self._insertion_mode:
            raise PreconditionViolation("add requires insertion mode")
        self._add(x)

    def change_to_extraction_mode(self) -> None:
        if not self._insertion_mode:
            raise PreconditionViolation("machine is already in extraction mode")
        self._prepare_extraction()
        self._insertion_mode = False
        logger.debug("%s switched to extraction mode with %d entries", type(self).__name__, self.size())

    def remove_first(self) -> Any:
        if self._insertion_mode:
            raise PreconditionViolation("remove_first requires extraction mode")
        if self.size() == 0:
            raise PreconditionViolation("remove_first on an empty machine")
        return self._remove_first()

    def is_in_insertion_mode(self) -> bool:
        return self._insertion_mode

    def order(self) -> Order:
        return self._order

    def size(self) -> int:
        return len(self._entries())

    # ------------------------- standard services ------------------------- #

    def clear(self) -> None:
        """Empty the machine and put it back in insertion mode; order is kept."""
        self._reset()
        self._insertion_mode = True

    def new_instance(self) -> "SortingMachine":
        return type(self)(self._order)

    def transfer_from(self, source: "SortingMachine") -> None:
        """
        Take over `source`'s order, mode and contents; `source` is left empty
        in insertion mode with its own order.
        """
        if source is self:
            raise PreconditionViolation("cannot transfer a machine into itself")
        if type(source) is not type(self):
            raise PreconditionViolation(
                f"transfer_from requires a {type(self).__name__}, got {type(source).__name__}"
            )
        self.__dict__.update(source.__dict__)
        source.clear()

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[Any]:
        # Storage order, not extraction order.
        return iter(list(self._entries()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortingMachine):
            return NotImplemented
        return (
            self._insertion_mode == other._insertion_mode
            and self._order == other._order
            and same_multiset(self._entries(), other._entries())
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        mode = "insertion" if self._insertion_mode else "extraction"
        order_name = getattr(self._order, "__name__", repr(self._order))
        return f"{type(self).__name__}(order={order_name}, mode={mode}, entries={self._entries()!r})"


# ------------------------- helpers ------------------------- #


def create_from_args(
    factory: Callable[[Order], SortingMachine],
    order: Order,
    insertion_mode: bool,
    *entries: Any,
) -> SortingMachine:
    """Build a machine holding `entries`, switched to extraction mode unless `insertion_mode`."""
    machine = factory(order)
    for x in entries:
        machine.add(x)
    if not insertion_mode:
        machine.change_to_extraction_mode()
    return machine


def drain(machine: SortingMachine) -> List[Any]:
    """Remove every remaining element, in extraction order."""
    out: List[Any] = []
    while machine.size() > 0:
        out.append(machine.remove_first())
    return out


def same_multiset(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """True iff `a` and `b` hold the same elements (by `==`) with the same multiplicities."""
    if len(a) != len(b):
        return False
    try:
        return Counter(a) == Counter(b)
    except TypeError:
        # Unhashable elements: quadratic matching.
        remaining = list(b)
        for x in a:
            for i, y in enumerate(remaining):
                if x == y:
                    del remaining[i]
                    break
            else:
                return False
        return True
