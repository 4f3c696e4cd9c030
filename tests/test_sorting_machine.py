"""
Contract tests for the sorting machine kernel.

Every test builds the machine under test (heap, heap_incremental; see the
`factory` fixture in conftest.py) next to the reference machine with the
same entries and mode, applies the same calls to both, and checks:
- Machines compare equal (mode, order and multiset contents)
- Accessors agree
- Removed values are order-equivalent
- Wrong-mode / empty calls raise PreconditionViolation
"""

from __future__ import annotations

import logging
from typing import List

import pytest

from sortmachine import PreconditionViolation, case_insensitive_order, natural_order
from sortmachine.machine import HeapSortingMachine, create_from_args, drain, is_heap
from sortmachine.validate import ReferenceSortingMachine, is_nondecreasing, is_permutation

ORDER = case_insensitive_order

LARGE: List[str] = [
    "beer", "apple", "beer", "chair", "door", "electron", "friend", "42",
    "Ultimate answer of the universe", "Not True", "true", "True", "apple",
    "beer", "chair", "door", "electron", "friend", "A", "apple", "beer",
    "chair", "door", "electron", "friend", "42", "Not True", "electron",
    "electron", "friend", "A", "whatever", "!", "*SUPER*", "*TEST*", "*CASE*",
]

ENTRY_CASES = [
    [],
    ["green"],
    ["A", "a"],
    ["A", "a", "1", "123", "a"],
    ["A", "a", "1", "123", "a", "apple", "beer"],
    ["beer", "c", "eyes"],
    LARGE,
]


def _pair(factory, insertion_mode: bool, *entries: str):
    m = create_from_args(factory, ORDER, insertion_mode, *entries)
    m_expected = create_from_args(ReferenceSortingMachine, ORDER, insertion_mode, *entries)
    return m, m_expected


# ------------------------- constructor ------------------------- #

def test_constructor(factory) -> None:
    m = factory(ORDER)
    assert m == ReferenceSortingMachine(ORDER)
    assert m.is_in_insertion_mode()
    assert m.size() == 0
    assert m.order() is ORDER


# ------------------------- add ------------------------- #

@pytest.mark.parametrize("entries", ENTRY_CASES)
@pytest.mark.parametrize("x", ["green", "A", "a"])
def test_add(factory, entries: List[str], x: str) -> None:
    m, m_expected = _pair(factory, True, *entries)
    m.add(x)
    m_expected.add(x)
    assert m == m_expected
    assert m.size() == len(entries) + 1
    assert m.is_in_insertion_mode()


def test_add_duplicates_are_distinct_members(factory) -> None:
    m = factory(ORDER)
    for x in ["a", "A", "a"]:
        m.add(x)
    assert m.size() == 3
    assert sorted(m) == ["A", "a", "a"]


def test_add_in_extraction_mode_rejected(factory) -> None:
    m, _ = _pair(factory, False)
    with pytest.raises(PreconditionViolation):
        m.add("x")
    assert m.size() == 0


# ------------------------- change_to_extraction_mode ------------------------- #

@pytest.mark.parametrize("entries", ENTRY_CASES)
def test_change_to_extraction_mode(factory, entries: List[str]) -> None:
    m, m_expected = _pair(factory, True, *entries)
    m.change_to_extraction_mode()
    m_expected.change_to_extraction_mode()
    assert m == m_expected
    assert not m.is_in_insertion_mode()
    assert m.size() == len(entries)
    assert is_permutation(list(m), entries)


def test_change_to_extraction_mode_builds_heap(factory) -> None:
    m, _ = _pair(factory, False, *LARGE)
    assert is_heap(list(m), ORDER)


def test_change_to_extraction_mode_twice_rejected(factory) -> None:
    m, _ = _pair(factory, False, "a")
    with pytest.raises(PreconditionViolation):
        m.change_to_extraction_mode()
    assert not m.is_in_insertion_mode()


# ------------------------- remove_first ------------------------- #

@pytest.mark.parametrize("entries", [e for e in ENTRY_CASES if e])
def test_remove_first(factory, entries: List[str]) -> None:
    m, m_expected = _pair(factory, False, *entries)
    got = m.remove_first()
    want = m_expected.remove_first()
    assert ORDER(got, want) == 0
    assert m.size() == m_expected.size() == len(entries) - 1
    assert not m.is_in_insertion_mode()


@pytest.mark.parametrize("entries", ENTRY_CASES)
def test_remove_all(factory, entries: List[str]) -> None:
    m, _ = _pair(factory, False, *entries)
    out = drain(m)
    assert m.size() == 0
    assert is_nondecreasing(out, ORDER)
    assert is_permutation(out, entries)


def test_remove_first_in_insertion_mode_rejected(factory) -> None:
    m, _ = _pair(factory, True, "a", "b")
    with pytest.raises(PreconditionViolation):
        m.remove_first()
    assert m.size() == 2


# ------------------------- accessors ------------------------- #

@pytest.mark.parametrize("insertion_mode", [True, False])
@pytest.mark.parametrize("entries", ENTRY_CASES)
def test_accessors(factory, insertion_mode: bool, entries: List[str]) -> None:
    m, m_expected = _pair(factory, insertion_mode, *entries)
    assert m == m_expected
    assert m.is_in_insertion_mode() == m_expected.is_in_insertion_mode() == insertion_mode
    assert m.order() is m_expected.order() is ORDER
    assert m.size() == m_expected.size() == len(m) == len(entries)


def test_order_unchanged_by_lifecycle(factory) -> None:
    m = factory(ORDER)
    m.add("b")
    assert m.order() is ORDER
    m.change_to_extraction_mode()
    assert m.order() is ORDER
    m.remove_first()
    assert m.order() is ORDER


# ------------------------- scenarios ------------------------- #

def test_scenario_empty_machine_switches(factory) -> None:
    m = factory(ORDER)
    m.change_to_extraction_mode()
    assert m.size() == 0


def test_scenario_two_words(factory) -> None:
    m = factory(ORDER)
    m.add("beer")
    m.add("apple")
    m.change_to_extraction_mode()
    assert m.remove_first() == "apple"
    assert m.remove_first() == "beer"
    assert m.size() == 0


def test_scenario_case_equivalent_words(factory) -> None:
    m = factory(ORDER)
    m.add("A")
    m.add("a")
    m.change_to_extraction_mode()
    first = m.remove_first()
    second = m.remove_first()
    assert ORDER(first, "a") == 0
    assert ORDER(second, "A") == 0
    assert sorted([first, second]) == ["A", "a"]
    assert m.size() == 0


def test_scenario_add_after_switch_rejected(factory) -> None:
    m = factory(ORDER)
    m.change_to_extraction_mode()
    with pytest.raises(PreconditionViolation):
        m.add("a")


def test_scenario_remove_from_empty_rejected(factory) -> None:
    m = factory(ORDER)
    m.change_to_extraction_mode()
    with pytest.raises(PreconditionViolation):
        m.remove_first()


# ------------------------- equality & standard services ------------------------- #

def test_equality_checks_mode_order_and_contents(factory) -> None:
    base, _ = _pair(factory, True, "a", "b")
    assert base != create_from_args(factory, ORDER, False, "a", "b")
    assert base != create_from_args(factory, natural_order, True, "a", "b")
    assert base != create_from_args(factory, ORDER, True, "a", "B")
    assert base != create_from_args(factory, ORDER, True, "a", "b", "b")
    assert base == create_from_args(factory, ORDER, True, "b", "a")
    assert base != ["a", "b"]


def test_machines_are_unhashable(factory) -> None:
    with pytest.raises(TypeError):
        hash(factory(ORDER))


def test_clear(factory) -> None:
    m, _ = _pair(factory, False, "b", "a")
    m.clear()
    assert m == ReferenceSortingMachine(ORDER)
    m.add("c")
    assert m.size() == 1


def test_new_instance(factory) -> None:
    m, _ = _pair(factory, False, "b", "a")
    fresh = m.new_instance()
    assert type(fresh) is type(m)
    assert fresh == ReferenceSortingMachine(ORDER)
    assert m.size() == 2


def test_new_instance_keeps_incremental_setting() -> None:
    m = HeapSortingMachine(ORDER, incremental=True)
    assert m.new_instance().incremental


def test_transfer_from(factory) -> None:
    source, expected = _pair(factory, False, "b", "a", "c")
    target = create_from_args(factory, natural_order, True, "z")
    target.transfer_from(source)
    assert target == expected
    assert target.order() is ORDER
    assert source == ReferenceSortingMachine(ORDER)
    assert drain(target) == ["a", "b", "c"]
    assert source.size() == 0


def test_transfer_from_other_implementation_rejected(factory) -> None:
    m = factory(ORDER)
    with pytest.raises(PreconditionViolation):
        m.transfer_from(ReferenceSortingMachine(ORDER))
    with pytest.raises(PreconditionViolation):
        m.transfer_from(m)


def test_iter_does_not_remove(factory) -> None:
    m, _ = _pair(factory, False, "b", "a")
    assert sorted(m) == ["a", "b"]
    assert m.size() == 2


def test_repr_names_mode_and_order(factory) -> None:
    m = factory(ORDER)
    m.add("x")
    text = repr(m)
    assert "insertion" in text
    assert "case_insensitive_order" in text
    assert "'x'" in text


def test_unhashable_entries_compare_by_equality() -> None:
    order = lambda a, b: (a[0] > b[0]) - (a[0] < b[0])  # noqa: E731
    m = create_from_args(HeapSortingMachine, order, True, [1, "x"], [0, "y"])
    m_expected = create_from_args(ReferenceSortingMachine, order, True, [0, "y"], [1, "x"])
    assert m == m_expected
    m_expected.add([2, "z"])
    assert m != m_expected


# ------------------------- failing orders & logging ------------------------- #

class _FailOnce:
    """Case-insensitive order that raises on its first call once armed."""

    def __init__(self) -> None:
        self.armed = False

    def __call__(self, a: str, b: str) -> int:
        if self.armed:
            self.armed = False
            raise RuntimeError("order failed")
        return case_insensitive_order(a, b)


@pytest.mark.parametrize("machine_factory", [HeapSortingMachine, ReferenceSortingMachine])
def test_failed_switch_stays_in_insertion_mode(machine_factory) -> None:
    order = _FailOnce()
    m = create_from_args(machine_factory, order, True, "c", "b", "a")
    order.armed = True
    with pytest.raises(RuntimeError):
        m.change_to_extraction_mode()
    assert m.is_in_insertion_mode()
    assert m.size() == 3
    with pytest.raises(PreconditionViolation):
        m.remove_first()
    m.change_to_extraction_mode()
    assert drain(m) == ["a", "b", "c"]


def test_switch_logs_heapify(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="sortmachine")
    m = create_from_args(HeapSortingMachine, ORDER, True, "b", "a", "c")
    m.change_to_extraction_mode()
    messages = [r.getMessage() for r in caplog.records]
    assert "heapified 3 entries" in messages
    assert any("switched to extraction mode with 3 entries" in msg for msg in messages)
