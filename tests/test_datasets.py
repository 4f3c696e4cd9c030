"""
Tests for the string dataset generators.
"""

from __future__ import annotations

import numpy as np
import pytest

from sortmachine.datasets import SUPPORTED_DISTS, make_dataset
from sortmachine.order import case_insensitive_order
from sortmachine.validate import is_nondecreasing


def _rng(seed: int = 7) -> np.random.Generator:
    return np.random.default_rng(seed)


@pytest.mark.parametrize("dist", sorted(SUPPORTED_DISTS))
@pytest.mark.parametrize("n", [0, 1, 17, 200])
def test_length_and_type(dist: str, n: int) -> None:
    spec = {"dist": dist, "params": {"k": 5} if dist in ("few_uniques", "case_variants") else {}}
    out = make_dataset(n, spec, _rng())
    assert len(out) == n
    assert all(isinstance(x, str) for x in out)


@pytest.mark.parametrize("dist", sorted(SUPPORTED_DISTS))
def test_deterministic_for_seed(dist: str) -> None:
    spec = {"dist": dist, "params": {"k": 5} if dist in ("few_uniques", "case_variants") else {}}
    assert make_dataset(50, spec, _rng(3)) == make_dataset(50, spec, _rng(3))


def test_random_words_respect_length_range() -> None:
    out = make_dataset(300, {"dist": "random_words", "params": {"length": [2, 4]}}, _rng())
    assert all(2 <= len(w) <= 4 for w in out)
    assert all(w.islower() and w.isalpha() for w in out)


def test_few_uniques_exact_count() -> None:
    out = make_dataset(500, {"dist": "few_uniques", "params": {"k": 4}}, _rng())
    assert len(set(out)) == 4


def test_few_uniques_distinct_with_short_words() -> None:
    out = make_dataset(2000, {"dist": "few_uniques", "params": {"k": 20, "length": [1, 1]}}, _rng(0))
    assert len(set(out)) == 20


def test_few_uniques_capped_by_length_range() -> None:
    out = make_dataset(2000, {"dist": "few_uniques", "params": {"k": 100, "length": [1, 1]}}, _rng(0))
    assert len(set(out)) == 26


def test_few_uniques_capped_by_n() -> None:
    out = make_dataset(3, {"dist": "few_uniques", "params": {"k": 10, "length": [1, 1]}}, _rng())
    assert len(out) == 3
    assert len(set(out)) <= 3


def test_case_variants_are_order_equivalent_but_unequal() -> None:
    out = make_dataset(500, {"dist": "case_variants", "params": {"k": 3, "length": [5, 5]}}, _rng())
    assert len({w.casefold() for w in out}) == 3
    assert len(set(out)) > 3


def test_nearly_sorted_zero_swaps_is_sorted() -> None:
    out = make_dataset(120, {"dist": "nearly_sorted", "params": {"swap_frac": 0.0}}, _rng())
    assert is_nondecreasing(out, case_insensitive_order)
    assert out[0] == "000" and out[-1] == "119"


def test_reversed() -> None:
    assert make_dataset(11, {"dist": "reversed"}, _rng()) == [str(i).zfill(2) for i in range(10, -1, -1)]


@pytest.mark.parametrize(
    "n, spec",
    [
        (-1, {"dist": "random_words"}),
        (5, {"dist": "bogus"}),
        (5, "random_words"),
        (5, {"dist": "few_uniques", "params": {}}),
        (5, {"dist": "few_uniques", "params": {"k": 0}}),
        (5, {"dist": "random_words", "params": {"length": [4, 2]}}),
        (5, {"dist": "random_words", "params": {"length": [1]}}),
        (5, {"dist": "nearly_sorted", "params": {"swap_frac": 1.5}}),
        (5, {"dist": "nearly_sorted", "params": {"swap_frac": "lots"}}),
    ],
)
def test_invalid_specs(n, spec) -> None:
    with pytest.raises(ValueError):
        make_dataset(n, spec, _rng())
