"""
Shared pytest setup.

Inserts the project `src/` onto sys.path so tests run without installing the
package, and provides the factories every machine test is parametrized over.
"""

from __future__ import annotations

import functools
import pathlib
import sys

import pytest

# Ensure `src/` is importable when running `pytest` from the repo root
_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sortmachine.machine import HeapSortingMachine  # noqa: E402

# Implementations under test; each is checked against ReferenceSortingMachine.
TEST_FACTORIES = {
    "heap": HeapSortingMachine,
    "heap_incremental": functools.partial(HeapSortingMachine, incremental=True),
}


@pytest.fixture(params=sorted(TEST_FACTORIES))
def factory(request):
    return TEST_FACTORIES[request.param]
