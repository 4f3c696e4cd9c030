"""
Timing harness for sorting machine implementations.

One sample is one full machine lifecycle: construct, `add` every input
element, `change_to_extraction_mode`, then `remove_first` until empty. We
time it with a monotonic high-resolution clock. GC and warmup happen
outside the timed block; output validation happens after it.

Public API (stable):
    time_drain_call(... ) -> dict

Returned dict schema:
    {
        "impl": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns for each successful sample
        "status": "ok" | "timeout" | "error" | "invalid",
        "error": str | None,                # populated if status is "error" or "invalid"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
    }
"""

from __future__ import annotations

import gc
import logging
import time
from typing import Any, Callable, Dict, List, Optional

from sortmachine.machine.base import SortingMachine, drain
from sortmachine.order import Order
from sortmachine.validate.properties import (
    first_nondecreasing_violation_index,
    is_permutation,
)

logger = logging.getLogger(__name__)

__all__ = ["time_drain_call", "run_lifecycle"]


def run_lifecycle(factory: Callable[[Order], SortingMachine], a: List[Any], order: Order) -> List[Any]:
    """Fill a fresh machine with `a`, switch modes, and return the drained output."""
    machine = factory(order)
    for x in a:
        machine.add(x)
    machine.change_to_extraction_mode()
    return drain(machine)


def _check_output(a: List[Any], out: List[Any], order: Order) -> Optional[str]:
    i = first_nondecreasing_violation_index(out, order)
    if i is not None:
        return f"not nondecreasing at i={i}: {out[i]!r} > {out[i + 1]!r}"
    if not is_permutation(a, out):
        return "output is not a permutation of the input"
    return None


def time_drain_call(
    *,
    impl_name: str,
    factory: Callable[[Order], SortingMachine],
    a: List[Any],
    order: Order,
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
    validate: bool = True,
) -> Dict[str, Any]:
    """
    Time repeated lifecycles of machines built by `factory(order)` over `a`.

    Parameters
    ----------
    impl_name : str
        Logical name of the implementation (for logs/records).
    factory : Callable[[Order], SortingMachine]
        Builds an empty machine for the given order.
    a : list
        Input elements. Never mutated; machines only read from it.
    order : Order
        Three-way comparison passed to the factory.
    repeats : int
        Number of timed samples to collect.
    warmup : bool
        If True, run one untimed lifecycle first.
    disable_gc : bool
        If True, collect and disable Python GC during the timed loop; restore afterward.
    timeout_seconds : float
        Per-sample threshold. A sample exceeding it sets status="timeout" and
        stops further sampling.
    validate : bool
        If True, check every drained output is nondecreasing and a permutation
        of `a`; the first failure sets status="invalid".

    Returns
    -------
    dict
        See module docstring for exact schema.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    result: Dict[str, Any] = {
        "impl": impl_name,
        "repeats": repeats,
        "samples_ns": [],
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
    }

    if warmup and repeats > 0:
        try:
            run_lifecycle(factory, a, order)
        except Exception as e:
            logger.warning("%s: warmup failed: %r", impl_name, e)
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            try:
                t0 = time.perf_counter_ns()
                out = run_lifecycle(factory, a, order)
                t1 = time.perf_counter_ns()
            except Exception as e:
                logger.warning("%s: run failed at repeat %d: %r", impl_name, r, e)
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            elapsed = t1 - t0
            result["samples_ns"].append(int(elapsed))

            if validate:
                problem = _check_output(a, out, order)
                if problem is not None:
                    logger.warning("%s: invalid output at repeat %d: %s", impl_name, r, problem)
                    result["status"] = "invalid"
                    result["error"] = problem
                    break

            if elapsed > threshold_ns:
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        # If GC was previously disabled, leave it disabled (respect caller's global state).
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result
