"""
Experiment runner: orchestrates a full benchmarking sweep from a YAML config.

Usage (from repo root):
    python -m sortmachine.bench.runner experiments/configs/01_heap_vs_reference.yaml
    sortmachine-bench experiments/configs/01_heap_vs_reference.yaml

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per timing sample / failure record
    - summary.csv             # median + IQR per (impl, n)
    - (console) rich/tqdm summaries

Design notes:
- For each size n, we generate ONE dataset and feed the same input to every
  implementation.
- Every drained output is validated against the order; an invalid output is
  recorded like an error.
- On timeout/error/invalid for an implementation at size n, we skip larger
  sizes for that implementation.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import functools
import json
import logging
import os
import platform
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from sortmachine.bench.measure import time_drain_call
from sortmachine.datasets import make_dataset
from sortmachine.machine import HeapSortingMachine, SortingMachine
from sortmachine.order import Order, resolve_order
from sortmachine.validate import ReferenceSortingMachine

logger = logging.getLogger(__name__)
_console = Console()

# Implementations selectable from a config's "implementations" list.
IMPLEMENTATIONS: Dict[str, Callable[[Order], SortingMachine]] = {
    "heap": HeapSortingMachine,
    "heap_incremental": functools.partial(HeapSortingMachine, incremental=True),
    "reference": ReferenceSortingMachine,
}

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "dataset",
    "sizes",
    "implementations",
]

_SUMMARY_COLUMNS = ["impl", "n", "samples_ok", "median_ns", "iqr_ns", "min_ns", "max_ns"]


# ------------------------- data structures ------------------------- #

@dataclass(frozen=True)
class ImplSpec:
    name: str
    factory: Callable[[Order], SortingMachine]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    suffix = 1
    while run_dir.exists():
        run_dir = base_dir / f"{_timestamp()}_{experiment_name}_{suffix}"
        suffix += 1
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def _gather_meta() -> Dict[str, Any]:
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


def _resolve_implementations(names: List[Any]) -> List[ImplSpec]:
    specs: List[ImplSpec] = []
    seen = set()
    for name in names:
        if not name or not isinstance(name, str):
            raise ValueError("Each implementation must be a non-empty string")
        if name in seen:
            raise ValueError(f"Duplicate implementation name in config: {name}")
        if name not in IMPLEMENTATIONS:
            raise ValueError(f"Unknown implementation: {name!r}. Supported: {sorted(IMPLEMENTATIONS)}")
        seen.add(name)
        specs.append(ImplSpec(name=name, factory=IMPLEMENTATIONS[name]))
    return specs


def _validate_config(cfg: Any) -> None:
    if not isinstance(cfg, dict):
        raise ValueError("Config must be a YAML mapping")
    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")
    sizes = cfg["sizes"]
    if not isinstance(sizes, list) or not sizes:
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")
    if any(not isinstance(n, int) or isinstance(n, bool) or n < 0 for n in sizes):
        raise ValueError(f"Config 'sizes' must hold nonnegative integers; got {sizes!r}")
    if not isinstance(cfg["implementations"], list) or not cfg["implementations"]:
        raise ValueError("Config 'implementations' must be a non-empty list")


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    if not jsonl_path.exists():
        return pd.DataFrame(columns=_SUMMARY_COLUMNS)
    df = pd.read_json(jsonl_path, lines=True)
    # Failure records carry no time_ns
    if "time_ns" not in df.columns:
        return pd.DataFrame(columns=_SUMMARY_COLUMNS)
    df = df[df["time_ns"].notna()]
    if df.empty:
        return pd.DataFrame(columns=_SUMMARY_COLUMNS)

    agg = (
        df.groupby(["impl", "n"], as_index=False)
        .agg(
            samples_ok=("time_ns", "count"),
            median_ns=("time_ns", "median"),
            min_ns=("time_ns", "min"),
            max_ns=("time_ns", "max"),
        )
    )
    iqr_vals = (
        df.groupby(["impl", "n"])["time_ns"]
        .agg(lambda s: int(s.quantile(0.75) - s.quantile(0.25)))
        .rename("iqr_ns")
        .reset_index()
    )
    out = agg.merge(iqr_vals, on=["impl", "n"], how="left")
    out[["median_ns", "min_ns", "max_ns", "iqr_ns"]] = out[["median_ns", "min_ns", "max_ns", "iqr_ns"]].astype("int64")
    out["n"] = out["n"].astype("int64")
    return out[_SUMMARY_COLUMNS].sort_values(["impl", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame, sizes: List[int]) -> None:
    table = Table(title="Benchmark Summary (median ± IQR in ms)")
    table.add_column("Implementation", style="bold")
    picks: List[Tuple[str, int]] = []
    if sizes:
        first = sizes[0]
        mid = sizes[len(sizes) // 2]
        last = sizes[-1]
        for npick in dict.fromkeys([first, mid, last]):
            picks.append((f"n={npick}", npick))
            table.add_column(f"n={npick}", justify="right")

    def _format_cell(median_ns: int, iqr_ns: int) -> str:
        return f"{median_ns / 1e6:.2f} ± {iqr_ns / 1e6:.2f}"

    for impl in summary["impl"].unique():
        row = [f"[bold]{impl}[/]"]
        for _, npick in picks:
            s = summary[(summary["impl"] == impl) & (summary["n"] == npick)]
            if s.empty:
                row.append("—")
            else:
                row.append(_format_cell(int(s["median_ns"].values[0]), int(s["iqr_ns"].values[0])))
        table.add_row(*row)
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path, *, progress: bool = True) -> Path:
    cfg = _load_yaml(config_path)
    _validate_config(cfg)

    experiment_name: str = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes: List[int] = list(cfg["sizes"])
    repeats: int = int(cfg["repeats"])
    warmup: bool = bool(cfg["warmup"])
    disable_gc: bool = bool(cfg["disable_gc"])
    timeout_seconds: float = float(cfg["timeout_seconds"])
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])
    order_name: str = str(cfg.get("order", "case_insensitive"))
    order = resolve_order(order_name)
    impls = _resolve_implementations(list(cfg["implementations"]))

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    # Persist resolved config early
    _write_yaml({**cfg, "order": order_name}, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))

    # Per-implementation skip flags (set on timeout/error/invalid)
    per_impl_skip = {spec.name: False for spec in impls}

    logger.info("run directory: %s", run_dir)
    logger.info("experiment %s: order=%s implementations=%s", experiment_name, order_name, [s.name for s in impls])

    for n in tqdm(sizes, desc="Sizes", unit="n", disable=not progress):
        base_a = make_dataset(int(n), dataset_spec, rng)

        for spec in impls:
            if per_impl_skip[spec.name]:
                continue

            res = time_drain_call(
                impl_name=spec.name,
                factory=spec.factory,
                a=base_a,
                order=order,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
            )

            for trial_idx, t_ns in enumerate(res["samples_ns"]):
                _append_jsonl(
                    {
                        "impl": spec.name,
                        "n": int(n),
                        "dataset": dataset_spec,
                        "order": order_name,
                        "trial": int(trial_idx),
                        "time_ns": int(t_ns),
                    },
                    results_path,
                )

            status = res["status"]
            if status != "ok":
                per_impl_skip[spec.name] = True
                logger.warning("%s at n=%d: %s; skipping larger sizes", spec.name, n, status)
                _append_jsonl(
                    {
                        "impl": spec.name,
                        "n": int(n),
                        "status": status,
                        "error": res["error"],
                        "timed_out_on_repeat": res["timed_out_on_repeat"],
                    },
                    results_path,
                )

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)

    if progress:
        _print_rich_summary(summary_df, sizes)
        _console.print("[bold green]Done.[/bold green] Wrote:")
        for path in (results_path, summary_path, meta_path, cfg_resolved_path):
            _console.print(f" - {path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a sorting machine benchmark experiment from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=_console, show_path=False)],
    )
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
