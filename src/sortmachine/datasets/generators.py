"""
String dataset generators for feeding sorting machines.

Currently implemented:
- dist == "random_words":
    Lowercase ASCII words whose lengths are drawn uniformly from an inclusive
    range.

- dist == "few_uniques":
    Pick min(k, n, #words the length range allows) distinct base words, then
    fill the array by sampling indices into them uniformly. Lots of exact
    duplicates.

- dist == "case_variants":
    Like "few_uniques", but every emitted copy is randomly re-cased letter by
    letter. Under the case-insensitive order this yields many elements that
    are order-equivalent yet unequal ("Beer", "bEER", ...).

- dist == "nearly_sorted":
    Start from zero-padded numeric strings ["000", "001", ...] (sorted under
    both orders) then perform ceil(swap_frac * n) random index swaps.

- dist == "reversed":
    Deterministic reversed order of the same zero-padded numeric strings.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list[str]

Conventions:
- params["length"] == [min_len, max_len] is **inclusive** on both ends and
  defaults to [1, 8] wherever words are generated.
- Returns a Python `list[str]` (machines stay NumPy-agnostic).
- The caller supplies the RNG (for reproducibility across runs).
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import numpy as np

SUPPORTED_DISTS = {
    "random_words",
    "few_uniques",
    "case_variants",
    "nearly_sorted",
    "reversed",
}
__all__ = ["SUPPORTED_DISTS", "make_dataset"]

_ALPHABET = "abcdefghijklmnopqrstuvwxyz"
_DEFAULT_LENGTH = (1, 8)


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[str]:
    """
    Generate a string dataset according to `spec`, using the provided RNG.

    Parameters
    ----------
    n : int
        Number of elements to generate. Must be >= 0.
    spec : dict
        Distribution specification.

        Random words:
            {
                "dist": "random_words",
                "params": { "length": [1, 8] }          # optional; inclusive
            }

        Few-uniques / case variants:
            {
                "dist": "few_uniques" | "case_variants",
                "params": {
                    "k": 20,                            # desired #base words (>=1)
                    "length": [1, 8]                    # optional; inclusive
                }
            }

        Nearly-sorted:
            {
                "dist": "nearly_sorted",
                "params": { "swap_frac": 0.05 }         # in [0.0, 1.0]
            }

        Reversed:
            {
                "dist": "reversed",
                "params": {}                            # params unused
            }

    rng : numpy.random.Generator
        Random number generator owned by the caller (seeded upstream).

    Returns
    -------
    list[str]
        A list of length `n`.

    Raises
    ------
    ValueError
        If inputs are invalid or if the distribution is unsupported.
    """
    _validate_n(n)

    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )

    params = spec.get("params", {}) or {}

    if dist == "random_words":
        lo, hi = _parse_length(params)
        if n == 0:
            return []
        return _words(n, lo, hi, rng)

    if dist in ("few_uniques", "case_variants"):
        k = _parse_k(params)
        lo, hi = _parse_length(params)
        if n == 0:
            return []
        # Cannot use more base words than positions or than the length range allows.
        actual_k = min(k, n, _word_capacity(lo, hi))
        base = _distinct_words(actual_k, lo, hi, rng)
        idxs = rng.integers(0, len(base), size=n)
        out = [base[int(t)] for t in idxs]
        if dist == "case_variants":
            out = [_recase(w, rng) for w in out]
        return out

    if dist == "nearly_sorted":
        swap_frac = _parse_swap_frac(params)
        if n == 0:
            return []
        arr = _numbered(n)
        # ceil so a small nonzero fraction still makes at least one swap
        num_swaps = int(np.ceil(swap_frac * n))
        if num_swaps <= 0:
            return arr
        idxs = rng.integers(0, n, size=2 * num_swaps)
        for s in range(num_swaps):
            i = int(idxs[2 * s])
            j = int(idxs[2 * s + 1])
            arr[i], arr[j] = arr[j], arr[i]
        return arr

    if dist == "reversed":
        # `rng` is unused.
        return _numbered(n)[::-1]

    raise ValueError(f"Unhandled dataset dist: {dist!r}")


# ------------------------- helpers ------------------------- #


def _validate_n(n: int) -> None:
    if not isinstance(n, int):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")


def _words(count: int, lo: int, hi: int, rng: np.random.Generator) -> List[str]:
    lengths = rng.integers(lo, hi + 1, size=count)
    letters = rng.integers(0, len(_ALPHABET), size=int(lengths.sum()))
    out: List[str] = []
    pos = 0
    for length in map(int, lengths):
        out.append("".join(_ALPHABET[int(c)] for c in letters[pos:pos + length]))
        pos += length
    return out


def _word_capacity(lo: int, hi: int) -> int:
    return sum(len(_ALPHABET) ** length for length in range(lo, hi + 1))


def _distinct_words(count: int, lo: int, hi: int, rng: np.random.Generator) -> List[str]:
    """
    Draw `count` distinct words by rejecting repeats; `count` must not exceed
    `_word_capacity(lo, hi)`.
    """
    chosen: List[str] = []
    seen = set()
    while len(chosen) < count:
        # Oversample to reduce collisions
        need = count - len(chosen)
        for w in _words(need * 2, lo, hi, rng):
            if w not in seen:
                seen.add(w)
                chosen.append(w)
                if len(chosen) == count:
                    break
    return chosen


def _recase(word: str, rng: np.random.Generator) -> str:
    upper = rng.random(len(word)) < 0.5
    return "".join(ch.upper() if up else ch for ch, up in zip(word, upper))


def _numbered(n: int) -> List[str]:
    # Zero-padding keeps lexicographic order equal to numeric order.
    width = len(str(max(n - 1, 0)))
    return [str(i).zfill(width) for i in range(n)]


def _parse_length(params: Dict[str, Any]) -> Tuple[int, int]:
    """
    Parse the optional inclusive word length range params["length"].

    Returns
    -------
    (lo, hi) : tuple[int, int]
    """
    if "length" not in params:
        return _DEFAULT_LENGTH
    spec = params["length"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("params.length must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("params.length values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo < 0:
        raise ValueError(f"params.length min must be nonnegative; got {lo}")
    if lo > hi:
        raise ValueError(f"params.length invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_swap_frac(params: Dict[str, Any]) -> float:
    """
    Parse and validate swap_frac in [0.0, 1.0] for nearly_sorted.
    Default to 0.05 if not provided.
    """
    val = params.get("swap_frac", 0.05)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {val!r}"
        ) from e
    if not (0.0 <= x <= 1.0):
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {x}"
        )
    return x


def _parse_k(params: Dict[str, Any]) -> int:
    """Parse k (desired #base words); must be an integer >= 1."""
    if "k" not in params:
        raise ValueError("params.k must be provided (int >= 1)")
    k = params["k"]
    if not _is_int_like(k) or k < 1:
        raise ValueError(f"params.k must be an integer >= 1; got {k!r}")
    return int(k)


def _is_int_like(x: Any) -> bool:
    # Accept Python ints and NumPy integer types, but not bools
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
