"""
Error types for the sorting machine contract.

Only one fault category exists in the core: calling an operation whose
precondition does not hold (wrong mode, removing from an empty machine,
switching mode twice). That is a programmer error, so it subclasses
`AssertionError` and is never caught or retried inside the package.
"""

from __future__ import annotations

__all__ = ["PreconditionViolation"]


class PreconditionViolation(AssertionError):
    """Raised when a sorting machine operation is called outside its contract."""
