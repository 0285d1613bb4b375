"""Cancellation error types.

Defines the public ``CancelledError`` used to signal cooperative cancellation
and its ``DeadlineExceededError`` specialization for tokens whose deadline
elapsed. A token creates exactly one error instance when it fires and surfaces
that same instance everywhere, so callers may match by identity or by type.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    This specialized error distinguishes cooperative cancellation from other
    runtime failures, enabling targeted handling (e.g., suppress log noise,
    map to a structured status, or avoid retry logic).
    """


class DeadlineExceededError(CancelledError):
    """Raised when a token's deadline elapsed before the operation finished."""


__all__ = ["CancelledError", "DeadlineExceededError"]
