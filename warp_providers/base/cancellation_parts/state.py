"""Internal state holder for cancellation tokens.

Dataclass used by ``CancellationToken`` to track cancellation status, the
optional reason, the cached error instance and an optional monotonic deadline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .cancelled_error import CancelledError


@dataclass
class State:
    """Internal state for cooperative cancellation tokens."""

    cancelled: bool = False
    reason: Optional[str] = None
    error: Optional[CancelledError] = None
    deadline: Optional[float] = None


__all__ = ["State"]
