"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class that governs a request: the stream
decoder polls it around each blocking read and the callback registry polls it
before each callback. Tokens cascade to children and may carry a deadline.
"""

from __future__ import annotations

import time
from threading import Lock
from typing import List, Optional

from .state import State
from .cancelled_error import CancelledError, DeadlineExceededError


class CancellationToken:
    """A cooperative cancellation token with optional cascading semantics.

    Thread-safe. Child tokens inherit cancellation when the parent is
    cancelled and receive the parent's error instance. A token created with
    ``timeout`` fires on its own once the deadline elapses; the deadline is
    evaluated lazily whenever the token is polled, and polling a child also
    polls its ancestors so an elapsed parent deadline reaches the child.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None, timeout: float | None = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        self._timeout = timeout
        self._parent = parent
        if timeout is not None:
            self._state.deadline = time.monotonic() + max(0.0, float(timeout))
        if parent is not None:
            parent.link_child(self)

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        """Return a root token that fires after ``seconds``."""
        return cls(timeout=seconds)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested or the deadline elapsed."""
        if self._state.cancelled:
            return True
        deadline = self._state.deadline
        if deadline is not None and time.monotonic() >= deadline:
            self._fire(DeadlineExceededError(f"deadline exceeded after {self._timeout}s"), reason="deadline exceeded")
            return True
        parent = self._parent
        if parent is not None and parent.cancelled:
            # an ancestor deadline only fires when polled
            self._fire(parent._state.error or CancelledError("operation cancelled"), reason=parent._state.reason)
            return True
        return False

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    @property
    def error(self) -> Optional[CancelledError]:
        """The error instance this token surfaces, or ``None`` while live."""
        if not self.cancelled:
            return None
        return self._state.error

    @property
    def deadline(self) -> float | None:
        """Monotonic deadline (``time.monotonic()`` scale) or ``None``."""
        return self._state.deadline

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation and cascade to children."""
        self._fire(CancelledError(reason or "operation cancelled"), reason=reason)

    def _fire(self, error: CancelledError, *, reason: str | None) -> None:
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            self._state.error = error
            children = list(self._children)
        for child in children:
            child._fire(error, reason=reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        with self._lock:
            self._children.append(token)
        if self.cancelled:
            token._fire(self._state.error or CancelledError("operation cancelled"), reason=self._state.reason)
        return token

    def raise_if_cancelled(self) -> None:
        """Raise the token's ``CancelledError`` instance if it has fired."""
        if self.cancelled:
            err = self._state.error
            if err is None:  # pragma: no cover - state always carries the error once fired
                err = CancelledError(self._state.reason or "operation cancelled")
            raise err.with_traceback(None)

    def child(self, *, timeout: float | None = None) -> "CancellationToken":
        """Create and link a child token (shortcut)."""
        return CancellationToken(parent=self, timeout=timeout)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken"]
