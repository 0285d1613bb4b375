"""
Errors produced by lifecycle callback execution.

``CallbackPanicError`` is the error value a raised callback exception is
converted into at the recovery boundary. ``CallbackVetoError`` aggregates every
failure of a before-request run into one exception whose message lists each
contributing error in registration order.
"""
from __future__ import annotations

from typing import Sequence, Tuple

from .error_code import ErrorCode


class CallbackPanicError(RuntimeError):
    """A callback raised instead of returning; carries the original exception."""

    def __init__(self, original: BaseException) -> None:
        super().__init__(f"callback panic: {original!r}")
        self.original = original


class CallbackVetoError(Exception):
    """One or more before-request callbacks rejected the request.

    Attributes:
        errors: Every contributing error, in callback registration order.
    """

    code = ErrorCode.VALIDATION

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors: Tuple[BaseException, ...] = tuple(errors)
        joined = "; ".join(str(e) for e in self.errors)
        super().__init__(f"before-request callbacks failed: {joined}")


__all__ = ["CallbackPanicError", "CallbackVetoError"]
