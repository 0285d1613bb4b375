"""Callback signatures, one alias per lifecycle stage.

Every callback receives the request's cancellation token and the stage event.
A BeforeRequest callback vetoes the request by *returning* an exception
instance; returning ``None`` lets it proceed. The other stages are observers
and their return values are ignored.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from ..cancellation import CancellationToken
from .events import BeforeRequestEvent, FailureEvent, StreamEvent, SuccessEvent

BeforeRequestCallback = Callable[[CancellationToken, BeforeRequestEvent], Optional[BaseException]]
SuccessCallback = Callable[[CancellationToken, SuccessEvent], Any]
FailureCallback = Callable[[CancellationToken, FailureEvent], Any]
StreamCallback = Callable[[CancellationToken, StreamEvent], Any]

__all__ = [
    "BeforeRequestCallback",
    "SuccessCallback",
    "FailureCallback",
    "StreamCallback",
]
