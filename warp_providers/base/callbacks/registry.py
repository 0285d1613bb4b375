"""Concurrency-safe lifecycle callback registry.

The registry owns four insertion-ordered callback lists, one per stage. All
access follows the snapshot pattern: ``register_*`` appends under the lock,
``execute_*`` copies the stage's list under the lock, releases it, and only
then runs the copy on the caller's thread. No callback ever runs while the
lock is held, so a callback may register further callbacks (they apply from
the next execution on) and slow observers never block registration.

Stage semantics:

============== ===== ============================== ===========================
Stage          Veto  Callback raises                Cancelled token
============== ===== ============================== ===========================
before_request yes   ``CallbackPanicError``, joins  token error raised
                     the aggregated veto
success        no    logged and discarded           halts silently
failure        no    logged and discarded           halts silently
stream         no    logged and discarded           halts silently
============== ===== ============================== ===========================

Only ``Exception`` subclasses are contained; ``KeyboardInterrupt`` and
``SystemExit`` propagate.
"""
from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Sequence

from ...config import get_runtime_config
from ..cancellation import CancellationToken
from ..errors import CallbackPanicError, CallbackVetoError
from ..logging import LogContext, get_logger, log_event
from .events import BeforeRequestEvent, FailureEvent, StreamEvent, SuccessEvent
from .hook_types import BeforeRequestCallback, FailureCallback, StreamCallback, SuccessCallback

_BEFORE_REQUEST = "before_request"
_SUCCESS = "success"
_FAILURE = "failure"
_STREAM = "stream"
STAGES = (_BEFORE_REQUEST, _SUCCESS, _FAILURE, _STREAM)


def _callback_name(cb: Callable[..., Any]) -> str:
    return getattr(cb, "__qualname__", None) or type(cb).__name__


class CallbackRegistry:
    """Registry of lifecycle hooks for one client.

    Thread-safe. There is no process-wide instance; each client builds and
    owns its registry.
    """

    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._lock = Lock()
        self._before_request: List[BeforeRequestCallback] = []
        self._success: List[SuccessCallback] = []
        self._failure: List[FailureCallback] = []
        self._stream: List[StreamCallback] = []
        self._logger = logger or get_logger("warp.callbacks")

    # ------------------------------------------------------------------ register
    def register_before_request(self, cb: Optional[BeforeRequestCallback]) -> None:
        """Append a before-request hook; ``None`` is ignored."""
        self._append(self._before_request, cb)

    def register_success(self, cb: Optional[SuccessCallback]) -> None:
        self._append(self._success, cb)

    def register_failure(self, cb: Optional[FailureCallback]) -> None:
        self._append(self._failure, cb)

    def register_stream(self, cb: Optional[StreamCallback]) -> None:
        self._append(self._stream, cb)

    def _append(self, target: List[Any], cb: Optional[Callable[..., Any]]) -> None:
        if cb is None:
            return
        with self._lock:
            target.append(cb)

    def _snapshot(self, source: List[Any]) -> List[Any]:
        with self._lock:
            return list(source)

    # ------------------------------------------------------------------- execute
    def execute_before_request(self, token: CancellationToken, event: BeforeRequestEvent) -> None:
        """Run every before-request hook in registration order.

        Raises:
            CancelledError: The token's own error when it fires before a hook.
            CallbackVetoError: One or more hooks returned an exception or raised.
        """
        callbacks = self._snapshot(self._before_request)
        if not callbacks:
            return
        errors: List[BaseException] = []
        for cb in callbacks:
            token.raise_if_cancelled()
            try:
                result = cb(token, event)
            except Exception as exc:  # noqa: BLE001 - recovery boundary per callback
                result = CallbackPanicError(exc)
            if isinstance(result, BaseException):
                errors.append(result)
        if errors:
            log_event(
                self._logger,
                "callback.veto",
                LogContext(provider=event.provider, model=event.model, request_id=event.request_id),
                level=logging.WARNING,
                stage=_BEFORE_REQUEST,
                errors=[str(e) for e in errors],
            )
            raise CallbackVetoError(errors)

    def execute_success(self, token: CancellationToken, event: SuccessEvent) -> None:
        """Notify success observers; failures are absorbed."""
        self._observe(_SUCCESS, self._snapshot(self._success), token, event)

    def execute_failure(self, token: CancellationToken, event: FailureEvent) -> None:
        """Notify failure observers; failures are absorbed."""
        self._observe(_FAILURE, self._snapshot(self._failure), token, event)

    def execute_stream(self, token: CancellationToken, event: StreamEvent) -> None:
        """Notify stream observers of one chunk; failures are absorbed."""
        self._observe(_STREAM, self._snapshot(self._stream), token, event)

    def _observe(self, stage: str, callbacks: Sequence[Callable[..., Any]], token: CancellationToken, event: Any) -> None:
        for cb in callbacks:
            if token.cancelled:
                return
            try:
                cb(token, event)
            except Exception as exc:  # noqa: BLE001 - observers never fail the request
                self._log_suppressed(stage, cb, exc, event)

    def _log_suppressed(self, stage: str, cb: Callable[..., Any], exc: Exception, event: Any) -> None:
        if not get_runtime_config().log_callback_failures:
            return
        log_event(
            self._logger,
            "callback.suppressed",
            LogContext(
                provider=getattr(event, "provider", None),
                model=getattr(event, "model", None),
                request_id=getattr(event, "request_id", None),
            ),
            level=logging.WARNING,
            stage=stage,
            callback=_callback_name(cb),
            error_type=type(exc).__name__,
            error=str(exc),
        )

    # --------------------------------------------------------------- diagnostics
    def counts(self) -> Dict[str, int]:
        """Snapshot of the number of registered hooks per stage."""
        with self._lock:
            return {
                _BEFORE_REQUEST: len(self._before_request),
                _SUCCESS: len(self._success),
                _FAILURE: len(self._failure),
                _STREAM: len(self._stream),
            }

    def clear(self) -> None:
        """Remove every registered hook (teardown helper)."""
        with self._lock:
            self._before_request.clear()
            self._success.clear()
            self._failure.clear()
            self._stream.clear()


__all__ = ["CallbackRegistry", "STAGES"]
