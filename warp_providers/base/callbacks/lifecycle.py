"""Request lifecycle orchestration over a ``CallbackRegistry``.

``RequestLifecycle`` is the glue a client uses around one provider call::

    lifecycle = RequestLifecycle(registry, model="gpt-4o", provider="openai", request=payload)
    lifecycle.begin()                      # may raise CallbackVetoError / CancelledError
    try:
        response = transport.send(...)
    except Exception as exc:
        raise lifecycle.fail(exc)
    lifecycle.succeed(response, tokens=response.usage.total_tokens)

For streams, ``wrap_stream`` returns a ``CallbackStream`` that shares the
lifecycle's once-only guard, so exactly one of success/failure fires whether
the outcome is reported by the stream or by the caller.
"""
from __future__ import annotations

import logging
import secrets
import time
from threading import Lock
from typing import Any, Optional, Tuple

from ...config import get_runtime_config
from ..cancellation import CancellationToken, CancelledError
from ..errors import CallbackVetoError
from ..logging import LogContext, get_logger, log_event
from .events import BeforeRequestEvent, FailureEvent, SuccessEvent, utc_now
from .registry import CallbackRegistry


def generate_request_id() -> str:
    """Return ``req_<unix nanos>_<8 hex chars>``."""
    return f"req_{time.time_ns()}_{secrets.token_hex(4)}"


def split_model(model: str) -> Tuple[str, str]:
    """Split ``"provider/model-name"`` into its two parts.

    Only the first ``/`` separates; model names may contain further slashes.

    Raises:
        ValueError: Missing separator or an empty provider or model part.
    """
    provider, sep, name = model.partition("/")
    if not sep:
        raise ValueError(f"invalid model format: {model!r} (expected format: provider/model-name)")
    if not provider:
        raise ValueError(f"provider name is empty in model: {model!r}")
    if not name:
        raise ValueError(f"model name is empty in model: {model!r}")
    return provider, name


class RequestLifecycle:
    """Runs the callback stages for a single request.

    Args:
        registry: The client's callback registry.
        model: Model name without provider prefix.
        provider: Provider name.
        request: Opaque request payload passed to every event.
        request_id: Identifier to use; generated when omitted.
        token: Cancellation token for the request. When omitted a fresh token
            is created, with a deadline when
            ``RuntimeConfig.request_timeout_seconds`` is set.
    """

    def __init__(
        self,
        registry: CallbackRegistry,
        *,
        model: str,
        provider: str,
        request: Any = None,
        request_id: Optional[str] = None,
        token: Optional[CancellationToken] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.registry = registry
        self.model = model
        self.provider = provider
        self.request = request
        self.request_id = request_id or generate_request_id()
        if token is None:
            token = CancellationToken(timeout=get_runtime_config().request_timeout_seconds)
        self.token = token
        self.start_time = utc_now()
        self._logger = logger or get_logger("warp.request")
        self._lock = Lock()
        self._started = False
        self._completed = False
        self._aborted = False

    @property
    def aborted(self) -> bool:
        """True when ``begin()`` was vetoed or cancelled."""
        return self._aborted

    @property
    def completed(self) -> bool:
        """True once success or failure has been reported (or the request aborted)."""
        return self._completed

    def _claim(self) -> bool:
        with self._lock:
            if self._completed:
                return False
            self._completed = True
            return True

    def begin(self) -> None:
        """Run the before-request hooks.

        Raises:
            CallbackVetoError: A hook rejected the request.
            CancelledError: The token fired before or between hooks.
            RuntimeError: ``begin`` was already called.
        """
        with self._lock:
            if self._started:
                raise RuntimeError("request lifecycle already started")
            self._started = True
        self.start_time = utc_now()
        log_event(
            self._logger,
            "request.begin",
            LogContext(provider=self.provider, model=self.model, request_id=self.request_id),
            level=logging.DEBUG,
        )
        try:
            self.registry.execute_before_request(
                self.token,
                BeforeRequestEvent(
                    request_id=self.request_id,
                    model=self.model,
                    provider=self.provider,
                    request=self.request,
                    start_time=self.start_time,
                ),
            )
        except (CallbackVetoError, CancelledError):
            self._aborted = True
            self._claim()
            raise

    def succeed(self, response: Any, *, cost: float = 0.0, tokens: int = 0) -> bool:
        """Fire the success hooks once; returns False when already completed."""
        if not self._claim():
            return False
        end = utc_now()
        self.registry.execute_success(
            self.token,
            SuccessEvent(
                request_id=self.request_id,
                model=self.model,
                provider=self.provider,
                request=self.request,
                response=response,
                start_time=self.start_time,
                end_time=end,
                duration=end - self.start_time,
                cost=cost,
                tokens=tokens,
            ),
        )
        return True

    def fail(self, error: BaseException) -> BaseException:
        """Fire the failure hooks once and return ``error`` for re-raising."""
        if self._claim():
            end = utc_now()
            self.registry.execute_failure(
                self.token,
                FailureEvent(
                    request_id=self.request_id,
                    model=self.model,
                    provider=self.provider,
                    error=error,
                    request=self.request,
                    start_time=self.start_time,
                    end_time=end,
                    duration=end - self.start_time,
                ),
            )
        return error

    def wrap_stream(self, stream: Any):
        """Wrap ``stream`` in a ``CallbackStream`` bound to this lifecycle."""
        from ..streaming.callback_stream import CallbackStream  # local import to avoid cycles

        return CallbackStream(
            stream,
            self.registry,
            self.token,
            request_id=self.request_id,
            model=self.model,
            provider=self.provider,
            request=self.request,
            start_time=self.start_time,
            claim_completion=self._claim,
        )


__all__ = ["RequestLifecycle", "generate_request_id", "split_model"]
