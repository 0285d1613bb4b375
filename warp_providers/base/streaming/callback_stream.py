"""Stream wrapper that reports chunk and completion events to a registry.

``CallbackStream`` decorates any object exposing ``recv()``/``close()``
(normally a ``StreamDecoder``). Per request it fires one ``StreamEvent`` per
chunk and then exactly one ``SuccessEvent`` (on ``EndOfStream``) or
``FailureEvent`` (any other terminal exception). ``close()`` fires nothing.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime
from threading import Lock
from typing import Any, Callable, Iterator, Optional

from ..cancellation import CancellationToken
from ..callbacks.events import FailureEvent, StreamEvent, SuccessEvent, utc_now
from ..callbacks.registry import CallbackRegistry
from ..errors import EndOfStream, classify_exception
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import CompletionChunk
from .streaming_metrics import StreamMetrics, apply_usage, validate_token_usage


def _once_guard() -> Callable[[], bool]:
    lock = Lock()
    state = {"claimed": False}

    def claim() -> bool:
        with lock:
            if state["claimed"]:
                return False
            state["claimed"] = True
            return True

    return claim


class CallbackStream:
    """Lifecycle-reporting wrapper around a chunk stream.

    ``claim_completion`` lets an owner (``RequestLifecycle``) share its
    once-only completion guard; by default the stream owns its own.
    """

    def __init__(
        self,
        stream: Any,
        registry: CallbackRegistry,
        token: CancellationToken,
        *,
        request_id: str,
        model: str,
        provider: str,
        request: Any = None,
        start_time: Optional[datetime] = None,
        claim_completion: Optional[Callable[[], bool]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._stream = stream
        self._registry = registry
        self._token = token
        self.request_id = request_id
        self.model = model
        self.provider = provider
        self.request = request
        self.start_time = start_time or utc_now()
        self._claim = claim_completion or _once_guard()
        self._logger = logger or get_logger("warp.stream")
        self._ctx = LogContext(provider=provider, model=model, request_id=request_id)
        self._index = 0
        self._last_chunk: Optional[CompletionChunk] = None
        self._last_total_tokens = 0
        self._t0 = time.perf_counter()
        self.metrics = StreamMetrics()

    def recv(self) -> CompletionChunk:
        try:
            chunk = self._stream.recv()
        except EndOfStream:
            self._complete_success()
            raise
        except Exception as exc:
            self._complete_failure(exc)
            raise
        self._record(chunk)
        self._registry.execute_stream(
            self._token,
            StreamEvent(
                request_id=self.request_id,
                model=self.model,
                provider=self.provider,
                chunk=chunk,
                index=self._index,
            ),
        )
        self._index += 1
        return chunk

    def _record(self, chunk: CompletionChunk) -> None:
        if self.metrics.emitted == 0:
            self.metrics.time_to_first_chunk_ms = (time.perf_counter() - self._t0) * 1000.0
        self.metrics.emitted += 1
        self._last_chunk = chunk
        if chunk.usage is not None:
            self._last_total_tokens = chunk.usage.total_tokens
            apply_usage(self.metrics, chunk.usage)
            ok, reason = validate_token_usage(self.metrics)
            if not ok:
                log_event(
                    self._logger,
                    "stream.usage.invalid",
                    self._ctx,
                    level=logging.WARNING,
                    reason=reason,
                    chunk_index=self._index,
                )

    def _finish_metrics(self) -> None:
        self.metrics.total_duration_ms = (time.perf_counter() - self._t0) * 1000.0

    def _complete_success(self) -> None:
        if not self._claim():
            return
        self._finish_metrics()
        end = utc_now()
        normalized_log_event(
            self._logger,
            "stream.adapter.end",
            self._ctx,
            phase="finalize",
            emitted=self.metrics.emitted > 0,
            tokens=self.metrics.tokens,
            emitted_count=self.metrics.emitted,
            time_to_first_chunk_ms=self.metrics.time_to_first_chunk_ms,
            total_duration_ms=self.metrics.total_duration_ms,
        )
        self._registry.execute_success(
            self._token,
            SuccessEvent(
                request_id=self.request_id,
                model=self.model,
                provider=self.provider,
                request=self.request,
                response=self._last_chunk,
                start_time=self.start_time,
                end_time=end,
                duration=end - self.start_time,
                tokens=self._last_total_tokens,
            ),
        )

    def _complete_failure(self, exc: BaseException) -> None:
        if not self._claim():
            return
        self._finish_metrics()
        end = utc_now()
        normalized_log_event(
            self._logger,
            "stream.adapter.error",
            self._ctx,
            phase="finalize",
            error_code=classify_exception(exc).value,
            emitted=self.metrics.emitted > 0,
            tokens=self.metrics.tokens,
            level=logging.WARNING,
            emitted_count=self.metrics.emitted,
            total_duration_ms=self.metrics.total_duration_ms,
            error=str(exc),
        )
        self._registry.execute_failure(
            self._token,
            FailureEvent(
                request_id=self.request_id,
                model=self.model,
                provider=self.provider,
                error=exc,
                request=self.request,
                start_time=self.start_time,
                end_time=end,
                duration=end - self.start_time,
            ),
        )

    def close(self) -> None:
        """Close the wrapped stream; no lifecycle event is fired."""
        self._stream.close()

    def __iter__(self) -> Iterator[CompletionChunk]:
        while True:
            try:
                chunk = self.recv()
            except EndOfStream:
                return
            yield chunk

    def __enter__(self) -> "CallbackStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["CallbackStream"]
