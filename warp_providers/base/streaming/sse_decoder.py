"""Pull-based stream decoder over a line-oriented response body.

``StreamDecoder`` turns a provider's chunked body into ``CompletionChunk``
objects one ``recv()`` at a time. Each decoder is a single-use, forward-only
state machine::

    OPEN -> (chunk)* -> END_OF_STREAM | CANCELLED | DECODE_ERROR
                        | READ_ERROR | PROVIDER_ERROR

The first terminal exception is cached and raised again, as the same
instance, by every later ``recv()``.

Cancellation is polled before and right after each line read, and once more
after a payload is parsed, so a token fired during a blocking read wins over
the chunk that read produced.

Usage::

    with StreamDecoder(response, token) as stream:
        for chunk in stream:
            print(chunk.text, end="")
"""
from __future__ import annotations

import json
import logging
from threading import Lock
from typing import Any, Iterator, Optional, Union

from pydantic import ValidationError

from ...config import get_runtime_config
from ..cancellation import CancellationToken, CancelledError
from ..errors import EndOfStream, ProviderError, StreamDecodeError, StreamReadError
from ..logging import LogContext, get_logger, log_event
from ..models import CompletionChunk
from .chunk_mappers import ChunkMapper, as_mapper
from .framing import Framing, frame_payload, is_done_sentinel
from .line_source import LineSource, coerce_line_source
from .stream_state import StreamState

_TERMINAL_STATES = (
    (EndOfStream, StreamState.END_OF_STREAM),
    (CancelledError, StreamState.CANCELLED),
    (StreamDecodeError, StreamState.DECODE_ERROR),
    (StreamReadError, StreamState.READ_ERROR),
    (ProviderError, StreamState.PROVIDER_ERROR),
)


class StreamDecoder:
    """Decode a streaming completion body into normalized chunks.

    Args:
        source: A ``LineSource``, a binary file-like object or a streaming
            ``httpx.Response``.
        token: Cancellation token governing the stream; a fresh token that
            never fires is used when omitted.
        mapper: ``ChunkMapper`` or plain callable applied to each decoded JSON
            payload before validation.
        framing: ``"sse"`` (default) or ``"ndjson"``.
        max_line_bytes: Longest accepted line; defaults to
            ``RuntimeConfig.max_line_bytes``; must be positive.
        provider: Provider name for log context.
        model: Model name for log context.

    ``recv()`` is not reentrant. ``close()`` may be called from any thread.
    """

    def __init__(
        self,
        source: Any,
        token: Optional[CancellationToken] = None,
        *,
        mapper: Any = None,
        framing: Union[Framing, str] = Framing.SSE,
        max_line_bytes: Optional[int] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._source: LineSource = coerce_line_source(source)
        self._token = token if token is not None else CancellationToken()
        self._mapper: ChunkMapper = as_mapper(mapper)
        self._framing = Framing(framing)
        if max_line_bytes is None:
            max_line_bytes = get_runtime_config().max_line_bytes
        if max_line_bytes <= 0:
            raise ValueError(f"max_line_bytes must be positive, got {max_line_bytes}")
        self._max_line_bytes = max_line_bytes
        self._ctx = LogContext(provider=provider, model=model)
        self._logger = logger or get_logger("warp.stream")
        self._state = StreamState.OPEN
        self._terminal: Optional[BaseException] = None
        self._final_seen = False
        self._chunks = 0
        self._close_lock = Lock()
        self._closed = False

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def terminal_error(self) -> Optional[BaseException]:
        """The cached terminal exception (``EndOfStream`` included), if any."""
        return self._terminal

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def chunks_received(self) -> int:
        return self._chunks

    def recv(self) -> CompletionChunk:
        """Return the next chunk or raise the stream's terminal exception."""
        if self._terminal is not None:
            raise self._terminal.with_traceback(None)
        if self._final_seen:
            self._terminate(EndOfStream())
        while True:
            self._check_cancelled()
            if self._closed:
                self._terminate(StreamReadError("read on closed stream"))
            try:
                line = self._source.readline(self._max_line_bytes + 1)
            except Exception as exc:  # noqa: BLE001 - any source failure ends the stream
                self._check_cancelled()
                reason = "stream closed during read" if self._closed else f"failed to read line: {exc}"
                self._terminate(StreamReadError(reason, cause=exc), cause=exc)
            self._check_cancelled()
            if not line:
                self._terminate(EndOfStream())
            if len(line.rstrip(b"\r\n")) > self._max_line_bytes:
                self._terminate(
                    StreamDecodeError(
                        f"line exceeds {self._max_line_bytes} bytes",
                        payload=line,
                    )
                )
            payload = frame_payload(line.strip(), self._framing)
            if payload is None:
                continue
            if is_done_sentinel(payload, self._framing):
                self._terminate(EndOfStream())
            chunk = self._decode(payload)
            self._check_cancelled()
            if chunk is None:
                if self._final_seen:
                    self._terminate(EndOfStream())
                continue
            self._chunks += 1
            return chunk

    def _decode(self, payload: bytes) -> Optional[CompletionChunk]:
        try:
            raw = json.loads(payload)
        except ValueError as exc:
            self._terminate(StreamDecodeError(f"invalid JSON payload: {exc}", payload=payload, cause=exc), cause=exc)
        if not isinstance(raw, dict):
            # mapper ``None`` means skip, so a bare ``null`` must not reach it
            self._terminate(StreamDecodeError("payload is not a JSON object", payload=payload))
        try:
            mapped = self._mapper.map(raw)
            self._final_seen = self._mapper.is_final(raw)
        except ProviderError as exc:
            self._terminate(exc)
        except Exception as exc:  # noqa: BLE001 - mapper failures mean the payload is malformed
            self._terminate(StreamDecodeError(f"payload mapping failed: {exc}", payload=payload, cause=exc), cause=exc)
        if mapped is None or isinstance(mapped, CompletionChunk):
            return mapped
        try:
            return CompletionChunk.model_validate(mapped)
        except ValidationError as exc:
            self._terminate(
                StreamDecodeError(f"payload does not match chunk schema: {exc.error_count()} error(s)", payload=payload, cause=exc),
                cause=exc,
            )

    def _check_cancelled(self) -> None:
        if self._token.cancelled:
            self._terminate(self._token.error or CancelledError("operation cancelled"))

    def _terminate(self, exc: BaseException, *, cause: Optional[BaseException] = None) -> None:
        self._terminal = exc
        self._state = next(state for kind, state in _TERMINAL_STATES if isinstance(exc, kind))
        level = logging.DEBUG if self._state in (StreamState.END_OF_STREAM, StreamState.CANCELLED) else logging.WARNING
        log_event(
            self._logger,
            "stream.decoder.terminal",
            self._ctx,
            level=level,
            state=self._state.value,
            chunks=self._chunks,
            error=None if isinstance(exc, EndOfStream) else str(exc),
        )
        if cause is not None:
            raise exc from cause
        raise exc

    def close(self) -> None:
        """Close the underlying source; safe to call repeatedly and from any thread."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._source.close()

    def __iter__(self) -> Iterator[CompletionChunk]:
        while True:
            try:
                chunk = self.recv()
            except EndOfStream:
                return
            yield chunk

    def __enter__(self) -> "StreamDecoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["StreamDecoder"]
