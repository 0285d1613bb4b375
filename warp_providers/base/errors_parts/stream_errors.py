"""
Terminal results of a streaming decoder.

A stream ends exactly once. Normal completion is signalled with
:class:`EndOfStream`; malformed upstream payloads with
:class:`StreamDecodeError`; I/O failures of the underlying body (including a
read after ``close()``) with :class:`StreamReadError`. Cancellation is not
defined here: the cancellation token's own error is surfaced unchanged.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode

_PAYLOAD_PREVIEW = 200


class EndOfStream(Exception):
    """Raised by ``recv()`` once the stream has been fully consumed."""

    def __init__(self, message: str = "end of stream") -> None:
        super().__init__(message)


class StreamDecodeError(ValueError):
    """A stream payload could not be decoded into a completion chunk.

    Fatal and non-retryable for the stream that produced it. The offending
    payload is kept (truncated) so operators can tell "provider sent garbage"
    apart from network or cancellation failures.

    Attributes:
        payload: Leading part of the payload that failed to decode.
        cause: The underlying parse or validation exception, if any.
    """

    code = ErrorCode.DECODE
    retryable = False

    def __init__(self, message: str, *, payload: bytes | str | None = None, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", errors="replace")
        self.payload = payload[:_PAYLOAD_PREVIEW] if payload is not None else None
        self.cause = cause


class StreamReadError(OSError):
    """Reading the next line from the response body failed."""

    code = ErrorCode.TRANSIENT

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


__all__ = ["EndOfStream", "StreamDecodeError", "StreamReadError"]
