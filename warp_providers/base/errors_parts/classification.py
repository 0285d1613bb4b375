"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction and status-to-code mapping for provider
responses, plus direct mappings for the runtime's own error types so that a
vetoed request reads as a validation failure, a cancelled stream as a
cancelled request, and a malformed chunk as a distinct decode failure.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

from ..cancellation_parts.cancelled_error import CancelledError, DeadlineExceededError
from .callback_errors import CallbackVetoError
from .error_code import ErrorCode
from .provider_error import ProviderError
from .stream_errors import StreamDecodeError, StreamReadError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def code_for_status(status: int) -> ErrorCode:
    """Map an HTTP status to an :class:`ErrorCode` (``UNKNOWN`` when unmapped)."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if 500 <= status < 600:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Runtime error types (deadline, cancellation, decode, read, veto).
        3. Timeout exceptions (sync/async).
        4. HTTP status mapping.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, DeadlineExceededError):
        return ErrorCode.TIMEOUT
    if isinstance(exc, CancelledError):
        return ErrorCode.CANCELLED
    if isinstance(exc, StreamDecodeError):
        return ErrorCode.DECODE
    if isinstance(exc, StreamReadError):
        return ErrorCode.TRANSIENT
    if isinstance(exc, CallbackVetoError):
        return ErrorCode.VALIDATION
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None:
        return code_for_status(status)
    return ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "code_for_status",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
