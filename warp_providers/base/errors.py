"""Unified error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``warp_providers.base.errors_parts`` to maintain a stable import path.
Cancellation errors live with the token in ``warp_providers.base.cancellation``
and are re-exported here for convenience.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.stream_errors import EndOfStream, StreamDecodeError, StreamReadError
from .errors_parts.callback_errors import CallbackPanicError, CallbackVetoError
from .errors_parts.classification import classify_exception, code_for_status
from .cancellation_parts.cancelled_error import CancelledError, DeadlineExceededError

__all__ = [
    "ErrorCode",
    "ProviderError",
    "EndOfStream",
    "StreamDecodeError",
    "StreamReadError",
    "CallbackPanicError",
    "CallbackVetoError",
    "CancelledError",
    "DeadlineExceededError",
    "classify_exception",
    "code_for_status",
]
