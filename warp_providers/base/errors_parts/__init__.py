"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `warp_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .stream_errors import EndOfStream, StreamDecodeError, StreamReadError
from .callback_errors import CallbackPanicError, CallbackVetoError
from .classification import classify_exception, code_for_status

__all__ = [
    "ErrorCode",
    "ProviderError",
    "EndOfStream",
    "StreamDecodeError",
    "StreamReadError",
    "CallbackPanicError",
    "CallbackVetoError",
    "classify_exception",
    "code_for_status",
]
