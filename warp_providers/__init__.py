"""warp_providers package

Streaming response runtime and lifecycle callback registry for LLM provider
clients.

Purpose:
    Decode a provider's chunked HTTP body into normalized completion chunks
    under cooperative cancellation, and notify observers before and after
    each request without letting observer failures leak into the request path.

Public API (re-exported):
    - Version: ``__version__``
    - Decoding: :class:`StreamDecoder`, :func:`open_event_stream`, chunk mappers
    - Callbacks: :class:`CallbackRegistry`, :class:`RequestLifecycle`,
      :class:`CallbackStream`
    - Errors: :class:`ProviderError`, :class:`ErrorCode`, :class:`EndOfStream`
      and the decode, read and callback error types
    - Cancellation: :class:`CancellationToken`, :class:`CancelledError`
"""

from .base import (
    AnthropicChunkMapper,
    CallbackPanicError,
    CallbackRegistry,
    CallbackStream,
    CallbackVetoError,
    CancellationToken,
    CancelledError,
    CompletionChunk,
    DeadlineExceededError,
    EndOfStream,
    ErrorCode,
    OllamaChunkMapper,
    ProviderError,
    RequestLifecycle,
    StreamDecodeError,
    StreamDecoder,
    StreamReadError,
    TextCompletionMapper,
    open_event_stream,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ProviderError",
    "ErrorCode",
    "EndOfStream",
    "StreamDecodeError",
    "StreamReadError",
    "CallbackPanicError",
    "CallbackVetoError",
    "CancellationToken",
    "CancelledError",
    "DeadlineExceededError",
    "CompletionChunk",
    "StreamDecoder",
    "open_event_stream",
    "TextCompletionMapper",
    "AnthropicChunkMapper",
    "OllamaChunkMapper",
    "CallbackStream",
    "CallbackRegistry",
    "RequestLifecycle",
]
