"""
Runtime Base Package

Exports the provider-agnostic streaming runtime and lifecycle callback
machinery:
- Errors: normalized taxonomy plus stream and callback error types
- Cancellation: cooperative tokens with cascade and deadlines
- Models: normalized completion chunk DTOs
- Streaming: line sources, chunk mappers, the stream decoder and its
  callback-reporting wrapper
- Callbacks: lifecycle events, the registry and the request lifecycle helper
"""

from .errors import (
    CallbackPanicError,
    CallbackVetoError,
    EndOfStream,
    ErrorCode,
    ProviderError,
    StreamDecodeError,
    StreamReadError,
    classify_exception,
)
from .cancellation import CancellationToken, CancelledError, DeadlineExceededError
from .models import ChunkChoice, CompletionChunk, FunctionCall, MessageDelta, ToolCall, Usage
from .streaming import (
    AnthropicChunkMapper,
    BufferedLineSource,
    CallbackStream,
    ChunkMapper,
    Framing,
    HttpxLineSource,
    OllamaChunkMapper,
    StreamDecoder,
    StreamMetrics,
    StreamState,
    TextCompletionMapper,
    open_event_stream,
)
from .callbacks import (
    BeforeRequestEvent,
    CallbackRegistry,
    FailureEvent,
    RequestLifecycle,
    StreamEvent,
    SuccessEvent,
    split_model,
)

__all__ = [
    # Errors
    "ErrorCode",
    "ProviderError",
    "EndOfStream",
    "StreamDecodeError",
    "StreamReadError",
    "CallbackPanicError",
    "CallbackVetoError",
    "classify_exception",
    # Cancellation
    "CancellationToken",
    "CancelledError",
    "DeadlineExceededError",
    # Models
    "Usage",
    "FunctionCall",
    "ToolCall",
    "MessageDelta",
    "ChunkChoice",
    "CompletionChunk",
    # Streaming
    "StreamState",
    "Framing",
    "BufferedLineSource",
    "HttpxLineSource",
    "ChunkMapper",
    "TextCompletionMapper",
    "AnthropicChunkMapper",
    "OllamaChunkMapper",
    "StreamDecoder",
    "open_event_stream",
    "StreamMetrics",
    "CallbackStream",
    # Callbacks
    "BeforeRequestEvent",
    "SuccessEvent",
    "FailureEvent",
    "StreamEvent",
    "CallbackRegistry",
    "RequestLifecycle",
    "split_model",
]
