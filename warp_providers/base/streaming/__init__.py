"""Streaming runtime: line sources, framing, chunk mappers and decoders."""

from .stream_state import StreamState
from .framing import Framing, frame_payload, is_done_sentinel
from .line_source import BufferedLineSource, HttpxLineSource, LineSource, coerce_line_source
from .chunk_mappers import (
    AnthropicChunkMapper,
    CallableMapper,
    ChunkMapper,
    OllamaChunkMapper,
    TextCompletionMapper,
    as_mapper,
)
from .sse_decoder import StreamDecoder
from .http_stream import open_event_stream
from .streaming_metrics import StreamMetrics, apply_usage, build_token_usage, validate_token_usage
from .callback_stream import CallbackStream

__all__ = [
    "StreamState",
    "Framing",
    "frame_payload",
    "is_done_sentinel",
    "LineSource",
    "BufferedLineSource",
    "HttpxLineSource",
    "coerce_line_source",
    "ChunkMapper",
    "CallableMapper",
    "as_mapper",
    "TextCompletionMapper",
    "AnthropicChunkMapper",
    "OllamaChunkMapper",
    "StreamDecoder",
    "open_event_stream",
    "StreamMetrics",
    "apply_usage",
    "build_token_usage",
    "validate_token_usage",
    "CallbackStream",
]
