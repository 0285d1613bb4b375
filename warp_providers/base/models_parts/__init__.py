"""Model parts package; import from ``warp_providers.base.models``."""

from .usage import Usage
from .tool_call import FunctionCall, ToolCall
from .completion_chunk import ChunkChoice, CompletionChunk, MessageDelta

__all__ = [
    "Usage",
    "FunctionCall",
    "ToolCall",
    "MessageDelta",
    "ChunkChoice",
    "CompletionChunk",
]
