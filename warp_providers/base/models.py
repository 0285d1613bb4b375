"""
Normalized streaming data models public surface.

This module re-exports the implementations under
``warp_providers.base.models_parts`` to preserve a single stable import path.
"""

from .models_parts.usage import Usage
from .models_parts.tool_call import FunctionCall, ToolCall
from .models_parts.completion_chunk import ChunkChoice, CompletionChunk, MessageDelta

__all__ = [
    "Usage",
    "FunctionCall",
    "ToolCall",
    "MessageDelta",
    "ChunkChoice",
    "CompletionChunk",
]
