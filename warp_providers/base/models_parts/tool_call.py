"""
Tool call fragments carried by streaming deltas.

Streaming providers emit tool calls incrementally: the first fragment usually
carries ``id``, ``type`` and ``function.name``; later fragments only append to
``function.arguments``. All fields are therefore optional.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class FunctionCall(BaseModel):
    """Function invocation details (name plus JSON-encoded arguments)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = None
    arguments: Optional[str] = None


class ToolCall(BaseModel):
    """A single (possibly partial) tool invocation."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    index: Optional[int] = None
    id: Optional[str] = None
    type: Optional[str] = None
    function: Optional[FunctionCall] = None


__all__ = ["FunctionCall", "ToolCall"]
