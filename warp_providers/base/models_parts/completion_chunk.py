"""
Normalized streaming completion chunk.

Every stream decoder yields ``CompletionChunk`` instances regardless of the
provider's native shape; provider-specific mapping happens before validation
into these models. Models are frozen and sequences are tuples, so a chunk is
immutable once returned. Unknown JSON fields are ignored.

Normalization rules:
    - ``finish_reason`` of ``""`` (providers without a nullable field) becomes
      ``None``.
    - ``choices: null`` becomes an empty tuple; ``delta: null`` an empty delta.
    - A missing ``usage`` stays ``None``.
"""
from __future__ import annotations

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from .tool_call import ToolCall
from .usage import Usage


class MessageDelta(BaseModel):
    """Incremental message content; accumulate across chunks to build a message."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    role: Optional[str] = None
    content: Optional[str] = None
    tool_calls: Optional[Tuple[ToolCall, ...]] = None


class ChunkChoice(BaseModel):
    """One choice entry of a streaming chunk."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    index: int = 0
    delta: MessageDelta = MessageDelta()
    finish_reason: Optional[str] = None

    @field_validator("delta", mode="before")
    @classmethod
    def _null_delta(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("finish_reason", mode="before")
    @classmethod
    def _empty_finish_reason(cls, value: Any) -> Any:
        return None if value == "" else value


class CompletionChunk(BaseModel):
    """A single normalized chunk of a streaming chat completion.

    Attributes:
        id: Stream identifier shared by all chunks of one completion.
        object: Object type tag (e.g., ``"chat.completion.chunk"``).
        created: Unix timestamp (seconds) of creation, ``0`` when unknown.
        model: Model that produced the chunk.
        choices: Ordered choices carried by this chunk.
        usage: Token usage, present only on the terminal chunk when supplied.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = ""
    object: str = "chat.completion.chunk"
    created: int = 0
    model: str = ""
    choices: Tuple[ChunkChoice, ...] = ()
    usage: Optional[Usage] = None

    @field_validator("choices", mode="before")
    @classmethod
    def _null_choices(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def text(self) -> str:
        """Concatenated delta content of all choices (``""`` when none)."""
        return "".join(c.delta.content or "" for c in self.choices)

    @property
    def finish_reason(self) -> Optional[str]:
        """First non-null finish reason among the choices, if any."""
        return next((c.finish_reason for c in self.choices if c.finish_reason), None)


__all__ = ["MessageDelta", "ChunkChoice", "CompletionChunk"]
