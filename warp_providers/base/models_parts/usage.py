"""
Token usage model for completion chunks.

Providers attach usage only to the terminal chunk of a stream (when at all).
Absence is modelled as ``CompletionChunk.usage is None``; this model is never
instantiated with zeros to stand in for missing data.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Usage(BaseModel):
    """Token usage statistics reported by a provider.

    Attributes:
        prompt_tokens: Tokens consumed by the prompt.
        completion_tokens: Tokens generated in the completion.
        total_tokens: Prompt plus completion tokens.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


__all__ = ["Usage"]
