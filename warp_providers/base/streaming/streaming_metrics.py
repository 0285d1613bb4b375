"""Streaming metrics data structures.

Collected by ``CallbackStream`` while a stream is consumed and reported in the
``stream.adapter.end`` / ``stream.adapter.error`` log events.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple

from ..models import Usage


@dataclass
class StreamMetrics:
    """Collected streaming metrics for a single request.

    Attributes:
        emitted: Number of chunks delivered to the consumer.
        time_to_first_chunk_ms: Latency from stream start to the first chunk.
        total_duration_ms: Latency from stream start to its terminal result.
        prompt_tokens / completion_tokens / total_tokens: Usage reported by the
            provider (last chunk carrying usage wins), ``None`` when absent.
        tokens: Canonical ``{"prompt", "completion", "total"}`` mapping.
    """

    emitted: int = 0
    time_to_first_chunk_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    tokens: Optional[Dict[str, Any]] = None


def build_token_usage(prompt: Optional[int], completion: Optional[int], total: Optional[int] = None) -> Dict[str, Optional[int]]:
    """Return a canonical token usage mapping."""
    derived_total = total
    if derived_total is None and (prompt is not None and completion is not None):
        derived_total = prompt + completion
    return {"prompt": prompt, "completion": completion, "total": derived_total}


def apply_usage(metrics: StreamMetrics, usage: Optional[Usage]) -> None:
    """Copy a chunk's ``Usage`` onto ``metrics``; ``None`` leaves them untouched."""
    if usage is None:
        return
    metrics.prompt_tokens = usage.prompt_tokens
    metrics.completion_tokens = usage.completion_tokens
    metrics.total_tokens = usage.total_tokens or (usage.prompt_tokens + usage.completion_tokens)
    metrics.tokens = build_token_usage(metrics.prompt_tokens, metrics.completion_tokens, metrics.total_tokens)


def validate_token_usage(
    metrics: StreamMetrics,
    *,
    raise_on_error: bool = False,
) -> Tuple[bool, Optional[str]]:
    """Validate token usage fields for internal consistency."""

    def _fail(reason: str) -> Tuple[bool, Optional[str]]:
        if raise_on_error:
            raise ValueError(f"token usage invalid: {reason}")
        return False, reason

    for name, value in (
        ("prompt_tokens", metrics.prompt_tokens),
        ("completion_tokens", metrics.completion_tokens),
        ("total_tokens", metrics.total_tokens),
    ):
        if value is not None and value < 0:
            return _fail(f"{name} negative: {value}")

    if (
        metrics.prompt_tokens is not None
        and metrics.completion_tokens is not None
        and metrics.total_tokens is not None
    ) and metrics.prompt_tokens + metrics.completion_tokens != metrics.total_tokens:
        return _fail("total_tokens mismatch: expected prompt+completion == total")

    return True, None


__all__ = [
    "StreamMetrics",
    "apply_usage",
    "build_token_usage",
    "validate_token_usage",
]
