"""Provider chunk mappers.

A mapper converts one raw decoded payload (the JSON object carried by a stream
line) into the normalized chunk shape accepted by ``CompletionChunk``. Mappers
are stateful per stream: build a fresh instance for every decoder.

Contract:
    - ``map(raw)`` returns a mapping (validated into ``CompletionChunk``), a
      ``CompletionChunk`` instance, or ``None`` to skip the payload.
    - ``is_final(raw)`` flags the payload that ends the stream for framings
      without a sentinel (NDJSON) or for providers with an explicit stop event.
    - Raising ``ProviderError`` reports an in-band provider error event; any
      other exception is treated as a malformed payload.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..errors import ErrorCode, ProviderError
from ..models import CompletionChunk

MappedChunk = Union[Mapping[str, Any], CompletionChunk, None]

_CHUNK_OBJECT = "chat.completion.chunk"


class ChunkMapper:
    """Identity mapper: payloads already carry the normalized shape."""

    def map(self, raw: Any) -> MappedChunk:
        return raw

    def is_final(self, raw: Any) -> bool:
        return False

    def __call__(self, raw: Any) -> MappedChunk:
        return self.map(raw)


class CallableMapper(ChunkMapper):
    """Adapter letting a plain ``raw -> mapped`` function act as a mapper."""

    def __init__(self, fn: Callable[[Any], MappedChunk]) -> None:
        self._fn = fn

    def map(self, raw: Any) -> MappedChunk:
        return self._fn(raw)


def as_mapper(mapper: Any) -> ChunkMapper:
    """Normalize ``None``, a ``ChunkMapper`` or a callable into a ``ChunkMapper``."""
    if mapper is None:
        return ChunkMapper()
    if isinstance(mapper, ChunkMapper):
        return mapper
    if callable(mapper):
        return CallableMapper(mapper)
    raise TypeError(f"unsupported mapper type: {type(mapper).__name__}")


def _require_object(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise TypeError(f"expected a JSON object, got {type(raw).__name__}")
    return raw


class TextCompletionMapper(ChunkMapper):
    """Maps prompt-completion engines (vLLM style ``choices[].text``).

    The first chunk carrying non-empty text also gets ``role = "assistant"``
    so consumers assembling a chat message see a role once.
    """

    def __init__(self) -> None:
        self._role_sent = False

    def map(self, raw: Any) -> MappedChunk:
        data = _require_object(raw)
        choices: List[Dict[str, Any]] = []
        for position, choice in enumerate(data.get("choices") or ()):
            text = choice.get("text") or ""
            delta: Dict[str, Any] = {}
            if text:
                delta["content"] = text
                if not self._role_sent:
                    delta["role"] = "assistant"
                    self._role_sent = True
            choices.append(
                {
                    "index": choice.get("index", position),
                    "delta": delta,
                    "finish_reason": choice.get("finish_reason"),
                }
            )
        return {
            "id": data.get("id") or "",
            "object": _CHUNK_OBJECT,
            "created": data.get("created") or 0,
            "model": data.get("model") or "",
            "choices": choices,
            "usage": data.get("usage"),
        }


_ANTHROPIC_STOP_REASONS = {
    "end_turn": "stop",
    "stop_sequence": "stop",
    "max_tokens": "length",
    "tool_use": "tool_calls",
}

_ANTHROPIC_ERROR_CODES = {
    "overloaded_error": ErrorCode.UNAVAILABLE,
    "rate_limit_error": ErrorCode.RATE_LIMIT,
    "authentication_error": ErrorCode.AUTH,
    "permission_error": ErrorCode.AUTH,
    "invalid_request_error": ErrorCode.VALIDATION,
    "not_found_error": ErrorCode.NOT_FOUND,
    "api_error": ErrorCode.SERVER_ERROR,
}


class AnthropicChunkMapper(ChunkMapper):
    """Maps Anthropic's typed SSE events onto normalized chunks.

    ``message_start`` opens the message (role chunk, id capture),
    ``content_block_*`` events carry text or tool-use fragments,
    ``message_delta`` carries the stop reason and output usage, and
    ``message_stop`` ends the stream. ``ping`` and unknown events are skipped.
    """

    def __init__(self, model: str = "") -> None:
        self._model = model
        self._id = ""
        self._created = int(time.time())
        self._index = 0
        self._input_tokens = 0

    def _chunk(self, delta: Dict[str, Any], *, finish_reason: Optional[str] = None, usage: Any = None) -> Dict[str, Any]:
        return {
            "id": self._id,
            "object": _CHUNK_OBJECT,
            "created": self._created,
            "model": self._model,
            "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
            "usage": usage,
        }

    def map(self, raw: Any) -> MappedChunk:
        data = _require_object(raw)
        kind = data.get("type")
        if kind == "message_start":
            message = data.get("message") or {}
            self._id = message.get("id") or self._id
            self._model = message.get("model") or self._model
            self._input_tokens = int((message.get("usage") or {}).get("input_tokens") or 0)
            return self._chunk({"role": message.get("role") or "assistant"})
        if kind == "content_block_start":
            self._index = int(data.get("index") or 0)
            block = data.get("content_block") or {}
            if block.get("type") != "tool_use":
                return None
            call = {
                "index": self._index,
                "id": block.get("id"),
                "type": "function",
                "function": {"name": block.get("name"), "arguments": ""},
            }
            return self._chunk({"tool_calls": [call]})
        if kind == "content_block_delta":
            delta = data.get("delta") or {}
            if delta.get("type") == "text_delta":
                return self._chunk({"content": delta.get("text") or ""})
            if delta.get("type") == "input_json_delta":
                fragment = {"index": self._index, "function": {"arguments": delta.get("partial_json") or ""}}
                return self._chunk({"tool_calls": [fragment]})
            return None
        if kind == "message_delta":
            stop_reason = (data.get("delta") or {}).get("stop_reason")
            if not stop_reason:
                return None
            output_tokens = int((data.get("usage") or {}).get("output_tokens") or 0)
            input_tokens = int((data.get("usage") or {}).get("input_tokens") or self._input_tokens)
            usage = {
                "prompt_tokens": input_tokens,
                "completion_tokens": output_tokens,
                "total_tokens": input_tokens + output_tokens,
            }
            return self._chunk({}, finish_reason=_ANTHROPIC_STOP_REASONS.get(stop_reason, stop_reason), usage=usage)
        if kind == "error":
            error = data.get("error") or {}
            raise ProviderError(
                code=_ANTHROPIC_ERROR_CODES.get(error.get("type"), ErrorCode.UNKNOWN),
                message=error.get("message") or "stream error event",
                provider="anthropic",
                model=self._model or None,
                retryable=error.get("type") in ("overloaded_error", "rate_limit_error"),
            )
        return None

    def is_final(self, raw: Any) -> bool:
        return isinstance(raw, dict) and raw.get("type") == "message_stop"


class OllamaChunkMapper(ChunkMapper):
    """Maps Ollama's newline-delimited chat objects onto normalized chunks.

    Use with NDJSON framing: the object with ``done: true`` is the last one.
    """

    def map(self, raw: Any) -> MappedChunk:
        data = _require_object(raw)
        if data.get("error"):
            raise ProviderError(
                code=ErrorCode.SERVER_ERROR,
                message=str(data["error"]),
                provider="ollama",
                model=data.get("model"),
            )
        message = data.get("message") or {}
        delta: Dict[str, Any] = {}
        if message.get("role"):
            delta["role"] = message["role"]
        if message.get("content"):
            delta["content"] = message["content"]
        finish_reason = None
        usage = None
        if data.get("done"):
            finish_reason = data.get("done_reason") or "stop"
            if "prompt_eval_count" in data or "eval_count" in data:
                prompt = int(data.get("prompt_eval_count") or 0)
                completion = int(data.get("eval_count") or 0)
                usage = {
                    "prompt_tokens": prompt,
                    "completion_tokens": completion,
                    "total_tokens": prompt + completion,
                }
        return {
            "id": f"ollama-{data.get('created_at', '')}",
            "object": _CHUNK_OBJECT,
            "created": 0,
            "model": data.get("model") or "",
            "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
            "usage": usage,
        }

    def is_final(self, raw: Any) -> bool:
        return isinstance(raw, dict) and bool(raw.get("done"))


__all__ = [
    "ChunkMapper",
    "CallableMapper",
    "MappedChunk",
    "as_mapper",
    "TextCompletionMapper",
    "AnthropicChunkMapper",
    "OllamaChunkMapper",
]
