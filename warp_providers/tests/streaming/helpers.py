"""Helpers for stream decoder tests.

Builds SSE/NDJSON bodies from payload dicts and provides line sources with
controllable blocking and cancellation behavior.
"""
from __future__ import annotations

import io
import json
import queue
import threading
from typing import Any, Dict, Iterable, List, Optional

from warp_providers.base.cancellation import CancellationToken


def chunk_payload(
    content: Optional[str] = None,
    *,
    role: Optional[str] = None,
    finish_reason: Optional[str] = None,
    usage: Optional[Dict[str, int]] = None,
    chunk_id: str = "chatcmpl-1",
    model: str = "gpt-4o",
) -> Dict[str, Any]:
    delta: Dict[str, Any] = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    payload: Dict[str, Any] = {
        "id": chunk_id,
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
    if usage is not None:
        payload["usage"] = usage
    return payload


def sse_body(*payloads: Any, done: bool = True) -> bytes:
    """Encode payloads as ``data:`` lines separated by blank lines."""
    lines: List[str] = []
    for p in payloads:
        text = p if isinstance(p, str) else json.dumps(p)
        lines.append(f"data: {text}\n\n")
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


def ndjson_body(payloads: Iterable[Dict[str, Any]]) -> bytes:
    return "".join(json.dumps(p) + "\n" for p in payloads).encode("utf-8")


def sse_source(*payloads: Any, done: bool = True) -> io.BytesIO:
    return io.BytesIO(sse_body(*payloads, done=done))


class CountingSource:
    """Wraps ``io.BytesIO`` and counts ``readline`` calls."""

    def __init__(self, data: bytes) -> None:
        self._buf = io.BytesIO(data)
        self.reads = 0
        self.closed = 0

    def readline(self, size: int = -1) -> bytes:
        self.reads += 1
        return self._buf.readline(size)

    def close(self) -> None:
        self.closed += 1
        self._buf.close()


class BlockingLineSource:
    """Line source whose ``readline`` blocks until a line is pushed or it is closed."""

    def __init__(self, lines: Iterable[bytes] = ()) -> None:
        self._queue: "queue.Queue[bytes]" = queue.Queue()
        for line in lines:
            self._queue.put(line)
        self._closed = threading.Event()
        self.reading = threading.Event()

    def push(self, line: bytes) -> None:
        self._queue.put(line)

    def readline(self, size: int = -1) -> bytes:
        self.reading.set()
        while True:
            if self._closed.is_set():
                raise ValueError("I/O operation on closed source")
            try:
                return self._queue.get(timeout=0.01)
            except queue.Empty:
                continue

    def close(self) -> None:
        self._closed.set()


class CancelDuringReadSource:
    """Cancels ``token`` while "blocked" in ``readline`` and still returns a valid line."""

    def __init__(self, token: CancellationToken, line: bytes) -> None:
        self._token = token
        self._line = line

    def readline(self, size: int = -1) -> bytes:
        self._token.cancel("cancelled mid-read")
        return self._line

    def close(self) -> None:
        pass
