"""Line framing strategies.

``SSE``: a line is significant only when it starts with ``data: ``; the rest is
the payload and ``[DONE]`` terminates the stream.
``NDJSON``: every non-blank line is a payload; there is no sentinel.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from ...config.defaults import SSE_DATA_PREFIX, SSE_DONE_SENTINEL


class Framing(str, Enum):
    """Supported stream framings."""

    SSE = "sse"
    NDJSON = "ndjson"


def frame_payload(line: bytes, framing: Framing) -> Optional[bytes]:
    """Return the payload carried by an already-trimmed ``line``, or ``None``."""
    if not line:
        return None
    if framing is Framing.NDJSON:
        return line
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    return line[len(SSE_DATA_PREFIX):]


def is_done_sentinel(payload: bytes, framing: Framing) -> bool:
    return framing is Framing.SSE and payload == SSE_DONE_SENTINEL


__all__ = ["Framing", "frame_payload", "is_done_sentinel"]
