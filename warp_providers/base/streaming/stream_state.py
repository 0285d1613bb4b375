"""Lifecycle states of a stream decoder."""
from __future__ import annotations

from enum import Enum


class StreamState(str, Enum):
    OPEN = "open"
    END_OF_STREAM = "end_of_stream"
    CANCELLED = "cancelled"
    DECODE_ERROR = "decode_error"
    READ_ERROR = "read_error"
    PROVIDER_ERROR = "provider_error"

    @property
    def terminal(self) -> bool:
        return self is not StreamState.OPEN


__all__ = ["StreamState"]
