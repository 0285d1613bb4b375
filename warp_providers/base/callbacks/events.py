"""Lifecycle event payloads delivered to callbacks.

Events are frozen dataclasses: BeforeRequest hooks may veto a request but
cannot mutate what it sends, and observers of one event can never see edits
made by another. Every event identifies the request by ``request_id``,
``model`` (without provider prefix) and ``provider``.

Ordering per request: ``BeforeRequestEvent`` first, then zero or more
``StreamEvent`` objects, then exactly one ``SuccessEvent`` or ``FailureEvent``
(none at all when the request was vetoed before any HTTP call).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..models import CompletionChunk


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class BeforeRequestEvent:
    request_id: str
    model: str
    provider: str
    request: Any = None
    start_time: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class SuccessEvent:
    """Completed request.

    Attributes:
        response: The final response object, or the last chunk of a stream.
        duration: ``end_time - start_time``.
        cost: Estimated cost in USD, ``0.0`` when unknown.
        tokens: Total tokens used, ``0`` when unknown.
    """

    request_id: str
    model: str
    provider: str
    request: Any = None
    response: Any = None
    start_time: datetime = field(default_factory=utc_now)
    end_time: datetime = field(default_factory=utc_now)
    duration: timedelta = timedelta(0)
    cost: float = 0.0
    tokens: int = 0


@dataclass(frozen=True)
class FailureEvent:
    request_id: str
    model: str
    provider: str
    error: BaseException
    request: Any = None
    start_time: datetime = field(default_factory=utc_now)
    end_time: datetime = field(default_factory=utc_now)
    duration: timedelta = timedelta(0)


@dataclass(frozen=True)
class StreamEvent:
    """One received chunk; ``index`` is zero-based within its stream."""

    request_id: str
    model: str
    provider: str
    chunk: Optional[CompletionChunk] = None
    index: int = 0
    timestamp: datetime = field(default_factory=utc_now)


__all__ = [
    "BeforeRequestEvent",
    "SuccessEvent",
    "FailureEvent",
    "StreamEvent",
    "utc_now",
]
