"""Centralized runtime defaults.

Single source of truth for default values used when neither the optional
config file nor environment variables provide an override.
"""

from __future__ import annotations

DEFAULT_MAX_LINE_BYTES: int = 4 * 1024 * 1024
DEFAULT_REQUEST_TIMEOUT_SECONDS: float | None = None
DEFAULT_LOG_CALLBACK_FAILURES: bool = True
DEFAULT_LOG_JSON: bool = True

SSE_DATA_PREFIX: bytes = b"data: "
SSE_DONE_SENTINEL: bytes = b"[DONE]"

__all__ = [
    "DEFAULT_MAX_LINE_BYTES",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "DEFAULT_LOG_CALLBACK_FAILURES",
    "DEFAULT_LOG_JSON",
    "SSE_DATA_PREFIX",
    "SSE_DONE_SENTINEL",
]
