"""Unified configuration layer for the streaming runtime.

Goals
-----
* Centralize defaults (line size guard, request timeout, logging toggles).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by WARP_CONFIG_FILE
    3. Environment variables
* Cache the result per process, refreshing only when the relevant environment
  values change so tests can adjust them at runtime.

Environment Variables
---------------------
WARP_CONFIG_FILE, WARP_STREAM_MAX_LINE_BYTES, WARP_REQUEST_TIMEOUT_SECONDS,
WARP_LOG_CALLBACK_FAILURES, WARP_LOG_JSON

External Config File (Optional)
-------------------------------
JSON is attempted first, then YAML. Structure example:

```
runtime:
  max_line_bytes: 1048576
  request_timeout_seconds: 120
  log_callback_failures: true
```

Public API
----------
* get_runtime_config() -> RuntimeConfig
* reset_runtime_config() -> None
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

import yaml

from .defaults import (
    DEFAULT_LOG_CALLBACK_FAILURES,
    DEFAULT_LOG_JSON,
    DEFAULT_MAX_LINE_BYTES,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)

_ENV_KEYS = (
    "WARP_CONFIG_FILE",
    "WARP_STREAM_MAX_LINE_BYTES",
    "WARP_REQUEST_TIMEOUT_SECONDS",
    "WARP_LOG_CALLBACK_FAILURES",
    "WARP_LOG_JSON",
)


@dataclass(frozen=True)
class RuntimeConfig:
    """Normalized runtime settings.

    Attributes:
        max_line_bytes: Longest accepted stream line; longer lines fail decoding.
        request_timeout_seconds: Default deadline for request tokens created by
            ``RequestLifecycle``; ``None`` disables it.
        log_callback_failures: Whether suppressed callback failures are logged.
        log_json: Whether the shared logger emits JSON lines.
    """

    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES
    request_timeout_seconds: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS
    log_callback_failures: bool = DEFAULT_LOG_CALLBACK_FAILURES
    log_json: bool = DEFAULT_LOG_JSON


_CACHED: Optional[RuntimeConfig] = None
_ENV_GUARD: Optional[str] = None


def _parse_positive_float(raw: Any, default: float | None) -> float | None:
    if raw is None or raw == "":
        return default
    try:
        val = float(raw)
    except (TypeError, ValueError):
        return default
    return val if val > 0 else default


def _parse_positive_int(raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        val = int(raw)
    except (TypeError, ValueError):
        return default
    return val if val > 0 else default


def _parse_bool(raw: Any, default: bool) -> bool:
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}


def _load_external_config(path: str | None) -> Dict[str, Any]:
    """Read the ``runtime`` section of the optional config file."""
    if not path:
        return {}
    p = Path(path)
    if not p.is_file():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    if not isinstance(data, dict):
        return {}
    section = data.get("runtime", data)
    return section if isinstance(section, dict) else {}


def get_runtime_config() -> RuntimeConfig:
    """Return the process-cached :class:`RuntimeConfig`.

    Merge order (later wins): defaults -> config file -> environment.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(k, "") for k in _ENV_KEYS)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED

    file_cfg = _load_external_config(os.getenv("WARP_CONFIG_FILE"))

    max_line = _parse_positive_int(file_cfg.get("max_line_bytes"), DEFAULT_MAX_LINE_BYTES)
    max_line = _parse_positive_int(os.getenv("WARP_STREAM_MAX_LINE_BYTES"), max_line)
    timeout = _parse_positive_float(file_cfg.get("request_timeout_seconds"), DEFAULT_REQUEST_TIMEOUT_SECONDS)
    timeout = _parse_positive_float(os.getenv("WARP_REQUEST_TIMEOUT_SECONDS"), timeout)
    log_failures = _parse_bool(file_cfg.get("log_callback_failures"), DEFAULT_LOG_CALLBACK_FAILURES)
    log_failures = _parse_bool(os.getenv("WARP_LOG_CALLBACK_FAILURES"), log_failures)
    log_json = _parse_bool(file_cfg.get("log_json"), DEFAULT_LOG_JSON)
    log_json = _parse_bool(os.getenv("WARP_LOG_JSON"), log_json)

    _CACHED = RuntimeConfig(
        max_line_bytes=max_line,
        request_timeout_seconds=timeout,
        log_callback_failures=log_failures,
        log_json=log_json,
    )
    _ENV_GUARD = guard
    return _CACHED


def reset_runtime_config() -> None:
    """Drop the cached config so the next call re-reads file and environment."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603
    _CACHED = None
    _ENV_GUARD = None


__all__ = [
    "RuntimeConfig",
    "get_runtime_config",
    "reset_runtime_config",
]
