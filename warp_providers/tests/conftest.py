"""Pytest configuration for the runtime test suite.

Keeps the process-cached runtime configuration isolated per test and exposes
a capture fixture for the structured ``warp`` logger (which does not propagate
to the root logger).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

import pytest

from warp_providers.base.callbacks import CallbackRegistry
from warp_providers.base.cancellation import CancellationToken
from warp_providers.base.logging import get_logger
from warp_providers.config import reset_runtime_config


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def events(self) -> List[Dict[str, Any]]:
        out = []
        for record in self.records:
            try:
                out.append(json.loads(record.getMessage()))
            except ValueError:
                continue
        return out


@pytest.fixture(autouse=True)
def isolated_runtime_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop cached config and WARP_* overrides around every test."""
    for key in (
        "WARP_CONFIG_FILE",
        "WARP_STREAM_MAX_LINE_BYTES",
        "WARP_REQUEST_TIMEOUT_SECONDS",
        "WARP_LOG_CALLBACK_FAILURES",
        "WARP_LOG_JSON",
        "WARP_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    reset_runtime_config()
    yield
    reset_runtime_config()


@pytest.fixture()
def log_capture(monkeypatch: pytest.MonkeyPatch) -> Iterator[_ListHandler]:
    """Collect every record emitted under the shared ``warp`` logger."""
    monkeypatch.setenv("WARP_LOG_LEVEL", "DEBUG")
    logger = get_logger()
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)


@pytest.fixture()
def registry() -> CallbackRegistry:
    return CallbackRegistry()


@pytest.fixture()
def token() -> CancellationToken:
    return CancellationToken()
