"""Focused tests for warp_providers.base.logging.

Covers:
- _parse_level string parsing
- normalized_log_event emits required keys
- JsonFormatter hoists structured payloads
- configure_logger attaches a managed rotating file handler
"""
from __future__ import annotations

import json
import logging

from warp_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)
from warp_providers.base.log_support import JsonFormatter, LogContext


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_child_loggers_live_under_warp():
    assert get_logger("stream").name == "warp.stream"  # nosec B101
    assert get_logger("warp.callbacks").name == "warp.callbacks"  # nosec B101


def test_normalized_log_event_emits_required_keys():
    logger = get_logger("tests.logging", json_mode=False)
    handler = _ListHandler()
    logger.handlers[:] = [handler]
    logger.propagate = False
    try:
        normalized_log_event(
            logger,
            "stream.adapter.end",
            LogContext(provider="p", model="m"),
            phase="finalize",
            emitted=True,
            tokens=None,
            emitted_count=3,
            phase_override="ignored",
        )
    finally:
        logger.handlers[:] = []
        logger.propagate = True
    payload = json.loads(handler.messages[-1])
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload  # nosec B101
    assert payload["event"] == "stream.adapter.end" and payload["provider"] == "p"  # nosec B101
    assert payload["tokens"] is None and payload["emitted_count"] == 3  # nosec B101
    assert "error_code" not in payload  # nosec B101


def test_log_event_drops_none_fields():
    logger = get_logger("tests.drop_none")
    handler = _ListHandler()
    logger.handlers[:] = [handler]
    logger.propagate = False
    try:
        log_event(logger, "request.begin", LogContext(request_id="req_1"), kept=1, dropped=None)
    finally:
        logger.handlers[:] = []
        logger.propagate = True
    payload = json.loads(handler.messages[-1])
    assert payload == {"event": "request.begin", "request_id": "req_1", "kept": 1}  # nosec B101


def test_json_formatter_hoists_payload_keys():
    record = logging.LogRecord("warp.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 2}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e" and out["n"] == 2 and out["level"] == "INFO"  # nosec B101
    assert out["logger"] == "warp.x"  # nosec B101


def test_configure_logger_file_handler(tmp_path):
    path = tmp_path / "logs" / "warp.log"
    logger = configure_logger(level="INFO", file_path=str(path))
    try:
        log_event(logger, "file.check", value=1)
        for h in logger.handlers:
            h.flush()
        assert "file.check" in path.read_text(encoding="utf-8")  # nosec B101
    finally:
        configure_logger(file_path=None)
