from __future__ import annotations

import types

import pytest

from warp_providers.base.cancellation import CancelledError, DeadlineExceededError
from warp_providers.base.errors import (
    CallbackPanicError,
    CallbackVetoError,
    ErrorCode,
    ProviderError,
    StreamDecodeError,
    StreamReadError,
    classify_exception,
    code_for_status,
)


def test_classify_provider_error_passthrough():
    e = ProviderError(code=ErrorCode.AUTH, message="nope", provider="x")
    assert classify_exception(e) is ErrorCode.AUTH  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.parametrize(
    "exc,code",
    [
        (StreamDecodeError("bad"), ErrorCode.DECODE),
        (StreamReadError("eof"), ErrorCode.TRANSIENT),
        (CancelledError("stop"), ErrorCode.CANCELLED),
        (DeadlineExceededError("late"), ErrorCode.TIMEOUT),
        (CallbackVetoError([Exception("no")]), ErrorCode.VALIDATION),
        (TimeoutError(), ErrorCode.TIMEOUT),
        (Exception("random"), ErrorCode.UNKNOWN),
    ],
)
def test_classify_runtime_errors(exc, code):
    assert classify_exception(exc) is code  # nosec B101


def test_classify_http_status_mapping():
    e1 = types.SimpleNamespace(status_code=404)
    assert classify_exception(e1) is ErrorCode.NOT_FOUND  # nosec B101 - assert is appropriate in unit tests
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e2) is ErrorCode.UNAVAILABLE  # nosec B101 - assert is appropriate in unit tests


def test_code_for_status_fallbacks():
    assert code_for_status(599) is ErrorCode.SERVER_ERROR  # nosec B101
    assert code_for_status(418) is ErrorCode.UNKNOWN  # nosec B101


def test_decode_error_truncates_payload():
    err = StreamDecodeError("bad", payload=b"x" * 500)
    assert len(err.payload) == 200 and isinstance(err, ValueError)  # nosec B101


def test_veto_error_joins_messages_in_order():
    err = CallbackVetoError([Exception("first"), CallbackPanicError(RuntimeError("second"))])
    assert str(err) == "before-request callbacks failed: first; callback panic: RuntimeError('second')"  # nosec B101


def test_provider_error_str():
    e = ProviderError(code=ErrorCode.RATE_LIMIT, message="slow down", provider="openai", model="gpt-4o", status=429)
    assert str(e) == "openai:gpt-4o rate_limit: slow down"  # nosec B101
