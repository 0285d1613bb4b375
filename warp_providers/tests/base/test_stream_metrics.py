from __future__ import annotations

import pytest

from warp_providers.base.models import Usage
from warp_providers.base.streaming import StreamMetrics, apply_usage, build_token_usage, validate_token_usage


def test_build_token_usage_derives_total():
    assert build_token_usage(2, 3) == {"prompt": 2, "completion": 3, "total": 5}  # nosec B101
    assert build_token_usage(None, 3) == {"prompt": None, "completion": 3, "total": None}  # nosec B101


def test_apply_usage_populates_metrics():
    m = StreamMetrics()
    apply_usage(m, None)
    assert m.tokens is None  # nosec B101
    apply_usage(m, Usage(prompt_tokens=4, completion_tokens=6))
    assert (m.prompt_tokens, m.completion_tokens, m.total_tokens) == (4, 6, 10)  # nosec B101
    assert m.tokens == {"prompt": 4, "completion": 6, "total": 10}  # nosec B101


def test_validate_token_usage_flags_mismatch():
    m = StreamMetrics(prompt_tokens=1, completion_tokens=1, total_tokens=5)
    ok, reason = validate_token_usage(m)
    assert not ok and "mismatch" in reason  # nosec B101
    with pytest.raises(ValueError):
        validate_token_usage(StreamMetrics(prompt_tokens=-1), raise_on_error=True)
