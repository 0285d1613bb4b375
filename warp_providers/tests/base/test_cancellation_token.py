"""Unit tests for cooperative cancellation primitives.

Covers idempotent cancel, cascade to children, late link of child after
parent cancel, deadline expiry, and error instance identity.
"""
from __future__ import annotations

import threading
import time

import pytest

from warp_providers.base.cancellation import (
    CancellationToken,
    CancelledError,
    DeadlineExceededError,
)


def test_cancel_cascades_to_children_and_is_idempotent():
    parent = CancellationToken()
    child1 = parent.child()
    child2 = parent.child()

    parent.cancel(reason="stop")
    parent.cancel(reason="ignored")

    assert parent.cancelled is True and parent.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child1.cancelled is True and child1.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child2.cancelled is True and child2.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child1.error is parent.error and child2.error is parent.error  # nosec B101


def test_child_cancel_does_not_affect_parent():
    parent = CancellationToken()
    child = parent.child()
    child.cancel("local")
    assert child.cancelled and not parent.cancelled  # nosec B101
    assert parent.error is None  # nosec B101


def test_link_child_after_parent_cancel_immediately_cancels_child():
    parent = CancellationToken()
    parent.cancel("done")
    late_child = CancellationToken(parent=parent)
    assert late_child.cancelled is True and late_child.reason == "done"  # nosec B101 - pytest assert in tests


def test_raise_if_cancelled_raises_same_instance():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("terminate")
    with pytest.raises(CancelledError) as first:
        token.raise_if_cancelled()
    with pytest.raises(CancelledError) as second:
        token.raise_if_cancelled()
    assert first.value is second.value is token.error  # nosec B101
    assert str(first.value) == "terminate"  # nosec B101


def test_default_cancel_message():
    token = CancellationToken()
    token.cancel()
    assert str(token.error) == "operation cancelled"  # nosec B101


def test_deadline_fires_deadline_exceeded():
    token = CancellationToken.with_timeout(0)
    child = token.child()
    assert token.cancelled  # nosec B101
    assert isinstance(token.error, DeadlineExceededError)  # nosec B101
    assert child.error is token.error  # nosec B101
    with pytest.raises(CancelledError):
        token.raise_if_cancelled()


def test_future_deadline_is_not_cancelled():
    token = CancellationToken(timeout=60)
    assert not token.cancelled and token.deadline is not None  # nosec B101


def test_concurrent_cancel_fires_once():
    token = CancellationToken()
    children = [token.child() for _ in range(10)]
    threads = [threading.Thread(target=token.cancel, args=(f"r{i}",)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    err = token.error
    assert err is not None  # nosec B101
    assert all(c.error is err for c in children)  # nosec B101


def test_child_observes_elapsed_parent_deadline():
    print("TEST: child polled after the parent's deadline -> parent's DeadlineExceededError")
    parent = CancellationToken(timeout=0.01)
    child = parent.child()
    grandchild = child.child()
    time.sleep(0.05)

    assert grandchild.cancelled is True  # nosec B101
    assert isinstance(grandchild.error, DeadlineExceededError)  # nosec B101
    assert grandchild.error is parent.error is child.error  # nosec B101
    assert child.reason == "deadline exceeded"  # nosec B101


def test_child_own_deadline_does_not_cancel_parent():
    parent = CancellationToken(timeout=60)
    child = parent.child(timeout=0)
    assert child.cancelled and not parent.cancelled  # nosec B101
