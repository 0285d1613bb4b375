"""Stream decoder cancellation and close semantics."""
from __future__ import annotations

import json
import threading
import time

import pytest

from warp_providers.base.cancellation import CancellationToken, CancelledError, DeadlineExceededError
from warp_providers.base.errors import EndOfStream, StreamReadError
from warp_providers.base.streaming import StreamDecoder, StreamState
from warp_providers.tests.streaming.helpers import (
    BlockingLineSource,
    CancelDuringReadSource,
    CountingSource,
    chunk_payload,
    sse_body,
)
from warp_providers.tests.utils import assert_true, capture


def test_pre_cancelled_token_raises_same_error_without_reading():
    print("TEST: pre-cancelled token -> cancellation on every recv, source untouched")
    token = CancellationToken()
    token.cancel("caller gave up")
    source = CountingSource(sse_body(chunk_payload("never")))
    decoder = StreamDecoder(source, token)

    errors = [capture(decoder.recv) for _ in range(3)]

    assert_true(all(e is token.error for e in errors), f"expected token error instance, got {errors!r}")
    assert_true(isinstance(errors[0], CancelledError), "cancellation must surface as CancelledError")
    assert_true(source.reads == 0, "no line may be read once the token has fired")
    assert_true(decoder.state is StreamState.CANCELLED, f"unexpected state {decoder.state}")


def test_cancellation_during_read_wins_over_parsed_chunk():
    print("TEST: token fired during a blocking read -> Cancelled even though a chunk arrived")
    token = CancellationToken()
    line = b"data: " + json.dumps(chunk_payload("arrived")).encode() + b"\n"
    decoder = StreamDecoder(CancelDuringReadSource(token, line), token)

    with pytest.raises(CancelledError) as exc:
        decoder.recv()
    assert exc.value is token.error  # nosec B101
    assert capture(decoder.recv) is token.error  # nosec B101


def test_cancel_between_chunks_stops_the_stream():
    token = CancellationToken()
    decoder = StreamDecoder(CountingSource(sse_body(chunk_payload("a"), chunk_payload("b"))), token)
    assert decoder.recv().text == "a"  # nosec B101
    token.cancel()
    with pytest.raises(CancelledError):
        decoder.recv()


def test_parent_cancellation_cascades_into_decoder():
    parent = CancellationToken()
    child = parent.child()
    decoder = StreamDecoder(CountingSource(sse_body(chunk_payload("a"))), child)
    parent.cancel("shutdown")
    err = capture(decoder.recv)
    assert err is parent.error  # nosec B101


def test_deadline_surfaces_as_deadline_exceeded():
    token = CancellationToken(timeout=0)
    decoder = StreamDecoder(CountingSource(sse_body(chunk_payload("late"))), token)
    with pytest.raises(DeadlineExceededError):
        decoder.recv()


def test_close_from_another_thread_unblocks_recv():
    print("TEST: close() while recv() is blocked -> recv fails and the stream is terminal")
    source = BlockingLineSource()
    decoder = StreamDecoder(source)
    result = []

    worker = threading.Thread(target=lambda: result.append(capture(decoder.recv)))
    worker.start()
    assert_true(source.reading.wait(2.0), "reader never started")
    decoder.close()
    worker.join(2.0)

    assert_true(not worker.is_alive(), "recv did not return after close")
    assert_true(isinstance(result[0], StreamReadError), f"expected StreamReadError, got {result!r}")
    assert_true(capture(decoder.recv) is result[0], "terminal error must be cached")
    assert_true(decoder.state is StreamState.READ_ERROR, f"unexpected state {decoder.state}")


def test_close_is_idempotent_and_thread_safe():
    source = CountingSource(sse_body(chunk_payload("a")))
    decoder = StreamDecoder(source)
    threads = [threading.Thread(target=decoder.close) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    decoder.close()
    assert source.closed == 1  # nosec B101
    assert decoder.closed is True  # nosec B101


def test_recv_after_close_is_read_error():
    decoder = StreamDecoder(CountingSource(sse_body(chunk_payload("a"))))
    decoder.close()
    with pytest.raises(StreamReadError):
        decoder.recv()


def test_close_after_end_of_stream_keeps_end_of_stream():
    decoder = StreamDecoder(CountingSource(sse_body()))
    with pytest.raises(EndOfStream):
        decoder.recv()
    decoder.close()
    with pytest.raises(EndOfStream):
        decoder.recv()


def test_source_read_failure_is_read_error():
    class Broken:
        def readline(self, size=-1):
            raise ConnectionResetError("peer reset")

        def close(self):
            pass

    decoder = StreamDecoder(Broken())
    with pytest.raises(StreamReadError) as exc:
        decoder.recv()
    assert isinstance(exc.value.cause, ConnectionResetError)  # nosec B101
    assert "peer reset" in str(exc.value)  # nosec B101


def test_child_of_expired_parent_raises_parent_deadline():
    print("TEST: decoder on a child token stops once the parent's deadline has elapsed")
    parent = CancellationToken(timeout=0.01)
    child = parent.child()
    source = CountingSource(sse_body(chunk_payload("Hi")))
    decoder = StreamDecoder(source, child)
    time.sleep(0.05)

    err = capture(decoder.recv)

    assert_true(isinstance(err, DeadlineExceededError), f"expected deadline error, got {err!r}")
    assert_true(err is parent.error, "child must surface the parent's error instance")
    assert_true(source.reads == 0, "no line may be read after the parent deadline")
    assert_true(decoder.state is StreamState.CANCELLED, f"unexpected state {decoder.state}")
