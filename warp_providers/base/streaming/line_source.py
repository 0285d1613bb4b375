"""Line-oriented byte sources for stream decoders.

A decoder reads one line at a time from a ``LineSource``: any object exposing
``readline(size) -> bytes`` (``b""`` at end of input) and ``close()``. Binary
file-like objects already satisfy the protocol; ``HttpxLineSource`` adapts a
streaming ``httpx.Response`` body.

Closing a source from another thread makes a blocked or future ``readline``
fail, which is how ``StreamDecoder.close()`` unblocks a pending ``recv()``.
"""
from __future__ import annotations

from typing import Any, Iterator, Optional, Protocol, runtime_checkable

import httpx


@runtime_checkable
class LineSource(Protocol):
    """Structural protocol for closable line readers."""

    def readline(self, size: int = -1) -> bytes: ...

    def close(self) -> None: ...


class BufferedLineSource:
    """Adapter over a binary file-like object (``io.BytesIO``, a socket file...).

    The wrapped object must provide ``readline``; ``close`` is optional.
    """

    def __init__(self, raw: Any) -> None:
        if not callable(getattr(raw, "readline", None)):
            raise TypeError(f"{type(raw).__name__} does not provide readline()")
        self._raw = raw

    def readline(self, size: int = -1) -> bytes:
        line = self._raw.readline(size)
        if isinstance(line, str):
            return line.encode("utf-8")
        return line

    def close(self) -> None:
        close = getattr(self._raw, "close", None)
        if callable(close):
            close()


class HttpxLineSource:
    """Line reader over a streaming ``httpx.Response`` body.

    Content decoding (gzip, br...) is handled by ``iter_bytes``. Lines keep
    their trailing newline; a final unterminated line is returned as-is.
    """

    def __init__(self, response: httpx.Response, *, chunk_size: Optional[int] = None) -> None:
        self._response = response
        self._chunks: Iterator[bytes] = response.iter_bytes(chunk_size)
        self._buffer = bytearray()
        self._eof = False

    @property
    def response(self) -> httpx.Response:
        return self._response

    def readline(self, size: int = -1) -> bytes:
        while True:
            newline = self._buffer.find(b"\n")
            if newline >= 0:
                end = newline + 1
                if 0 <= size < end:
                    end = size
                return self._take(end)
            if 0 <= size <= len(self._buffer):
                return self._take(size)
            if self._eof:
                return self._take(len(self._buffer))
            try:
                self._buffer.extend(next(self._chunks))
            except StopIteration:
                self._eof = True

    def _take(self, n: int) -> bytes:
        out = bytes(self._buffer[:n])
        del self._buffer[:n]
        return out

    def close(self) -> None:
        self._response.close()


def coerce_line_source(source: Any) -> LineSource:
    """Return a ``LineSource`` for ``source``.

    Accepts an ``httpx.Response``, an object already satisfying the protocol,
    or any binary file-like object with ``readline``.
    """
    if isinstance(source, httpx.Response):
        return HttpxLineSource(source)
    if isinstance(source, (BufferedLineSource, HttpxLineSource)):
        return source
    return BufferedLineSource(source)


__all__ = ["LineSource", "BufferedLineSource", "HttpxLineSource", "coerce_line_source"]
