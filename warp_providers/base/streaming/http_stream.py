"""Build stream decoders over ``httpx`` streaming responses.

The caller owns the ``httpx.Client`` and opens the request with
``client.stream(...)`` or ``client.send(request, stream=True)``;
``open_event_stream`` validates the status and hands the body to a decoder::

    with client.stream("POST", url, json=payload) as response:
        with open_event_stream(response, token, provider="openai") as stream:
            for chunk in stream:
                ...
"""
from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from ..cancellation import CancellationToken
from ..errors import ProviderError, code_for_status
from .line_source import HttpxLineSource
from .sse_decoder import StreamDecoder

_RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})
_MAX_ERROR_MESSAGE = 500


def _error_message(response: httpx.Response) -> str:
    """Extract a readable message from an error response body."""
    text = response.text.strip()
    try:
        body = json.loads(text) if text else None
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
        if body.get("message"):
            return str(body["message"])
    return text[:_MAX_ERROR_MESSAGE] or response.reason_phrase or f"HTTP {response.status_code}"


def open_event_stream(
    response: httpx.Response,
    token: Optional[CancellationToken] = None,
    **decoder_kwargs: Any,
) -> StreamDecoder:
    """Return a ``StreamDecoder`` over ``response`` after checking its status.

    Raises:
        ProviderError: The response status is not 2xx. The body has been read
            and the response closed; ``code`` is classified from the status.
    """
    if not response.is_success:
        try:
            response.read()
            message = _error_message(response)
        finally:
            response.close()
        raise ProviderError(
            code=code_for_status(response.status_code),
            message=message,
            provider=decoder_kwargs.get("provider") or "unknown",
            model=decoder_kwargs.get("model"),
            status=response.status_code,
            retryable=response.status_code in _RETRYABLE_STATUSES,
        )
    return StreamDecoder(HttpxLineSource(response), token, **decoder_kwargs)


__all__ = ["open_event_stream"]
