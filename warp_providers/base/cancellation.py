"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose stable cancellation constructs via the canonical
``warp_providers.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts`` for organization.

Notes
-----
- ``CancellationToken`` is the governing signal passed into every decoder and
  registry operation. Both poll it; neither is interrupted asynchronously.
- ``CancelledError`` is raised by operations that observe a cancellation
  request; ``DeadlineExceededError`` when the token's deadline elapsed.
"""

from .cancellation_parts.cancelled_error import CancelledError, DeadlineExceededError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError", "DeadlineExceededError"]
