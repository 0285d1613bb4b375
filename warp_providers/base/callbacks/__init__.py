"""Lifecycle callbacks: events, the registry and the request lifecycle helper."""

from .events import BeforeRequestEvent, FailureEvent, StreamEvent, SuccessEvent
from .hook_types import BeforeRequestCallback, FailureCallback, StreamCallback, SuccessCallback
from .registry import STAGES, CallbackRegistry
from .lifecycle import RequestLifecycle, generate_request_id, split_model

__all__ = [
    "BeforeRequestEvent",
    "SuccessEvent",
    "FailureEvent",
    "StreamEvent",
    "BeforeRequestCallback",
    "SuccessCallback",
    "FailureCallback",
    "StreamCallback",
    "STAGES",
    "CallbackRegistry",
    "RequestLifecycle",
    "generate_request_id",
    "split_model",
]
