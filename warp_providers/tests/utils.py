"""Shared testing utilities for runtime and callback tests.

Purpose:
    Avoid duplication of simple assertion helpers across test modules while
    retaining explicit AssertionError semantics (eschewing bare ``assert`` to
    satisfy Bandit B101).

Exports:
    - assert_true(condition: bool, message: str) -> None
    - capture(fn) -> the value returned by ``fn`` or the exception it raised
"""
from __future__ import annotations

from typing import Any, Callable


def assert_true(condition: bool, message: str) -> None:
    """Raise AssertionError with the provided message if condition is False."""
    if not condition:
        raise AssertionError(message)


def capture(fn: Callable[[], Any]) -> Any:
    """Call ``fn`` and return its result, or the exception it raised."""
    try:
        return fn()
    except Exception as exc:  # noqa: BLE001 - tests inspect the raised instance
        return exc
