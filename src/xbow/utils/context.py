# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Per-request ambient context.

This module provides a ContextVar-backed RequestContext that carries the
cancellation signal (a threading.Event) and an optional timeout override.
Transports read from this context so a single signal threads through page
fetches, retry backoff waits and rate-limiter waits without every call site
passing it explicitly.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from ..errors import RequestCancelledError


@dataclass(frozen=True)
class RequestContext:
    cancel_event: threading.Event | None = None
    timeout: float | None = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelledError()

    def sleep(self, seconds: float) -> None:
        """Block for `seconds`, returning early with RequestCancelledError if cancelled."""
        self.raise_if_cancelled()
        if seconds <= 0:
            return
        if self.cancel_event is None:
            time.sleep(seconds)
            return
        if self.cancel_event.wait(seconds):
            raise RequestCancelledError()


_current_request_context: ContextVar[RequestContext | None] = ContextVar("xbow_request_context", default=None)


def get_request_context() -> RequestContext:
    """Return the current ambient request context."""
    return _current_request_context.get() or RequestContext()


@contextmanager
def request_context(**overrides: Any) -> Iterator[RequestContext]:
    """
    Context manager that layers overrides onto the ambient RequestContext.

    None-valued overrides are ignored to preserve outer context values.
    """
    current = get_request_context()
    filtered = {key: value for key, value in overrides.items() if value is not None}
    new_context = replace(current, **filtered) if filtered else current
    token = _current_request_context.set(new_context)
    try:
        yield new_context
    finally:
        _current_request_context.reset(token)


__all__ = [
    "RequestContext",
    "get_request_context",
    "request_context",
]
