# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client-side request throttling."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from typing import Protocol

from ..utils.context import RequestContext, get_request_context
from .client import HttpClient
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    """Blocks until a request may proceed; raises if the wait is aborted."""

    def wait(self, context: RequestContext) -> None: ...


class SlidingWindowRateLimiter:
    """Allow at most `max_requests` requests in any `window`-second span."""

    def __init__(self, max_requests: int, window: float = 1.0, *, clock: Callable[[], float] = time.monotonic):
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window <= 0:
            raise ValueError("window must be positive")
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._sent: deque[float] = deque()
        self._lock = threading.Lock()

    def _reserve(self) -> float:
        """Record a slot and return 0, or return how long to wait for the next one."""
        with self._lock:
            now = self._clock()
            while self._sent and now - self._sent[0] >= self.window:
                self._sent.popleft()
            if len(self._sent) < self.max_requests:
                self._sent.append(now)
                return 0.0
            return self.window - (now - self._sent[0])

    def wait(self, context: RequestContext) -> None:
        while True:
            context.raise_if_cancelled()
            delay = self._reserve()
            if delay <= 0:
                return
            logger.debug("Rate limit reached, waiting %.3fs", delay)
            context.sleep(delay)


class RateLimitedHttpClient(HttpClient):
    """Calls the limiter before every request; limiter errors abort the request."""

    def __init__(self, inner: HttpClient, limiter: RateLimiter):
        self.inner = inner
        self.limiter = limiter

    def request(self, request: HttpRequest) -> HttpResponse:
        self.limiter.wait(get_request_context())
        return self.inner.request(request)

    def close(self) -> None:
        self.inner.close()


__all__ = ["RateLimitedHttpClient", "RateLimiter", "SlidingWindowRateLimiter"]
