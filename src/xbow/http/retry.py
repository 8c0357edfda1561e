# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry decorator for HttpClient implementations."""

from __future__ import annotations

import logging
import random

from ..utils.context import get_request_context
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryPolicy

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "PUT", "DELETE"})


def compute_backoff(policy: RetryPolicy, attempt: int, rng: random.Random | None = None) -> float:
    """
    Delay in seconds before retry number `attempt` (zero-based).

    Exponential growth capped at `max_backoff`; with jitter the delay is drawn
    uniformly from [0, delay].
    """
    delay = min(policy.initial_backoff * (2**attempt), policy.max_backoff)
    if policy.jitter:
        return (rng or random).uniform(0, delay)
    return delay


def is_retryable_method(policy: RetryPolicy, method: str) -> bool:
    method = method.upper()
    if method == "POST":
        return policy.retry_post
    return method in IDEMPOTENT_METHODS


class RetryingHttpClient(HttpClient):
    """
    Re-issues requests that come back with a retryable status code.

    Transport exceptions are never retried. When attempts run out the last
    response is returned as-is; interpreting the status is left to the caller.
    """

    def __init__(self, inner: HttpClient, policy: RetryPolicy | None = None, *, rng: random.Random | None = None):
        self.inner = inner
        self.policy = (policy or RetryPolicy()).normalized()
        self._rng = rng

    def request(self, request: HttpRequest) -> HttpResponse:
        policy = self.policy
        max_attempts = policy.max_attempts if is_retryable_method(policy, request.method) else 1
        codes = policy.retryable_status_codes or frozenset()

        attempt = 0
        while True:
            response = self.inner.request(request)
            if response.status_code not in codes or attempt + 1 >= max_attempts:
                if attempt:
                    response.meta["retry_count"] = attempt
                return response

            response.close()
            delay = compute_backoff(policy, attempt, self._rng)
            logger.debug(
                "Retrying %s %s after status %s (attempt %d/%d, sleeping %.3fs)",
                request.method,
                request.url,
                response.status_code,
                attempt + 1,
                max_attempts,
                delay,
            )
            get_request_context().sleep(delay)
            attempt += 1

    def close(self) -> None:
        self.inner.close()


__all__ = ["IDEMPOTENT_METHODS", "RetryingHttpClient", "compute_backoff", "is_retryable_method"]
