# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction and factory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ..config import ClientSettings, load_client_settings
from .models import HttpRequest, HttpResponse, RetryPolicy

if TYPE_CHECKING:
    from .ratelimit import RateLimiter


class HttpClient(Protocol):
    """Minimal protocol for issuing HTTP requests."""

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def wrap_http_client(
    client: HttpClient,
    *,
    retry_policy: RetryPolicy | None = None,
    rate_limiter: RateLimiter | None = None,
) -> HttpClient:
    """
    Layer the rate-limit and retry decorators over `client`.

    Retry is outermost, so every retry attempt passes through the limiter.
    """
    from .ratelimit import RateLimitedHttpClient
    from .retry import RetryingHttpClient

    if rate_limiter is not None:
        client = RateLimitedHttpClient(client, rate_limiter)
    if retry_policy is not None:
        client = RetryingHttpClient(client, retry_policy)
    return client


def create_default_http_client(
    settings: ClientSettings | None = None,
    *,
    retry_policy: RetryPolicy | None = None,
    rate_limiter: RateLimiter | None = None,
) -> HttpClient:
    """Factory for the default httpx-backed client with rate limiting and retries."""
    from .httpx_client import HttpxClient
    from .ratelimit import SlidingWindowRateLimiter

    settings = settings or load_client_settings()
    if rate_limiter is None and settings.rate_limit_requests:
        rate_limiter = SlidingWindowRateLimiter(settings.rate_limit_requests, settings.rate_limit_window)
    return wrap_http_client(
        HttpxClient(settings),
        retry_policy=retry_policy or RetryPolicy.from_settings(settings),
        rate_limiter=rate_limiter,
    )
