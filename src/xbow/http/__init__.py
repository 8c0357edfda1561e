# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client, wrap_http_client
from .headers import header_value, normalize_headers
from .httpx_client import HttpxClient
from .models import DEFAULT_RETRYABLE_STATUS_CODES, Headers, HttpRequest, HttpResponse, RetryPolicy
from .ratelimit import RateLimitedHttpClient, RateLimiter, SlidingWindowRateLimiter
from .retry import RetryingHttpClient, compute_backoff

__all__ = [
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "RateLimitedHttpClient",
    "RateLimiter",
    "RetryPolicy",
    "RetryingHttpClient",
    "SlidingWindowRateLimiter",
    "StubHttpClient",
    "compute_backoff",
    "create_default_http_client",
    "header_value",
    "normalize_headers",
    "wrap_http_client",
]
