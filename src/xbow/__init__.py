# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
XBOW API client package entrypoint.

This package wraps the XBOW security-assessment API behind typed dataclasses
and per-resource services. HTTP behavior is abstracted behind an injectable
client interface with retry and rate-limit decorators, list endpoints are
walked lazily through cursor pagination, and inbound webhook deliveries can be
verified against the published Ed25519 signing keys.
"""

from .config import API_VERSION, DEFAULT_BASE_URL, ClientSettings, load_client_settings
from .errors import (
    APIError,
    ConfigurationError,
    InvalidRequestError,
    PaginationError,
    RequestCancelledError,
    ResponseDecodeError,
    TransportError,
    WebhookVerificationError,
    XbowError,
)
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RateLimitedHttpClient,
    RateLimiter,
    RetryingHttpClient,
    RetryPolicy,
    SlidingWindowRateLimiter,
    create_default_http_client,
)
from .log import setup_logging
from .pagination import ListOptions, Page, PageInfo, collect, paginate
from .runtime import XbowClient
from .utils.context import RequestContext, get_request_context, request_context
from .version import __version__
from .webhook import WebhookVerifier

__all__ = [
    "API_VERSION",
    "APIError",
    "ClientSettings",
    "ConfigurationError",
    "DEFAULT_BASE_URL",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "InvalidRequestError",
    "ListOptions",
    "Page",
    "PageInfo",
    "PaginationError",
    "RateLimitedHttpClient",
    "RateLimiter",
    "RequestCancelledError",
    "RequestContext",
    "ResponseDecodeError",
    "RetryPolicy",
    "RetryingHttpClient",
    "SlidingWindowRateLimiter",
    "TransportError",
    "WebhookVerificationError",
    "WebhookVerifier",
    "XbowClient",
    "XbowError",
    "__version__",
    "collect",
    "create_default_http_client",
    "get_request_context",
    "load_client_settings",
    "paginate",
    "request_context",
    "setup_logging",
]
