# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by every transport layer."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from .headers import header_value

if TYPE_CHECKING:
    from ..config import ClientSettings

Headers = dict[str, str]

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    params: dict[str, Any] | None = None
    body: bytes | None = None
    timeout: float | None = None


@dataclass
class HttpResponse:
    """Fully-buffered HTTP response."""

    status_code: int
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)
    closed: bool = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content) if self.content else None

    def header(self, name: str, default: str = "") -> str:
        return header_value(self.headers, name, default)

    def close(self) -> None:
        """Discard the buffered body; the response is not reused afterwards."""
        self.content = b""
        self.closed = True


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry policy for transient HTTP failures.

    Durations are seconds. Non-positive values (and a None status set) are
    treated as unset and replaced by defaults in `normalized()`.
    """

    max_attempts: int = 3
    initial_backoff: float = 0.5
    max_backoff: float = 30.0
    jitter: bool = False
    retryable_status_codes: frozenset[int] | None = DEFAULT_RETRYABLE_STATUS_CODES
    retry_post: bool = False

    def normalized(self) -> RetryPolicy:
        defaults = RetryPolicy()
        codes: Iterable[int] | None = self.retryable_status_codes
        return replace(
            self,
            max_attempts=self.max_attempts if self.max_attempts > 0 else defaults.max_attempts,
            initial_backoff=self.initial_backoff if self.initial_backoff > 0 else defaults.initial_backoff,
            max_backoff=self.max_backoff if self.max_backoff > 0 else defaults.max_backoff,
            retryable_status_codes=frozenset(codes) if codes is not None else DEFAULT_RETRYABLE_STATUS_CODES,
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> RetryPolicy:
        """Build a retry policy from the shared ClientSettings."""
        return cls(
            max_attempts=max(1, settings.retry_max_attempts),
            initial_backoff=settings.retry_initial_backoff,
            max_backoff=settings.retry_max_backoff,
            jitter=settings.retry_jitter,
            retry_post=settings.retry_post,
        ).normalized()
