# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for the XBOW client."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_BASE_URL = "https://console.xbow.com"
API_VERSION = "2026-02-01"
DEFAULT_USER_AGENT = f"xbow-python/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_int_env(name: str, default: int | None) -> int | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = int(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


def _optional_str_env(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or None


@dataclass
class ClientSettings:
    """Client defaults: endpoint, credentials, HTTP, retry and rate-limit knobs."""

    base_url: str = DEFAULT_BASE_URL
    org_key: str | None = None
    integration_key: str | None = None
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    retry_max_attempts: int = 3
    retry_initial_backoff: float = 0.5
    retry_max_backoff: float = 30.0
    retry_jitter: bool = False
    retry_post: bool = False
    rate_limit_requests: int | None = None
    rate_limit_window: float = 1.0

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Create settings from environment variables (evaluated at call time)."""
        rate_limit_window = _float_env("XBOW_RATE_LIMIT_WINDOW", cls.rate_limit_window)
        if rate_limit_window <= 0:
            rate_limit_window = cls.rate_limit_window
        return cls(
            base_url=os.getenv("XBOW_BASE_URL", cls.base_url).rstrip("/"),
            org_key=_optional_str_env("XBOW_ORG_KEY", cls.org_key),
            integration_key=_optional_str_env("XBOW_INTEGRATION_KEY", cls.integration_key),
            timeout=_float_env("XBOW_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("XBOW_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("XBOW_HTTP_VERIFY_SSL", cls.verify_ssl),
            retry_max_attempts=_int_env("XBOW_RETRY_MAX_ATTEMPTS", cls.retry_max_attempts),
            retry_initial_backoff=_float_env("XBOW_RETRY_INITIAL_BACKOFF", cls.retry_initial_backoff),
            retry_max_backoff=_float_env("XBOW_RETRY_MAX_BACKOFF", cls.retry_max_backoff),
            retry_jitter=_bool_env("XBOW_RETRY_JITTER", cls.retry_jitter),
            retry_post=_bool_env("XBOW_RETRY_POST", cls.retry_post),
            rate_limit_requests=_optional_int_env("XBOW_RATE_LIMIT_REQUESTS", cls.rate_limit_requests),
            rate_limit_window=rate_limit_window,
        )


def load_client_settings() -> ClientSettings:
    """Load client settings from environment with sensible defaults."""
    return ClientSettings.from_env()
