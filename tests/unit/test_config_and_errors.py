# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import socket
import ssl

import httpx
import pytest

from xbow import log
from xbow.config import API_VERSION, DEFAULT_BASE_URL, ClientSettings, load_client_settings
from xbow.errors import (
    APIError,
    BadRequestError,
    ErrorCategory,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
    RateLimitedError,
    TransportError,
    UnauthorizedError,
    XbowError,
    categorize_exception,
    error_category_to_reason,
)
from xbow.http.models import RetryPolicy

_ENV_VARS = [
    "XBOW_BASE_URL",
    "XBOW_ORG_KEY",
    "XBOW_INTEGRATION_KEY",
    "XBOW_HTTP_TIMEOUT",
    "XBOW_USER_AGENT",
    "XBOW_HTTP_VERIFY_SSL",
    "XBOW_RETRY_MAX_ATTEMPTS",
    "XBOW_RETRY_INITIAL_BACKOFF",
    "XBOW_RETRY_MAX_BACKOFF",
    "XBOW_RETRY_JITTER",
    "XBOW_RETRY_POST",
    "XBOW_RATE_LIMIT_REQUESTS",
    "XBOW_RATE_LIMIT_WINDOW",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_defaults(clean_env):  # noqa: ARG001
    settings = load_client_settings()
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.org_key is None
    assert settings.integration_key is None
    assert settings.timeout == 30.0
    assert settings.rate_limit_requests is None
    assert API_VERSION == "2026-02-01"


def test_settings_from_env(clean_env):
    clean_env.setenv("XBOW_BASE_URL", "https://staging.xbow.test/")
    clean_env.setenv("XBOW_ORG_KEY", " org-key ")
    clean_env.setenv("XBOW_INTEGRATION_KEY", "")
    clean_env.setenv("XBOW_HTTP_TIMEOUT", "12.5")
    clean_env.setenv("XBOW_HTTP_VERIFY_SSL", "false")
    clean_env.setenv("XBOW_RETRY_MAX_ATTEMPTS", "6")
    clean_env.setenv("XBOW_RETRY_JITTER", "yes")
    clean_env.setenv("XBOW_RATE_LIMIT_REQUESTS", "20")
    clean_env.setenv("XBOW_RATE_LIMIT_WINDOW", "-1")

    settings = ClientSettings.from_env()
    assert settings.base_url == "https://staging.xbow.test"
    assert settings.org_key == "org-key"
    assert settings.integration_key is None
    assert settings.timeout == 12.5
    assert settings.verify_ssl is False
    assert settings.retry_max_attempts == 6
    assert settings.retry_jitter is True
    assert settings.rate_limit_requests == 20
    assert settings.rate_limit_window == 1.0


def test_settings_ignore_malformed_numbers(clean_env):
    clean_env.setenv("XBOW_HTTP_TIMEOUT", "soon")
    clean_env.setenv("XBOW_RETRY_MAX_ATTEMPTS", "many")
    clean_env.setenv("XBOW_RATE_LIMIT_REQUESTS", "0")
    settings = ClientSettings.from_env()
    assert settings.timeout == 30.0
    assert settings.retry_max_attempts == 3
    assert settings.rate_limit_requests is None


def test_retry_policy_from_settings():
    policy = RetryPolicy.from_settings(
        ClientSettings(retry_max_attempts=0, retry_initial_backoff=0.2, retry_post=True)
    )
    assert policy.max_attempts == 1
    assert policy.initial_backoff == 0.2
    assert policy.retry_post is True


def test_api_error_from_envelope():
    err = APIError.from_response(404, b'{"code":"ERR_NOT_FOUND","error":"Not Found","message":"asset missing"}')
    assert isinstance(err, NotFoundError)
    assert err.status_code == 404
    assert err.code == "ERR_NOT_FOUND"
    assert err.error_type == "Not Found"
    assert err.message == "asset missing"
    assert err.is_not_found
    assert str(err) == "xbow: asset missing (status=404, code=ERR_NOT_FOUND)"


@pytest.mark.parametrize(
    ("status", "cls", "error_type", "code"),
    [
        (400, BadRequestError, "Bad Request", "FST_ERR_VALIDATION"),
        (401, UnauthorizedError, "Unauthorized", None),
        (403, ForbiddenError, "Forbidden", None),
        (404, NotFoundError, "Not Found", "ERR_NOT_FOUND"),
        (429, RateLimitedError, "Too Many Requests", None),
        (502, InternalServerError, "Internal Server Error", None),
    ],
)
def test_api_error_defaults_without_envelope(status, cls, error_type, code):
    err = APIError.from_response(status, b"plain failure")
    assert type(err) is cls
    assert err.error_type == error_type
    assert err.code == code
    assert err.message == "plain failure"


def test_api_error_ignores_envelope_without_code():
    err = APIError.from_response(409, '{"message":"conflict"}')
    assert type(err) is APIError
    assert err.code is None
    assert err.message == '{"message":"conflict"}'

    empty = APIError.from_response(429, b"")
    assert empty.is_rate_limited
    assert str(empty) == "xbow: Too Many Requests (status=429)"

    quota = APIError.from_response(402, b'{"code":"ERR_QUOTA_EXHAUSTED","message":"no credits left"}')
    assert quota.is_quota_exhausted
    assert not empty.is_quota_exhausted


def test_error_string_forms():
    assert str(XbowError("boom")) == "xbow: boom"
    assert str(XbowError("boom", code="ERR_X")) == "xbow: boom (code=ERR_X)"
    transport = TransportError("refused", category=ErrorCategory.CONNECTION_ERROR)
    assert str(transport) == "xbow: Network connectivity issue: refused"
    assert isinstance(transport, XbowError)


def test_categorize_exception():
    request = httpx.Request("GET", "https://api.test/")
    assert categorize_exception(httpx.ConnectTimeout("t", request=request)) == ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectError("c", request=request)) == ErrorCategory.CONNECTION_ERROR

    wrapped = httpx.ConnectError("dns", request=request)
    wrapped.__cause__ = socket.gaierror("no such host")
    assert categorize_exception(wrapped) == ErrorCategory.DNS_ERROR

    tls = httpx.ConnectError("tls", request=request)
    tls.__cause__ = ssl.SSLError("bad cert")
    assert categorize_exception(tls) == ErrorCategory.SSL_ERROR

    assert categorize_exception(ConnectionResetError()) == ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ValueError()) == ErrorCategory.UNKNOWN_ERROR
    assert error_category_to_reason(None) == ""
    assert error_category_to_reason(ErrorCategory.TIMEOUT) == "Network timeout"


def test_setup_logging_configures_root(monkeypatch):
    captured = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
    log.setup_logging("debug")
    assert captured["level"] == logging.DEBUG

    log.setup_logging("nonsense")
    assert captured["level"] == logging.WARNING
