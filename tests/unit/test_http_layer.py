# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import threading

import httpx
import pytest

from xbow.config import ClientSettings
from xbow.errors import ErrorCategory, RequestCancelledError, TransportError
from xbow.http import (
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RateLimitedHttpClient,
    RetryingHttpClient,
    RetryPolicy,
    SlidingWindowRateLimiter,
    StubHttpClient,
    create_default_http_client,
    header_value,
    normalize_headers,
    wrap_http_client,
)
from xbow.utils.context import request_context


def _mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_httpx_client_sends_request_and_buffers_response():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["ua"] = request.headers.get("user-agent")
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = request.content
        return httpx.Response(201, headers={"X-Request-Id": "r-1"}, json={"id": "a1"})

    client = HttpxClient(ClientSettings(user_agent="test-agent/1"), client=_mock_client(handler))
    resp = client.request(
        HttpRequest(
            url="https://api.test/api/v1/things",
            method="POST",
            headers={"Authorization": "Bearer k"},
            params={"limit": 5},
            body=b'{"a":1}',
        )
    )

    assert seen == {
        "method": "POST",
        "url": "https://api.test/api/v1/things?limit=5",
        "ua": "test-agent/1",
        "auth": "Bearer k",
        "body": b'{"a":1}',
    }
    assert resp.status_code == 201
    assert resp.ok
    assert resp.json() == {"id": "a1"}
    assert resp.headers["x-request-id"] == "r-1"
    assert resp.header("X-Request-ID") == "r-1"
    assert resp.url == "https://api.test/api/v1/things?limit=5"


def test_httpx_client_keeps_caller_user_agent():
    def handler(request):
        return httpx.Response(200, text=request.headers["user-agent"])

    client = HttpxClient(ClientSettings(), client=_mock_client(handler))
    resp = client.request(HttpRequest(url="https://api.test/", headers={"User-Agent": "custom"}))
    assert resp.text == "custom"


def test_httpx_client_wraps_transport_failures():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpxClient(ClientSettings(), client=_mock_client(handler))
    with pytest.raises(TransportError) as excinfo:
        client.request(HttpRequest(url="https://api.test/"))
    assert excinfo.value.category == ErrorCategory.CONNECTION_ERROR
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert "connection refused" in str(excinfo.value)


def test_httpx_client_timeout_category():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    client = HttpxClient(ClientSettings(), client=_mock_client(handler))
    with pytest.raises(TransportError) as excinfo:
        client.request(HttpRequest(url="https://api.test/"))
    assert excinfo.value.category == ErrorCategory.TIMEOUT


def test_httpx_client_refuses_when_already_cancelled():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    client = HttpxClient(ClientSettings(), client=_mock_client(handler))
    event = threading.Event()
    event.set()
    with request_context(cancel_event=event):
        with pytest.raises(RequestCancelledError):
            client.request(HttpRequest(url="https://api.test/"))
    assert calls == []


def test_httpx_client_timeout_precedence():
    timeouts = []

    def handler(request):
        timeouts.append(request.extensions["timeout"]["read"])
        return httpx.Response(200)

    client = HttpxClient(ClientSettings(timeout=30.0), client=_mock_client(handler))
    client.request(HttpRequest(url="https://api.test/"))
    with request_context(timeout=7.0):
        client.request(HttpRequest(url="https://api.test/"))
        client.request(HttpRequest(url="https://api.test/", timeout=2.0))
    assert timeouts == [30.0, 7.0, 2.0]


def test_response_helpers():
    resp = HttpResponse(status_code=404, headers={"content-type": "application/json"}, content=b"")
    assert not resp.ok
    assert resp.json() is None
    assert resp.header("Content-Type") == "application/json"
    assert resp.header("missing", "dflt") == "dflt"

    resp = HttpResponse(status_code=200, content=json.dumps({"x": 1}).encode())
    resp.close()
    assert resp.closed
    assert resp.content == b""


def test_header_helpers():
    assert normalize_headers({"X-A": "1", "": "skip", "X-B": None}) == {"x-a": "1", "x-b": ""}
    assert normalize_headers(None) == {}
    assert normalize_headers([("Content-Type", "text/plain")]) == {"content-type": "text/plain"}
    assert header_value(httpx.Headers({"X-Mixed": " v "}), "x-mixed") == "v"
    assert header_value({"X-Mixed": " v "}, "X-MIXED", strip=False) == " v "
    assert header_value({}, "x") == ""


def test_wrap_http_client_stacks_retry_over_rate_limit():
    inner = StubHttpClient()
    limiter = SlidingWindowRateLimiter(5)
    client = wrap_http_client(inner, retry_policy=RetryPolicy(), rate_limiter=limiter)
    assert isinstance(client, RetryingHttpClient)
    assert isinstance(client.inner, RateLimitedHttpClient)
    assert client.inner.inner is inner
    assert client.inner.limiter is limiter
    assert wrap_http_client(inner) is inner


def test_create_default_http_client_uses_settings():
    settings = ClientSettings(rate_limit_requests=10, rate_limit_window=2.0, retry_max_attempts=5)
    client = create_default_http_client(settings)
    try:
        assert isinstance(client, RetryingHttpClient)
        assert client.policy.max_attempts == 5
        assert isinstance(client.inner, RateLimitedHttpClient)
        assert isinstance(client.inner.inner, HttpxClient)
    finally:
        client.close()

    plain = create_default_http_client(ClientSettings())
    try:
        assert isinstance(plain, RetryingHttpClient)
        assert isinstance(plain.inner, HttpxClient)
    finally:
        plain.close()


def test_stub_http_client_matches_and_sequences():
    first = HttpResponse(status_code=503)
    second = HttpResponse(status_code=200)
    stub = StubHttpClient({("GET", "/api/v1/x"): [first, second]})
    stub.add("post", "https://exact.test/api/v1/x", lambda req: HttpResponse(status_code=201, content=req.body))

    assert stub.request(HttpRequest(url="https://any.test/api/v1/x")) is first
    assert stub.request(HttpRequest(url="https://any.test/api/v1/x")) is second
    assert stub.request(HttpRequest(url="https://any.test/api/v1/x")) is second
    assert stub.request(HttpRequest(url="https://exact.test/api/v1/x", method="POST", body=b"b")).content == b"b"
    assert stub.request(HttpRequest(url="https://any.test/other")).status_code == 404
    assert len(stub.requests) == 5
