# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory HttpClient used by tests and offline tooling."""

from __future__ import annotations

from collections.abc import Callable
from typing import Union

from .client import HttpClient
from .models import HttpRequest, HttpResponse

StubResponse = Union[HttpResponse, list[HttpResponse], Callable[[HttpRequest], HttpResponse]]


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Responses are keyed by `(METHOD, path-or-url)`. A list is consumed in order
    (the last entry repeats); a callable receives the request.
    """

    def __init__(self, responses: dict[tuple[str, str], StubResponse] | None = None):
        self._responses: dict[tuple[str, str], StubResponse] = dict(responses or {})
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, method: str, url: str, response: StubResponse) -> None:
        self._responses[(method.upper(), url)] = response

    def _lookup(self, request: HttpRequest) -> StubResponse | None:
        method = request.method.upper()
        if (method, request.url) in self._responses:
            return self._responses[(method, request.url)]
        for (stub_method, stub_url), response in self._responses.items():
            if stub_method == method and request.url.endswith(stub_url):
                return response
        return None

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        stub = self._lookup(request)
        if stub is None:
            return HttpResponse(status_code=404, content=b'{"code":"ERR_NOT_FOUND","message":"no stub configured"}')
        if callable(stub):
            return stub(request)
        if isinstance(stub, list):
            return stub.pop(0) if len(stub) > 1 else stub[0]
        return stub

    def close(self) -> None:
        self.closed = True
