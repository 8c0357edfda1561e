# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import ClientSettings, load_client_settings
from ..errors import TransportError, categorize_exception
from ..utils.context import get_request_context
from .client import HttpClient
from .headers import normalize_headers
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper."""

    def __init__(self, settings: ClientSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_client_settings()
        self._client = client or httpx.Client(
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        context = get_request_context()
        context.raise_if_cancelled()

        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)

        timeout = request.timeout
        if timeout is None:
            timeout = context.timeout if context.timeout is not None else self.settings.timeout

        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                params=request.params,
                content=request.body,
                timeout=timeout,
            ) as resp:
                content = resp.read()
        except httpx.HTTPError as exc:
            category = categorize_exception(exc)
            logger.debug("%s %s failed: %s (%s)", request.method, request.url, exc, category.value)
            raise TransportError(str(exc) or type(exc).__name__, category=category) from exc

        return HttpResponse(
            status_code=resp.status_code,
            headers=normalize_headers(resp.headers),
            content=content,
            url=str(resp.url),
        )

    def close(self) -> None:
        self._client.close()
