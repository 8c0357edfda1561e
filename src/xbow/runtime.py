# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level XBOW API facade."""

from __future__ import annotations

import json as json_module
import logging
from collections.abc import Mapping
from contextlib import suppress
from typing import Any

from .config import API_VERSION, ClientSettings, load_client_settings
from .errors import (
    ERR_MISSING_ANY_KEY,
    ERR_MISSING_INTEGRATION_KEY,
    ERR_MISSING_ORG_KEY,
    APIError,
    ConfigurationError,
)
from .http.client import HttpClient, create_default_http_client, wrap_http_client
from .http.models import HttpRequest, HttpResponse, RetryPolicy
from .http.ratelimit import RateLimiter
from .services import (
    AssessmentsService,
    AssetsService,
    Auth,
    FindingsService,
    MetaService,
    OrganizationsService,
    ReportsService,
    WebhooksService,
)

logger = logging.getLogger(__name__)


class XbowClient:
    """
    Entry point for the XBOW API.

    Organization-scoped resources (assessments, assets, webhooks) use the
    organization key; organization management uses the integration key; findings,
    reports and metadata accept either. Keys not passed explicitly are taken from
    `settings` (by default `XBOW_ORG_KEY` / `XBOW_INTEGRATION_KEY`).

    The default transport is httpx with retries and, when configured, client-side
    rate limiting. An injected `http_client` is used as the base transport and is
    only wrapped when `retry_policy` or `rate_limiter` are given.
    """

    def __init__(
        self,
        org_key: str | None = None,
        integration_key: str | None = None,
        *,
        base_url: str | None = None,
        http_client: HttpClient | None = None,
        settings: ClientSettings | None = None,
        retry_policy: RetryPolicy | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self.settings = settings or load_client_settings()
        self.org_key = org_key or self.settings.org_key
        self.integration_key = integration_key or self.settings.integration_key
        self.base_url = (base_url or self.settings.base_url).rstrip("/")

        if http_client is None:
            self.http_client = create_default_http_client(
                self.settings,
                retry_policy=retry_policy,
                rate_limiter=rate_limiter,
            )
        else:
            self.http_client = wrap_http_client(http_client, retry_policy=retry_policy, rate_limiter=rate_limiter)

        self.assessments = AssessmentsService(self)
        self.assets = AssetsService(self)
        self.findings = FindingsService(self)
        self.meta = MetaService(self)
        self.organizations = OrganizationsService(self)
        self.reports = ReportsService(self)
        self.webhooks = WebhooksService(self)

    def api_key_for(self, auth: Auth) -> str:
        """Resolve the bearer key for `auth`, raising ConfigurationError when it is missing."""
        if auth == Auth.ORG:
            if not self.org_key:
                raise ConfigurationError("organization key is required", code=ERR_MISSING_ORG_KEY)
            return self.org_key
        if auth == Auth.INTEGRATION:
            if not self.integration_key:
                raise ConfigurationError("integration key is required", code=ERR_MISSING_INTEGRATION_KEY)
            return self.integration_key
        if self.integration_key:
            return self.integration_key
        if self.org_key:
            return self.org_key
        raise ConfigurationError("organization key or integration key is required", code=ERR_MISSING_ANY_KEY)

    def request(
        self,
        method: str,
        path: str,
        *,
        auth: Auth,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """
        Send an authenticated API request and return the buffered response.

        Non-2xx responses raise the matching APIError subclass.
        """
        key = self.api_key_for(auth)
        request_headers = {
            "Authorization": f"Bearer {key}",
            "X-XBOW-API-Version": API_VERSION,
            "Accept": "application/json",
        }
        body = None
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)

        response = self.http_client.request(
            HttpRequest(
                url=f"{self.base_url}{path}",
                method=method,
                headers=request_headers,
                params=dict(params) if params else None,
                body=body,
            )
        )
        if not response.ok:
            logger.debug("%s %s -> %s", method, path, response.status_code)
            raise APIError.from_response(response.status_code, response.content)
        return response

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> XbowClient:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
