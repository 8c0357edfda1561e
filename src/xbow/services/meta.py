# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""API metadata: OpenAPI document and webhook signing keys."""

from __future__ import annotations

from ..models.webhook import WebhookSigningKey
from .base import Auth, Service, api_path


class MetaService(Service):
    auth = Auth.ANY

    def get_openapi_spec(self) -> bytes:
        """Raw OpenAPI JSON for the pinned API version."""
        return self._client.request("GET", api_path("meta", "openapi.json"), auth=self.auth).content

    def get_webhook_signing_keys(self) -> list[WebhookSigningKey]:
        """
        Public keys used to sign webhook deliveries.

        More than one key may be active while keys are being rotated.
        """
        path = api_path("meta", "webhooks-signing-keys")
        data = self._get_json(path) or []
        return self._parse(path, data, lambda items: [WebhookSigningKey.from_mapping(item) for item in items])
