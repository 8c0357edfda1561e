# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Webhook subscription management."""

from __future__ import annotations

from collections.abc import Iterator

from ..models.webhook import CreateWebhookRequest, UpdateWebhookRequest, Webhook, WebhookDelivery, WebhookListItem
from ..pagination import ListOptions, Page
from .base import Auth, Service, api_path, require_param, require_request


class WebhooksService(Service):
    auth = Auth.ORG

    def get(self, webhook_id: str) -> Webhook:
        require_param(webhook_id, "webhook id")
        return self._get(api_path("webhooks", webhook_id), Webhook.from_mapping)

    def update(self, webhook_id: str, request: UpdateWebhookRequest) -> Webhook:
        require_param(webhook_id, "webhook id")
        require_request(request, "UpdateWebhookRequest")
        path = api_path("webhooks", webhook_id)
        return self._send("PATCH", path, Webhook.from_mapping, request.to_payload())

    def delete(self, webhook_id: str) -> None:
        require_param(webhook_id, "webhook id")
        self._client.request("DELETE", api_path("webhooks", webhook_id), auth=self.auth)

    def ping(self, webhook_id: str) -> None:
        """Ask the server to send a ping event to the subscription."""
        require_param(webhook_id, "webhook id")
        self._client.request("POST", api_path("webhooks", webhook_id, "ping"), auth=self.auth)

    def create(self, organization_id: str, request: CreateWebhookRequest) -> Webhook:
        require_param(organization_id, "organization id")
        require_request(request, "CreateWebhookRequest")
        path = api_path("organizations", organization_id, "webhooks")
        return self._send("POST", path, Webhook.from_mapping, request.to_payload())

    def list_by_organization(self, organization_id: str, options: ListOptions | None = None) -> Page[WebhookListItem]:
        require_param(organization_id, "organization id")
        path = api_path("organizations", organization_id, "webhooks")
        return self._get_page(path, options, WebhookListItem.from_mapping)

    def all_by_organization(self, organization_id: str, options: ListOptions | None = None) -> Iterator[WebhookListItem]:
        require_param(organization_id, "organization id")
        return self._iterate(lambda opts: self.list_by_organization(organization_id, opts), options)

    def list_deliveries(self, webhook_id: str, options: ListOptions | None = None) -> Page[WebhookDelivery]:
        require_param(webhook_id, "webhook id")
        return self._get_page(api_path("webhooks", webhook_id, "deliveries"), options, WebhookDelivery.from_mapping)

    def all_deliveries(self, webhook_id: str, options: ListOptions | None = None) -> Iterator[WebhookDelivery]:
        require_param(webhook_id, "webhook id")
        return self._iterate(lambda opts: self.list_deliveries(webhook_id, opts), options)
