# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Webhook subscription, delivery and signing-key models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .common import ApiModel, as_mapping, parse_timestamp


@dataclass
class Webhook(ApiModel):
    id: str
    api_version: str = ""
    target_url: str = ""
    events: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Webhook:
        return cls(
            id=str(data.get("id") or ""),
            api_version=str(data.get("apiVersion") or ""),
            target_url=str(data.get("targetUrl") or ""),
            events=[str(event) for event in data.get("events") or []],
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


WebhookListItem = Webhook


@dataclass
class WebhookDeliveryRequest(ApiModel):
    body: Any = None
    headers: dict[str, Any] = field(default_factory=dict)


@dataclass
class WebhookDeliveryResponse(ApiModel):
    body: Any = None
    headers: dict[str, Any] = field(default_factory=dict)
    status: int = 0


@dataclass
class WebhookDelivery(ApiModel):
    payload: Any = None
    request: WebhookDeliveryRequest = field(default_factory=WebhookDeliveryRequest)
    response: WebhookDeliveryResponse = field(default_factory=WebhookDeliveryResponse)
    sent_at: datetime | None = None
    success: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> WebhookDelivery:
        request = as_mapping(data.get("request"))
        response = as_mapping(data.get("response"))
        return cls(
            payload=data.get("payload"),
            request=WebhookDeliveryRequest(body=request.get("body"), headers=dict(as_mapping(request.get("headers")))),
            response=WebhookDeliveryResponse(
                body=response.get("body"),
                headers=dict(as_mapping(response.get("headers"))),
                status=int(response.get("status") or 0),
            ),
            sent_at=parse_timestamp(data.get("sentAt")),
            success=bool(data.get("success")),
        )


@dataclass
class CreateWebhookRequest:
    api_version: str
    target_url: str
    events: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {"apiVersion": self.api_version, "targetUrl": self.target_url, "events": list(self.events)}


@dataclass
class UpdateWebhookRequest:
    """Partial update; only fields that are set are sent."""

    api_version: str | None = None
    target_url: str | None = None
    events: list[str] | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.api_version is not None:
            payload["apiVersion"] = self.api_version
        if self.target_url is not None:
            payload["targetUrl"] = self.target_url
        if self.events:
            payload["events"] = list(self.events)
        return payload


@dataclass(frozen=True)
class WebhookSigningKey:
    public_key: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> WebhookSigningKey:
        return cls(public_key=str(data.get("publicKey") or ""))

    def to_dict(self) -> dict[str, Any]:
        return {"public_key": self.public_key}
