# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Organization domain models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .common import ApiModel, optional_str, parse_timestamp


@dataclass
class Organization(ApiModel):
    id: str
    name: str = ""
    external_id: str | None = None
    state: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Organization:
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            external_id=optional_str(data.get("externalId")),
            state=str(data.get("state") or ""),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


# List responses carry the same fields as a single organization.
OrganizationListItem = Organization


@dataclass
class OrganizationMember(ApiModel):
    email: str
    name: str

    def to_payload(self) -> dict[str, Any]:
        return {"email": self.email, "name": self.name}


@dataclass
class OrganizationAPIKey(ApiModel):
    id: str
    name: str = ""
    key: str = ""
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OrganizationAPIKey:
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            key=str(data.get("key") or ""),
            expires_at=parse_timestamp(data.get("expiresAt")),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


@dataclass
class CreateOrganizationRequest:
    name: str
    members: list[OrganizationMember] = field(default_factory=list)
    external_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "externalId": self.external_id,
            "members": [member.to_payload() for member in self.members],
        }


@dataclass
class UpdateOrganizationRequest:
    name: str
    # None clears the external id on the server.
    external_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "externalId": self.external_id}


@dataclass
class CreateKeyRequest:
    name: str
    expires_in_days: int | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name}
        if self.expires_in_days is not None:
            payload["expiresInDays"] = self.expires_in_days
        return payload
