# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Asset domain models.

Nested asset configuration (credentials, boundary rules, checks) is kept as
plain JSON structures; the API owns their schema.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .common import ApiModel, as_mapping, optional_str, parse_timestamp


@dataclass
class Asset(ApiModel):
    id: str
    name: str = ""
    organization_id: str = ""
    lifecycle: str = ""
    sku: str = ""
    start_url: str | None = None
    max_requests_per_second: int | None = None
    approved_time_windows: dict[str, Any] | None = None
    credentials: list[dict[str, Any]] = field(default_factory=list)
    dns_boundary_rules: list[dict[str, Any]] = field(default_factory=list)
    headers: dict[str, list[str]] = field(default_factory=dict)
    http_boundary_rules: list[dict[str, Any]] = field(default_factory=list)
    checks: dict[str, Any] = field(default_factory=dict)
    archive_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Asset:
        windows = data.get("approvedTimeWindows")
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            organization_id=str(data.get("organizationId") or ""),
            lifecycle=str(data.get("lifecycle") or ""),
            sku=str(data.get("sku") or ""),
            start_url=optional_str(data.get("startUrl")),
            max_requests_per_second=data.get("maxRequestsPerSecond") or None,
            approved_time_windows=dict(windows) if isinstance(windows, Mapping) else None,
            credentials=[dict(item) for item in data.get("credentials") or []],
            dns_boundary_rules=[dict(item) for item in data.get("dnsBoundaryRules") or []],
            headers=_parse_headers(data.get("headers")),
            http_boundary_rules=[dict(item) for item in data.get("httpBoundaryRules") or []],
            checks=dict(as_mapping(data.get("checks"))),
            archive_at=parse_timestamp(data.get("archiveAt")),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


def _parse_headers(raw: Any) -> dict[str, list[str]]:
    # Values may be a single string or a list of strings.
    out: dict[str, list[str]] = {}
    for name, value in as_mapping(raw).items():
        if isinstance(value, (list, tuple)):
            out[str(name)] = [str(v) for v in value]
        elif value is not None:
            out[str(name)] = [str(value)]
    return out


@dataclass
class AssetListItem(ApiModel):
    id: str
    name: str = ""
    lifecycle: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AssetListItem:
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            lifecycle=str(data.get("lifecycle") or ""),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


@dataclass
class CreateAssetRequest:
    name: str
    sku: str

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "sku": self.sku}


@dataclass
class UpdateAssetRequest:
    name: str
    start_url: str
    max_requests_per_second: int
    sku: str | None = None
    approved_time_windows: dict[str, Any] | None = None
    credentials: list[dict[str, Any]] = field(default_factory=list)
    dns_boundary_rules: list[dict[str, Any]] = field(default_factory=list)
    headers: dict[str, list[str]] = field(default_factory=dict)
    http_boundary_rules: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_asset(cls, asset: Asset) -> UpdateAssetRequest:
        """Start an update from the current asset so unchanged fields are preserved."""
        return cls(
            name=asset.name,
            start_url=asset.start_url or "",
            max_requests_per_second=asset.max_requests_per_second or 0,
            sku=asset.sku or None,
            approved_time_windows=asset.approved_time_windows,
            credentials=list(asset.credentials),
            dns_boundary_rules=list(asset.dns_boundary_rules),
            headers=dict(asset.headers),
            http_boundary_rules=list(asset.http_boundary_rules),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UpdateAssetRequest:
        """Parse a camelCase update document (the same shape `to_payload` produces)."""
        windows = data.get("approvedTimeWindows")
        return cls(
            name=str(data.get("name") or ""),
            start_url=str(data.get("startUrl") or ""),
            max_requests_per_second=int(data.get("maxRequestsPerSecond") or 0),
            sku=optional_str(data.get("sku")),
            approved_time_windows=dict(windows) if isinstance(windows, Mapping) else None,
            credentials=[dict(item) for item in data.get("credentials") or []],
            dns_boundary_rules=[dict(item) for item in data.get("dnsBoundaryRules") or []],
            headers=_parse_headers(data.get("headers")),
            http_boundary_rules=[dict(item) for item in data.get("httpBoundaryRules") or []],
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "startUrl": self.start_url,
            "maxRequestsPerSecond": self.max_requests_per_second,
            "credentials": self.credentials,
            "dnsBoundaryRules": self.dns_boundary_rules,
            "headers": self.headers,
            "httpBoundaryRules": self.http_boundary_rules,
        }
        if self.sku is not None:
            payload["sku"] = self.sku
        if self.approved_time_windows is not None:
            payload["approvedTimeWindows"] = self.approved_time_windows
        return payload
