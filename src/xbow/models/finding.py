# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Finding domain models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .common import ApiModel, parse_timestamp


@dataclass
class Finding(ApiModel):
    id: str
    name: str = ""
    severity: str = ""
    state: str = ""
    summary: str = ""
    impact: str = ""
    mitigations: str = ""
    recipe: str = ""
    evidence: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Finding:
        text = {key: str(data.get(key) or "") for key in ("summary", "impact", "mitigations", "recipe", "evidence")}
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            severity=str(data.get("severity") or ""),
            state=str(data.get("state") or ""),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            **text,
        )


@dataclass
class FindingListItem(ApiModel):
    id: str
    name: str = ""
    severity: str = ""
    state: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> FindingListItem:
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            severity=str(data.get("severity") or ""),
            state=str(data.get("state") or ""),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )
