# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Report domain models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .common import ApiModel, parse_timestamp


@dataclass
class ReportListItem(ApiModel):
    id: str
    version: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ReportListItem:
        return cls(
            id=str(data.get("id") or ""),
            version=int(data.get("version") or 0),
            created_at=parse_timestamp(data.get("createdAt")),
        )


@dataclass
class ReportSummary(ApiModel):
    markdown: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ReportSummary:
        return cls(markdown=str(data.get("markdown") or ""))
