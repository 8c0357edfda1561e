# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Assessment domain models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .common import ApiModel, parse_timestamp


class AssessmentState(str, Enum):
    WAITING_FOR_CAPACITY = "waiting-for-capacity"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    REPORT_READY = "report-ready"
    FAILED = "failed"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    PAUSED = "paused"
    WAITING_FOR_TIME_WINDOW = "waiting-for-time-window"


def parse_state(value: Any) -> AssessmentState | str:
    """Known states become AssessmentState; unknown ones are kept verbatim."""
    try:
        return AssessmentState(value)
    except ValueError:
        return str(value or "")


@dataclass
class AssessmentEvent(ApiModel):
    name: str
    timestamp: datetime | None = None
    reason: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AssessmentEvent:
        return cls(
            name=str(data.get("name") or ""),
            timestamp=parse_timestamp(data.get("timestamp")),
            reason=str(data.get("reason") or ""),
        )


@dataclass
class Assessment(ApiModel):
    id: str
    name: str = ""
    asset_id: str = ""
    organization_id: str = ""
    state: AssessmentState | str = ""
    progress: float = 0.0
    attack_credits: int = 0
    recent_events: list[AssessmentEvent] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Assessment:
        events = []
        for raw in data.get("recentEvents") or []:
            # Events are a tagged union; entries that are not objects are skipped.
            if isinstance(raw, Mapping):
                events.append(AssessmentEvent.from_mapping(raw))
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            asset_id=str(data.get("assetId") or ""),
            organization_id=str(data.get("organizationId") or ""),
            state=parse_state(data.get("state")),
            progress=float(data.get("progress") or 0),
            attack_credits=int(data.get("attackCredits") or 0),
            recent_events=events,
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


@dataclass
class AssessmentListItem(ApiModel):
    id: str
    name: str = ""
    state: AssessmentState | str = ""
    progress: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AssessmentListItem:
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            state=parse_state(data.get("state")),
            progress=float(data.get("progress") or 0),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


@dataclass
class CreateAssessmentRequest:
    attack_credits: int
    objective: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"attackCredits": int(self.attack_credits)}
        if self.objective is not None:
            payload["objective"] = self.objective
        return payload
