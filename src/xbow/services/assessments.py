# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Assessment lifecycle operations."""

from __future__ import annotations

from collections.abc import Iterator

from ..models.assessment import Assessment, AssessmentListItem, CreateAssessmentRequest
from ..pagination import ListOptions, Page
from .base import Auth, Service, api_path, require_request


class AssessmentsService(Service):
    auth = Auth.ORG

    def get(self, assessment_id: str) -> Assessment:
        return self._get(api_path("assessments", assessment_id), Assessment.from_mapping)

    def create(self, asset_id: str, request: CreateAssessmentRequest) -> Assessment:
        """Start a new assessment against an asset."""
        require_request(request, "CreateAssessmentRequest")
        path = api_path("assets", asset_id, "assessments")
        return self._send("POST", path, Assessment.from_mapping, request.to_payload())

    def list_by_asset(self, asset_id: str, options: ListOptions | None = None) -> Page[AssessmentListItem]:
        return self._get_page(api_path("assets", asset_id, "assessments"), options, AssessmentListItem.from_mapping)

    def all_by_asset(self, asset_id: str, options: ListOptions | None = None) -> Iterator[AssessmentListItem]:
        return self._iterate(lambda opts: self.list_by_asset(asset_id, opts), options)

    def cancel(self, assessment_id: str) -> Assessment:
        return self._transition(assessment_id, "cancel")

    def pause(self, assessment_id: str) -> Assessment:
        return self._transition(assessment_id, "pause")

    def resume(self, assessment_id: str) -> Assessment:
        return self._transition(assessment_id, "resume")

    def _transition(self, assessment_id: str, action: str) -> Assessment:
        return self._send("POST", api_path("assessments", assessment_id, action), Assessment.from_mapping)
