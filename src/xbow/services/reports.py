# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Report downloads and summaries."""

from __future__ import annotations

from collections.abc import Iterator

from ..models.report import ReportListItem, ReportSummary
from ..pagination import ListOptions, Page
from .base import Auth, Service, api_path


class ReportsService(Service):
    auth = Auth.ANY

    def get(self, report_id: str) -> bytes:
        """Download a report as PDF bytes."""
        response = self._client.request(
            "GET",
            api_path("reports", report_id),
            auth=self.auth,
            headers={"Accept": "application/pdf"},
        )
        return response.content

    def get_summary(self, report_id: str) -> ReportSummary:
        path = api_path("reports", report_id, "summary")
        return self._parse(path, self._get_json(path) or {}, ReportSummary.from_mapping)

    def list_by_asset(self, asset_id: str, options: ListOptions | None = None) -> Page[ReportListItem]:
        return self._get_page(api_path("assets", asset_id, "reports"), options, ReportListItem.from_mapping)

    def all_by_asset(self, asset_id: str, options: ListOptions | None = None) -> Iterator[ReportListItem]:
        return self._iterate(lambda opts: self.list_by_asset(asset_id, opts), options)
