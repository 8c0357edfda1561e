# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Finding operations."""

from __future__ import annotations

from collections.abc import Iterator

from ..models.assessment import Assessment
from ..models.finding import Finding, FindingListItem
from ..pagination import ListOptions, Page
from .base import Auth, Service, api_path


class FindingsService(Service):
    auth = Auth.ANY

    def get(self, finding_id: str) -> Finding:
        return self._get(api_path("findings", finding_id), Finding.from_mapping)

    def list_by_asset(self, asset_id: str, options: ListOptions | None = None) -> Page[FindingListItem]:
        return self._get_page(api_path("assets", asset_id, "findings"), options, FindingListItem.from_mapping)

    def all_by_asset(self, asset_id: str, options: ListOptions | None = None) -> Iterator[FindingListItem]:
        return self._iterate(lambda opts: self.list_by_asset(asset_id, opts), options)

    def verify_fix(self, finding_id: str) -> Assessment:
        """Start a targeted assessment that checks whether the finding is fixed."""
        return self._send("POST", api_path("findings", finding_id, "verify-fix"), Assessment.from_mapping)
