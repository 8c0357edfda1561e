# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Asset operations."""

from __future__ import annotations

from collections.abc import Iterator

from ..models.asset import Asset, AssetListItem, CreateAssetRequest, UpdateAssetRequest
from ..pagination import ListOptions, Page
from .base import Auth, Service, api_path, require_request


class AssetsService(Service):
    auth = Auth.ORG

    def get(self, asset_id: str) -> Asset:
        return self._get(api_path("assets", asset_id), Asset.from_mapping)

    def create(self, organization_id: str, request: CreateAssetRequest) -> Asset:
        require_request(request, "CreateAssetRequest")
        path = api_path("organizations", organization_id, "assets")
        return self._send("POST", path, Asset.from_mapping, request.to_payload())

    def update(self, asset_id: str, request: UpdateAssetRequest) -> Asset:
        """Replace an asset's configuration. The server treats this as a full update."""
        require_request(request, "UpdateAssetRequest")
        return self._send("PUT", api_path("assets", asset_id), Asset.from_mapping, request.to_payload())

    def list_by_organization(self, organization_id: str, options: ListOptions | None = None) -> Page[AssetListItem]:
        return self._get_page(api_path("organizations", organization_id, "assets"), options, AssetListItem.from_mapping)

    def all_by_organization(self, organization_id: str, options: ListOptions | None = None) -> Iterator[AssetListItem]:
        return self._iterate(lambda opts: self.list_by_organization(organization_id, opts), options)
