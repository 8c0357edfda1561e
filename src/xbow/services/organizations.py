# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Organization and API-key management (integration key)."""

from __future__ import annotations

from collections.abc import Iterator

from ..errors import ERR_INVALID_REQUEST, InvalidRequestError
from ..models.organization import (
    CreateKeyRequest,
    CreateOrganizationRequest,
    Organization,
    OrganizationAPIKey,
    OrganizationListItem,
    UpdateOrganizationRequest,
)
from ..pagination import ListOptions, Page
from .base import Auth, Service, api_path, require_request


class OrganizationsService(Service):
    auth = Auth.INTEGRATION

    def get(self, organization_id: str) -> Organization:
        return self._get(api_path("organizations", organization_id), Organization.from_mapping)

    def update(self, organization_id: str, request: UpdateOrganizationRequest) -> Organization:
        require_request(request, "UpdateOrganizationRequest")
        path = api_path("organizations", organization_id)
        return self._send("PUT", path, Organization.from_mapping, request.to_payload())

    def create(self, integration_id: str, request: CreateOrganizationRequest) -> Organization:
        require_request(request, "CreateOrganizationRequest")
        if not request.members:
            raise InvalidRequestError("at least one member is required", code=ERR_INVALID_REQUEST)
        path = api_path("integrations", integration_id, "organizations")
        return self._send("POST", path, Organization.from_mapping, request.to_payload())

    def list_by_integration(self, integration_id: str, options: ListOptions | None = None) -> Page[OrganizationListItem]:
        path = api_path("integrations", integration_id, "organizations")
        return self._get_page(path, options, OrganizationListItem.from_mapping)

    def all_by_integration(self, integration_id: str, options: ListOptions | None = None) -> Iterator[OrganizationListItem]:
        return self._iterate(lambda opts: self.list_by_integration(integration_id, opts), options)

    def create_key(self, organization_id: str, request: CreateKeyRequest) -> OrganizationAPIKey:
        """Create an organization API key. The secret is only returned here."""
        require_request(request, "CreateKeyRequest")
        path = api_path("organizations", organization_id, "keys")
        return self._send("POST", path, OrganizationAPIKey.from_mapping, request.to_payload())

    def revoke_key(self, key_id: str) -> None:
        self._client.request("DELETE", api_path("keys", key_id), auth=self.auth)
