# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for the XBOW API."""

from ..http.models import Headers, HttpRequest, HttpResponse, RetryPolicy
from .assessment import Assessment, AssessmentEvent, AssessmentListItem, AssessmentState, CreateAssessmentRequest
from .asset import Asset, AssetListItem, CreateAssetRequest, UpdateAssetRequest
from .common import parse_timestamp, to_jsonable
from .finding import Finding, FindingListItem
from .organization import (
    CreateKeyRequest,
    CreateOrganizationRequest,
    Organization,
    OrganizationAPIKey,
    OrganizationListItem,
    OrganizationMember,
    UpdateOrganizationRequest,
)
from .report import ReportListItem, ReportSummary
from .webhook import (
    CreateWebhookRequest,
    UpdateWebhookRequest,
    Webhook,
    WebhookDelivery,
    WebhookDeliveryRequest,
    WebhookDeliveryResponse,
    WebhookListItem,
    WebhookSigningKey,
)

__all__ = [
    "Assessment",
    "AssessmentEvent",
    "AssessmentListItem",
    "AssessmentState",
    "Asset",
    "AssetListItem",
    "CreateAssessmentRequest",
    "CreateAssetRequest",
    "CreateKeyRequest",
    "CreateOrganizationRequest",
    "CreateWebhookRequest",
    "Finding",
    "FindingListItem",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "Organization",
    "OrganizationAPIKey",
    "OrganizationListItem",
    "OrganizationMember",
    "ReportListItem",
    "ReportSummary",
    "RetryPolicy",
    "UpdateAssetRequest",
    "UpdateOrganizationRequest",
    "UpdateWebhookRequest",
    "Webhook",
    "WebhookDelivery",
    "WebhookDeliveryRequest",
    "WebhookDeliveryResponse",
    "WebhookListItem",
    "WebhookSigningKey",
    "parse_timestamp",
    "to_jsonable",
]
