# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-resource API services."""

from .assessments import AssessmentsService
from .assets import AssetsService
from .base import Auth, Service, api_path
from .findings import FindingsService
from .meta import MetaService
from .organizations import OrganizationsService
from .reports import ReportsService
from .webhooks import WebhooksService

__all__ = [
    "AssessmentsService",
    "AssetsService",
    "Auth",
    "FindingsService",
    "MetaService",
    "OrganizationsService",
    "ReportsService",
    "Service",
    "WebhooksService",
    "api_path",
]
