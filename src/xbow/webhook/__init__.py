# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Webhook signature verification."""

from .body import ReplayInput
from .verifier import (
    DEFAULT_MAX_BODY_BYTES,
    DEFAULT_MAX_CLOCK_SKEW,
    ERR_BODY_TOO_LARGE,
    ERR_INVALID_KEY,
    ERR_INVALID_SIGNATURE,
    ERR_INVALID_TIMESTAMP,
    ERR_MISSING_SIGNATURE,
    ERR_MISSING_TIMESTAMP,
    ERR_NO_KEYS,
    ERR_READ_BODY,
    ERR_SIGNATURE_INVALID,
    ERR_TIMESTAMP_EXPIRED,
    HEADER_SIGNATURE_ED25519,
    HEADER_SIGNATURE_TIMESTAMP,
    WebhookVerifier,
    load_public_key,
)

__all__ = [
    "DEFAULT_MAX_BODY_BYTES",
    "DEFAULT_MAX_CLOCK_SKEW",
    "ERR_BODY_TOO_LARGE",
    "ERR_INVALID_KEY",
    "ERR_INVALID_SIGNATURE",
    "ERR_INVALID_TIMESTAMP",
    "ERR_MISSING_SIGNATURE",
    "ERR_MISSING_TIMESTAMP",
    "ERR_NO_KEYS",
    "ERR_READ_BODY",
    "ERR_SIGNATURE_INVALID",
    "ERR_TIMESTAMP_EXPIRED",
    "HEADER_SIGNATURE_ED25519",
    "HEADER_SIGNATURE_TIMESTAMP",
    "ReplayInput",
    "WebhookVerifier",
    "load_public_key",
]
