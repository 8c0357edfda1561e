# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import json
import socket
import ssl as ssl_module
from enum import Enum
from typing import Any

import httpx

# Error codes used by the API and by client-side validation.
ERR_CODE_VALIDATION = "FST_ERR_VALIDATION"
ERR_CODE_NOT_FOUND = "ERR_NOT_FOUND"
ERR_CODE_QUOTA_EXHAUSTED = "ERR_QUOTA_EXHAUSTED"

ERR_INVALID_REQUEST = "ERR_INVALID_REQUEST"
ERR_INVALID_PARAM = "ERR_INVALID_PARAM"
ERR_MISSING_ORG_KEY = "ERR_MISSING_ORG_KEY"
ERR_MISSING_INTEGRATION_KEY = "ERR_MISSING_INTEGRATION_KEY"
ERR_MISSING_ANY_KEY = "ERR_MISSING_ANY_KEY"
ERR_MISSING_CURSOR = "ERR_MISSING_CURSOR"
ERR_REPEATED_CURSOR = "ERR_REPEATED_CURSOR"
ERR_CANCELLED = "ERR_CANCELLED"
ERR_TRANSPORT = "ERR_TRANSPORT"
ERR_DECODE_RESPONSE = "ERR_DECODE_RESPONSE"


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    cause = exc.__cause__ or exc.__context__
    if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR
    if isinstance(cause, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error",
        None: "",
    }
    return mapping.get(category, "Network error")


class XbowError(Exception):
    """Base class for every error raised by the client."""

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"xbow: {self.message} (code={self.code})"
        return f"xbow: {self.message}"


class ConfigurationError(XbowError):
    """Missing or invalid construction inputs (API keys, signing keys)."""


class InvalidRequestError(XbowError):
    """A caller-supplied argument was rejected before any request was sent."""


class PaginationError(XbowError):
    """The server broke the cursor protocol while paginating."""


class RequestCancelledError(XbowError):
    """The ambient cancellation signal fired while a request was in flight."""

    def __init__(self, message: str = "operation cancelled"):
        super().__init__(message, code=ERR_CANCELLED)


class TransportError(XbowError):
    """Connection-level failure; no HTTP response was received."""

    def __init__(self, message: str, *, category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR):
        super().__init__(message, code=ERR_TRANSPORT)
        self.category = category

    def __str__(self) -> str:
        reason = error_category_to_reason(self.category)
        return f"xbow: {reason}: {self.message}" if reason else f"xbow: {self.message}"


class ResponseDecodeError(XbowError):
    """A successful response whose body could not be parsed into the expected model."""

    def __init__(self, message: str):
        super().__init__(message, code=ERR_DECODE_RESPONSE)


class WebhookVerificationError(XbowError):
    """A webhook request failed signature, timestamp or body validation."""


class APIError(XbowError):
    """Structured error returned by the API for a non-2xx response."""

    def __init__(
        self,
        status_code: int,
        *,
        code: str | None = None,
        error_type: str | None = None,
        message: str = "",
    ):
        super().__init__(message, code=code)
        self.status_code = status_code
        self.error_type = error_type

    def __str__(self) -> str:
        if self.message:
            return f"xbow: {self.message} (status={self.status_code}, code={self.code or ''})"
        return f"xbow: {self.error_type or 'error'} (status={self.status_code})"

    @classmethod
    def from_response(cls, status_code: int, body: bytes | str | None) -> APIError:
        """Build the most specific APIError subclass from a raw status and body."""
        raw = body.decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else (body or "")
        error_cls = _error_class_for_status(status_code)

        envelope = _parse_envelope(raw)
        if envelope is not None:
            return error_cls(
                status_code,
                code=envelope.get("code"),
                error_type=envelope.get("error"),
                message=envelope.get("message") or "",
            )

        error_type, code = _STATUS_DEFAULTS.get(status_code, (None, None))
        if error_type is None and status_code >= 500:
            error_type = "Internal Server Error"
        return error_cls(status_code, code=code, error_type=error_type, message=raw)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_quota_exhausted(self) -> bool:
        return self.code == ERR_CODE_QUOTA_EXHAUSTED


class BadRequestError(APIError):
    pass


class UnauthorizedError(APIError):
    pass


class ForbiddenError(APIError):
    pass


class NotFoundError(APIError):
    pass


class RateLimitedError(APIError):
    pass


class InternalServerError(APIError):
    pass


_STATUS_ERRORS: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    429: RateLimitedError,
}

_STATUS_DEFAULTS: dict[int, tuple[str | None, str | None]] = {
    400: ("Bad Request", ERR_CODE_VALIDATION),
    401: ("Unauthorized", None),
    403: ("Forbidden", None),
    404: ("Not Found", ERR_CODE_NOT_FOUND),
    429: ("Too Many Requests", None),
}


def _error_class_for_status(status_code: int) -> type[APIError]:
    if status_code >= 500:
        return InternalServerError
    return _STATUS_ERRORS.get(status_code, APIError)


def _parse_envelope(raw: str) -> dict[str, Any] | None:
    """Return the `{code, error, message}` envelope when the body carries one with a code."""
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, dict) or not data.get("code"):
        return None
    return {key: (None if data.get(key) is None else str(data.get(key))) for key in ("code", "error", "message")}


__all__ = [
    "APIError",
    "BadRequestError",
    "ConfigurationError",
    "ErrorCategory",
    "ForbiddenError",
    "InternalServerError",
    "InvalidRequestError",
    "NotFoundError",
    "PaginationError",
    "RateLimitedError",
    "RequestCancelledError",
    "ResponseDecodeError",
    "TransportError",
    "UnauthorizedError",
    "WebhookVerificationError",
    "XbowError",
    "categorize_exception",
    "error_category_to_reason",
]
