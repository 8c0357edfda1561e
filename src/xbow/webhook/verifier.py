# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Webhook signature verification.

Deliveries carry a detached Ed25519 signature over the timestamp header value
followed by the raw request body:

    X-Signature-Timestamp: 1735689600
    X-Signature-Ed25519:   <128 hex chars>
    signed message:        b"1735689600" + body

Several signing keys may be active at once while the server rotates keys; a
signature produced by any of them is accepted.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import time
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from ..errors import ConfigurationError, WebhookVerificationError
from ..http.headers import header_value
from ..models.webhook import WebhookSigningKey
from .body import ReplayInput, read_limited

logger = logging.getLogger(__name__)

HEADER_SIGNATURE_TIMESTAMP = "X-Signature-Timestamp"
HEADER_SIGNATURE_ED25519 = "X-Signature-Ed25519"

DEFAULT_MAX_CLOCK_SKEW = 300.0
DEFAULT_MAX_BODY_BYTES = 5 * 1024 * 1024
SIGNATURE_SIZE = 64

ERR_NO_KEYS = "ERR_NO_KEYS"
ERR_INVALID_KEY = "ERR_INVALID_KEY"
ERR_MISSING_TIMESTAMP = "ERR_MISSING_TIMESTAMP"
ERR_MISSING_SIGNATURE = "ERR_MISSING_SIGNATURE"
ERR_INVALID_TIMESTAMP = "ERR_INVALID_TIMESTAMP"
ERR_TIMESTAMP_EXPIRED = "ERR_TIMESTAMP_EXPIRED"
ERR_INVALID_SIGNATURE = "ERR_INVALID_SIGNATURE"
ERR_READ_BODY = "ERR_READ_BODY"
ERR_BODY_TOO_LARGE = "ERR_BODY_TOO_LARGE"
ERR_SIGNATURE_INVALID = "ERR_SIGNATURE_INVALID"

_TIMESTAMP_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_WSGI_TIMESTAMP = "HTTP_X_SIGNATURE_TIMESTAMP"
_WSGI_SIGNATURE = "HTTP_X_SIGNATURE_ED25519"

SigningKeyInput = Union[WebhookSigningKey, str]
WSGIApp = Callable[[dict[str, Any], Callable[..., Any]], Iterable[bytes]]


def load_public_key(encoded: str) -> Ed25519PublicKey:
    """Decode a Base64 DER SPKI Ed25519 public key."""
    try:
        der = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError(f"failed to decode base64 public key: {exc}", code=ERR_INVALID_KEY) from exc

    try:
        key = serialization.load_der_public_key(der)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ConfigurationError(f"failed to parse SPKI public key: {exc}", code=ERR_INVALID_KEY) from exc

    if not isinstance(key, Ed25519PublicKey):
        raise ConfigurationError("public key is not Ed25519", code=ERR_INVALID_KEY)
    return key


class WebhookVerifier:
    """
    Verifies signed webhook deliveries.

    Construction fails fast on an empty key set or any undecodable key. The
    verifier is read-only afterwards and safe to share across threads.
    """

    def __init__(
        self,
        keys: Iterable[SigningKeyInput],
        *,
        max_clock_skew: float = DEFAULT_MAX_CLOCK_SKEW,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
        clock: Callable[[], float] = time.time,
    ):
        encoded = [key.public_key if isinstance(key, WebhookSigningKey) else key for key in keys or ()]
        if not encoded:
            raise ConfigurationError("at least one signing key is required", code=ERR_NO_KEYS)
        self.public_keys: tuple[Ed25519PublicKey, ...] = tuple(load_public_key(value) for value in encoded)
        self.max_clock_skew = max_clock_skew
        self.max_body_bytes = max_body_bytes
        self._clock = clock

    def _check_headers(self, timestamp: str, signature: str) -> bytes:
        """Validate the signature headers in order and return the decoded signature."""
        if not timestamp:
            raise WebhookVerificationError(f"missing {HEADER_SIGNATURE_TIMESTAMP} header", code=ERR_MISSING_TIMESTAMP)
        if not signature:
            raise WebhookVerificationError(f"missing {HEADER_SIGNATURE_ED25519} header", code=ERR_MISSING_SIGNATURE)

        seconds = _parse_timestamp(timestamp)
        skew = abs(int(self._clock()) - seconds)
        if skew > self.max_clock_skew:
            raise WebhookVerificationError("timestamp outside valid range", code=ERR_TIMESTAMP_EXPIRED)

        try:
            decoded = binascii.unhexlify(signature)
        except (binascii.Error, ValueError) as exc:
            raise WebhookVerificationError("invalid signature hex encoding", code=ERR_INVALID_SIGNATURE) from exc
        if len(decoded) != SIGNATURE_SIZE:
            raise WebhookVerificationError("invalid signature length", code=ERR_INVALID_SIGNATURE)
        return decoded

    def _check_signature(self, timestamp: str, body: bytes, signature: bytes) -> None:
        message = timestamp.encode("utf-8") + body
        for key in self.public_keys:
            try:
                key.verify(signature, message)
            except InvalidSignature:
                continue
            return
        raise WebhookVerificationError("signature verification failed", code=ERR_SIGNATURE_INVALID)

    def verify_request(self, headers: Any, body: bytes) -> None:
        """
        Verify a delivery whose body has already been read.

        `headers` is any case-insensitive or plain mapping of request headers.
        Raises WebhookVerificationError on rejection.
        """
        timestamp = header_value(headers, HEADER_SIGNATURE_TIMESTAMP, strip=False)
        signature_hex = header_value(headers, HEADER_SIGNATURE_ED25519, strip=False)
        try:
            signature = self._check_headers(timestamp, signature_hex)
            if len(body) > self.max_body_bytes:
                raise WebhookVerificationError("request body exceeds maximum allowed size", code=ERR_BODY_TOO_LARGE)
            self._check_signature(timestamp, body, signature)
        except WebhookVerificationError as exc:
            logger.debug("Rejected webhook delivery: %s", exc.code)
            raise

    def verify(self, environ: dict[str, Any]) -> None:
        """
        Verify a WSGI request.

        Reads at most `max_body_bytes + 1` bytes of the body and replaces
        `wsgi.input` with a stream that replays them (followed by anything left
        unread), so the body stays readable whether or not verification passes.
        """
        timestamp = str(environ.get(_WSGI_TIMESTAMP) or "")
        signature_hex = str(environ.get(_WSGI_SIGNATURE) or "")
        try:
            signature = self._check_headers(timestamp, signature_hex)
            body = self._read_body(environ)
            if len(body) > self.max_body_bytes:
                raise WebhookVerificationError("request body exceeds maximum allowed size", code=ERR_BODY_TOO_LARGE)
            self._check_signature(timestamp, body, signature)
        except WebhookVerificationError as exc:
            logger.debug("Rejected webhook delivery: %s", exc.code)
            raise

    def _read_body(self, environ: dict[str, Any]) -> bytes:
        stream = environ.get("wsgi.input")
        if stream is None:
            environ["wsgi.input"] = ReplayInput(b"")
            return b""

        limit = self.max_body_bytes + 1
        content_length = _content_length(environ)
        if content_length is not None:
            limit = min(limit, content_length)

        try:
            body = read_limited(stream, limit)
        except (OSError, ValueError) as exc:
            raise WebhookVerificationError("failed to read request body", code=ERR_READ_BODY) from exc
        environ["wsgi.input"] = ReplayInput(body, stream)
        return body

    def middleware(self, app: WSGIApp) -> WSGIApp:
        """Wrap a WSGI app so unverified deliveries get a 401 and never reach it."""

        def verified_app(environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
            try:
                self.verify(environ)
            except WebhookVerificationError as exc:
                return _unauthorized(start_response, str(exc))
            return app(environ, start_response)

        return verified_app


def _parse_timestamp(value: str) -> int:
    """Parse a signed decimal Unix timestamp that fits in a signed 64-bit integer."""
    if not _TIMESTAMP_RE.fullmatch(value):
        raise WebhookVerificationError("invalid timestamp format", code=ERR_INVALID_TIMESTAMP)
    try:
        seconds = int(value)
    except ValueError as exc:
        raise WebhookVerificationError("invalid timestamp format", code=ERR_INVALID_TIMESTAMP) from exc
    if not _INT64_MIN <= seconds <= _INT64_MAX:
        raise WebhookVerificationError("invalid timestamp format", code=ERR_INVALID_TIMESTAMP)
    return seconds


def _content_length(environ: Mapping[str, Any]) -> int | None:
    raw = environ.get("CONTENT_LENGTH")
    if raw in (None, ""):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None


def _unauthorized(start_response: Callable[..., Any], message: str) -> Iterator[bytes]:
    body = (message + "\n").encode("utf-8")
    start_response(
        "401 Unauthorized",
        [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
            ("Content-Length", str(len(body))),
        ],
    )
    return iter([body])
