# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Case-insensitive header access.

Header names are case-insensitive (RFC 9110). Buffered responses keep
lowercase-keyed dicts; inbound webhook headers come from whatever container the
caller's framework uses (dict, httpx.Headers, list of pairs).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any


def _pairs(headers: Any) -> Iterator[tuple[str, Any]]:
    """Yield `(name, value)` from a mapping, an `.items()` object or an iterable of pairs."""
    if not headers:
        return
    if isinstance(headers, Mapping) or callable(getattr(headers, "items", None)):
        source = headers.items()
    else:
        source = headers
    try:
        for key, value in source:
            if key is not None:
                yield str(key), value
    except (TypeError, ValueError):
        return


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed copy; blank names are dropped and None values become ""."""
    out: dict[str, str] = {}
    for key, value in _pairs(headers):
        name = key.strip().lower()
        if name:
            out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Any, name: str, default: str = "", *, strip: bool = True) -> str:
    """
    Look up a header by name, ignoring case.

    Pass `strip=False` when the exact value matters (signed header values).
    """
    if not name:
        return default
    if isinstance(headers, Mapping) and name in headers:
        value = headers[name]
    else:
        wanted = name.lower()
        value = next((v for k, v in _pairs(headers) if k.lower() == wanted), None)
    if value is None:
        return default
    return str(value).strip() if strip else str(value)


__all__ = ["header_value", "normalize_headers"]
