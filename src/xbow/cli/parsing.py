# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Parsers for repeatable structured CLI flags."""

from __future__ import annotations

from typing import Any

from ..errors import ERR_INVALID_PARAM, InvalidRequestError
from ..models.organization import OrganizationMember


def _invalid(message: str) -> InvalidRequestError:
    return InvalidRequestError(message, code=ERR_INVALID_PARAM)


def parse_kv(raw: str) -> dict[str, str]:
    """Parse `a=1,b=2` into a dict; parts without `=` are ignored."""
    out: dict[str, str] = {}
    for part in raw.split(","):
        key, sep, value = part.partition("=")
        if sep:
            out[key.strip()] = value.strip()
    return out


def _require_fields(kind: str, raw: str, kv: dict[str, str], names: tuple[str, ...]) -> None:
    for name in names:
        if not kv.get(name):
            raise _invalid(f"{kind} missing required field '{name}' in {raw!r}")


def parse_headers(raw: list[str]) -> dict[str, list[str]]:
    headers: dict[str, list[str]] = {}
    for item in raw:
        key, sep, value = item.partition(":")
        if not sep:
            raise _invalid(f'invalid header format {item!r}, expected "Key: Value"')
        key = key.strip()
        if not key:
            raise _invalid(f"empty header key in {item!r}")
        headers.setdefault(key, []).append(value.strip())
    return headers


def parse_credentials(raw: list[str]) -> list[dict[str, Any]]:
    creds: list[dict[str, Any]] = []
    for item in raw:
        kv = parse_kv(item)
        _require_fields("credential", item, kv, ("name", "type", "username", "password"))
        cred: dict[str, Any] = {
            "name": kv["name"],
            "type": kv["type"],
            "username": kv["username"],
            "password": kv["password"],
        }
        if kv.get("id"):
            cred["id"] = kv["id"]
        if "email-address" in kv:
            cred["emailAddress"] = kv["email-address"]
        if "authenticator-uri" in kv:
            cred["authenticatorUri"] = kv["authenticator-uri"]
        creds.append(cred)
    return creds


def parse_boundary_rules(kind: str, raw: list[str]) -> list[dict[str, Any]]:
    """Parse `--dns-rule` / `--http-rule` values."""
    rules: list[dict[str, Any]] = []
    for item in raw:
        kv = parse_kv(item)
        _require_fields(kind, item, kv, ("action", "type", "filter"))
        rule: dict[str, Any] = {"action": kv["action"], "type": kv["type"], "filter": kv["filter"]}
        if kv.get("id"):
            rule["id"] = kv["id"]
        if "include-subdomains" in kv:
            rule["includeSubdomains"] = kv["include-subdomains"] == "true"
        rules.append(rule)
    return rules


def parse_members(raw: list[str]) -> list[OrganizationMember]:
    members = []
    for item in raw:
        kv = parse_kv(item)
        _require_fields("member", item, kv, ("email", "name"))
        members.append(OrganizationMember(email=kv["email"], name=kv["name"]))
    return members
