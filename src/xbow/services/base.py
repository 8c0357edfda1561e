# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared plumbing for resource services."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

from ..errors import ERR_INVALID_PARAM, ERR_INVALID_REQUEST, InvalidRequestError, ResponseDecodeError
from ..http.models import HttpResponse
from ..pagination import ListOptions, Page, paginate

if TYPE_CHECKING:
    from ..runtime import XbowClient

T = TypeVar("T")


class Auth(str, Enum):
    """Which API key a call is authorised with."""

    ORG = "org"
    INTEGRATION = "integration"
    # Integration key when configured, otherwise the organization key.
    ANY = "any"


def api_path(*segments: str) -> str:
    """Join `/api/v1` with URL-quoted path segments."""
    return "/api/v1/" + "/".join(quote(str(segment), safe="") for segment in segments)


def require_param(value: str | None, name: str) -> str:
    if not value:
        raise InvalidRequestError(f"{name} is required", code=ERR_INVALID_PARAM)
    return value


def require_request(request: Any, type_name: str) -> None:
    if request is None:
        raise InvalidRequestError(f"{type_name} cannot be None", code=ERR_INVALID_REQUEST)


def _decode_failure(path: str, exc: Exception) -> ResponseDecodeError:
    return ResponseDecodeError(f"decoding response from {path}: {exc}")


class Service:
    auth: Auth = Auth.ORG

    def __init__(self, client: XbowClient):
        self._client = client

    @staticmethod
    def _json(path: str, response: HttpResponse) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise _decode_failure(path, exc) from exc

    @staticmethod
    def _parse(path: str, data: Any, factory: Callable[[Any], T]) -> T:
        # Malformed fields and non-object bodies land here.
        try:
            return factory(data)
        except (ValueError, TypeError, AttributeError) as exc:
            raise _decode_failure(path, exc) from exc

    def _get_json(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        return self._json(path, self._client.request("GET", path, auth=self.auth, params=params))

    def _send_json(self, method: str, path: str, payload: Any = None) -> Any:
        return self._json(path, self._client.request(method, path, auth=self.auth, json=payload))

    def _get(self, path: str, factory: Callable[[Any], T]) -> T:
        return self._parse(path, self._get_json(path), factory)

    def _send(self, method: str, path: str, factory: Callable[[Any], T], payload: Any = None) -> T:
        return self._parse(path, self._send_json(method, path, payload), factory)

    def _get_page(
        self,
        path: str,
        options: ListOptions | None,
        item_factory: Callable[[Mapping[str, Any]], T],
    ) -> Page[T]:
        params = (options or ListOptions()).to_params()
        data = self._get_json(path, params=params or None)
        return self._parse(path, data, lambda raw: Page.from_mapping(raw, item_factory))

    @staticmethod
    def _iterate(fetch: Callable[[ListOptions], Page[T]], options: ListOptions | None) -> Iterator[T]:
        return paginate(fetch, options)
