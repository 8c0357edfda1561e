# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cursor pagination.

List endpoints return one page per call together with an opaque cursor for the
next page. `paginate` turns a single-page fetch function into a lazy iterator
over every item, guarding against servers that stop advancing the cursor.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from .errors import (
    ERR_INVALID_PARAM,
    ERR_MISSING_CURSOR,
    ERR_REPEATED_CURSOR,
    InvalidRequestError,
    PaginationError,
    XbowError,
)

T = TypeVar("T")


@dataclass(frozen=True)
class PageInfo:
    next_cursor: str | None = None
    has_more: bool = False


@dataclass(frozen=True)
class Page(Generic[T]):
    """One fetched page of items plus its cursor information."""

    items: tuple[T, ...] = ()
    page_info: PageInfo = PageInfo()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, item_factory: Callable[[Mapping[str, Any]], T]) -> Page[T]:
        """
        Parse the `{"items": [...], "nextCursor": ..., "hasMore": ...}` wire shape.

        When `hasMore` is absent it is derived from the presence of a cursor.
        """
        data = data or {}
        raw_items = data.get("items") or []
        cursor = data.get("nextCursor")
        if cursor is not None and not isinstance(cursor, str):
            cursor = str(cursor)
        has_more = data.get("hasMore")
        if has_more is None:
            has_more = bool(cursor)
        return cls(
            items=tuple(item_factory(item) for item in raw_items),
            page_info=PageInfo(next_cursor=cursor, has_more=bool(has_more)),
        )


@dataclass(frozen=True)
class ListOptions:
    limit: int | None = None
    after: str | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and (isinstance(self.limit, bool) or self.limit <= 0):
            raise InvalidRequestError("limit must be a positive integer", code=ERR_INVALID_PARAM)

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.limit is not None:
            params["limit"] = self.limit
        if self.after:
            params["after"] = self.after
        return params


PageFetcher = Callable[[ListOptions], Page[T]]


def paginate(fetch: PageFetcher[T], options: ListOptions | None = None) -> Iterator[T]:
    """
    Lazily yield every item across pages.

    Exceptions raised by `fetch` propagate and end the iteration. A page that
    claims more results without a fresh cursor raises PaginationError after its
    items are yielded. Pages are fetched only as the consumer advances.
    """
    options = options or ListOptions()
    cursor = options.after or ""

    while True:
        page = fetch(replace(options, after=cursor or None))
        yield from page.items

        info = page.page_info
        if not info.has_more:
            return
        if not info.next_cursor:
            raise PaginationError("server indicated more pages but returned no cursor", code=ERR_MISSING_CURSOR)
        if info.next_cursor == cursor:
            raise PaginationError(
                "server returned same cursor, stopping to prevent infinite loop",
                code=ERR_REPEATED_CURSOR,
            )
        cursor = info.next_cursor


def collect(items: Iterable[T]) -> tuple[list[T], XbowError | None]:
    """Drain `items`, returning what was gathered plus the first client error (if any)."""
    out: list[T] = []
    try:
        for item in items:
            out.append(item)
    except XbowError as exc:
        return out, exc
    return out, None


__all__ = ["ListOptions", "Page", "PageFetcher", "PageInfo", "collect", "paginate"]
