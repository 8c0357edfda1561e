# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import itertools
import threading

import pytest

from xbow.errors import (
    ERR_MISSING_CURSOR,
    ERR_REPEATED_CURSOR,
    APIError,
    InvalidRequestError,
    PaginationError,
    RequestCancelledError,
)
from xbow.pagination import ListOptions, Page, PageInfo, collect, paginate
from xbow.utils.context import get_request_context, request_context


class PageSequence:
    """Serves pre-built pages in order and records the options of each call."""

    def __init__(self, pages):
        self._pages = list(pages)
        self.calls: list[ListOptions] = []

    def __call__(self, options: ListOptions) -> Page:
        self.calls.append(options)
        page = self._pages[len(self.calls) - 1]
        if isinstance(page, Exception):
            raise page
        return page


def _page(items, cursor=None, more=False):
    return Page(items=tuple(items), page_info=PageInfo(next_cursor=cursor, has_more=more))


def test_collect_walks_every_page_in_order():
    fetch = PageSequence(
        [
            _page(["a", "b"], "c1", True),
            _page(["c", "d"], "c2", True),
            _page(["e"]),
        ]
    )
    items, err = collect(paginate(fetch))
    assert items == ["a", "b", "c", "d", "e"]
    assert err is None
    assert len(fetch.calls) == 3


def test_cursor_threading_starts_from_caller_after():
    fetch = PageSequence([_page([1], "n1", True), _page([2], "n2", True), _page([3])])
    list(paginate(fetch, ListOptions(limit=5, after="start")))
    assert [call.after for call in fetch.calls] == ["start", "n1", "n2"]
    assert all(call.limit == 5 for call in fetch.calls)


def test_cursor_defaults_to_empty_when_not_given():
    fetch = PageSequence([_page([1])])
    list(paginate(fetch))
    assert fetch.calls[0].after is None
    assert fetch.calls[0].to_params() == {}


def test_empty_first_page_yields_nothing():
    fetch = PageSequence([_page([])])
    items, err = collect(paginate(fetch))
    assert items == []
    assert err is None
    assert len(fetch.calls) == 1


@pytest.mark.parametrize("cursor", [None, ""])
def test_missing_cursor_with_more_pages_is_a_protocol_error(cursor):
    fetch = PageSequence([_page(["a", "b"], cursor, True), _page(["never"])])
    items, err = collect(paginate(fetch))
    assert items == ["a", "b"]
    assert isinstance(err, PaginationError)
    assert err.code == ERR_MISSING_CURSOR
    assert "no cursor" in err.message
    assert len(fetch.calls) == 1


def test_repeated_cursor_stops_iteration():
    fetch = PageSequence([_page(["a"], "same", True), _page(["b"], "same", True), _page(["never"])])
    items, err = collect(paginate(fetch))
    assert items == ["a", "b"]
    assert isinstance(err, PaginationError)
    assert err.code == ERR_REPEATED_CURSOR
    assert len(fetch.calls) == 2


def test_repeated_cursor_detected_against_caller_cursor():
    fetch = PageSequence([_page(["a"], "start", True)])
    items, err = collect(paginate(fetch, ListOptions(after="start")))
    assert items == ["a"]
    assert err.code == ERR_REPEATED_CURSOR
    assert len(fetch.calls) == 1


def test_fetch_error_ends_sequence_and_keeps_partial_results():
    boom = APIError(500, message="boom")
    fetch = PageSequence([_page(["a"], "c1", True), boom])
    items, err = collect(paginate(fetch))
    assert items == ["a"]
    assert err is boom


def test_non_client_errors_propagate_from_collect():
    fetch = PageSequence([RuntimeError("bug")])
    with pytest.raises(RuntimeError):
        collect(paginate(fetch))


def test_early_stop_does_not_prefetch():
    pages = [_page([i * 3, i * 3 + 1, i * 3 + 2], f"c{i + 1}", True) for i in range(10)]
    fetch = PageSequence(pages)
    taken = list(itertools.islice(paginate(fetch), 4))
    assert taken == [0, 1, 2, 3]
    assert len(fetch.calls) == 2


def test_iterator_is_lazy_until_consumed():
    fetch = PageSequence([_page([1])])
    iterator = paginate(fetch)
    assert fetch.calls == []
    assert next(iterator) == 1
    assert len(fetch.calls) == 1


def test_cancellation_inside_fetch_surfaces_cancel_error():
    event = threading.Event()

    def fetch(options):
        if options.after == "c1":
            event.set()
            get_request_context().raise_if_cancelled()
        return _page(["a"], "c1", True)

    with request_context(cancel_event=event):
        items, err = collect(paginate(fetch))
    assert items == ["a"]
    assert isinstance(err, RequestCancelledError)


def test_page_from_mapping_derives_has_more_from_cursor():
    page = Page.from_mapping({"items": [{"v": 1}], "nextCursor": "abc"}, lambda d: d["v"])
    assert page.items == (1,)
    assert page.page_info == PageInfo(next_cursor="abc", has_more=True)

    last = Page.from_mapping({"items": [], "nextCursor": None}, lambda d: d)
    assert last.page_info.has_more is False

    explicit = Page.from_mapping({"items": [], "nextCursor": "", "hasMore": True}, lambda d: d)
    assert explicit.page_info == PageInfo(next_cursor="", has_more=True)


def test_list_options_validation_and_params():
    assert ListOptions(limit=10, after="x").to_params() == {"limit": 10, "after": "x"}
    assert ListOptions(after="").to_params() == {}
    with pytest.raises(InvalidRequestError):
        ListOptions(limit=0)
    with pytest.raises(InvalidRequestError):
        ListOptions(limit=-3)
