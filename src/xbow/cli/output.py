# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Table and JSON rendering for CLI commands."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any, TextIO

from ..models.common import to_jsonable
from ..pagination import collect


def format_time(value: datetime | None, *, date_only: bool = False) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d" if date_only else "%Y-%m-%d %H:%M:%S")


def format_progress(value: float) -> str:
    return f"{value * 100:.1f}%"


def print_json(data: Any, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    payload = data.to_dict() if hasattr(data, "to_dict") else to_jsonable(data)
    json.dump(payload, stream, indent=2)
    stream.write("\n")


def print_details(rows: Sequence[tuple[str, Any]], stream: TextIO | None = None) -> None:
    """Print `LABEL:  value` lines with aligned values."""
    stream = stream or sys.stdout
    width = max((len(label) for label, _ in rows), default=0) + 2
    for label, value in rows:
        stream.write(f"{label:<{width}}{'' if value is None else value}".rstrip() + "\n")


class TableWriter:
    """
    Streams rows as they arrive.

    Column widths are fixed up front (at least the header width) so rows can be
    written without buffering the whole listing; longer values push the row out.
    """

    def __init__(self, columns: Sequence[tuple[str, int]], stream: TextIO | None = None):
        self.columns = [(header, max(width, len(header))) for header, width in columns]
        self.stream = stream or sys.stdout
        self.row(*(header for header, _ in self.columns))

    def row(self, *values: Any) -> None:
        cells = []
        for (_, width), value in zip(self.columns, values):
            cells.append(f"{'' if value is None else value!s:<{width}}")
        self.stream.write("  ".join(cells).rstrip() + "\n")
        self.stream.flush()


def print_list(
    items: Iterable[Any],
    output: str,
    columns: Sequence[tuple[str, int]],
    render_row: Any,
) -> None:
    """
    Render a lazy listing.

    JSON output drains the iterator through `collect` into a single array and
    prints nothing if any page fails; table output prints each row as soon as its
    page has been fetched. Errors from the iterator propagate.
    """
    if output == "json":
        collected, err = collect(items)
        if err is not None:
            raise err
        print_json(collected)
        return
    table = TableWriter(columns)
    for item in items:
        table.row(*render_row(item))
