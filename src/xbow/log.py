# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for the xbow CLI; the library only emits records."""

from __future__ import annotations

import logging
import os
import sys

DEFAULT_LOG_LEVEL = os.getenv("XBOW_LOG_LEVEL", "WARNING").upper()

# httpcore traces every socket event at DEBUG; keep it out of `-v` output.
_NOISY_LOGGERS = ("httpcore",)


def setup_logging(level: str | None = None) -> None:
    """Send log records to stderr at `level` (default `XBOW_LOG_LEVEL`, else WARNING)."""
    resolved = getattr(logging, (level or DEFAULT_LOG_LEVEL).upper(), logging.WARNING)
    logging.basicConfig(
        level=resolved,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.INFO))


__all__ = ["setup_logging"]
