# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for fanclient."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("FANCLIENT_LOG_LEVEL", "WARNING").upper()

# Concurrent fan-out reports per-URL failures here instead of raising them.
FANOUT_LOGGER = "fanclient.fanout"


def _level(name: str, default: int) -> int:
    level = getattr(logging, name.strip().upper(), None)
    return level if isinstance(level, int) else default


def setup_logging(level: str | None = None, *, fanout_level: str | None = None) -> None:
    """
    Configure standard logging for library consumers and scripts.

    `fanout_level` (or FANCLIENT_FANOUT_LOG_LEVEL) sets the fan-out logger on its own, e.g.
    "ERROR" to silence the WARNING emitted for each URL dropped by a concurrent `do_all`.
    """
    logging.basicConfig(
        level=_level(level or DEFAULT_LOG_LEVEL, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    fanout = fanout_level or os.getenv("FANCLIENT_FANOUT_LOG_LEVEL")
    if fanout:
        logging.getLogger(FANOUT_LOGGER).setLevel(_level(fanout, logging.WARNING))


__all__ = ["FANOUT_LOGGER", "setup_logging"]
