# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers for the dispatcher."""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlencode, urlsplit, urlunsplit

from ..errors import MalformedURLError

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode_query(query: Iterable[tuple[str, str]]) -> str:
    """Form-encode query parameters with keys in sorted order."""
    return urlencode(sorted(query, key=lambda item: item[0]))


def resolve_url(raw_url: str, query: Iterable[tuple[str, str]]) -> str:
    """
    Parse `raw_url` and replace its query string with `query`.

    Any query already present in `raw_url` is discarded. With no parameters the result has
    no `?` at all.
    """
    if _CONTROL_CHARS.search(raw_url):
        raise MalformedURLError("failed to parse URL: control character in URL", url=raw_url)
    try:
        parts = urlsplit(raw_url)
        # urlsplit defers port validation until the attribute is read.
        parts.port
    except ValueError as exc:
        raise MalformedURLError(f"failed to parse URL: {exc}", url=raw_url) from exc
    # The query is replaced below, so only the parts that survive are checked.
    for component in (parts.netloc, parts.path, parts.fragment):
        if _BAD_PERCENT_ESCAPE.search(component):
            raise MalformedURLError(f"failed to parse URL: invalid escape in {component!r}", url=raw_url)
    return urlunsplit(parts._replace(query=encode_query(query)))


__all__ = ["encode_query", "resolve_url"]
