# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-request dispatch: one (method, URL, request state) triple in, one Response out."""

from __future__ import annotations

import re

from .errors import DispatchError, RequestConstructionError, TransportError
from .http.client import Transport
from .http.models import RequestSnapshot, Response
from .http.url import resolve_url

# RFC 9110 token characters.
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def dispatch(transport: Transport, snapshot: RequestSnapshot, method: str, url: str) -> Response:
    """
    Issue one request built from `snapshot` against `url`.

    The query string of `url` is replaced by the snapshot's query parameters and the
    snapshot's headers are sent verbatim. No retries are attempted.
    """
    resolved = resolve_url(url, snapshot.query)

    if not method or not _METHOD_TOKEN.fullmatch(method):
        raise RequestConstructionError(f"failed to create request: invalid method {method!r}", url=resolved)

    request = snapshot.build(method, resolved)
    try:
        return transport.send(request)
    except DispatchError:
        raise
    except Exception as exc:  # noqa: BLE001
        # Third-party transports may leak their own exception types.
        raise TransportError.from_exception(exc, url=resolved) from exc


__all__ = ["dispatch"]
