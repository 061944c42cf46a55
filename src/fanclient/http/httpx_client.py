# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import RequestConstructionError, TransportError
from .client import Transport
from .models import HttpRequest, Response

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """Synchronous httpx client wrapper.

    Requests are built with `httpx.Request` and sent with `Client.send`, so the client's
    default headers (User-Agent, Accept, ...) never reach the wire. httpx still computes
    `Host` and `Content-Length` when the caller did not set them.
    """

    def __init__(self, settings: HttpSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
        )

    def send(self, request: HttpRequest) -> Response:
        try:
            outgoing = httpx.Request(
                request.method,
                request.url,
                headers=list(request.headers),
                content=request.body,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise RequestConstructionError(f"failed to create request: {exc}", url=request.url) from exc

        try:
            raw = self._client.send(
                outgoing,
                stream=True,
                follow_redirects=self.settings.allow_redirects,
            )
        except httpx.HTTPError as exc:
            raise TransportError.from_exception(exc, url=request.url) from exc
        except OSError as exc:
            raise TransportError.from_exception(exc, url=request.url) from exc

        logger.debug("%s %s -> %s", request.method, request.url, raw.status_code)
        return Response(raw, url=str(raw.url))

    def close(self) -> None:
        self._client.close()
