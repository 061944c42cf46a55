# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process transports."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Union

import httpx

from ..errors import DispatchError, TransportError
from .client import Transport
from .models import HttpRequest, Response

StubReply = Union[httpx.Response, DispatchError, Callable[[HttpRequest], httpx.Response]]


class StubTransport(Transport):
    """Deterministic, programmable Transport for tests.

    Replies are keyed by the resolved request URL. A reply may be an `httpx.Response`, a
    DispatchError to raise, or a callable producing a response from the request. Safe to
    use from concurrent fan-out workers.
    """

    def __init__(self, replies: dict[str, StubReply] | None = None):
        self._replies: dict[str, StubReply] = dict(replies or {})
        self._lock = threading.Lock()
        self.requests: list[HttpRequest] = []

    def add(self, url: str, reply: StubReply) -> None:
        with self._lock:
            self._replies[url] = reply

    def send(self, request: HttpRequest) -> Response:
        with self._lock:
            self.requests.append(request)
            reply = self._replies.get(request.url)

        if reply is None:
            raise TransportError("No stubbed response configured", url=request.url)
        if isinstance(reply, DispatchError):
            raise reply
        if callable(reply):
            reply = reply(request)
        return Response(reply, url=request.url)

    def close(self) -> None:
        return None
