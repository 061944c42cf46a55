# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fluent HTTP client facade: request builder, verb helpers and fan-out."""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager, suppress
from functools import partial

from .config import HttpSettings, load_http_settings
from .dispatch import dispatch
from .errors import ConcurrentReconfigurationError
from .fanout import (
    FanoutOrder,
    collect_responses,
    run_concurrent,
    run_sequential,
    run_sequential_results,
)
from .http.client import Transport, create_default_transport
from .http.models import DispatchResult, RequestSpec, Response


class Client:
    """
    HTTP client whose header/query/body configuration persists across calls.

    Every `with_*` method mutates this client's RequestSpec and returns the client, so
    configuration applies to every later request. Use one client per independent
    configuration.

    Dispatching from several threads at once is supported. Reconfiguring while any dispatch
    is running is not: it raises ConcurrentReconfigurationError.
    """

    def __init__(self, transport: Transport | None = None, *, settings: HttpSettings | None = None):
        self.settings = settings or load_http_settings()
        self.transport = transport or create_default_transport(self.settings)
        self.spec = RequestSpec()
        self._state_lock = threading.Lock()
        self._in_flight = 0

    def with_headers(self, headers: Mapping[str, str]) -> Client:
        with self._reconfiguring():
            self.spec.merge_headers(headers)
        return self

    def with_query(self, query: Mapping[str, str]) -> Client:
        with self._reconfiguring():
            self.spec.merge_query(query)
        return self

    def with_body(self, body: bytes) -> Client:
        with self._reconfiguring():
            self.spec.set_body(body)
        return self

    def get(self, url: str) -> Response:
        return self.request("GET", url)

    def post(self, url: str) -> Response:
        return self.request("POST", url)

    def put(self, url: str) -> Response:
        return self.request("PUT", url)

    def patch(self, url: str) -> Response:
        return self.request("PATCH", url)

    def delete(self, url: str) -> Response:
        return self.request("DELETE", url)

    def request(self, method: str, url: str) -> Response:
        with self._dispatching():
            return dispatch(self.transport, self.spec.snapshot(), method, url)

    def do_all(
        self,
        method: str,
        urls: Sequence[str],
        *,
        concurrent: bool = False,
        order: FanoutOrder = FanoutOrder.INPUT,
    ) -> list[Response]:
        """
        Issue `method` against every URL with the current configuration.

        Sequential mode stops at the first failure, closes the responses gathered so far and
        raises that failure. Concurrent mode runs every URL on its own thread, logs each
        failure and leaves it out of the result, so it never raises a dispatch error;
        compare `len(result)` with `len(urls)` to detect omissions. `order` chooses between
        input order and completion order for concurrent results.
        """
        with self._dispatching():
            send = partial(dispatch, self.transport, self.spec.snapshot(), method)
            if not concurrent:
                return run_sequential(send, urls)
            return collect_responses(run_concurrent(send, urls, order=order))

    def dispatch_all(
        self,
        method: str,
        urls: Sequence[str],
        *,
        concurrent: bool = False,
        order: FanoutOrder = FanoutOrder.INPUT,
    ) -> list[DispatchResult]:
        """Like `do_all`, but report every URL's outcome, failures included, without raising."""
        with self._dispatching():
            send = partial(dispatch, self.transport, self.spec.snapshot(), method)
            if not concurrent:
                return run_sequential_results(send, urls)
            return run_concurrent(send, urls, order=order)

    @contextmanager
    def _dispatching(self) -> Iterator[None]:
        with self._state_lock:
            self._in_flight += 1
        try:
            yield
        finally:
            with self._state_lock:
                self._in_flight -= 1

    @contextmanager
    def _reconfiguring(self) -> Iterator[None]:
        with self._state_lock:
            if self._in_flight:
                raise ConcurrentReconfigurationError(
                    f"client reconfigured while {self._in_flight} dispatch(es) are in flight"
                )
            yield

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.transport, "close"):
                self.transport.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
