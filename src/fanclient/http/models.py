# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request/response data models shared by the dispatcher, fan-out and decoder."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from ..errors import BodyReadError, DispatchError

Headers = httpx.Headers


@dataclass(frozen=True)
class HttpRequest:
    """Immutable request description consumed by Transport implementations."""

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None

    def header_map(self) -> Headers:
        return httpx.Headers(list(self.headers))


@dataclass
class RequestSpec:
    """
    Header/query/body configuration accumulated by one client.

    One RequestSpec is reused by every dispatch of its client, so each mutation is visible to
    all later calls. `snapshot()` freezes the current state for one dispatch or fan-out.
    """

    headers: Headers = field(default_factory=httpx.Headers)
    query: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def merge_headers(self, headers: Mapping[str, str]) -> None:
        # httpx.Headers.__setitem__ drops every case-insensitive match before storing.
        for name, value in headers.items():
            self.headers[name] = value

    def merge_query(self, query: Mapping[str, str]) -> None:
        for name, value in query.items():
            self.query[name] = value

    def set_body(self, body: bytes | None) -> None:
        self.body = body

    def snapshot(self) -> RequestSnapshot:
        return RequestSnapshot(
            headers=tuple(self.headers.multi_items()),
            query=tuple(self.query.items()),
            body=self.body,
        )


@dataclass(frozen=True)
class RequestSnapshot:
    """Frozen RequestSpec state, safe to share across fan-out workers."""

    headers: tuple[tuple[str, str], ...] = ()
    query: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None

    def build(self, method: str, url: str) -> HttpRequest:
        return HttpRequest(method=method, url=url, headers=self.headers, body=self.body)


class Response:
    """
    Transport response with a single-use body.

    The body stays unread until `read()` (or a decoder) drains it. Draining closes the
    underlying stream; a second read raises BodyReadError instead of returning cached bytes.
    """

    def __init__(self, raw: httpx.Response, *, url: str | None = None) -> None:
        self._raw = raw
        self.url = url if url is not None else _raw_url(raw)
        self._lock = threading.Lock()
        self._consumed = False
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._raw.status_code

    @property
    def headers(self) -> Headers:
        return self._raw.headers

    @property
    def charset(self) -> str | None:
        return self._raw.charset_encoding

    @property
    def consumed(self) -> bool:
        return self._consumed

    def read(self) -> bytes:
        """Drain and close the body stream, returning its bytes."""
        with self._lock:
            if self._consumed:
                raise BodyReadError("response body already consumed")
            if self._closed:
                raise BodyReadError("response closed before its body was read")
            self._consumed = True
            try:
                return self._raw.read()
            except (httpx.HTTPError, httpx.StreamError, OSError) as exc:
                raise BodyReadError(f"failed to read response body: {exc}") from exc
            finally:
                self._close_raw()

    def close(self) -> None:
        """Release the body stream without reading it."""
        with self._lock:
            self._close_raw()

    def body_map(self) -> dict:
        """Decode the body according to its Content-Type (see fanclient.decode)."""
        from ..decode import decode_body

        return decode_body(self)

    def _close_raw(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._raw.close()

    def __enter__(self) -> Response:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}] {self.url}>"


def _raw_url(raw: httpx.Response) -> str | None:
    try:
        return str(raw.url)
    except RuntimeError:
        # httpx raises when the response was built without a request.
        return None


@dataclass
class DispatchResult:
    """Outcome of dispatching one URL: a Response or the error that replaced it."""

    url: str
    index: int
    response: Response | None = None
    error: DispatchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None
