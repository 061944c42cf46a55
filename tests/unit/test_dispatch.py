# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from fanclient import (
    Client,
    ErrorCategory,
    HttpSettings,
    MalformedURLError,
    RequestConstructionError,
    StubTransport,
    TransportError,
)


def _client(replies=None):
    transport = StubTransport(replies)
    return Client(transport, settings=HttpSettings()), transport


@pytest.mark.parametrize(
    "url",
    [
        "http://[::1/path",
        "http://example:notaport/",
        "http://example:99999/",
        "http://example/\x00",
        "http://exa mple/\n",
        "http://example/%zz",
        "http://example/path%2",
        "http://example/#frag%g1",
    ],
)
def test_malformed_url_fails_before_any_request(url):
    client, transport = _client()
    with pytest.raises(MalformedURLError) as excinfo:
        client.get(url)
    assert excinfo.value.url == url
    assert excinfo.value.stage == "parse_url"
    assert "parse_url" in str(excinfo.value)
    assert transport.requests == []


@pytest.mark.parametrize("method", ["", "BAD METHOD", "GET\r\n"])
def test_invalid_method_fails_request_construction(method):
    client, transport = _client({"http://example/": httpx.Response(200)})
    with pytest.raises(RequestConstructionError):
        client.request(method, "http://example/")
    assert transport.requests == []


def test_custom_method_token_is_accepted():
    client, transport = _client({"http://example/": httpx.Response(200)})
    client.request("PURGE", "http://example/")
    assert transport.requests[0].method == "PURGE"


def test_transport_error_is_surfaced():
    failure = TransportError("connection refused", url="http://down/", category=ErrorCategory.CONNECTION_ERROR)
    client, _ = _client({"http://down/": failure})
    with pytest.raises(TransportError) as excinfo:
        client.get("http://down/")
    assert excinfo.value is failure
    assert excinfo.value.stage == "send"


def test_unstubbed_url_is_a_transport_error():
    client, _ = _client()
    with pytest.raises(TransportError, match="No stubbed response"):
        client.get("http://missing/")


def test_foreign_transport_exceptions_are_wrapped():
    class ExplodingTransport:
        def send(self, request):  # noqa: ARG002
            raise RuntimeError("socket exploded")

        def close(self):
            return None

    client = Client(ExplodingTransport(), settings=HttpSettings())
    with pytest.raises(TransportError) as excinfo:
        client.get("http://example/?q=1")
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert excinfo.value.category is ErrorCategory.UNKNOWN_ERROR
    assert excinfo.value.url == "http://example/"


def test_response_is_returned_unconsumed():
    client, _ = _client({"http://example/": httpx.Response(200, content=b"body")})
    response = client.get("http://example/")
    assert response.consumed is False
    assert response.url == "http://example/"
    assert response.read() == b"body"
    assert response.consumed is True


def test_client_context_manager_closes_transport():
    class ClosingTransport(StubTransport):
        closed = False

        def close(self):
            self.closed = True

    transport = ClosingTransport()
    with Client(transport, settings=HttpSettings()) as client:
        assert client.transport is transport
    assert transport.closed is True
