# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from fanclient import Client, ConcurrentReconfigurationError, HttpSettings, StubTransport
from fanclient.http.models import RequestSpec
from fanclient.http.url import encode_query, resolve_url


def _client(*urls):
    transport = StubTransport({url: httpx.Response(200) for url in urls})
    return Client(transport, settings=HttpSettings()), transport


def test_with_methods_return_same_client():
    client, _ = _client()
    assert client.with_headers({"X": "1"}) is client
    assert client.with_query({"q": "1"}) is client
    assert client.with_body(b"data") is client


def test_headers_last_write_wins_per_name():
    client, transport = _client("http://example/")
    client.with_headers({"X-A": "1", "X-B": "2"}).with_headers({"x-a": "3"})

    client.get("http://example/")

    sent = transport.requests[0].header_map()
    assert dict(sent) == {"x-a": "3", "x-b": "2"}
    assert "x-c" not in sent


def test_header_keys_absent_from_update_are_untouched():
    spec = RequestSpec()
    spec.merge_headers({"Accept": "text/plain", "X-Trace": "abc"})
    spec.merge_headers({"Accept": "application/json"})
    assert spec.headers["accept"] == "application/json"
    assert spec.headers["x-trace"] == "abc"


def test_query_replaces_query_embedded_in_url():
    client, transport = _client("http://example/path?a=1&b=two+words")
    client.with_query({"b": "two words", "a": "1"})

    client.get("http://example/path?stale=1&a=9")

    assert transport.requests[0].url == "http://example/path?a=1&b=two+words"


def test_no_query_parameters_strip_embedded_query():
    client, transport = _client("http://example/path")
    client.get("http://example/path?stale=1")
    assert transport.requests[0].url == "http://example/path"


def test_query_last_write_wins():
    client, transport = _client("http://example/?page=2&size=10")
    client.with_query({"page": "1", "size": "10"}).with_query({"page": "2"})
    client.get("http://example/")
    assert transport.requests[0].url == "http://example/?page=2&size=10"


def test_second_body_replaces_first():
    client, transport = _client("http://example/upload")
    client.with_body(b"first").with_body(b"second")

    client.post("http://example/upload")

    assert transport.requests[0].body == b"second"
    assert transport.requests[0].method == "POST"


def test_configuration_persists_across_dispatches():
    client, transport = _client("http://example/a", "http://example/b")
    client.with_headers({"X-Token": "t"}).with_body(b"payload")

    client.put("http://example/a")
    client.patch("http://example/b")

    assert [r.method for r in transport.requests] == ["PUT", "PATCH"]
    assert all(r.header_map()["x-token"] == "t" for r in transport.requests)
    assert all(r.body == b"payload" for r in transport.requests)


def test_snapshot_is_isolated_from_later_mutation():
    spec = RequestSpec()
    spec.merge_query({"a": "1"})
    snapshot = spec.snapshot()
    spec.merge_query({"a": "2"})
    assert snapshot.query == (("a", "1"),)


def test_reconfiguring_during_dispatch_raises():
    transport = StubTransport()
    client = Client(transport, settings=HttpSettings())
    errors = []

    def reply(request):  # noqa: ARG001
        try:
            client.with_headers({"X-Late": "1"})
        except ConcurrentReconfigurationError as exc:
            errors.append(exc)
        return httpx.Response(204)

    transport.add("http://example/", reply)
    response = client.delete("http://example/")

    assert response.status_code == 204
    assert len(errors) == 1
    assert "x-late" not in transport.requests[0].header_map()
    # Idle again: reconfiguration is allowed.
    client.with_headers({"X-Late": "1"})
    assert client.spec.headers["x-late"] == "1"


def test_encode_query_sorts_keys():
    assert encode_query([("z", "1"), ("a", "x y"), ("m", "&")]) == "a=x+y&m=%26&z=1"


def test_resolve_url_keeps_path_and_fragment():
    assert resolve_url("https://host:8443/a/b?x=1#frag", [("k", "v")]) == "https://host:8443/a/b?k=v#frag"


@pytest.mark.parametrize("method", ["get", "post", "put", "patch", "delete"])
def test_verb_helpers_use_matching_method(method):
    client, transport = _client("http://example/")
    getattr(client, method)("http://example/")
    assert transport.requests[0].method == method.upper()


def test_resolve_url_accepts_valid_escapes_and_ignores_dropped_query():
    assert resolve_url("http://host/a%20b%2F?bad=%zz", []) == "http://host/a%20b%2F"
