# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport layer exports."""

from .adapters import StubTransport
from .client import Transport, create_default_transport
from .headers import first_header_value
from .httpx_client import HttpxTransport
from .models import DispatchResult, Headers, HttpRequest, RequestSnapshot, RequestSpec, Response
from .url import encode_query, resolve_url

__all__ = [
    "DispatchResult",
    "Headers",
    "HttpRequest",
    "HttpxTransport",
    "RequestSnapshot",
    "RequestSpec",
    "Response",
    "StubTransport",
    "Transport",
    "create_default_transport",
    "encode_query",
    "first_header_value",
    "resolve_url",
]
