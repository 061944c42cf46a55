# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
fanclient package entrypoint.

A small fluent HTTP client: headers, query parameters and a body accumulate on a Client and
apply to every request it issues. `Client.do_all` fans the same request out over many URLs,
sequentially or on one thread per URL, and `decode_body` turns a response into a mapping
based on its declared Content-Type. The network layer sits behind an injectable Transport
(httpx by default).
"""

from .client import Client
from .config import HttpSettings, load_http_settings
from .decode import decode_body
from .errors import (
    BodyReadError,
    ConcurrentReconfigurationError,
    DecodeError,
    DispatchError,
    ErrorCategory,
    FanclientError,
    MalformedURLError,
    RequestConstructionError,
    ResponseError,
    TransportError,
)
from .fanout import FanoutOrder
from .http import (
    DispatchResult,
    HttpRequest,
    HttpxTransport,
    RequestSpec,
    Response,
    StubTransport,
    Transport,
    create_default_transport,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "BodyReadError",
    "Client",
    "ConcurrentReconfigurationError",
    "DecodeError",
    "DispatchError",
    "DispatchResult",
    "ErrorCategory",
    "FanclientError",
    "FanoutOrder",
    "HttpRequest",
    "HttpSettings",
    "HttpxTransport",
    "MalformedURLError",
    "RequestConstructionError",
    "RequestSpec",
    "Response",
    "ResponseError",
    "StubTransport",
    "Transport",
    "TransportError",
    "create_default_transport",
    "decode_body",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
