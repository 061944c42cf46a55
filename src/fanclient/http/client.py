# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and factory."""

from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, Response


class Transport(Protocol):
    """
    Minimal protocol for sending one request.

    Implementations raise RequestConstructionError when the request cannot be built and
    TransportError when it cannot be executed. The returned body must be left unread.
    """

    def send(self, request: HttpRequest) -> Response: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_transport(settings: HttpSettings | None = None) -> Transport:
    """Factory for the default httpx-backed transport."""
    from .httpx_client import HttpxTransport

    return HttpxTransport(settings or load_http_settings())
