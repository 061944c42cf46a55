# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNSUPPORTED_PROTOCOL = "UNSUPPORTED_PROTOCOL"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def _exception_chain(exc: BaseException, limit: int = 8) -> list[BaseException]:
    chain: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and len(chain) < limit:
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps socket-level failures (twice, via httpcore), so the cause chain is inspected
    for TLS and DNS errors before falling back to the httpx class.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.UnsupportedProtocol):
        return ErrorCategory.UNSUPPORTED_PROTOCOL

    chain = _exception_chain(exc)
    if any(isinstance(item, (ssl.SSLError, ssl.CertificateError)) for item in chain):
        return ErrorCategory.SSL_ERROR

    if any(isinstance(item, (socket.gaierror, socket.herror)) for item in chain):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """Human-readable reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "request timed out",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNSUPPORTED_PROTOCOL: "unsupported URL scheme",
        ErrorCategory.UNKNOWN_ERROR: "transport error",
    }
    return mapping.get(category, "transport error")


class FanclientError(Exception):
    """Base class for every error raised by fanclient."""


class ConcurrentReconfigurationError(FanclientError, RuntimeError):
    """A client was reconfigured while one of its dispatches was still running."""


class DispatchError(FanclientError):
    """A single dispatch failed; `stage` names the step that failed."""

    stage = "dispatch"

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url

    def __str__(self) -> str:
        message = super().__str__()
        if self.url:
            return f"{self.stage} {self.url}: {message}"
        return f"{self.stage}: {message}"


class MalformedURLError(DispatchError):
    stage = "parse_url"


class RequestConstructionError(DispatchError):
    stage = "build_request"


class TransportError(DispatchError):
    stage = "send"

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
    ) -> None:
        super().__init__(message, url=url)
        self.category = category

    @classmethod
    def from_exception(cls, exc: BaseException, *, url: str | None = None) -> TransportError:
        category = categorize_exception(exc)
        detail = str(exc) or type(exc).__name__
        return cls(f"{error_category_to_reason(category)} ({detail})", url=url, category=category)


class ResponseError(FanclientError):
    """Reading or decoding a response body failed."""

    stage = "response"

    def __str__(self) -> str:
        return f"{self.stage}: {super().__str__()}"


class BodyReadError(ResponseError):
    stage = "read_body"


class DecodeError(ResponseError):
    stage = "decode"

    def __init__(self, message: str, *, content_type: str | None = None) -> None:
        super().__init__(message)
        self.content_type = content_type


__all__ = [
    "BodyReadError",
    "ConcurrentReconfigurationError",
    "DecodeError",
    "DispatchError",
    "ErrorCategory",
    "FanclientError",
    "MalformedURLError",
    "RequestConstructionError",
    "ResponseError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
]
