# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Content-Type driven response decoding.

`decode_body` drains a Response exactly once and returns a fresh mapping. The declared
Content-Type is matched exactly (`text/html; charset=utf-8` is not `text/html`); anything
unrecognized, or a missing header, is wrapped under `"raw"`.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qsl

from .errors import DecodeError
from .http.headers import first_header_value
from .http.models import Response

RAW_KEY = "raw"

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
TEXT_CONTENT_TYPES = frozenset({"text/plain", "text/html", "text/xml"})

_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

DecodedBody = dict[str, Any]


def _text(body: bytes, charset: str | None) -> str:
    encoding = charset or "utf-8"
    try:
        return body.decode(encoding, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not a valid JSON value")


def decode_json(body: bytes, charset: str | None = None) -> DecodedBody:
    try:
        value = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as exc:
        raise DecodeError(f"invalid JSON body: {exc}", content_type=JSON_CONTENT_TYPE) from exc
    if not isinstance(value, dict):
        raise DecodeError(
            f"expected a JSON object, got {type(value).__name__}",
            content_type=JSON_CONTENT_TYPE,
        )
    return value


def decode_form(body: bytes, charset: str | None = None) -> DecodedBody:
    """Parse a urlencoded form, keeping only the first value of each repeated key."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"form body is not valid UTF-8: {exc}", content_type=FORM_CONTENT_TYPE) from exc
    if ";" in text:
        raise DecodeError("invalid semicolon separator in form body", content_type=FORM_CONTENT_TYPE)
    bad_escape = _BAD_PERCENT_ESCAPE.search(text)
    if bad_escape:
        raise DecodeError(
            f"invalid percent escape at offset {bad_escape.start()}",
            content_type=FORM_CONTENT_TYPE,
        )

    try:
        pairs = parse_qsl(text, keep_blank_values=True, errors="strict")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"form escape is not valid UTF-8: {exc}", content_type=FORM_CONTENT_TYPE) from exc

    result: DecodedBody = {}
    for key, value in pairs:
        result.setdefault(key, value)
    return result


def decode_raw(body: bytes, charset: str | None = None) -> DecodedBody:
    return {RAW_KEY: _text(body, charset)}


_DECODERS: dict[str, Callable[[bytes, str | None], DecodedBody]] = {
    JSON_CONTENT_TYPE: decode_json,
    FORM_CONTENT_TYPE: decode_form,
    **{content_type: decode_raw for content_type in TEXT_CONTENT_TYPES},
}


def decoder_for(content_type: str | None) -> Callable[[bytes, str | None], DecodedBody]:
    """Return the decoder registered for an exact Content-Type value, else the raw fallback."""
    return _DECODERS.get(content_type or "", decode_raw)


def decode_body(response: Response) -> DecodedBody:
    """
    Drain `response` and decode its body by declared Content-Type.

    Raises BodyReadError when the stream fails or was already consumed, and DecodeError when
    the declared type's parser rejects the content. The stream is closed in every case.
    """
    content_type = first_header_value(response.headers, "Content-Type")
    body = response.read()
    return decoder_for(content_type)(body, response.charset)


__all__ = [
    "DecodedBody",
    "RAW_KEY",
    "decode_body",
    "decode_form",
    "decode_json",
    "decode_raw",
    "decoder_for",
]
