# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header lookup utilities.

HTTP header field names are case-insensitive (RFC 9110). httpx.Headers handles the casing, but
`get()` comma-joins repeated fields, which breaks exact Content-Type matching.
"""

from __future__ import annotations

import httpx


def first_header_value(headers: httpx.Headers, name: str) -> str | None:
    """Return the first value sent for `name`, stripped, or None when the field is absent."""
    values = headers.get_list(name)
    if not values:
        return None
    return values[0].strip()


__all__ = ["first_header_value"]
