"""Helper utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional
from urllib.parse import parse_qs, urlparse


def parse_url(url: str) -> Dict[str, Any]:
    """Parse URL into components."""
    parsed = urlparse(url)

    return {
        "scheme": parsed.scheme,
        "host": parsed.hostname or "",
        "port": parsed.port,
        "path": parsed.path,
        "query": parse_qs(parsed.query),
        "fragment": parsed.fragment,
    }


def find_header(headers: Dict[str, str], name: str) -> Optional[str]:
    """Return the stored key matching name case-insensitively."""
    lowered = name.lower()
    for key in headers:
        if key.lower() == lowered:
            return key
    return None


def merge_headers(*headers_list: Dict[str, str]) -> Dict[str, str]:
    """Merge header dictionaries, later ones winning regardless of case."""
    result: Dict[str, str] = {}

    for headers in headers_list:
        for key, value in headers.items():
            existing_key = find_header(result, key)
            if existing_key is not None:
                del result[existing_key]
            result[key] = value

    return result


def remove_headers(headers: Dict[str, str], names: Iterable[str]) -> Dict[str, str]:
    """Return a copy of headers without the given names (case-insensitive)."""
    dropped = {name.lower() for name in names}
    return {k: v for k, v in headers.items() if k.lower() not in dropped}


__all__ = [
    "parse_url",
    "find_header",
    "merge_headers",
    "remove_headers",
]
