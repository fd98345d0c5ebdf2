"""Request Context - Per-invocation request/response state.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from roadchain_core.utils.helpers import find_header, parse_url


@dataclass
class RequestContext:
    """Mutable context flowing through a middleware chain.

    Carries the outgoing request, the response filled in by the
    terminal handler, and a metadata slot for hooks of the same
    invocation to share state (timing data, request IDs).

    Flow:
    ┌────────────────────────────────────────────────────────────┐
    │                    RequestContext                           │
    │                                                             │
    │  method/url/request_* ──▶ MW1 ──▶ MW2 ──▶ Terminal         │
    │                                              │              │
    │  status/response_*   ◀── MW1 ◀── MW2 ◀───────┘              │
    └────────────────────────────────────────────────────────────┘
    """

    method: str
    url: str
    request_headers: Dict[str, str] = field(default_factory=dict)
    request_body: bytes = b""
    params: Dict[str, Any] = field(default_factory=dict)

    # Filled in by the terminal handler
    status: Optional[int] = None
    reason_phrase: str = ""
    response_headers: Dict[str, str] = field(default_factory=dict)
    response_body: bytes = b""

    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    @property
    def path(self) -> str:
        """Request path without query string."""
        return parse_url(self.url)["path"] or "/"

    @property
    def query(self) -> Dict[str, Any]:
        """Parsed query string."""
        return parse_url(self.url)["query"]

    @property
    def is_finished(self) -> bool:
        """Check if a response has been attached."""
        return self.status is not None

    @property
    def is_success(self) -> bool:
        """Check if response is successful (2xx)."""
        return self.status is not None and 200 <= self.status < 300

    def get_header(self, name: str, default: str = "", response: bool = False) -> str:
        """Get request or response header value (case-insensitive)."""
        headers = self.response_headers if response else self.request_headers
        key = find_header(headers, name)
        return headers[key] if key is not None else default

    def set_header(self, name: str, value: str, response: bool = False) -> None:
        """Set request or response header, replacing any differently-cased key."""
        headers = self.response_headers if response else self.request_headers
        key = find_header(headers, name)
        if key is not None:
            del headers[key]
        headers[name] = value

    def finish(
        self,
        status: int,
        headers: Optional[Dict[str, str]] = None,
        body: bytes = b"",
        reason_phrase: str = "",
    ) -> "RequestContext":
        """Attach the response. Called by terminal handlers."""
        self.status = status
        self.response_headers = dict(headers or {})
        self.response_body = body if isinstance(body, bytes) else str(body).encode()
        self.reason_phrase = reason_phrase
        return self

    def json(self) -> Any:
        """Parse response body as JSON."""
        return json.loads(self.response_body.decode())

    def text(self) -> str:
        """Get response body as text."""
        return self.response_body.decode()

    def to_dict(self, include_request: bool = False) -> Dict[str, Any]:
        """Response summary, optionally with the request that produced it."""
        result: Dict[str, Any] = {
            "status": self.status,
            "headers": dict(self.response_headers),
            "body": self.response_body,
        }
        if include_request:
            result["request"] = {
                "method": self.method,
                "url": self.url,
                "headers": dict(self.request_headers),
                "body": self.request_body,
            }
        return result


__all__ = [
    "RequestContext",
]
