"""Stub Adapter - In-memory terminal handler for tests.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple, Union

from roadchain_core.errors import StubNotFoundError

if TYPE_CHECKING:
    from roadchain_core.context import RequestContext

logger = logging.getLogger(__name__)

# (status, headers, body)
StubResponse = Tuple[int, Dict[str, str], Union[bytes, str]]
Responder = Callable[["RequestContext"], StubResponse]


@dataclass
class Stub:
    """A canned response for one method and path."""

    method: str
    path: str
    response: Union[StubResponse, Responder]
    calls: int = 0

    def matches(self, context: RequestContext) -> bool:
        """Check if the stub answers this request."""
        return self.method == context.method and self.path == context.path

    def respond(self, context: RequestContext) -> StubResponse:
        """Produce the response, calling the responder if callable."""
        self.calls += 1
        if callable(self.response):
            return self.response(context)
        return self.response


class Stubs:
    """Collection of stubbed responses.

    Usage:
        stubs = Stubs()
        stubs.get("/success", (200, {}, "ok"))
        stubs.post("/fail", lambda ctx: (500, {}, "boom"))
    """

    def __init__(self):
        self._stubs: List[Stub] = []
        self._lock = threading.Lock()

    def add(self, method: str, path: str, response: Union[StubResponse, Responder]) -> "Stubs":
        """Register a response for method and path."""
        with self._lock:
            self._stubs.append(Stub(method.upper(), path, response))
        return self

    def get(self, path: str, response: Union[StubResponse, Responder]) -> "Stubs":
        return self.add("GET", path, response)

    def post(self, path: str, response: Union[StubResponse, Responder]) -> "Stubs":
        return self.add("POST", path, response)

    def put(self, path: str, response: Union[StubResponse, Responder]) -> "Stubs":
        return self.add("PUT", path, response)

    def delete(self, path: str, response: Union[StubResponse, Responder]) -> "Stubs":
        return self.add("DELETE", path, response)

    def match(self, context: RequestContext) -> Optional[Stub]:
        """Find the first stub answering the request."""
        with self._lock:
            for stub in self._stubs:
                if stub.matches(context):
                    return stub
        return None

    def unused(self) -> List[Stub]:
        """Stubs that were never called."""
        return [stub for stub in self._stubs if stub.calls == 0]

    def __len__(self) -> int:
        return len(self._stubs)


class StubAdapter:
    """Terminal handler answering from a Stubs collection."""

    def __init__(self, stubs: Optional[Stubs] = None):
        self.stubs = stubs or Stubs()
        self.closed = False

    def process(self, context: RequestContext) -> RequestContext:
        """Finish the context with the matching stub's response."""
        stub = self.stubs.match(context)
        if stub is None:
            raise StubNotFoundError(f"no stubbed request for {context.method} {context.path}")

        status, headers, body = stub.respond(context)
        if isinstance(body, str):
            body = body.encode()
        return context.finish(status, headers, body)

    def close(self) -> None:
        """Mark the adapter closed."""
        self.closed = True
        logger.debug("Stub adapter closed")


__all__ = [
    "Stub",
    "Stubs",
    "StubAdapter",
]
