"""Logging Middleware - Request/response logging.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING, Any, Dict

from roadchain_core.middleware.base import Middleware

if TYPE_CHECKING:
    from roadchain_core.context import RequestContext

logger = logging.getLogger(__name__)


class LoggingMiddleware(Middleware):
    """Logging middleware for requests, responses and failures."""

    DEFAULT_OPTIONS: Dict[str, Any] = {
        "log_headers": False,
        "log_body": False,
        "skip_paths": (),
        "log_errors": True,
        "max_body_size": 1024,
    }

    def on_request(self, context: RequestContext) -> None:
        """Log outgoing request."""
        skip_paths = self.options["skip_paths"]
        if isinstance(skip_paths, str):
            skip_paths = (skip_paths,)
        if context.path in skip_paths:
            context.metadata["_log_skip"] = True
            return

        request_id = str(uuid.uuid4())[:8]
        context.metadata["_request_id"] = request_id
        context.metadata["_start_time"] = time.time()

        log_parts = [f"[{request_id}] --> {context.method} {context.url}"]

        if self.options["log_headers"]:
            log_parts.append(f"headers={context.request_headers}")

        if self.options["log_body"] and context.request_body:
            log_parts.append(f"body={self._truncate(context.request_body)!r}")

        logger.info(" ".join(log_parts))

    def on_complete(self, context: RequestContext) -> None:
        """Log incoming response."""
        if context.metadata.get("_log_skip"):
            return

        request_id = context.metadata.get("_request_id", "?")
        start_time = context.metadata.get("_start_time", time.time())
        duration_ms = (time.time() - start_time) * 1000

        log_parts = [f"[{request_id}] <-- {context.status} ({duration_ms:.2f}ms)"]

        if self.options["log_headers"]:
            log_parts.append(f"headers={context.response_headers}")

        if self.options["log_body"] and context.response_body:
            log_parts.append(f"body={self._truncate(context.response_body)!r}")

        logger.info(" ".join(log_parts))

    def on_error(self, error: Exception) -> None:
        """Log downstream failure."""
        if self.options["log_errors"]:
            logger.error(f"<-- {type(error).__name__}: {error}")

    def _truncate(self, body: bytes) -> bytes:
        limit = self.options["max_body_size"]
        return body if len(body) <= limit else body[:limit] + b"..."


__all__ = [
    "LoggingMiddleware",
]
