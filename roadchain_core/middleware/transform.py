"""Transform Middleware - Request/response header manipulation.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

from roadchain_core.middleware.base import Middleware
from roadchain_core.utils.helpers import merge_headers, remove_headers

if TYPE_CHECKING:
    from roadchain_core.context import RequestContext

logger = logging.getLogger(__name__)


class HeaderMiddleware(Middleware):
    """Simple header manipulation middleware.

    Removals run before additions on both sides.
    """

    DEFAULT_OPTIONS: Dict[str, Any] = {
        "add_request_headers": {},
        "remove_request_headers": (),
        "add_response_headers": {},
        "remove_response_headers": (),
    }

    def on_request(self, context: RequestContext) -> None:
        """Add/remove request headers."""
        headers = remove_headers(context.request_headers, self.options["remove_request_headers"])
        context.request_headers = merge_headers(headers, self.options["add_request_headers"])
        self._log_edit("request", self.options["remove_request_headers"], self.options["add_request_headers"])

    def on_complete(self, context: RequestContext) -> None:
        """Add/remove response headers."""
        headers = remove_headers(context.response_headers, self.options["remove_response_headers"])
        context.response_headers = merge_headers(headers, self.options["add_response_headers"])
        self._log_edit("response", self.options["remove_response_headers"], self.options["add_response_headers"])

    def _log_edit(self, side: str, removed, added) -> None:
        if removed or added:
            logger.debug(f"{side} headers: removed={list(removed)} added={sorted(added)}")


__all__ = [
    "HeaderMiddleware",
]
