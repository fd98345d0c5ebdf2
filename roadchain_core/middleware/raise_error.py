"""Raise Error Middleware - Turn error statuses into exceptions.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

from roadchain_core.errors import ClientError, HTTPError, ServerError
from roadchain_core.middleware.base import Middleware

if TYPE_CHECKING:
    from roadchain_core.context import RequestContext

logger = logging.getLogger(__name__)


class RaiseErrorMiddleware(Middleware):
    """Raise ClientError for 4xx and ServerError for 5xx responses.

    Example:
        # Keep request details out of raised errors application-wide
        RaiseErrorMiddleware.set_default_options(include_request=False)
    """

    DEFAULT_OPTIONS: Dict[str, Any] = {
        "include_request": True,
        "allowed_statuses": (),
    }

    def on_complete(self, context: RequestContext) -> None:
        """Raise for error statuses."""
        status = context.status
        if status is None or status < 400:
            return
        if status in self.options["allowed_statuses"]:
            return

        if status < 500:
            error_class = ClientError
        elif status < 600:
            error_class = ServerError
        else:
            error_class = HTTPError

        response = context.to_dict(include_request=self.options["include_request"])
        logger.debug(f"Raising {error_class.__name__} for {context.method} {context.url}: {status}")
        raise error_class(f"the server responded with status {status}", response)


__all__ = [
    "RaiseErrorMiddleware",
]
