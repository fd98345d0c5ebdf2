"""Errors - Exception hierarchy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class RoadChainError(Exception):
    """Base class for RoadChain errors."""
    pass


class ConfigurationError(RoadChainError):
    """Raised when an option key is not recognized for a middleware type."""
    pass


class MiddlewareNotFoundError(RoadChainError):
    """Raised when a middleware name is not registered."""
    pass


class MissingDownstreamError(RoadChainError):
    """Raised when a link has no downstream handler to forward to."""
    pass


class StubNotFoundError(RoadChainError):
    """Raised by the stub adapter when no stub matches a request."""
    pass


class HTTPError(RoadChainError):
    """Error carrying the response that triggered it."""

    def __init__(self, message: str, response: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.response = response or {}

    @property
    def status(self) -> Optional[int]:
        """Response status code."""
        return self.response.get("status")


class ClientError(HTTPError):
    """4xx response."""
    pass


class ServerError(HTTPError):
    """5xx response."""
    pass


__all__ = [
    "RoadChainError",
    "ConfigurationError",
    "MiddlewareNotFoundError",
    "MissingDownstreamError",
    "StubNotFoundError",
    "HTTPError",
    "ClientError",
    "ServerError",
]
