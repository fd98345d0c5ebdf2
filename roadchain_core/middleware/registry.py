"""Middleware Registry - Named lookup of middleware types.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import importlib
import logging
import threading
from typing import Dict, List, Type, Union

from roadchain_core.errors import MiddlewareNotFoundError

logger = logging.getLogger(__name__)

# A class, or "package.module:ClassName" imported on first lookup
Registration = Union[type, str]


class MiddlewareRegistry:
    """Maps short names to middleware classes.

    Registrations may be lazy import paths so that registering a
    middleware does not import it.
    """

    def __init__(self):
        self._registered: Dict[str, Registration] = {}
        self._lock = threading.Lock()

    def register(self, **mapping: Registration) -> None:
        """Register middleware under names."""
        with self._lock:
            registered = dict(self._registered)
            registered.update(mapping)
            self._registered = registered

    def unregister(self, key: str) -> bool:
        """Remove a registration."""
        with self._lock:
            if key not in self._registered:
                return False
            registered = dict(self._registered)
            del registered[key]
            self._registered = registered
            return True

    def lookup(self, key: str) -> Type:
        """Resolve a name to its middleware class."""
        try:
            target = self._registered[key]
        except KeyError:
            raise MiddlewareNotFoundError(f"{key!r} is not registered") from None

        if isinstance(target, str):
            path = target
            target = self._load(key, path)
            with self._lock:
                # Skip the write-back if the name was dropped or replaced meanwhile.
                if self._registered.get(key) == path:
                    registered = dict(self._registered)
                    registered[key] = target
                    self._registered = registered

        return target

    def names(self) -> List[str]:
        """Registered names."""
        return sorted(self._registered)

    def __contains__(self, key: str) -> bool:
        return key in self._registered

    def _load(self, key: str, path: str) -> type:
        module_name, _, attr = path.partition(":")
        try:
            module = importlib.import_module(module_name)
            target = getattr(module, attr)
        except (ImportError, AttributeError) as e:
            logger.error(f"Failed to load middleware {key!r} from {path}: {e}")
            raise MiddlewareNotFoundError(f"{key!r} could not be loaded from {path}") from e
        return target


middleware_registry = MiddlewareRegistry()

middleware_registry.register(
    logging="roadchain_core.middleware.logging:LoggingMiddleware",
    headers="roadchain_core.middleware.transform:HeaderMiddleware",
    raise_error="roadchain_core.middleware.raise_error:RaiseErrorMiddleware",
)


def register_middleware(**mapping: Registration) -> None:
    """Register middleware in the process-wide registry."""
    middleware_registry.register(**mapping)


def unregister_middleware(key: str) -> bool:
    """Remove a name from the process-wide registry."""
    return middleware_registry.unregister(key)


def lookup_middleware(key: str) -> Type:
    """Resolve a name through the process-wide registry."""
    return middleware_registry.lookup(key)


def registered_middleware() -> List[str]:
    """Names in the process-wide registry."""
    return middleware_registry.names()


__all__ = [
    "MiddlewareRegistry",
    "middleware_registry",
    "register_middleware",
    "unregister_middleware",
    "lookup_middleware",
    "registered_middleware",
]
