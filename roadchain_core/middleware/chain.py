"""Middleware Chain - Ordered chain builder.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Type, Union

from roadchain_core.middleware.base import Handler, Middleware
from roadchain_core.middleware.registry import lookup_middleware

logger = logging.getLogger(__name__)

MiddlewareRef = Union[Type[Middleware], str]


@dataclass
class MiddlewareSpec:
    """A middleware class and the options to build it with."""

    klass: Type[Middleware]
    options: Dict[str, Any] = field(default_factory=dict)

    def build(self, app: Handler) -> Middleware:
        """Instantiate around a downstream handler."""
        return self.klass(app, self.options)


class MiddlewareChain:
    """Chain of middleware specs; the first added is outermost.

    Usage:
        chain = MiddlewareChain()
        chain.use("logging", log_headers=True)
        chain.use(RaiseErrorMiddleware)
        app = chain.build(adapter)
        context = app.process(RequestContext("GET", "/users"))
    """

    def __init__(self, middleware: Optional[List[MiddlewareSpec]] = None):
        self._middleware = list(middleware or [])

    def use(
        self,
        middleware: MiddlewareRef,
        options: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "MiddlewareChain":
        """Append middleware to the inner end of the chain."""
        self._middleware.append(self._spec(middleware, options, kwargs))
        return self

    add = use

    def insert(
        self,
        index: int,
        middleware: MiddlewareRef,
        options: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "MiddlewareChain":
        """Insert middleware at a position (0 = outermost)."""
        self._middleware.insert(index, self._spec(middleware, options, kwargs))
        return self

    def remove(self, middleware: MiddlewareRef) -> bool:
        """Remove the first spec for a middleware class."""
        klass = self._resolve(middleware)
        for i, spec in enumerate(self._middleware):
            if spec.klass is klass:
                del self._middleware[i]
                return True
        return False

    def build(self, terminal: Handler) -> Handler:
        """Wrap the terminal handler, innermost first.

        Every call creates fresh middleware instances.
        """
        app = terminal
        for spec in reversed(self._middleware):
            app = spec.build(app)

        logger.debug(
            f"Built chain: {' -> '.join(s.klass.__name__ for s in self._middleware)} "
            f"-> {type(terminal).__name__}"
        )
        return app

    def _spec(
        self,
        middleware: MiddlewareRef,
        options: Optional[Dict[str, Any]],
        kwargs: Dict[str, Any],
    ) -> MiddlewareSpec:
        merged = dict(options or {})
        merged.update(kwargs)
        return MiddlewareSpec(self._resolve(middleware), merged)

    def _resolve(self, middleware: MiddlewareRef) -> Type[Middleware]:
        if isinstance(middleware, str):
            return lookup_middleware(middleware)
        return middleware

    def __iter__(self) -> Iterator[MiddlewareSpec]:
        return iter(self._middleware)

    def __len__(self) -> int:
        return len(self._middleware)


__all__ = [
    "MiddlewareChain",
    "MiddlewareSpec",
]
