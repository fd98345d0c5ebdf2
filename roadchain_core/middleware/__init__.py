"""Middleware module - Chain links, option defaults and chain building."""

from roadchain_core.middleware.options import (
    OptionsRegistry,
    options_registry,
    get_effective_defaults,
    set_defaults,
    reset_defaults,
)
from roadchain_core.middleware.base import Middleware, Handler, HookCapability
from roadchain_core.middleware.registry import (
    MiddlewareRegistry,
    middleware_registry,
    register_middleware,
    unregister_middleware,
    lookup_middleware,
    registered_middleware,
)
from roadchain_core.middleware.chain import MiddlewareChain, MiddlewareSpec
from roadchain_core.middleware.logging import LoggingMiddleware
from roadchain_core.middleware.transform import HeaderMiddleware
from roadchain_core.middleware.raise_error import RaiseErrorMiddleware

__all__ = [
    "OptionsRegistry",
    "options_registry",
    "get_effective_defaults",
    "set_defaults",
    "reset_defaults",
    "Middleware",
    "Handler",
    "HookCapability",
    "MiddlewareRegistry",
    "middleware_registry",
    "register_middleware",
    "unregister_middleware",
    "lookup_middleware",
    "registered_middleware",
    "MiddlewareChain",
    "MiddlewareSpec",
    "LoggingMiddleware",
    "HeaderMiddleware",
    "RaiseErrorMiddleware",
]
