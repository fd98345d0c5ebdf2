"""RoadChain - Composable HTTP middleware chains.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

RoadChain defines the contract every middleware layer honors inside a
request/response pipeline:
- Per-type default options with inheritance and validated overrides
- Request, completion and error hooks around a downstream handler
- Close propagation through the chain
- Named middleware registry and chain builder

Architecture Overview:
┌─────────────────────────────────────────────────────────────────────────────┐
│                              RoadChain                                       │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                              │
│  ┌───────────────────────────────────────────────────────────────────────┐  │
│  │                         Request Pipeline                              │  │
│  │  Caller ──▶ MW1.on_request ──▶ MW2.on_request ──▶ Terminal Adapter    │  │
│  │  Caller ◀── MW1.on_complete ◀── MW2.on_complete ◀──────┘              │  │
│  └───────────────────────────────────────────────────────────────────────┘  │
│                                                                              │
│  ┌─────────────────┐  ┌─────────────────┐  ┌─────────────────────────────┐ │
│  │    Options      │  │   Middleware    │  │        Chain                │ │
│  │                 │  │                 │  │                             │ │
│  │ - Declared      │  │ - on_request    │  │ - Name registry             │ │
│  │ - Overrides     │  │ - on_complete   │  │ - Builder                   │ │
│  │ - Effective     │  │ - on_error      │  │ - Stub adapter              │ │
│  │ - Validation    │  │ - close         │  │ - Config loading            │ │
│  └─────────────────┘  └─────────────────┘  └─────────────────────────────┘ │
│                                                                              │
└─────────────────────────────────────────────────────────────────────────────┘

Usage:
    from roadchain_core import MiddlewareChain, RequestContext, StubAdapter, Stubs

    stubs = Stubs().get("/success", (200, {}, "ok"))

    chain = MiddlewareChain()
    chain.use("logging")
    chain.use("raise_error", include_request=False)

    app = chain.build(StubAdapter(stubs))
    context = app.process(RequestContext("GET", "http://example.com/success"))
    app.close()
"""

__version__ = "0.1.0"
__author__ = "BlackRoad OS, Inc."

# Middleware
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
    register_middleware,
    lookup_middleware,
)
from roadchain_core.middleware.chain import MiddlewareChain
from roadchain_core.middleware.logging import LoggingMiddleware
from roadchain_core.middleware.transform import HeaderMiddleware
from roadchain_core.middleware.raise_error import RaiseErrorMiddleware

# Context
from roadchain_core.context import RequestContext

# Adapters
from roadchain_core.adapters.stub import Stubs, StubAdapter

# Errors
from roadchain_core.errors import (
    RoadChainError,
    ConfigurationError,
    MiddlewareNotFoundError,
    MissingDownstreamError,
    StubNotFoundError,
    HTTPError,
    ClientError,
    ServerError,
)

# Utils
from roadchain_core.utils.config import Config, load_config, apply_config

__all__ = [
    # Version
    "__version__",
    # Middleware
    "OptionsRegistry",
    "options_registry",
    "get_effective_defaults",
    "set_defaults",
    "reset_defaults",
    "Middleware",
    "Handler",
    "HookCapability",
    "MiddlewareRegistry",
    "register_middleware",
    "lookup_middleware",
    "MiddlewareChain",
    "LoggingMiddleware",
    "HeaderMiddleware",
    "RaiseErrorMiddleware",
    # Context
    "RequestContext",
    # Adapters
    "Stubs",
    "StubAdapter",
    # Errors
    "RoadChainError",
    "ConfigurationError",
    "MiddlewareNotFoundError",
    "MissingDownstreamError",
    "StubNotFoundError",
    "HTTPError",
    "ClientError",
    "ServerError",
    # Utils
    "Config",
    "load_config",
    "apply_config",
]
