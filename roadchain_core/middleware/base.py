"""Middleware Base - Chain link with option defaults and lifecycle hooks.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from enum import Flag, auto
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Mapping, Optional, Protocol, runtime_checkable

from roadchain_core.errors import MissingDownstreamError
from roadchain_core.middleware.options import options_registry

if TYPE_CHECKING:
    from roadchain_core.context import RequestContext

logger = logging.getLogger(__name__)


@runtime_checkable
class Handler(Protocol):
    """Anything a link can forward to: another link or a terminal adapter."""

    def process(self, context: RequestContext) -> RequestContext:
        ...


class HookCapability(Flag):
    """Optional hooks a middleware type implements."""

    NONE = 0
    ON_REQUEST = auto()
    ON_COMPLETE = auto()
    ON_ERROR = auto()


_HOOK_METHODS = {
    HookCapability.ON_REQUEST: "on_request",
    HookCapability.ON_COMPLETE: "on_complete",
    HookCapability.ON_ERROR: "on_error",
}


class Middleware:
    """Base chain link.

    Subclasses declare their option schema and defaults in
    DEFAULT_OPTIONS and implement any of the optional hooks:

        on_request(context)   before forwarding downstream
        on_complete(context)  after downstream succeeded
        on_error(error)       after downstream raised; error is re-raised

    Pipeline:
    ┌────────────────────────────────────────────────────────────┐
    │                  Middleware Pipeline                        │
    │                                                             │
    │  Request ──▶ MW1 ──▶ MW2 ──▶ ... ──▶ Terminal              │
    │                                          │                  │
    │  Response ◀── MW1 ◀── MW2 ◀── ... ◀──────┘                 │
    └────────────────────────────────────────────────────────────┘

    Usage:
        class Timing(Middleware):
            DEFAULT_OPTIONS = {"header": "X-Elapsed"}

            def on_request(self, context):
                context.metadata["start"] = time.monotonic()

        Timing.set_default_options(header="X-Duration")
        link = Timing(adapter, {"header": "X-Took"})
    """

    DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType({})

    _hooks: HookCapability = HookCapability.NONE

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        hooks = HookCapability.NONE
        for flag, name in _HOOK_METHODS.items():
            if callable(getattr(cls, name, None)):
                hooks |= flag
        cls._hooks = hooks

    def __init__(
        self,
        app: Optional[Handler] = None,
        options: Optional[Mapping[str, Any]] = None,
    ):
        self.app = app
        merged = self.default_options()
        merged.update(options or {})
        self._options = MappingProxyType(merged)

    @property
    def options(self) -> Mapping[str, Any]:
        """Read-only snapshot of this instance's options."""
        return self._options

    @classmethod
    def hooks(cls) -> HookCapability:
        """Hooks implemented by this type."""
        return cls._hooks

    @classmethod
    def default_options(cls) -> Dict[str, Any]:
        """Effective defaults for this type."""
        return options_registry.get_effective_defaults(cls)

    @classmethod
    def set_default_options(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        """Override this type's defaults process-wide.

        Example:
            RaiseErrorMiddleware.set_default_options(include_request=False)

        Raises:
            ConfigurationError: if a key is not declared for this type.
        """
        overrides = dict(options or {})
        overrides.update(kwargs)
        options_registry.set_defaults(cls, overrides)

    @classmethod
    def reset_default_options(cls) -> None:
        """Drop overrides applied with set_default_options."""
        options_registry.reset_defaults(cls)

    @classmethod
    def allowed_option_keys(cls) -> FrozenSet[str]:
        """Option keys this type accepts as default overrides."""
        return options_registry.allowed_option_keys(cls)

    def process(self, context: RequestContext) -> RequestContext:
        """Run hooks around the downstream handler."""
        if self.app is None:
            raise MissingDownstreamError(f"{type(self).__name__} has no downstream handler")

        hooks = self._hooks
        if hooks & HookCapability.ON_REQUEST:
            self.on_request(context)

        try:
            result = self.app.process(context)
        except Exception as e:
            if hooks & HookCapability.ON_ERROR:
                self.on_error(e)
            raise

        if hooks & HookCapability.ON_COMPLETE:
            self.on_complete(result)
        return result

    def close(self) -> None:
        """Close the downstream handler if it supports closing."""
        closer = getattr(self.app, "close", None)
        if callable(closer):
            closer()
        else:
            logger.warning(f"{self.app!r} does not implement close()")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} app={type(self.app).__name__}>"


__all__ = [
    "Middleware",
    "Handler",
    "HookCapability",
]
