"""Middleware Options - Per-type default option registry.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from roadchain_core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DECLARED_ATTR = "DEFAULT_OPTIONS"


def _declared(kind: type) -> Mapping[str, Any]:
    """Defaults declared directly on a class, ignoring inherited ones."""
    return vars(kind).get(DECLARED_ATTR) or {}


def _detach(value: Any) -> Any:
    """Copy plain containers recursively.

    Dicts, lists, sets and tuples are rebuilt so the registry never shares
    them with callers. Other objects, such as locks or clients, are kept
    by reference.
    """
    if isinstance(value, dict):
        return {key: _detach(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_detach(item) for item in value]
    if type(value) is tuple:
        return tuple(_detach(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return type(value)(_detach(item) for item in value)
    return value


class OptionsRegistry:
    """Registry of default options keyed by middleware type.

    Each type's effective defaults are resolved from its MRO, most-base
    class first. Every class contributes one layer: its own declared
    DEFAULT_OPTIONS with that class's override layer applied on top.

    Resolution:
    ┌────────────────────────────────────────────────────────────┐
    │                   Effective Defaults                        │
    │                                                             │
    │  Middleware      declared ◀── override                      │
    │      │                                                      │
    │      ▼                                                      │
    │  Subclass        declared ◀── override                      │
    │      │                                                      │
    │      ▼                                                      │
    │  Leaf            declared ◀── override  ──▶ cached          │
    └────────────────────────────────────────────────────────────┘

    Override and cache tables are replaced, never mutated in place, so
    a reader always sees a complete mapping.
    """

    def __init__(self):
        self._overrides: Dict[type, Dict[str, Any]] = {}
        self._cache: Dict[type, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def allowed_option_keys(self, kind: type) -> FrozenSet[str]:
        """Option keys declared anywhere along the type's MRO."""
        keys = set()
        for base in kind.__mro__:
            keys.update(_declared(base))
        return frozenset(keys)

    def get_effective_defaults(self, kind: type) -> Dict[str, Any]:
        """Get the merged defaults for a type.

        Returns:
            A fresh dict with detached nested containers; mutating it
            does not touch the registry or any declared DEFAULT_OPTIONS.
        """
        cached = self._cache.get(kind)
        if cached is None:
            with self._lock:
                cached = self._cache.get(kind)
                if cached is None:
                    cached = self._resolve(kind)
                    cache = dict(self._cache)
                    cache[kind] = cached
                    self._cache = cache
        return _detach(cached)

    def set_defaults(self, kind: type, overrides: Mapping[str, Any]) -> None:
        """Merge overrides into the type's own layer.

        Raises:
            ConfigurationError: if any key is not declared for the type.
                Nothing is applied in that case.
        """
        self.validate(kind, overrides)

        with self._lock:
            layer = dict(self._overrides.get(kind, {}))
            layer.update(_detach(dict(overrides)))
            table = dict(self._overrides)
            table[kind] = layer
            self._overrides = table
            self._invalidate(kind)

        logger.debug(f"Default options for {kind.__name__} updated: {sorted(overrides)}")

    def reset_defaults(self, kind: type) -> None:
        """Drop the type's override layer."""
        with self._lock:
            if kind in self._overrides:
                table = dict(self._overrides)
                del table[kind]
                self._overrides = table
            self._invalidate(kind)

    def reset_all(self) -> None:
        """Drop every override and cached result."""
        with self._lock:
            self._overrides = {}
            self._cache = {}

    def validate(self, kind: type, options: Mapping[str, Any]) -> None:
        """Check option keys against the type's declared schema."""
        allowed = self.allowed_option_keys(kind)
        for key in options:
            if key not in allowed:
                raise ConfigurationError(
                    f"{key!r} is not a recognized option for {kind.__name__}"
                )

    def overrides(self, kind: type) -> Dict[str, Any]:
        """Get the type's own override layer."""
        return _detach(self._overrides.get(kind, {}))

    def lineage(self, kind: type) -> List[type]:
        """Classes contributing layers, most-base first."""
        return list(reversed(kind.__mro__))

    def _resolve(self, kind: type) -> Dict[str, Any]:
        overrides = self._overrides
        result: Dict[str, Any] = {}
        for base in self.lineage(kind):
            result.update(_detach(dict(_declared(base))))
            result.update(_detach(overrides.get(base, {})))
        return result

    def _invalidate(self, kind: type) -> None:
        # Caller holds the lock. Descendants resolve through kind.
        self._cache = {
            cached: value
            for cached, value in self._cache.items()
            if not issubclass(cached, kind)
        }


options_registry = OptionsRegistry()


def get_effective_defaults(kind: type, registry: Optional[OptionsRegistry] = None) -> Dict[str, Any]:
    """Get a type's effective defaults from the process-wide registry."""
    return (registry or options_registry).get_effective_defaults(kind)


def set_defaults(
    kind: type,
    overrides: Mapping[str, Any],
    registry: Optional[OptionsRegistry] = None,
) -> None:
    """Override a type's defaults in the process-wide registry."""
    (registry or options_registry).set_defaults(kind, overrides)


def reset_defaults(kind: type, registry: Optional[OptionsRegistry] = None) -> None:
    """Reset a type's defaults in the process-wide registry."""
    (registry or options_registry).reset_defaults(kind)


__all__ = [
    "OptionsRegistry",
    "options_registry",
    "get_effective_defaults",
    "set_defaults",
    "reset_defaults",
]
