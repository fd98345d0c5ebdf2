"""Configuration utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from roadchain_core.errors import ConfigurationError
from roadchain_core.middleware.options import OptionsRegistry, options_registry
from roadchain_core.middleware.registry import MiddlewareRegistry, middleware_registry

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Config")

MIDDLEWARE_ENV_KEY = "middleware__"
SEQUENCE_TYPES = (list, tuple, set, frozenset)


class ConfigSource(Enum):
    """Configuration sources."""

    FILE = auto()
    ENV = auto()
    DICT = auto()
    DEFAULT = auto()


@dataclass
class Config:
    """RoadChain configuration.

    middleware maps a registered middleware name to the default
    options applied to that type, e.g.:

        middleware:
          raise_error:
            include_request: false
    """

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # Middleware defaults by registered name
    middleware: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    source: ConfigSource = ConfigSource.DEFAULT

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any], source: ConfigSource = ConfigSource.DICT) -> T:
        """Create config from dictionary."""
        # Filter to only valid fields
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()} - {"source"}
        filtered = {k: v for k, v in (data or {}).items() if k in valid_fields}

        middleware = filtered.get("middleware") or {}
        if not isinstance(middleware, dict) or not all(
            isinstance(v, dict) for v in middleware.values()
        ):
            raise ConfigurationError("middleware must map names to option mappings")

        filtered["middleware"] = {name: dict(opts) for name, opts in middleware.items()}
        return cls(source=source, **filtered)

    @classmethod
    def from_json(cls: Type[T], path: str) -> T:
        """Load config from JSON file."""
        return cls.from_dict(_read_json(path), ConfigSource.FILE)

    @classmethod
    def from_yaml(cls: Type[T], path: str) -> T:
        """Load config from YAML file."""
        return cls.from_dict(_read_yaml(path), ConfigSource.FILE)

    @classmethod
    def from_env(cls: Type[T], prefix: str = "ROADCHAIN_") -> T:
        """Load config from environment variables.

        ROADCHAIN_LOG_LEVEL=DEBUG
        ROADCHAIN_MIDDLEWARE__RAISE_ERROR__INCLUDE_REQUEST=false
        """
        return cls.from_dict(_read_env(prefix), ConfigSource.ENV)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "log_level": self.log_level,
            "log_format": self.log_format,
            "middleware": {name: dict(opts) for name, opts in self.middleware.items()},
        }

    def merge(self, other: "Config") -> "Config":
        """Merge with another config (other takes precedence).

        Middleware options merge per name and per option.
        """
        return Config.from_dict(_merge_data(self.to_dict(), other.to_dict()), other.source)


def _convert(value: str) -> Any:
    # Type conversion
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def _coerce(overrides: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    # Scalars given for sequence-typed options, e.g. "/health,/ready" from env
    result = dict(overrides)
    for key, value in overrides.items():
        default = defaults.get(key)
        if not isinstance(default, SEQUENCE_TYPES) or value is None:
            continue
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(",")]
            result[key] = type(default)(_convert(part) for part in parts if part)
        elif not isinstance(value, SEQUENCE_TYPES + (dict,)):
            result[key] = type(default)((value,))
    return result


def _read_json(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return json.load(f) or {}


def _read_yaml(path: str) -> Dict[str, Any]:
    try:
        import yaml
    except ImportError:
        raise ImportError("PyYAML required for YAML config")

    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _read_env(prefix: str) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    middleware: Dict[str, Dict[str, Any]] = {}

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        config_key = key[len(prefix):].lower()

        if config_key.startswith(MIDDLEWARE_ENV_KEY):
            name, _, option = config_key[len(MIDDLEWARE_ENV_KEY):].partition("__")
            if not name or not option:
                logger.warning(f"Ignoring malformed middleware variable: {key}")
                continue
            middleware.setdefault(name, {})[option] = _convert(value)
        else:
            data[config_key] = _convert(value)

    if middleware:
        data["middleware"] = middleware
    return data


def _merge_data(base: Dict[str, Any], other: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    middleware = {name: dict(opts) for name, opts in (base.get("middleware") or {}).items()}

    for key, value in other.items():
        if key == "middleware":
            for name, opts in (value or {}).items():
                middleware.setdefault(name, {}).update(opts)
        else:
            result[key] = value

    result["middleware"] = middleware
    return result


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "ROADCHAIN_",
) -> Config:
    """Load configuration from multiple sources.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (if provided)
    3. Defaults
    """
    data: Dict[str, Any] = {}
    source = ConfigSource.DEFAULT

    # Load from file if provided
    if path:
        if Path(path).exists():
            if path.endswith(".json"):
                data = _read_json(path)
                source = ConfigSource.FILE
            elif path.endswith((".yaml", ".yml")):
                data = _read_yaml(path)
                source = ConfigSource.FILE
            else:
                logger.warning(f"Unknown config format: {path}")
        else:
            logger.warning(f"Config file not found: {path}")

    # Override with environment variables
    env_data = _read_env(env_prefix)
    if env_data:
        data = _merge_data(data, env_data)
        source = ConfigSource.ENV

    return Config.from_dict(data, source)


def apply_config(
    config: Config,
    registry: Optional[MiddlewareRegistry] = None,
    options: Optional[OptionsRegistry] = None,
) -> List[type]:
    """Apply configured middleware defaults.

    Every name and option key is checked before any type is changed.
    A string given for a sequence-typed option is split on commas.

    Returns:
        Middleware types whose defaults were set.

    Raises:
        MiddlewareNotFoundError: for an unregistered name.
        ConfigurationError: for an option the type does not declare.
    """
    registry = registry or middleware_registry
    options = options or options_registry

    resolved: List[Tuple[type, Dict[str, Any]]] = []
    for name, overrides in config.middleware.items():
        kind = registry.lookup(name)
        options.validate(kind, overrides)
        overrides = _coerce(overrides, options.get_effective_defaults(kind))
        resolved.append((kind, overrides))

    for kind, overrides in resolved:
        options.set_defaults(kind, overrides)
        logger.info(f"Applied default options for {kind.__name__}")

    return [kind for kind, _ in resolved]


def configure_logging(config: Config) -> None:
    """Configure root logging from config."""
    level = getattr(logging, config.log_level.upper(), None)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {config.log_level}")
    logging.basicConfig(level=level, format=config.log_format)


__all__ = [
    "Config",
    "ConfigSource",
    "load_config",
    "apply_config",
    "configure_logging",
]
