"""Utils module - Configuration and helper functions."""

from roadchain_core.utils.config import (
    Config,
    ConfigSource,
    load_config,
    apply_config,
    configure_logging,
)
from roadchain_core.utils.helpers import (
    parse_url,
    find_header,
    merge_headers,
    remove_headers,
)

__all__ = [
    "Config",
    "ConfigSource",
    "load_config",
    "apply_config",
    "configure_logging",
    "parse_url",
    "find_header",
    "merge_headers",
    "remove_headers",
]
