"""Adapters module - Terminal handlers."""

from roadchain_core.adapters.stub import Stub, Stubs, StubAdapter

__all__ = [
    "Stub",
    "Stubs",
    "StubAdapter",
]
