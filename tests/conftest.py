"""Shared fixtures."""

import pytest

from roadchain_core.middleware.options import options_registry


@pytest.fixture(autouse=True)
def reset_default_options():
    """Start and end every test with declared defaults only."""
    options_registry.reset_all()
    yield
    options_registry.reset_all()


class RecordingHandler:
    """Downstream handler recording calls, optionally raising."""

    def __init__(self, error=None, log=None):
        self.error = error
        self.log = log if log is not None else []
        self.calls = []

    def process(self, context):
        self.calls.append(context)
        self.log.append("downstream")
        if self.error is not None:
            raise self.error
        context.finish(200, {}, b"ok")
        return context


class ClosableHandler(RecordingHandler):
    """Recording handler that supports close()."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.closed = 0

    def close(self):
        self.closed += 1


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def closable():
    return ClosableHandler()


@pytest.fixture
def make_handler():
    """Factory for recording handlers with custom behaviour."""

    def factory(error=None, log=None, closable=False):
        klass = ClosableHandler if closable else RecordingHandler
        return klass(error=error, log=log)

    return factory
