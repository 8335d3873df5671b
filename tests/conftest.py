"""Shared test fixtures for the namelog test suite."""

import io

import pytest

from namelog import registry as _registry_mod
from namelog.registry import Registry


# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------
class RecordingStream:
    """Stream that keeps every payload it receives."""

    def __init__(self):
        self.payloads = []

    def write(self, payload):
        self.payloads.append(payload)

    def pipe(self, stream):
        return stream

    @property
    def data(self):
        """The data of each payload, in order."""
        return [p.data for p in self.payloads]

    @property
    def levels(self):
        return [p.level for p in self.payloads]


@pytest.fixture
def stream():
    """A RecordingStream."""
    return RecordingStream()


@pytest.fixture
def other_stream():
    """A second RecordingStream, for pipe() tests."""
    return RecordingStream()


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------
@pytest.fixture
def registry(stream):
    """A fresh Registry whose loggers all share the recording stream."""
    return Registry(default_stream=stream)


@pytest.fixture
def diagnostics():
    """A StringIO buffer for registry diagnostics."""
    return io.StringIO()


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Restore the module-level registry singleton after each test."""
    old = _registry_mod._registry
    _registry_mod._registry = None
    yield
    _registry_mod._registry = old
