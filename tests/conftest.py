"""
Pytest configuration and shared fixtures for the dashboard test suite.
"""
import itertools
import logging
import sys
from pathlib import Path

import pytest
import yaml

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tickerdash.config.constants import STORAGE_KEYS  # noqa: E402
from tickerdash.config.schema import DashboardSettings  # noqa: E402
from tickerdash.dashboard import DashboardOrchestrator  # noqa: E402
from tickerdash.data.providers.mock_provider import MockQuoteProvider  # noqa: E402
from tickerdash.data.resolver import QuoteResolver  # noqa: E402
from tickerdash.error_handling import error_handler  # noqa: E402
from tickerdash.exceptions import PersistenceUnavailable  # noqa: E402
from tickerdash.storage.backends import MemoryStore  # noqa: E402
from tickerdash.storage.snapshot import SnapshotStore  # noqa: E402
from tickerdash.widgets.registry import WidgetRegistry  # noqa: E402


class FailingStore(MemoryStore):
    """Memory store whose writes can be switched off to simulate an outage."""

    def __init__(self, initial=None, fail_reads=False, fail_writes=True):
        super().__init__(initial)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key):
        if self.fail_reads:
            raise PersistenceUnavailable(key, "read", "storage offline")
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise PersistenceUnavailable(key, "write", "quota exceeded")
        super().set(key, value)

    def delete(self, key):
        if self.fail_writes:
            raise PersistenceUnavailable(key, "delete", "storage offline")
        return super().delete(key)


class TickersWriteFailingStore(MemoryStore):
    """Memory store that can refuse writes of the tickers key only."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_tickers = False

    def set(self, key, value):
        if self.fail_tickers and key == STORAGE_KEYS.TICKERS:
            raise PersistenceUnavailable(key, "write", "quota exceeded")
        super().set(key, value)


class RecordingStore(MemoryStore):
    """Memory store that records every write."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []

    def set(self, key, value):
        self.writes.append((key, value))
        super().set(key, value)


def make_clock(start_ms=1_700_000_000_000, step_ms=1):
    """Deterministic epoch clock in seconds, advancing step_ms per call."""
    counter = itertools.count(start_ms, step_ms)
    return lambda: next(counter) / 1000


@pytest.fixture(autouse=True)
def reset_logging_and_errors():
    """Undo setup_logging side effects and clear the global error history."""
    error_handler.clear_history()
    root_logger = logging.getLogger()
    root_level = root_logger.level
    yield
    # dictConfig installs a plain StreamHandler on the root logger
    for handler in list(root_logger.handlers):
        if type(handler) is logging.StreamHandler:
            root_logger.removeHandler(handler)
    root_logger.setLevel(root_level)

    package_logger = logging.getLogger("tickerdash")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
    error_handler.clear_history()


@pytest.fixture
def memory_store():
    return RecordingStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def mock_provider():
    return MockQuoteProvider(seed=42)


@pytest.fixture
def resolver(mock_provider):
    return QuoteResolver(mock_provider)


@pytest.fixture
def registry(resolver):
    return WidgetRegistry(resolver, clock=make_clock())


@pytest.fixture
def settings():
    return DashboardSettings(storage={"backend": "memory"}, provider={"name": "mock"})


@pytest.fixture
def dashboard(resolver, memory_store, settings):
    """Orchestrator over the mock provider and a recording memory store."""
    return DashboardOrchestrator(resolver, SnapshotStore(memory_store), settings, clock=make_clock())


@pytest.fixture
def config_file(tmp_path):
    """YAML settings using the mock provider and a file store under tmp_path."""
    path = tmp_path / "dashboard.yaml"
    config = {
        "name": "test_dashboard",
        "storage": {"backend": "file", "directory": str(tmp_path / "state")},
        "provider": {"name": "mock"},
        "logging": {"level": "WARNING"},
    }
    path.write_text(yaml.dump(config))
    return path
