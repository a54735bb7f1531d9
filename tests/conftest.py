"""Shared pytest fixtures for ledgergrid tests."""

import os
import tempfile

import pytest

from ledgergrid.cache.base import CacheBackend
from ledgergrid.cache.memory import MemoryCache
from ledgergrid.cache.store import CacheStore
from ledgergrid.config import OverviewConfig
from ledgergrid.database.factories import create_sqlite_state
from ledgergrid.ledger.base import InMemoryLedgerSource
from ledgergrid.notifications import Notifier
from ledgergrid.render.base import Renderer

LEDGER_HEADER = ["Date", "Type", "Category", "Sub-Category", "Amount", "Shared"]


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class DictBackend(CacheBackend):
    """Durable tier double without expiry."""

    def __init__(self):
        self.entries = {}

    def get(self, key):
        return self.entries.get(key)

    def put(self, key, value, ttl_seconds):
        self.entries[key] = value

    def remove(self, key):
        self.entries.pop(key, None)

    def remove_all(self, keys):
        for key in keys:
            self.entries.pop(key, None)


class RecordingRenderer(Renderer):
    """Renderer keeping every layout it receives."""

    def __init__(self):
        self.layouts = []

    def render(self, layout):
        self.layouts.append(layout)


class RecordingNotifier(Notifier):
    """Notifier keeping every notice it receives."""

    def __init__(self):
        self.progress = []
        self.successes = []
        self.errors = []

    def show_progress(self, message):
        self.progress.append(message)

    def show_success(self, message):
        self.successes.append(message)

    def show_error(self, title, message):
        self.errors.append((title, message))


@pytest.fixture
def temp_state():
    """Create a temporary state database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    state = create_sqlite_state(database_path=db_path)

    yield state

    # Cleanup
    state.close()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def config():
    """Default configuration pinned to the 2024 report year."""
    return OverviewConfig(year=2024)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_store(config, clock):
    """In-process only cache store driven by a fake clock."""
    return CacheStore(config.cache, memory=MemoryCache(clock=clock))


@pytest.fixture
def scenario_rows():
    """Income plus a shared grocery expense over two months."""
    return [
        LEDGER_HEADER,
        ["2024-01-15", "Income", "Salary", "", "2000", ""],
        ["2024-01-10", "Essentials", "Food", "Groceries", "-50", "TRUE"],
        ["2024-02-10", "Essentials", "Food", "Groceries", "-60", "TRUE"],
    ]


@pytest.fixture
def full_rows():
    """Ledger touching every configured transaction type."""
    return [
        LEDGER_HEADER,
        ["2024-01-01", "Income", "Salary", "", "3000", ""],
        ["2024-01-02", "Essentials", "Housing", "Rent", "-1200", "TRUE"],
        ["2024-01-03", "Essentials", "Food", "Groceries", "-80", ""],
        ["2024-01-04", "Wants/Pleasure", "Dining", "", "-40", ""],
        ["2024-01-05", "Extra", "Travel", "Flights", "-300", ""],
        ["2024-01-06", "Savings", "Pension", "", "-500", ""],
        ["2024-01-07", "Essentials", "Food", "Household", "-20", ""],
    ]


@pytest.fixture
def scenario_ledger(scenario_rows):
    return InMemoryLedgerSource(scenario_rows)


@pytest.fixture
def recording_renderer():
    return RecordingRenderer()


@pytest.fixture
def recording_notifier():
    return RecordingNotifier()


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


def write_ledger_csv(path, rows):
    """Write ledger rows as a CSV file and return its path as a string."""
    import csv

    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f).writerows(rows)
    return str(path)


@pytest.fixture
def ledger_csv(tmp_path):
    """Return a helper writing ledger rows to a CSV file under tmp_path."""

    def _write(rows, name="transactions.csv"):
        return write_ledger_csv(tmp_path / name, rows)

    return _write
