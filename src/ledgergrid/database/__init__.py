"""State database layer for ledgergrid (durable cache tier and settings)."""

from ledgergrid.database.base import SettingsStore
from ledgergrid.database.factories import create_sqlite_state, StateDatabase

__all__ = ["SettingsStore", "create_sqlite_state", "StateDatabase"]
