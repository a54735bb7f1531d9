"""Factory functions for the state database."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ledgergrid.database.durable_cache import SQLAlchemyDurableCache
from ledgergrid.database.models import create_session_factory
from ledgergrid.database.settings import SQLAlchemySettingsStore


@dataclass
class StateDatabase:
    """Durable cache tier and settings store sharing one database."""

    database_path: str
    durable_cache: SQLAlchemyDurableCache
    settings: SQLAlchemySettingsStore

    def close(self) -> None:
        self.durable_cache.close()
        self.settings.close()


def resolve_database_path(database_path: Optional[str] = None) -> str:
    """Resolve the state database path.

    Args:
        database_path: Explicit path. If None, checks LEDGERGRID_DB_PATH
            environment variable, then defaults to ~/.ledgergrid/ledgergrid.db
    """
    if database_path is None:
        database_path = os.environ.get("LEDGERGRID_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".ledgergrid"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgergrid.db")

    return database_path


def create_sqlite_state(database_path: Optional[str] = None) -> StateDatabase:
    """Create the SQLite-backed durable cache and settings store.

    Args:
        database_path: Path to SQLite database file (see resolve_database_path)

    Returns:
        StateDatabase holding both stores
    """
    database_path = resolve_database_path(database_path)
    session_factory = create_session_factory(f"sqlite:///{database_path}")
    return StateDatabase(
        database_path=database_path,
        durable_cache=SQLAlchemyDurableCache(session_factory),
        settings=SQLAlchemySettingsStore(session_factory),
    )
