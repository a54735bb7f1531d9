"""SQLAlchemy implementation of the durable cache tier."""

import time
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ledgergrid.cache.base import CacheBackend
from ledgergrid.database.models import CacheEntry
from ledgergrid.domain.errors import CacheIOError
from ledgergrid.logging_setup import get_logger

_logger = get_logger("ledgergrid.cache")


class SQLAlchemyDurableCache(CacheBackend):
    """Durable cache tier stored in the ``cache_entries`` table.

    Every SQLAlchemy failure is re-raised as CacheIOError so the cache store
    can treat it as a miss.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        clock: Callable[[], float] = time.time,
    ):
        """Initialize durable cache.

        Args:
            session_factory: Session factory bound to the state database
            clock: Function returning the current time in seconds
        """
        self.session_factory = session_factory
        self._clock = clock
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def _fail(self, action: str, key: str, error: SQLAlchemyError) -> CacheIOError:
        if self._session is not None:
            try:
                self._session.rollback()
            except SQLAlchemyError as e:
                _logger.warning("Durable cache rollback failed: %s", e)
        return CacheIOError(f"Durable cache {action} failed for '{key}': {error}")

    def get(self, key: str) -> Optional[str]:
        value, _ = self.get_with_ttl(key)
        return value

    def get_with_ttl(self, key: str) -> tuple[Optional[str], Optional[float]]:
        try:
            session = self._get_session()
            entry = session.get(CacheEntry, key)
            if entry is None:
                return None, None
            remaining = entry.expires_at - self._clock()
            if remaining < 0:
                session.delete(entry)
                session.commit()
                return None, None
            return entry.value, remaining
        except SQLAlchemyError as e:
            raise self._fail("read", key, e) from e

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            session = self._get_session()
            session.merge(
                CacheEntry(key=key, value=value, expires_at=self._clock() + ttl_seconds)
            )
            session.commit()
        except SQLAlchemyError as e:
            raise self._fail("write", key, e) from e

    def remove(self, key: str) -> None:
        self.remove_all([key])

    def remove_all(self, keys: list[str]) -> None:
        if not keys:
            return
        try:
            session = self._get_session()
            session.query(CacheEntry).filter(CacheEntry.key.in_(keys)).delete(
                synchronize_session=False
            )
            session.commit()
        except SQLAlchemyError as e:
            raise self._fail("remove", ", ".join(keys), e) from e

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
