"""SQLAlchemy implementation of the settings store."""

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ledgergrid.database.base import SettingsStore
from ledgergrid.database.models import Preference
from ledgergrid.logging_setup import get_logger

_logger = get_logger("ledgergrid.settings")


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SQLAlchemySettingsStore(SettingsStore):
    """Settings store backed by the ``preferences`` table."""

    def __init__(self, session_factory: sessionmaker[Session]):
        """Initialize settings store.

        Args:
            session_factory: Session factory bound to the state database
        """
        self.session_factory = session_factory
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def get_value(self, key: str, default: Any = None) -> Any:
        """Get a preference value.

        Read failures are logged and answered with ``default``.
        """
        try:
            preference = self._get_session().get(Preference, key)
        except SQLAlchemyError as e:
            _logger.warning("Failed to get user preference '%s': %s", key, e)
            self._get_session().rollback()
            return default
        if preference is None:
            return default
        return preference.value

    def set_value(self, key: str, value: Any) -> None:
        session = self._get_session()
        preference = session.get(Preference, key)
        if preference is None:
            session.add(Preference(key=key, value=_to_text(value)))
        else:
            preference.value = _to_text(value)
        session.commit()

    def get_all_preferences(self) -> dict[str, Any]:
        session = self._get_session()
        preferences = session.query(Preference).order_by(Preference.key).all()
        return {pref.key: pref.value for pref in preferences}

    def reset_all_preferences(self) -> None:
        session = self._get_session()
        session.query(Preference).delete(synchronize_session=False)
        session.commit()

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
