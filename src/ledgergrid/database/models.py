"""SQLAlchemy models for the ledgergrid state database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    DateTime,
    Float,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class CacheEntry(Base):
    """Durable cache entry. Replaced wholesale on every write."""

    __tablename__ = "cache_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    expires_at = Column(Float, nullable=False)


class Preference(Base):
    """User preference stored as text."""

    __tablename__ = "preferences"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=True)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
