"""Database initialization and the key-value blob table."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    """Base class for all tables."""
    pass


class StoredBlob(Base):
    """One serialized collection (or flag) keyed by a fixed name."""

    __tablename__ = "kv_store"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def __repr__(self) -> str:
        return f"<StoredBlob(key='{self.key}', size={len(self.value or '')})>"


def create_db_engine(db_url: str = "sqlite:///sitebook.db", echo: bool = False):
    """Create SQLAlchemy engine."""
    return create_engine(db_url, echo=echo)


def init_database(db_url: str = "sqlite:///sitebook.db") -> None:
    """Initialize database and create all tables."""
    engine = create_db_engine(db_url)
    Base.metadata.create_all(engine)
    print(f"[INFO] Database initialized: {db_url}")


def get_session_factory(db_url: str = "sqlite:///sitebook.db", echo: bool = False):
    """Get a session factory for the database, creating tables if needed."""
    engine = create_db_engine(db_url, echo=echo)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)


def get_session(db_url: str = "sqlite:///sitebook.db", echo: bool = False) -> Session:
    """Get a new database session."""
    SessionFactory = get_session_factory(db_url, echo=echo)
    return SessionFactory()


def reset_database(db_url: str = "sqlite:///sitebook.db") -> None:
    """Drop all tables and recreate (WARNING: deletes all data!)."""
    engine = create_db_engine(db_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    print(f"[WARN] Database reset: {db_url}")
