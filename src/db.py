"""Database engine/session helpers."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base


def create_db_engine(db_url: str) -> Engine:
    """Create a SQLAlchemy engine with conservative defaults for scripts."""
    if db_url.startswith("sqlite"):
        return _create_sqlite_engine(db_url)
    return create_engine(db_url, pool_pre_ping=True, future=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the provided engine."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


def ensure_schema(engine: Engine) -> None:
    """Create all engine tables and indexes if they do not exist."""
    Base.metadata.create_all(bind=engine)


def _create_sqlite_engine(db_url: str) -> Engine:
    in_memory = db_url in ("sqlite://", "sqlite:///:memory:")
    kwargs: dict = {"future": True, "connect_args": {"check_same_thread": False}}
    if in_memory:
        # One shared connection, otherwise every checkout sees an empty database.
        kwargs["poolclass"] = StaticPool
    engine = create_engine(db_url, **kwargs)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine
