"""Database session management."""
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fleet_reports.config.settings import Settings, get_settings


def create_engine_from_settings(settings: Optional[Settings] = None) -> Engine:
    """
    Build the SQLAlchemy engine for the configured database.

    In-memory SQLite URLs share one connection so every session sees
    the same database.
    """
    settings = settings or get_settings()
    url = settings.DATABASE_URL

    kwargs = {"echo": settings.DB_ECHO, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    return create_engine(url, **kwargs)


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker[Session]:
    """Create the session factory consumed by units of work."""
    engine = engine or create_engine_from_settings()
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
