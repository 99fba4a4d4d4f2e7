# =============================================================================
# lib/database.py - SQLAlchemy Engine and Session Factory
# =============================================================================
# Owns the single database engine for the process and the declarative Base
# that every table model inherits from.
#
# Usage:
#   from lib.database import SessionLocal, init_db
#   init_db()
#   with SessionLocal() as db:
#       ...
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import Settings, settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def build_engine(config: Settings) -> Engine:
    """
    Create an engine for config.DATABASE_URL.

    SQLite connections are shared with the threadpool FastAPI runs sync
    dependencies on, so the same-thread check is disabled for them.
    """
    connect_args = {"check_same_thread": False} if config.is_sqlite else {}
    return create_engine(
        config.DATABASE_URL,
        echo=config.DATABASE_ECHO,
        connect_args=connect_args,
    )


engine = build_engine(settings)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that don't exist yet."""
    # Register table models on Base.metadata
    from lib import db_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database schema ready")


def drop_db(bind: Engine | None = None) -> None:
    """Drop all tables. Used by tests and `manage.py initdb --reset`."""
    from lib import db_models  # noqa: F401

    Base.metadata.drop_all(bind=bind or engine)
    logger.warning("Dropped all tables")


def check_connection() -> None:
    """
    Run a trivial query against the database.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database is unreachable
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Session for scripts: commits on success, rolls back on error.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
