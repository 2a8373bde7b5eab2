from contextlib import contextmanager
import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from alumni_connect.db.tables import metadata

logger = logging.getLogger(__name__)


def create_store_engine(url: str, echo: bool = False, timeout: Optional[float] = None) -> Engine:
    """
    Create the SQLAlchemy engine behind the record store.

    PostgreSQL gets a connection pool (5 ready, 10 overflow). With ``timeout``
    the server cancels statements running longer than that (statement_timeout),
    and connecting or waiting for a pooled connection is bounded too. SQLite is used
    for local runs and tests; its connections are handed between worker
    threads so the same-thread check is disabled.
    """
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    connect_args = {}
    if timeout:
        connect_args = {
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_timeout=timeout or 30,
        connect_args=connect_args,
        echo=echo  # Log SQL queries in debug mode
    )


@contextmanager
def session_scope(session_factory: sessionmaker):
    """
    Context manager for database sessions.
    Usage:
        with session_scope(factory) as db:
            db.execute(select(users))
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
    logger.info("Tables ready: %s", ", ".join(sorted(metadata.tables)))


def check_connection(engine: Engine) -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False
