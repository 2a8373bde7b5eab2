"""
Record Store - async find/count/insert/update over SQLAlchemy Core tables.

The services only ever talk to the database through this class. Each call
opens a short session in a worker thread, so the event loop keeps serving
other requests while the driver blocks, and is bounded by a timeout.

Filters are plain SQLAlchemy clauses:
    await store.find(messages, messages.c.recipient_id == 7, order_by=[...])
"""
import asyncio
import logging
import time
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy import Table, func, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from alumni_connect.core.config import get_settings
from alumni_connect.core.errors import FetchFailed
from alumni_connect.db.database import check_connection, create_store_engine, session_scope

logger = logging.getLogger(__name__)


class RecordStore:
    """Generic async access to the relational store."""

    def __init__(self, engine: Engine, timeout: float = 10.0):
        self.engine = engine
        self.timeout = timeout
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    async def _run(self, operation: str, work: Callable[[Any], Any]) -> Any:
        """
        Run ``work`` in one session on a worker thread.

        The deadline is checked inside the thread before committing: work that
        overran is rolled back, so a reported failure never leaves rows behind.
        The caller always waits for the thread, never abandons it.
        """
        deadline = time.monotonic() + self.timeout

        def in_session():
            with session_scope(self._session_factory) as db:
                result = work(db)
                if time.monotonic() > deadline:
                    raise TimeoutError(operation)
                return result

        try:
            return await asyncio.to_thread(in_session)
        except TimeoutError:
            logger.error("Store %s timed out after %.1fs", operation, self.timeout)
            raise FetchFailed(f"{operation} timed out")
        except SQLAlchemyError as e:
            logger.error("Store %s failed: %s", operation, e)
            raise FetchFailed(f"{operation} failed")

    async def find(
        self,
        table: Table,
        *where,
        order_by: Sequence = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch rows matching every clause in ``where``, as dicts."""
        stmt = select(table).where(*where).order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._run(
            f"find {table.name}",
            lambda db: [dict(row) for row in db.execute(stmt).mappings()],
        )

    async def find_one(self, table: Table, *where, order_by: Sequence = ()) -> Optional[Dict[str, Any]]:
        rows = await self.find(table, *where, order_by=order_by, limit=1)
        return rows[0] if rows else None

    async def count(self, table: Table, *where) -> int:
        stmt = select(func.count()).select_from(table).where(*where)
        return await self._run(f"count {table.name}", lambda db: db.execute(stmt).scalar_one())

    async def insert(self, table: Table, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored (defaults filled in)."""
        stmt = insert(table).values(**values).returning(*table.c)
        return await self._run(
            f"insert {table.name}",
            lambda db: dict(db.execute(stmt).mappings().one()),
        )

    async def update(self, table: Table, values: Dict[str, Any], *where) -> int:
        """Apply ``values`` to rows matching ``where``. Returns the affected row count."""
        stmt = update(table).where(*where).values(**values)
        return await self._run(f"update {table.name}", lambda db: db.execute(stmt).rowcount)

    async def ping(self) -> bool:
        return await asyncio.to_thread(check_connection, self.engine)


@lru_cache()
def get_record_store() -> RecordStore:
    """
    Process-wide store built from settings.
    Also the FastAPI dependency; tests override it with their own store.
    """
    settings = get_settings()
    engine = create_store_engine(settings.store_url, echo=settings.debug, timeout=settings.store_timeout_seconds)
    return RecordStore(engine, timeout=settings.store_timeout_seconds)
