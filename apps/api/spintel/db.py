"""Database engine, connection helper and the metric store used by routers."""
import logging
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from spintel.config import load_settings
from spintel.errors import StoreError
from spintel.queries.dialect import SqlDialect, dialect_for
from spintel.utils.observability import log_event

logger = logging.getLogger(__name__)

_db_engine: Engine | None = None


def get_engine() -> Engine | None:
    global _db_engine
    if _db_engine is None:
        url = load_settings().database_url
        if not url:
            return None
        _db_engine = create_engine(url, pool_pre_ping=True)
    return _db_engine


@contextmanager
def get_connection():
    engine = get_engine()
    if engine is None:
        yield None
        return
    conn = engine.connect()
    try:
        yield conn
    finally:
        conn.close()


class MetricStore:
    """
    Access to the metric tables and the organisation table. Every failure is
    logged with its context and re-raised as StoreError carrying only the
    caller's message.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.dialect: SqlDialect = dialect_for(engine.dialect.name)

    def _failed(self, e: SQLAlchemyError, error_message: str, context: dict[str, Any]) -> StoreError:
        log_event(
            logger,
            "store_query_failed",
            error_type=type(e).__name__,
            error=str(e.orig) if getattr(e, "orig", None) is not None else str(e),
            **context,
        )
        return StoreError(error_message)

    def fetch_all(
        self, statement: TextClause, params: dict[str, Any], *, error_message: str, **context: Any
    ) -> list[Row]:
        try:
            with self.engine.connect() as conn:
                return list(conn.execute(statement, params).fetchall())
        except SQLAlchemyError as e:
            raise self._failed(e, error_message, context) from e

    def fetch_one(
        self, statement: TextClause, params: dict[str, Any], *, error_message: str, **context: Any
    ) -> Row | None:
        rows = self.fetch_all(statement, params, error_message=error_message, **context)
        return rows[0] if rows else None

    def execute(
        self, statement: TextClause, params: dict[str, Any], *, error_message: str, **context: Any
    ) -> int:
        """Run one write in its own transaction. Returns the affected row count."""
        try:
            with self.engine.begin() as conn:
                return conn.execute(statement, params).rowcount
        except SQLAlchemyError as e:
            raise self._failed(e, error_message, context) from e


def get_store() -> MetricStore:
    """FastAPI dependency. Raises StoreError when DATABASE_URL is not configured."""
    engine = get_engine()
    if engine is None:
        log_event(logger, "store_unavailable", reason="DATABASE_URL not set")
        raise StoreError("Database is not configured")
    return MetricStore(engine)
