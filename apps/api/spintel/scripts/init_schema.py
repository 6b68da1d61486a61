"""
Create the four metric tables and the organisation table.
Run: python -m spintel.scripts.init_schema
Metric columns are TEXT because uploads store values as entered; report queries
treat anything that is not numeric text as NULL.
"""
import logging
import sys

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection

from spintel.config import load_settings
from spintel.queries.catalog import (
    METRIC_TABLES,
    ORGANISATION_FIELDS,
    ORGANISATION_ID_COLUMN,
    ORGANISATION_TABLE,
)
from spintel.queries.dialect import quote_ident

logger = logging.getLogger(__name__)

ID_COLUMN = {
    "postgresql": "id SERIAL PRIMARY KEY",
    "sqlite": "id INTEGER PRIMARY KEY AUTOINCREMENT",
}


def table_ddl(table: str, dialect_name: str) -> list[str]:
    columns = [
        ID_COLUMN.get(dialect_name, ID_COLUMN["postgresql"]),
        "organisation_id TEXT NOT NULL",
        "user_id TEXT",
        '"date" DATE NOT NULL',
        '"shift" TEXT',
        *(f"{quote_ident(c)} TEXT" for c in sorted(METRIC_TABLES[table])),
    ]
    return [
        f"CREATE TABLE IF NOT EXISTS {quote_ident(table)} ({', '.join(columns)})",
        f"CREATE INDEX IF NOT EXISTS {quote_ident('idx_' + table + '_org_date')} "
        f'ON {quote_ident(table)} (organisation_id, "date")',
    ]


def organisation_ddl() -> str:
    columns = [
        f"{ORGANISATION_ID_COLUMN} TEXT PRIMARY KEY",
        *(f"{quote_ident(c)} {sql_type}" for c, sql_type in ORGANISATION_FIELDS.items()),
    ]
    return f"CREATE TABLE IF NOT EXISTS {quote_ident(ORGANISATION_TABLE)} ({', '.join(columns)})"


def create_schema(conn: Connection) -> None:
    dialect_name = conn.engine.dialect.name
    for table in METRIC_TABLES:
        for stmt in table_ddl(table, dialect_name):
            conn.execute(text(stmt))
    conn.execute(text(organisation_ddl()))
    conn.commit()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    database_url = load_settings().database_url
    if not database_url:
        logger.error("DATABASE_URL not set")
        sys.exit(1)

    engine = create_engine(database_url, pool_pre_ping=True)
    logger.info("Creating metric tables: %s", ", ".join(METRIC_TABLES))
    with engine.connect() as conn:
        create_schema(conn)
    logger.info("Metric tables ready")


if __name__ == "__main__":
    main()
