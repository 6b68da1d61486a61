"""
Insert deterministic demo rows into the metric tables.
Run: python -m spintel.scripts.seed_sample [organisation_id] [days]
Generates one row per shift per day for the last `days` days (default 365)
in every metric table.
"""
import logging
import random
import sys
from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection

from spintel.config import load_settings
from spintel.queries.catalog import METRIC_TABLES
from spintel.queries.dialect import dialect_for, quote_ident
from spintel.scripts.init_schema import create_schema

logger = logging.getLogger(__name__)

DEFAULT_ORGANISATION = "UNI0024"

# (low, high) per column; anything not listed uses VALUE_RANGE_DEFAULT
VALUE_RANGES: dict[str, tuple[float, float]] = {
    "raw_material_input": (9000, 11000),
    "yarn_output": (7800, 8600),
    "total_waste": (900, 1300),
    "realisation": (78, 88),
    "allocated_spindle": (20000, 24000),
    "worked_spindle": (18000, 20000),
    "utilisation": (82, 97),
    "production_efficiency": (80, 98),
    "kgs": (1500, 2500),
    "gps": (90, 130),
    "u%": (85, 99),
    "eup": (70, 95),
    "total_unit_per_kg": (2.5, 6),
}
VALUE_RANGE_DEFAULT = (5, 120)
UKG_RANGE = (0.05, 1.2)


def _value(rng: random.Random, table: str, column: str) -> str:
    low, high = VALUE_RANGES.get(column, UKG_RANGE if table == "unit_per_kg" else VALUE_RANGE_DEFAULT)
    return f"{rng.uniform(low, high):.2f}"


def sample_rows(
    table: str, organisation_id: str, start: date, days: int, seed: int = 42
) -> list[dict[str, Any]]:
    rng = random.Random(f"{seed}:{table}")
    columns = sorted(METRIC_TABLES[table])
    rows = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        for shift in (1, 2, 3):
            row: dict[str, Any] = {
                "organisation_id": organisation_id,
                "user_id": "seed",
                "date": day,
                "shift": str(shift),
            }
            row.update({c: _value(rng, table, c) for c in columns})
            rows.append(row)
    return rows


def insert_rows(conn: Connection, table: str, rows: Iterable[Mapping[str, Any]]) -> int:
    """Insert rows whose keys are allow-listed column names. Returns rows inserted."""
    rows = list(rows)
    if not rows:
        return 0
    dialect = dialect_for(conn.engine.dialect.name)
    columns = list(rows[0].keys())
    allowed = METRIC_TABLES[table] | {"organisation_id", "user_id", "date", "shift"}
    unknown = [c for c in columns if c not in allowed]
    if unknown:
        raise ValueError(f"unknown columns for {table}: {unknown}")
    # bind names must be plain identifiers; "u%" is not
    binds = {c: f"p{i}" for i, c in enumerate(columns)}
    stmt = text(
        f"INSERT INTO {quote_ident(table)} ({', '.join(quote_ident(c) for c in columns)}) "
        f"VALUES ({', '.join(':' + binds[c] for c in columns)})"
    )
    params = []
    for row in rows:
        values = {}
        for c in columns:
            v = row.get(c)
            values[binds[c]] = dialect.bind_date(v) if isinstance(v, date) else v
        params.append(values)
    conn.execute(stmt, params)
    return len(rows)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    organisation_id = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_ORGANISATION
    days = int(sys.argv[2]) if len(sys.argv) > 2 else 365

    database_url = load_settings().database_url
    if not database_url:
        logger.error("DATABASE_URL not set")
        sys.exit(1)

    engine = create_engine(database_url, pool_pre_ping=True)
    start = date.today() - timedelta(days=days - 1)
    with engine.connect() as conn:
        create_schema(conn)
        for table in METRIC_TABLES:
            n = insert_rows(conn, table, sample_rows(table, organisation_id, start, days))
            logger.info("Inserted %d rows into %s", n, table)
        conn.commit()


if __name__ == "__main__":
    main()
