"""
Per-dialect rendering of the date and numeric expressions used by report queries.
PostgreSQL is the production store; SQLite is supported for local runs and tests.
Column arguments are already-quoted identifiers from the allow-list.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

# Optional leading minus, digits, optional fractional part. No surrounding
# whitespace. Anything else is treated as NULL.
NUMERIC_TEXT_PATTERN = r"^-?[0-9]+(\.[0-9]+)?$"


def quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


@dataclass(frozen=True)
class SqlDialect:
    name: str
    year: Callable[[str], str]
    month: Callable[[str], str]
    day: Callable[[str], str]
    numeric: Callable[[str], str]
    bind_date: Callable[[date], Any]

    def week_of_month(self, col: str) -> str:
        """Week-of-month 1..5: floor((day - 1) / 7) + 1, computed in integer arithmetic."""
        return f"((({self.day(col)}) - 1) / 7 + 1)"

    def shift_equals(self, col: str, shift: int) -> str:
        # shift is stored as text in some tables and as integer in others
        return f"CAST({col} AS TEXT) = '{int(shift)}'"


def _sqlite_numeric(col: str) -> str:
    # GLOB has no optional group, so strip one leading minus and check the rest
    body = f"(CASE WHEN substr({col}, 1, 1) = '-' THEN substr({col}, 2) ELSE {col} END)"
    return (
        f"CASE WHEN typeof({col}) IN ('integer', 'real') THEN {col} "
        f"WHEN typeof({col}) = 'text' AND {body} <> '' "
        f"AND {body} NOT GLOB '*[^0-9.]*' AND {body} NOT GLOB '*.*.*' "
        f"AND {body} NOT GLOB '.*' AND {body} NOT GLOB '*.' "
        f"THEN CAST({col} AS REAL) END"
    )


POSTGRES = SqlDialect(
    name="postgresql",
    year=lambda col: f"CAST(EXTRACT(YEAR FROM {col}) AS INTEGER)",
    month=lambda col: f"CAST(EXTRACT(MONTH FROM {col}) AS INTEGER)",
    day=lambda col: f"CAST(EXTRACT(DAY FROM {col}) AS INTEGER)",
    numeric=lambda col: (
        f"CASE WHEN CAST({col} AS TEXT) ~ '{NUMERIC_TEXT_PATTERN}' "
        f"THEN CAST(CAST({col} AS TEXT) AS NUMERIC) END"
    ),
    bind_date=lambda d: d,
)

SQLITE = SqlDialect(
    name="sqlite",
    year=lambda col: f"CAST(strftime('%Y', {col}) AS INTEGER)",
    month=lambda col: f"CAST(strftime('%m', {col}) AS INTEGER)",
    day=lambda col: f"CAST(strftime('%d', {col}) AS INTEGER)",
    numeric=_sqlite_numeric,
    bind_date=lambda d: d.isoformat(),
)

_DIALECTS = {POSTGRES.name: POSTGRES, SQLITE.name: SQLITE}


def dialect_for(name: str) -> SqlDialect:
    """Look up by SQLAlchemy dialect name; unknown backends render as PostgreSQL."""
    return _DIALECTS.get(name, POSTGRES)
