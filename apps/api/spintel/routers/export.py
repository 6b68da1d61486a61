"""
GET /export: raw metric rows for a date range as JSON.
Table and column names are checked against the allow-list before any SQL is built.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy import text

from spintel.db import MetricStore, get_store
from spintel.errors import ValidationError
from spintel.queries.catalog import DATE_COLUMN, ORGANISATION_COLUMN, SHIFT_COLUMN, require_columns
from spintel.queries.dialect import quote_ident

router = APIRouter(prefix="/export", tags=["export"])

EXPORT_BASE_COLUMNS = ("user_id", DATE_COLUMN, SHIFT_COLUMN)


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def parse_columns(raw: str) -> list[str]:
    return [c.strip() for c in raw.split(",") if c.strip()]


@router.get("")
def export_rows(
    table: str = Query(..., description="Metric table name"),
    columns: str = Query(..., description="Comma-separated column names"),
    start_date: date = Query(..., description="Range start, inclusive"),
    end_date: date = Query(..., description="Range end, inclusive"),
    shift: int | None = Query(None, ge=1, le=3),
    organisation_id: str | None = Query(None),
    store: MetricStore = Depends(get_store),
) -> list[dict[str, Any]]:
    """Rows of user_id, date, shift plus the requested columns, oldest first. No rows gives []."""
    requested = parse_columns(columns)
    if not requested:
        raise ValidationError("columns is required")
    if start_date > end_date:
        raise ValidationError("start_date must be <= end_date")
    selected = require_columns(table, dict.fromkeys([*EXPORT_BASE_COLUMNS, *requested]))

    dialect = store.dialect
    date_col = quote_ident(DATE_COLUMN)
    conditions = [f"{date_col} BETWEEN :start_date AND :end_date"]
    params: dict[str, Any] = {
        "start_date": dialect.bind_date(start_date),
        "end_date": dialect.bind_date(end_date),
    }
    if shift is not None:
        conditions.append(f"CAST({quote_ident(SHIFT_COLUMN)} AS TEXT) = :shift")
        params["shift"] = str(shift)
    if organisation_id and organisation_id.strip():
        conditions.append(f"{quote_ident(ORGANISATION_COLUMN)} = :organisation_id")
        params["organisation_id"] = organisation_id.strip()

    sql = (
        f"SELECT {', '.join(quote_ident(c) for c in selected)} "
        f"FROM {quote_ident(table)} WHERE {' AND '.join(conditions)} "
        f"ORDER BY {date_col}, {quote_ident(SHIFT_COLUMN)}"
    )
    rows = store.fetch_all(text(sql), params, error_message="Internal Server Error", table=table, strategy="export")
    return [{c: _json_value(row._mapping[c]) for c in selected} for row in rows]
