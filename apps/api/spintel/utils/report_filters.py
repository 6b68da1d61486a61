"""
Reusable report filter helper (organisation, date, year, month, week, quarter, shift).
Every chart and summary route resolves its query parameters through get_filter_request
and turns them into a WHERE clause with compile_report_filters.
"""
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from fastapi import Query
from pydantic import BaseModel, field_validator
from sqlalchemy import bindparam, text
from sqlalchemy.sql.elements import TextClause

from spintel.errors import ValidationError
from spintel.queries.catalog import DATE_COLUMN, ORGANISATION_COLUMN, SHIFT_COLUMN, require_columns
from spintel.queries.dialect import SqlDialect, quote_ident
from spintel.utils.time_window import Clock, default_window


class QuarterCalendar(str, Enum):
    FISCAL = "fiscal"  # Q1 starts in March
    CALENDAR = "calendar"


QUARTER_MONTHS: dict[QuarterCalendar, dict[int, tuple[int, ...]]] = {
    QuarterCalendar.FISCAL: {1: (3, 4, 5), 2: (6, 7, 8), 3: (9, 10, 11), 4: (12, 1, 2)},
    QuarterCalendar.CALENDAR: {1: (1, 2, 3), 2: (4, 5, 6), 3: (7, 8, 9), 4: (10, 11, 12)},
}


class FilterRequest(BaseModel):
    organisation_id: str | None = None
    exact_date: date | None = None
    start_date: date | None = None
    end_date: date | None = None
    years: list[int] = []
    months: list[int] = []
    weeks_of_month: list[int] = []  # 1..5
    quarters: list[int] = []
    shift: int | None = None

    @field_validator("weeks_of_month")
    @classmethod
    def _drop_out_of_range_weeks(cls, v: list[int]) -> list[int]:
        return [w for w in v if 1 <= w <= 5]

    @property
    def date_range(self) -> tuple[date, date] | None:
        if self.start_date is None or self.end_date is None:
            return None
        return (self.start_date, self.end_date)

    @property
    def has_temporal_filter(self) -> bool:
        return bool(
            self.exact_date
            or self.start_date
            or self.end_date
            or self.years
            or self.months
            or self.weeks_of_month
            or self.quarters
        )


def get_filter_request(
    organisation_id: str,
    exact_date: date | None = Query(None, alias="date", description="Single day (YYYY-MM-DD)"),
    start_date: date | None = Query(None, description="Range start, inclusive; requires end_date"),
    end_date: date | None = Query(None, description="Range end, inclusive; requires start_date"),
    year: list[int] = Query([], description="Repeatable calendar year"),
    month: list[int] = Query([], description="Repeatable month 1-12"),
    week: list[int] = Query([], description="Repeatable week of month 1-5; others are ignored"),
    quarter: list[int] = Query([], description="Repeatable quarter 1-4"),
    shift: int | None = Query(None, ge=1, le=3, description="Shift 1-3"),
) -> FilterRequest:
    return FilterRequest(
        organisation_id=organisation_id.strip() if organisation_id else None,
        exact_date=exact_date,
        start_date=start_date,
        end_date=end_date,
        years=year,
        months=month,
        weeks_of_month=week,
        quarters=quarter,
        shift=shift,
    )


def _unique(values: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(values))


def expand_quarters(quarters: Sequence[int], calendar: QuarterCalendar) -> list[int]:
    mapping = QUARTER_MONTHS[calendar]
    return _unique(m for q in quarters for m in mapping[q])


def resolve_months(
    months: Sequence[int], quarters: Sequence[int], calendar: QuarterCalendar
) -> list[int] | None:
    """
    Months the month predicate should match, or None for no month predicate.
    Explicit months combined with quarters keep only the months in both.
    """
    quarter_months = expand_quarters(quarters, calendar)
    if months and quarters:
        return [m for m in _unique(months) if m in quarter_months]
    if months:
        return _unique(months)
    if quarters:
        return quarter_months
    return None


def validate_filter_request(request: FilterRequest) -> None:
    if not request.organisation_id or not request.organisation_id.strip():
        raise ValidationError("organisation_id is required")
    if (request.start_date is None) != (request.end_date is None):
        raise ValidationError("start_date and end_date must be provided together")
    if request.date_range and request.start_date > request.end_date:
        raise ValidationError("start_date must be <= end_date")
    bad_months = [m for m in request.months if not 1 <= m <= 12]
    if bad_months:
        raise ValidationError(f"month must be between 1 and 12, got {bad_months[0]}")
    bad_quarters = [q for q in request.quarters if not 1 <= q <= 4]
    if bad_quarters:
        raise ValidationError(f"quarter must be between 1 and 4, got {bad_quarters[0]}")


@dataclass
class CompiledFilters:
    """Predicate fragments joined with AND, plus their bound values."""

    predicates: list[str] = field(default_factory=list)
    params: dict[str, Any] = field(default_factory=dict)
    expanding: list[str] = field(default_factory=list)

    def where_sql(self) -> str:
        if not self.predicates:
            return ""
        return " WHERE " + " AND ".join(self.predicates)

    def bind(self, sql: str) -> TextClause:
        stmt = text(sql)
        if self.expanding:
            stmt = stmt.bindparams(*(bindparam(name, expanding=True) for name in self.expanding))
        return stmt


def compile_report_filters(
    request: FilterRequest,
    table: str,
    columns: Iterable[str] = (),
    *,
    calendar: QuarterCalendar,
    clock: Clock,
    dialect: SqlDialect,
) -> CompiledFilters:
    """
    Build WHERE predicates and params for a metric table.
    Primary temporal filter: exact date, else date range, else years; months,
    weeks and quarters narrow it further. No temporal filter at all means the
    trailing 12-month window ending at the end of the current month.
    """
    validate_filter_request(request)
    require_columns(table, columns)

    out = CompiledFilters()
    date_col = quote_ident(DATE_COLUMN)

    out.predicates.append(f"{quote_ident(ORGANISATION_COLUMN)} = :organisation_id")
    out.params["organisation_id"] = request.organisation_id.strip()

    if request.exact_date is not None:
        out.predicates.append(f"{date_col} = :exact_date")
        out.params["exact_date"] = dialect.bind_date(request.exact_date)
    elif request.date_range is not None:
        start, end = request.date_range
        out.predicates.append(f"{date_col} BETWEEN :start_date AND :end_date")
        out.params["start_date"] = dialect.bind_date(start)
        out.params["end_date"] = dialect.bind_date(end)
    elif request.years:
        out.predicates.append(f"{dialect.year(date_col)} IN :years")
        out.params["years"] = _unique(request.years)
        out.expanding.append("years")

    month_set = resolve_months(request.months, request.quarters, calendar)
    if month_set is not None:
        if month_set:
            out.predicates.append(f"{dialect.month(date_col)} IN :months")
            out.params["months"] = month_set
            out.expanding.append("months")
        else:
            # months and quarters do not overlap
            out.predicates.append("1 = 0")

    if request.weeks_of_month:
        out.predicates.append(f"{dialect.week_of_month(date_col)} IN :weeks")
        out.params["weeks"] = _unique(request.weeks_of_month)
        out.expanding.append("weeks")

    if not request.has_temporal_filter:
        start, end = default_window(clock.today())
        out.predicates.append(f"{date_col} BETWEEN :window_start AND :window_end")
        out.params["window_start"] = dialect.bind_date(start)
        out.params["window_end"] = dialect.bind_date(end)

    if request.shift is not None:
        out.predicates.append(f"CAST({quote_ident(SHIFT_COLUMN)} AS TEXT) = :shift")
        out.params["shift"] = str(request.shift)

    return out
