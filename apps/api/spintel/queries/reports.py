"""
Entry points used by the routers: compile filters, pick the bucket grain and
run the aggregation for one metric table in a single call.
"""
from collections.abc import Sequence
from decimal import Decimal

from spintel.db import MetricStore
from spintel.queries.aggregation import AggregationResult, MetricSpec, run_chart, run_summary
from spintel.queries.buckets import select_bucket
from spintel.utils.report_filters import FilterRequest, QuarterCalendar, compile_report_filters
from spintel.utils.time_window import Clock


def _columns(metrics: Sequence[MetricSpec]) -> list[str]:
    return [c for m in metrics for c in m.source_columns]


def chart_report(
    request: FilterRequest,
    store: MetricStore,
    clock: Clock,
    table: str,
    metrics: Sequence[MetricSpec],
    *,
    calendar: QuarterCalendar = QuarterCalendar.FISCAL,
    error_message: str = "Error fetching chart data",
) -> AggregationResult:
    filters = compile_report_filters(
        request, table, _columns(metrics), calendar=calendar, clock=clock, dialect=store.dialect
    )
    return run_chart(store, table, metrics, filters, select_bucket(request), error_message=error_message)


def summary_report(
    request: FilterRequest,
    store: MetricStore,
    clock: Clock,
    table: str,
    metrics: Sequence[MetricSpec],
    *,
    calendar: QuarterCalendar = QuarterCalendar.CALENDAR,
    error_message: str,
) -> dict[str, Decimal | None]:
    filters = compile_report_filters(
        request, table, _columns(metrics), calendar=calendar, clock=clock, dialect=store.dialect
    )
    return run_summary(store, table, metrics, filters, error_message=error_message)
