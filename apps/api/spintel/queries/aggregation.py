"""
Aggregation executor: renders one SELECT for a list of metric specs over a
metric table, runs it through the store and returns Decimal results.

A metric over several source columns is the sum of its per-column aggregates;
each column gets its own SELECT item and the parts are added here, skipping
NULL parts. Values that are not numeric text aggregate as NULL.
"""
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from spintel.db import MetricStore
from spintel.queries.buckets import BucketingStrategy, bucket_label, group_by_sql
from spintel.queries.catalog import DATE_COLUMN, SHIFT_COLUMN, require_columns
from spintel.queries.dialect import SqlDialect, quote_ident
from spintel.utils.percentages import to_decimal, to_number
from spintel.utils.report_filters import CompiledFilters
from spintel.utils.time_window import to_date

SHIFTS = (1, 2, 3)
OVERALL = "overall"


class AggregationKind(str, Enum):
    SUM = "SUM"
    AVERAGE = "AVG"


@dataclass(frozen=True)
class MetricSpec:
    output_name: str
    source_columns: tuple[str, ...]
    kind: AggregationKind = AggregationKind.AVERAGE
    shift: int | None = None  # restrict this metric to one shift


def avg(name: str, *columns: str) -> MetricSpec:
    return MetricSpec(name, columns or (name,), AggregationKind.AVERAGE)


def total(name: str, *columns: str) -> MetricSpec:
    return MetricSpec(name, columns or (name,), AggregationKind.SUM)


def shift_split(metric: MetricSpec) -> list[MetricSpec]:
    """shift_1, shift_2, shift_3 and overall variants of one metric."""
    per_shift = [replace(metric, output_name=f"shift_{s}", shift=s) for s in SHIFTS]
    return [*per_shift, replace(metric, output_name=OVERALL, shift=None)]


@dataclass
class Bucket:
    label: str
    first_day: date
    metrics: dict[str, Decimal | None] = field(default_factory=dict)


AggregationResult = list[Bucket]


def _value_sql(dialect: SqlDialect, column: str, shift: int | None) -> str:
    value = dialect.numeric(quote_ident(column))
    if shift is None:
        return value
    return f"CASE WHEN {dialect.shift_equals(quote_ident(SHIFT_COLUMN), shift)} THEN {value} END"


def _select_items(dialect: SqlDialect, metrics: Sequence[MetricSpec]) -> tuple[list[str], list[list[str]]]:
    items: list[str] = []
    aliases: list[list[str]] = []
    for i, metric in enumerate(metrics):
        metric_aliases = []
        for j, column in enumerate(metric.source_columns):
            alias = f"m{i}_{j}"
            items.append(f"{metric.kind.value}({_value_sql(dialect, column, metric.shift)}) AS {alias}")
            metric_aliases.append(alias)
        aliases.append(metric_aliases)
    return items, aliases


def _combine(parts: Sequence[Any]) -> Decimal | None:
    present = [to_decimal(p) for p in parts if p is not None]
    if not present:
        return None
    return sum(present, Decimal(0))


def _metric_values(row: Any, metrics: Sequence[MetricSpec], aliases: list[list[str]]) -> dict[str, Decimal | None]:
    mapping = row._mapping
    return {
        metric.output_name: _combine([mapping[a] for a in metric_aliases])
        for metric, metric_aliases in zip(metrics, aliases)
    }


def _check_metrics(table: str, metrics: Sequence[MetricSpec]) -> None:
    require_columns(table, (c for m in metrics for c in m.source_columns))


def run_chart(
    store: MetricStore,
    table: str,
    metrics: Sequence[MetricSpec],
    filters: CompiledFilters,
    strategy: BucketingStrategy,
    *,
    error_message: str,
) -> AggregationResult:
    """One bucket per group, ordered by the earliest date in each bucket."""
    _check_metrics(table, metrics)
    dialect = store.dialect
    date_col = quote_ident(DATE_COLUMN)
    items, aliases = _select_items(dialect, metrics)
    sql = (
        f"SELECT MIN({date_col}) AS first_day, {', '.join(items)} "
        f"FROM {quote_ident(table)}{filters.where_sql()} "
        f"GROUP BY {group_by_sql(strategy, dialect)} "
        f"ORDER BY MIN({date_col})"
    )
    rows = store.fetch_all(
        filters.bind(sql),
        filters.params,
        error_message=error_message,
        table=table,
        strategy=strategy.value,
    )
    buckets: AggregationResult = []
    for row in rows:
        first_day = to_date(row._mapping["first_day"])
        buckets.append(
            Bucket(
                label=bucket_label(strategy, first_day),
                first_day=first_day,
                metrics=_metric_values(row, metrics, aliases),
            )
        )
    return buckets


def run_summary(
    store: MetricStore,
    table: str,
    metrics: Sequence[MetricSpec],
    filters: CompiledFilters,
    *,
    error_message: str,
) -> dict[str, Decimal | None]:
    """Single aggregate row over every matching record. No rows gives all None."""
    _check_metrics(table, metrics)
    items, aliases = _select_items(store.dialect, metrics)
    sql = f"SELECT {', '.join(items)} FROM {quote_ident(table)}{filters.where_sql()}"
    row = store.fetch_one(
        filters.bind(sql),
        filters.params,
        error_message=error_message,
        table=table,
        strategy="summary",
    )
    if row is None:
        return {m.output_name: None for m in metrics}
    return _metric_values(row, metrics, aliases)


def chart_rows(
    buckets: AggregationResult,
    shape: Callable[[dict[str, Decimal | None]], dict[str, Any]] | None = None,
) -> list[dict[str, Any]]:
    """Flatten buckets into `{label, <metric>: number|null}` objects."""
    out = []
    for bucket in buckets:
        if shape is not None:
            values = shape(bucket.metrics)
        else:
            values = {k: to_number(v) for k, v in bucket.metrics.items()}
        out.append({"label": bucket.label, **values})
    return out
