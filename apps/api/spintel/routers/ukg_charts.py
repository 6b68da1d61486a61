"""
GET /unit_per_kg_charts/{column}/{organisation_id}: per-shift and overall averages per bucket.
GET /unit_per_kg_charts/combined/{organisation_id}: waste, machine and operation energy per bucket.
"""
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import avg, chart_rows, shift_split
from spintel.queries.catalog import UKG_COLUMNS, UKG_MACHINE_COLUMNS, UKG_OPERATION_COLUMNS, UKG_WASTE_COLUMN
from spintel.queries.reports import chart_report
from spintel.utils.report_filters import FilterRequest, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/unit_per_kg_charts", tags=["unit per kg charts"])

TABLE = "unit_per_kg"

COMBINED_METRICS = [
    avg("waste", UKG_WASTE_COLUMN),
    avg("machine", *UKG_MACHINE_COLUMNS),
    avg("operation", *UKG_OPERATION_COLUMNS),
]


@router.get("/combined/{organisation_id}")
def combined_chart(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> list[dict[str, Any]]:
    """Machine and operation are sums of their per-column averages."""
    buckets = chart_report(
        filters,
        store,
        clock,
        TABLE,
        COMBINED_METRICS,
        error_message="Error fetching combined chart data",
    )
    return chart_rows(buckets)


def _add_shift_chart(column: str) -> None:
    metrics = shift_split(avg(column))

    def shift_chart(
        filters: FilterRequest = Depends(get_filter_request),
        store: MetricStore = Depends(get_store),
        clock: Clock = Depends(get_clock),
    ) -> list[dict[str, Any]]:
        return chart_rows(chart_report(filters, store, clock, TABLE, metrics))

    router.add_api_route(
        f"/{column}/{{organisation_id}}",
        shift_chart,
        methods=["GET"],
        name=f"{column}_chart",
        summary=f"Average {column} per bucket for shifts 1-3 and overall",
    )


for _column in UKG_COLUMNS:
    _add_shift_chart(_column)
